# sensor_data.py
# Normalized sensor readings handed to the scanners once per cycle.
#   PlanarData:     ordered (range, bearing) rows from a 2D scan
#   PointCloudData: ordered xyz points in the scanner frame
# Arrays are copied and frozen on construction.

import numpy as np

def _frozen(arr):
    arr = np.array(arr, float)  # copy
    arr.setflags(write=False)
    return arr

def _check_range_max(range_max):
    range_max = float(range_max)
    if not range_max > 0.0:
        raise ValueError(f"range_max must be > 0, got {range_max}")
    return range_max


class PlanarData:
    def __init__(self, ranges, range_max):
        ranges = np.asarray(ranges, float)
        if ranges.size == 0:
            ranges = ranges.reshape(0, 2)
        if ranges.ndim != 2 or ranges.shape[1] != 2:
            raise ValueError(f"ranges must be (N, 2) [range, bearing] rows, got shape {ranges.shape}")
        self.ranges = _frozen(ranges)
        self.range_max = _check_range_max(range_max)

    @classmethod
    def from_scan(cls, ranges, angle_min, angle_increment, range_max, range_min=0.0):
        # readings at/below range_min are treated as "nothing seen"
        r = np.array(ranges, float).reshape(-1)
        with np.errstate(invalid="ignore"):
            r[r <= range_min] = range_max
        bearings = angle_min + angle_increment*np.arange(r.shape[0])
        return cls(np.column_stack([r, bearings]), range_max)

    @property
    def range_count(self): return self.ranges.shape[0]

    def __len__(self): return self.range_count

    def __repr__(self):
        return f"PlanarData(range_count={self.range_count}, range_max={self.range_max})"


class PointCloudData:
    def __init__(self, points, range_max):
        points = np.asarray(points, float)
        if points.size == 0:
            points = points.reshape(0, 3)
        if points.ndim != 2 or points.shape[1] != 3:
            raise ValueError(f"points must be (N, 3) xyz rows, got shape {points.shape}")
        self.points = _frozen(points)
        self.range_max = _check_range_max(range_max)

    @property
    def ranges(self):
        return np.linalg.norm(self.points, axis=1)

    @property
    def range_count(self): return self.points.shape[0]

    def __len__(self): return self.range_count

    def __repr__(self):
        return f"PointCloudData(range_count={self.range_count}, range_max={self.range_max})"
