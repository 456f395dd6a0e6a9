# point_cloud_scanner.py
# 3D scanner model: likelihood-field family on PointCloudData against a 3D
# DistanceField (VoxelMap). The scanner sits at scanner_pose (planar offset
# from the robot) and scanner_height above the map's z origin frame.

import numpy as np

from .geometry import coord_add
from .models import subsample_indices
from .sensor import Sensor


class CloudBeams:
    def __init__(self, sensor_poses, points, scanner_height, range_max):
        self.sensor_poses = sensor_poses                                  # (N,3)
        self.points = points                                              # (B,3)
        self.scanner_height = scanner_height
        self.ranges = np.linalg.norm(points, axis=1)
        self.range_max = range_max

    def endpoints(self):
        c = np.cos(self.sensor_poses[:, 2, None]); s = np.sin(self.sensor_poses[:, 2, None])
        px, py, pz = self.points[:, 0], self.points[:, 1], self.points[:, 2]
        x = self.sensor_poses[:, 0, None] + px*c - py*s
        y = self.sensor_poses[:, 1, None] + px*s + py*c
        z = np.broadcast_to(pz + self.scanner_height, x.shape)
        return np.stack([x, y, z], axis=-1)                               # (N,B,3)


class PointCloudScanner(Sensor):
    def __init__(self, field, max_beams=60, scanner_pose=(0.0, 0.0, 0.0), scanner_height=0.0):
        super().__init__(field, max_beams, scanner_pose)
        self.scanner_height = float(scanner_height)

    def set_scanner_height(self, height):
        self.scanner_height = float(height)

    def _beams(self, poses, data):
        idx = subsample_indices(data.range_count, self.max_beams)
        P = data.points[idx]
        r = np.linalg.norm(P, axis=1)
        with np.errstate(invalid="ignore"):
            ok = np.isfinite(P).all(axis=1) & (r < data.range_max)
        if not ok.any():
            return None
        sp = coord_add(self.scanner_pose, np.asarray(poses, float))
        return CloudBeams(sp, P[ok], self.scanner_height, data.range_max)
