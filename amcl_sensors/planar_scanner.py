# planar_scanner.py
# 2D laser scanner model: all four sensor models on PlanarData.

import numpy as np

from .geometry import coord_add
from .models import subsample_indices
from .params import BeamModelParams
from .sensor import Sensor


class PlanarBeams:
    """Retained beams of one scan, seen from N scanner poses (map frame)."""

    def __init__(self, sensor_poses, ranges, bearings, range_max):
        self.sensor_poses = sensor_poses                                  # (N,3)
        self.ranges = ranges                                              # (B,)
        self.bearings = bearings                                          # (B,)
        self.range_max = range_max

    def angles(self):
        return self.sensor_poses[:, 2, None] + self.bearings[None, :]     # (N,B)

    def endpoints(self):
        A = self.angles()
        x = self.sensor_poses[:, 0, None] + self.ranges*np.cos(A)
        y = self.sensor_poses[:, 1, None] + self.ranges*np.sin(A)
        return np.stack([x, y], axis=-1)                                  # (N,B,2)

    def expected_ranges(self, field):
        A = self.angles()
        O = np.broadcast_to(self.sensor_poses[:, None, :2], A.shape + (2,))
        return field.calc_range(O, A, self.range_max)                     # (N,B)


class PlanarScanner(Sensor):
    def set_model_beam(self, z_hit, z_short, z_max, z_rand, sigma_hit, lambda_short):
        self.model = BeamModelParams(z_hit, z_short, z_max, z_rand, sigma_hit, lambda_short)
        self.get_logger().info(f"Sensor model: beam (z_hit={z_hit}, z_short={z_short}, "
                               f"z_max={z_max}, z_rand={z_rand}, sigma_hit={sigma_hit}, "
                               f"lambda_short={lambda_short})")

    def _beams(self, poses, data):
        idx = subsample_indices(data.range_count, self.max_beams)
        r, b = data.ranges[idx, 0], data.ranges[idx, 1]
        with np.errstate(invalid="ignore"):
            ok = np.isfinite(r) & np.isfinite(b) & (r >= 0.0)
            if type(self.model) is not BeamModelParams:
                # likelihood field ignores max-range readings
                ok &= r < data.range_max
        if not ok.any():
            return None
        sp = coord_add(self.scanner_pose, np.asarray(poses, float))
        return PlanarBeams(sp, r[ok], b[ok], data.range_max)
