# sample_set.py
# Fixed-size particle set: poses (N,3) [x, y, yaw] and weights (N,).
# Sensor models only ever touch `weights`, and only in place.

import numpy as np

from .geometry import as_pose


class SampleSet:
    def __init__(self, poses, weights=None, converged=False):
        poses = np.array(poses, float)
        if poses.ndim == 1:
            poses = as_pose(poses).reshape(1, 3)
        if poses.ndim != 2 or poses.shape[1] != 3:
            raise ValueError(f"poses must be (N, 3), got shape {poses.shape}")
        N = poses.shape[0]
        if weights is None:
            weights = np.ones(N, float)/max(N, 1)
        weights = np.array(weights, float).reshape(-1)
        if weights.shape[0] != N:
            raise ValueError(f"{weights.shape[0]} weights for {N} poses")
        if np.any(weights < 0.0):
            raise ValueError("sample weights must be non-negative")
        self.poses = poses
        self.weights = weights
        self.converged = bool(converged)

    @property
    def sample_count(self): return self.poses.shape[0]

    def __len__(self): return self.sample_count

    def total_weight(self): return float(np.sum(self.weights))

    def normalize(self):
        tot = self.total_weight()
        if tot > 0.0 and np.isfinite(tot):
            self.weights /= tot
        return tot

    def update_converged(self, dist_threshold):
        # converged = every sample within dist_threshold of the weighted mean (x and y)
        tot = self.total_weight()
        if self.sample_count == 0 or tot <= 0.0:
            self.converged = False
            return self.converged
        mx = float(np.sum(self.weights*self.poses[:,0]))/tot
        my = float(np.sum(self.weights*self.poses[:,1]))/tot
        self.converged = bool(np.all(np.abs(self.poses[:,0]-mx) <= dist_threshold) and
                              np.all(np.abs(self.poses[:,1]-my) <= dist_threshold))
        return self.converged

    def __repr__(self):
        return f"SampleSet(N={self.sample_count}, total={self.total_weight():.6g}, converged={self.converged})"
