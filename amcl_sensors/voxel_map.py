# voxel_map.py
# 3D voxel DistanceField for point-cloud scoring.
# cells[k, j, i]: k is z, j is y, i is x. 3D points get 3D obstacle distances;
# 2D queries (particle poses for the map factors) go to a footprint grid, which
# by default marks a column occupied if any voxel in it is occupied.

import numpy as np
from scipy.ndimage import distance_transform_edt

from .distance_field import DistanceField, FREE, UNKNOWN, OCCUPIED
from .occupancy_map import OccupancyMap


def footprint_from_voxels(cells):
    occ = (cells == OCCUPIED).any(axis=0)
    unknown = (cells == UNKNOWN).all(axis=0)
    fp = np.full(occ.shape, FREE, np.int8)
    fp[unknown] = UNKNOWN
    fp[occ] = OCCUPIED
    return fp


class VoxelMap(DistanceField):
    def __init__(self, cells, resolution, origin=(0.0, 0.0, 0.0), max_occ_dist=2.0, footprint=None):
        cells = np.asarray(cells)
        if cells.ndim != 3 or cells.size == 0:
            raise ValueError(f"cells must be a non-empty 3D grid, got shape {cells.shape}")
        if not resolution > 0.0:
            raise ValueError(f"resolution must be > 0, got {resolution}")
        self.cells = np.clip(cells, -1, 1).astype(np.int8)
        self.resolution = float(resolution)
        self.origin = np.asarray(origin, float).reshape(3)
        self.size_z, self.size_y, self.size_x = self.cells.shape
        if footprint is None:
            footprint = OccupancyMap(footprint_from_voxels(self.cells), self.resolution,
                                     self.origin[:2], max_occ_dist)
        self.footprint = footprint
        self.update_cspace(max_occ_dist)

    def update_cspace(self, max_occ_dist):
        max_occ_dist = float(max_occ_dist)
        if not max_occ_dist > 0.0:
            raise ValueError(f"max_occ_dist must be > 0, got {max_occ_dist}")
        self.max_occ_dist = max_occ_dist
        occ = self.cells == OCCUPIED
        if occ.any():
            d = distance_transform_edt(~occ, sampling=self.resolution)
            self.occ_dist = np.minimum(d, max_occ_dist)
        else:
            self.occ_dist = np.full(self.cells.shape, max_occ_dist)
        self.footprint.update_cspace(max_occ_dist)

    def world_to_map(self, points):
        P = np.asarray(points, float)
        idx = np.floor((P[...,:3] - self.origin) / self.resolution).astype(np.int64)
        return idx[...,0], idx[...,1], idx[...,2]

    def _valid(self, i, j, k):
        return ((i >= 0) & (i < self.size_x) & (j >= 0) & (j < self.size_y) &
                (k >= 0) & (k < self.size_z))

    @staticmethod
    def _is_3d(points): return np.shape(points)[-1] >= 3

    def is_in_map(self, points):
        if not self._is_3d(points):
            return self.footprint.is_in_map(points)
        return self._valid(*self.world_to_map(points))

    def distance_to_nearest_obstacle(self, points):
        if not self._is_3d(points):
            return self.footprint.distance_to_nearest_obstacle(points)
        i, j, k = self.world_to_map(points)
        ok = self._valid(i, j, k)
        out = np.full(ok.shape, self.max_occ_dist, float)
        out[ok] = self.occ_dist[k[ok], j[ok], i[ok]]
        return out

    def distance_to_non_free_space(self, points):
        return self.footprint.distance_to_non_free_space(np.asarray(points, float)[...,:2])

    def __repr__(self):
        return (f"VoxelMap({self.size_x}x{self.size_y}x{self.size_z} @ {self.resolution} m, "
                f"max_occ_dist={self.max_occ_dist})")
