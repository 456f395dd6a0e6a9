# occupancy_map.py
# 2D grid DistanceField.
# - cells[j, i]: row j is y, column i is x; states FREE/UNKNOWN/OCCUPIED
# - obstacle distances precomputed with an exact EDT and clamped to max_occ_dist
# - distance-to-non-free-space kept separately for the map-factor penalty
# - vectorized ray marching for the beam model

import math
import numpy as np
from scipy.ndimage import distance_transform_edt

from .distance_field import DistanceField, FREE, UNKNOWN, OCCUPIED


class OccupancyMap(DistanceField):
    def __init__(self, cells, resolution, origin=(0.0, 0.0), max_occ_dist=2.0):
        cells = np.asarray(cells)
        if cells.ndim != 2 or cells.size == 0:
            raise ValueError(f"cells must be a non-empty 2D grid, got shape {cells.shape}")
        if not resolution > 0.0:
            raise ValueError(f"resolution must be > 0, got {resolution}")
        self.cells = np.clip(cells, -1, 1).astype(np.int8)
        self.resolution = float(resolution)
        self.origin = np.asarray(origin, float).reshape(2)
        self.size_y, self.size_x = self.cells.shape

        nonfree = self.cells != FREE
        if nonfree.any():
            self.non_free_dist = distance_transform_edt(~nonfree, sampling=self.resolution)
        else:
            self.non_free_dist = np.full(self.cells.shape, np.inf)
        self.update_cspace(max_occ_dist)

    @classmethod
    def from_occupancy_grid(cls, data, width, height, resolution, origin=(0.0, 0.0), max_occ_dist=2.0):
        # nav_msgs/OccupancyGrid style: 0 free, 100 occupied, anything else unknown
        raw = np.asarray(data).reshape(int(height), int(width))
        cells = np.full(raw.shape, UNKNOWN, np.int8)
        cells[raw == 0] = FREE
        cells[raw == 100] = OCCUPIED
        return cls(cells, resolution, origin, max_occ_dist)

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

    # ── indexing ─────────────────────────────────────────────────────────
    def world_to_map(self, points):
        P = np.asarray(points, float)
        i = np.floor((P[...,0] - self.origin[0]) / self.resolution).astype(np.int64)
        j = np.floor((P[...,1] - self.origin[1]) / self.resolution).astype(np.int64)
        return i, j

    def _valid(self, i, j):
        return (i >= 0) & (i < self.size_x) & (j >= 0) & (j < self.size_y)

    def _lookup(self, grid, points, fill):
        i, j = self.world_to_map(points)
        ok = self._valid(i, j)
        out = np.full(ok.shape, fill, float)
        out[ok] = grid[j[ok], i[ok]]
        return out

    # ── DistanceField ────────────────────────────────────────────────────
    def is_in_map(self, points):
        i, j = self.world_to_map(points)
        return self._valid(i, j)

    def distance_to_nearest_obstacle(self, points):
        return self._lookup(self.occ_dist, points, self.max_occ_dist)

    def distance_to_non_free_space(self, points):
        return self._lookup(self.non_free_dist, points, 0.0)

    def calc_range(self, origins, angles, max_range):
        """Ray marching over the non-free distance field; stops at the first
        non-free or off-map cell. Each ray advances by its clearance (less one
        cell diagonal), never by less than half a cell. Memory is O(rays).
        origins: (..., 2), angles: (...) -> ranges (...), capped at max_range."""
        O = np.asarray(origins, float)[...,:2]
        A = np.asarray(angles, float)
        O, A = np.broadcast_arrays(O, A[...,None])
        shape = A.shape[:-1]
        ox, oy = O[...,0].ravel(), O[...,1].ravel()
        c, s = np.cos(A[...,0]).ravel(), np.sin(A[...,0]).ravel()
        max_range = float(max_range)

        min_step = 0.5*self.resolution
        slack = math.sqrt(2.0)*self.resolution
        t = np.zeros(ox.shape[0], float)
        r = np.full(ox.shape[0], max_range)
        live = np.arange(ox.shape[0])
        while live.size:
            tl = t[live]
            px = ox[live] + tl*c[live]
            py = oy[live] + tl*s[live]
            i = np.floor((px - self.origin[0]) / self.resolution).astype(np.int64)
            j = np.floor((py - self.origin[1]) / self.resolution).astype(np.int64)
            ok = self._valid(i, j)
            clear = np.zeros(live.shape[0], float)
            clear[ok] = self.non_free_dist[j[ok], i[ok]]
            hit = clear <= 0.0
            r[live[hit]] = tl[hit]
            tn = tl + np.maximum(clear - slack, min_step)
            t[live] = tn
            live = live[~hit & (tn <= max_range)]
        return np.minimum(r, max_range).reshape(shape)

    def __repr__(self):
        return (f"OccupancyMap({self.size_x}x{self.size_y} @ {self.resolution} m, "
                f"origin=({self.origin[0]:.2f}, {self.origin[1]:.2f}), max_occ_dist={self.max_occ_dist})")
