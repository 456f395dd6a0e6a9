# conftest.py
# Shared maps and synthetic scans. The "room" is a 5 m x 5 m box at 5 cm
# resolution with a one-cell wall all around; the robot sits in the middle.

import numpy as np
import pytest

from amcl_sensors.distance_field import FREE, OCCUPIED
from amcl_sensors.occupancy_map import OccupancyMap
from amcl_sensors.sensor_data import PlanarData
from amcl_sensors.voxel_map import VoxelMap

RES = 0.05
RANGE_MAX = 10.0
TRUE_POSE = np.array([2.5, 2.5, 0.0])


def room_cells(n=100):
    cells = np.full((n, n), FREE, np.int8)
    cells[0, :] = cells[-1, :] = OCCUPIED
    cells[:, 0] = cells[:, -1] = OCCUPIED
    return cells


def synthetic_scan(field, pose, n_beams=36, range_max=RANGE_MAX):
    """Noise-free scan: ray-cast from `pose`, so every endpoint lands in a wall cell."""
    bearings = np.linspace(-np.pi, np.pi, n_beams, endpoint=False)
    origins = np.broadcast_to(np.asarray(pose, float)[:2], (n_beams, 2))
    ranges = field.calc_range(origins, pose[2] + bearings, range_max)
    return PlanarData(np.column_stack([ranges, bearings]), range_max)


@pytest.fixture
def room():
    return OccupancyMap(room_cells(), RES, (0.0, 0.0), max_occ_dist=2.0)

@pytest.fixture
def scan(room):
    return synthetic_scan(room, TRUE_POSE)

@pytest.fixture
def voxel_room():
    # 4 m x 4 m x 1 m at 10 cm, walls over the full height
    cells = np.full((10, 40, 40), FREE, np.int8)
    cells[:, 0, :] = cells[:, -1, :] = OCCUPIED
    cells[:, :, 0] = cells[:, :, -1] = OCCUPIED
    return VoxelMap(cells, 0.1, (0.0, 0.0, 0.0), max_occ_dist=1.0)
