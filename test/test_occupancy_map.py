import numpy as np
import pytest

from amcl_sensors.distance_field import FREE, UNKNOWN, OCCUPIED
from amcl_sensors.occupancy_map import OccupancyMap
from amcl_sensors.sample_set import SampleSet

from conftest import RES


def test_from_occupancy_grid_states():
    m = OccupancyMap.from_occupancy_grid([0, 100, -1, 50], width=2, height=2, resolution=1.0)
    assert m.cells.tolist() == [[FREE, OCCUPIED], [UNKNOWN, UNKNOWN]]

def test_obstacle_distance_and_sentinel(room):
    pts = np.array([[0.025, 2.5], [0.175, 2.5], [2.5, 2.5], [-1.0, 0.0], [7.0, 7.0]])
    d = room.distance_to_nearest_obstacle(pts)
    np.testing.assert_allclose(d, [0.0, 0.15, 2.0, 2.0, 2.0])

def test_in_map(room):
    inside = room.is_in_map(np.array([[0.0, 0.0], [4.99, 4.99], [5.0, 1.0], [-0.01, 1.0]]))
    assert inside.tolist() == [True, True, False, False]

def test_non_free_space_distance(room):
    d = room.distance_to_non_free_space(np.array([[0.025, 2.5], [0.125, 2.5], [-1.0, 2.5]]))
    np.testing.assert_allclose(d, [0.0, 2*RES, 0.0])

def test_unknown_counts_as_non_free():
    cells = np.full((1, 5), FREE, np.int8); cells[0, 4] = UNKNOWN
    m = OccupancyMap(cells, 1.0)
    assert m.distance_to_non_free_space(np.array([[1.5, 0.5]]))[0] == pytest.approx(3.0)
    assert m.distance_to_nearest_obstacle(np.array([[1.5, 0.5]]))[0] == pytest.approx(m.max_occ_dist)

def test_update_cspace_clamps(room):
    room.update_cspace(0.3)
    assert room.distance_to_nearest_obstacle(np.array([[2.5, 2.5]]))[0] == pytest.approx(0.3)
    with pytest.raises(ValueError):
        room.update_cspace(0.0)

def test_calc_range_hits_wall(room):
    r = room.calc_range(np.array([[2.5, 2.5], [2.5, 2.5]]), np.array([0.0, np.pi/2]), 10.0)
    np.testing.assert_allclose(r, [2.45, 2.45], atol=RES)
    r = room.calc_range(np.array([[2.5, 2.5]]), np.array([0.0]), 1.0)
    assert r[0] == pytest.approx(1.0)

def test_calc_range_from_outside_is_zero(room):
    assert room.calc_range(np.array([[-1.0, 2.5]]), np.array([0.0]), 10.0)[0] == 0.0

def test_bad_grids():
    with pytest.raises(ValueError):
        OccupancyMap(np.zeros(5), 0.05)
    with pytest.raises(ValueError):
        OccupancyMap(np.zeros((2, 2)), 0.0)

def test_sample_set_convergence():
    s = SampleSet([[1.0, 1.0, 0.0], [1.1, 0.95, 0.3]])
    assert s.update_converged(0.1) and s.converged
    s = SampleSet([[1.0, 1.0, 0.0], [2.0, 1.0, 0.0]])
    assert not s.update_converged(0.1)
    with pytest.raises(ValueError):
        SampleSet([[0.0, 0.0, 0.0]], [-1.0])

def test_sample_set_normalize():
    s = SampleSet([[0.0, 0.0, 0.0], [1.0, 0.0, 0.0]], [2.0, 6.0])
    assert s.normalize() == pytest.approx(8.0)
    np.testing.assert_allclose(s.weights, [0.25, 0.75])
    assert len(s) == 2 and s.total_weight() == pytest.approx(1.0)

def test_pose_composition():
    from amcl_sensors.geometry import coord_add, wrap
    out = coord_add([1.0, 0.0, np.pi/2], np.array([[1.0, 1.0, np.pi/2]]))
    np.testing.assert_allclose(out, [[1.0, 2.0, wrap(np.pi)]], atol=1e-12)
    assert wrap(3*np.pi/2) == pytest.approx(-np.pi/2)

def test_calc_range_stops_at_unknown_and_clears_empty_maps():
    cells = np.full((1, 40), FREE, np.int8); cells[0, 30] = UNKNOWN
    m = OccupancyMap(cells, 0.1)
    r = m.calc_range(np.array([[0.05, 0.05]]), np.array([0.0]), 10.0)
    assert r[0] == pytest.approx(2.95, abs=0.1)
    empty = OccupancyMap(np.full((10, 10), FREE, np.int8), 0.1)
    assert empty.calc_range(np.array([0.5, 0.5]), np.array(0.0), 0.3) == pytest.approx(0.3)

def test_calc_range_memory_scales_with_rays_not_steps():
    import tracemalloc
    big = np.full((400, 400), FREE, np.int8)
    big[0, :] = big[-1, :] = OCCUPIED
    big[:, 0] = big[:, -1] = OCCUPIED
    m = OccupancyMap(big, 0.05)
    rng = np.random.default_rng(0)
    origins = rng.uniform(1.0, 19.0, size=(100, 60, 2))
    angles = rng.uniform(-np.pi, np.pi, size=(100, 60))
    tracemalloc.start()
    try:
        r = m.calc_range(origins, angles, 30.0)
        _, peak = tracemalloc.get_traced_memory()
    finally:
        tracemalloc.stop()
    assert r.shape == (100, 60)
    assert np.all((r > 0.0) & (r < 30.0))
    assert peak < 20e6

def test_as_pose_shape():
    from amcl_sensors.geometry import as_pose
    assert as_pose([1, 2, 3]).tolist() == [1.0, 2.0, 3.0]
    with pytest.raises(ValueError):
        as_pose([1.0, 2.0])
