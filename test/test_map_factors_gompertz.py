import math

import numpy as np
import pytest

from amcl_sensors.models import gompertz, non_free_space_weight, map_factor_weights
from amcl_sensors.params import GompertzParams, MapFactors
from amcl_sensors.planar_scanner import PlanarScanner

from conftest import TRUE_POSE


# ------------ map factors ------------
def test_non_free_space_interpolation():
    d = np.array([0.0, 0.25, 0.5, 1.0, 3.0])
    w = non_free_space_weight(d, 0.2, 1.0)
    np.testing.assert_allclose(w, [0.2, 0.4, 0.6, 1.0, 1.0])

def test_non_free_space_zero_radius_is_a_step():
    w = non_free_space_weight(np.array([0.0, 1e-6, 2.0]), 0.3, 0.0)
    np.testing.assert_allclose(w, [0.3, 1.0, 1.0])

def test_map_factor_per_pose(room):
    f = MapFactors(off_map_factor=0.1, non_free_space_factor=0.5, non_free_space_radius=1.0)
    poses = np.array([
        [-1.0, 2.5, 0.0],       # off the map
        [0.025, 2.5, 0.0],      # inside the wall
        [0.075, 2.5, 0.0],      # one cell from the wall
        [2.5, 2.5, 0.0],        # far from everything
    ])
    w = map_factor_weights(poses, room, f)
    np.testing.assert_allclose(w, [0.1, 0.5, 0.5 + 0.5*0.05, 1.0])

def test_default_factors_are_identity():
    assert MapFactors().is_identity
    assert not MapFactors(off_map_factor=0.5).is_identity

def test_negative_factor_rejected():
    with pytest.raises(ValueError):
        MapFactors(off_map_factor=-0.1)

def test_off_map_penalty_scales_score(room, scan):
    s = PlanarScanner(room, max_beams=36)
    s.set_model_likelihood_field(0.95, 0.05, 0.2, 2.0)
    off = np.array([-3.0, 2.5, 0.0])
    plain = s.score_pose(off, scan)
    s.set_map_factors(0.1, 1.0, 0.0)
    assert s.score_pose(off, scan) == pytest.approx(0.1*plain)
    # in-map pose unaffected
    s2 = PlanarScanner(room, max_beams=36); s2.set_model_likelihood_field(0.95, 0.05, 0.2, 2.0)
    assert s.score_pose(TRUE_POSE, scan) == pytest.approx(s2.score_pose(TRUE_POSE, scan))

def test_beam_model_ignores_map_factors(room, scan):
    s = PlanarScanner(room, max_beams=36)
    s.set_model_beam(0.8, 0.1, 0.05, 0.05, 0.2, 0.1)
    off = np.array([-3.0, 2.5, 0.0])
    plain = s.score_pose(off, scan)
    s.set_map_factors(0.1, 0.5, 1.0)
    assert s.score_pose(off, scan) == pytest.approx(plain)


# ------------ gompertz ------------
def test_gompertz_closed_form():
    g = GompertzParams()
    assert gompertz(0.0, g) == pytest.approx(math.exp(-1.0))
    g = GompertzParams(a=2.0, b=0.5, c=3.0, input_shift=0.1, input_scale=2.0, output_shift=-0.2)
    p = 0.4
    ref = 2.0*math.exp(-0.5*math.exp(-3.0*(p*2.0 + 0.1))) - 0.2
    assert gompertz(p, g) == pytest.approx(ref)

def test_gompertz_saturates_at_a_plus_shift():
    g = GompertzParams(a=1.5, b=1.0, c=5.0, output_shift=0.1)
    assert gompertz(100.0, g) == pytest.approx(1.6)

def test_gompertz_rejects_non_finite():
    with pytest.raises(ValueError):
        GompertzParams(c=float("nan"))

def test_apply_gompertz_uses_configured_coefficients(room):
    s = PlanarScanner(room)
    s.set_model_likelihood_field_gompertz(0.95, 0.05, 0.2, 2.0, 2.0, 1.0, 1.0, 0.0, 1.0, 0.0)
    assert s.apply_gompertz(0.0) == pytest.approx(2.0*math.exp(-1.0))
    np.testing.assert_allclose(s.apply_gompertz(np.array([0.0, 1.0])),
                               [2.0*math.exp(-1.0), 2.0*math.exp(-math.exp(-1.0))])

def test_gompertz_model_reshapes_best_score(room, scan):
    s = PlanarScanner(room, max_beams=36)
    s.set_model_likelihood_field_gompertz(0.95, 0.05, 0.2, 2.0, 1.0, 1.0, 1.0, 0.0, 1.0, 0.0)
    # normalized product is 1 at the true pose
    assert s.score_pose(TRUE_POSE, scan) == pytest.approx(math.exp(-math.exp(-1.0)))
    assert s.score_pose(TRUE_POSE + np.array([0.3, 0.0, 0.0]), scan) < s.score_pose(TRUE_POSE, scan)
