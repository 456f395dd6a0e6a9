# models.py
# Per-particle observation likelihoods, as pure functions over numpy arrays.
#
# Shapes used throughout:
#   N  particles, B  retained beams
#   d       (N,B) endpoint -> nearest obstacle distance (sentinel max_occ_dist off-map)
#   z       (B,)  measured ranges
#   z_star  (N,B) ray-cast ranges from each particle
#
# compute_weights() is the one entry point the scanners call: it switches on the
# active parameter variant and returns the (N,) multiplier for the weights.

import numpy as np

from .beam_skip import beam_skip_mask
from .geometry import normal_pdf, SQRT_2PI
from .params import (BeamModelParams, LikelihoodFieldParams, LikelihoodFieldProbParams,
                     LikelihoodFieldGompertzParams, MapFactors, LIKELIHOOD_FIELD_FAMILY)


def subsample_indices(count, max_beams):
    # evenly spread over the whole scan, first and last beam always kept
    max_beams = max(1, int(max_beams))
    if count <= max_beams:
        return np.arange(count)
    return np.linspace(0, count - 1, max_beams).round().astype(np.int64)


# ╔═══════════════════════════════════════════════════════════════════════╗
# ║                         Beam (physical) model                         ║
# ╚═══════════════════════════════════════════════════════════════════════╝
def beam_model_weights(z, z_star, range_max, p: BeamModelParams):
    z_star = np.minimum(np.asarray(z_star, float), range_max)
    z = np.broadcast_to(np.asarray(z, float), z_star.shape)
    below = z < range_max
    lam = p.lambda_short
    with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
        pz = np.where(below, p.z_hit*normal_pdf(z, z_star, p.sigma_hit), 0.0)
        # short readings: exponential truncated to [0, z*]
        eta = 1.0 / (1.0 - np.exp(-lam*z_star))
        pz = pz + np.where(z < z_star, p.z_short*eta*lam*np.exp(-lam*z), 0.0)
        pz = pz + np.where(below, 0.0, p.z_max)
        pz = pz + np.where(below, p.z_rand/range_max, 0.0)
        log_p = np.sum(np.log(pz), axis=1)
    return np.exp(log_p)


# ╔═══════════════════════════════════════════════════════════════════════╗
# ║                        Likelihood-field family                        ║
# ╚═══════════════════════════════════════════════════════════════════════╝
def lf_beam_prob(d, range_max, p: LikelihoodFieldParams):
    return p.z_hit*normal_pdf(d, 0.0, p.sigma_hit) + p.z_rand/range_max

def lf_max_prob(range_max, p: LikelihoodFieldParams):
    # per-beam score at d = 0
    return p.z_hit/(p.sigma_hit*SQRT_2PI) + p.z_rand/range_max

def likelihood_field_weights(d, range_max, p: LikelihoodFieldParams):
    return np.prod(lf_beam_prob(d, range_max, p), axis=1)

def likelihood_field_prob_weights(d, range_max, p: LikelihoodFieldProbParams,
                                  in_map=None, arena=None, converged=False):
    """
    Normalized likelihood field with optional beam skipping.
      d:         (N,B) obstacle distances at the endpoints
      in_map:    (N,B) endpoint inside the map (needed only when skipping)
      arena:     BeamSkipArena for the scratch matrices (fresh arrays if None)
      converged: skipping only runs on a converged sample set
    """
    d = np.asarray(d, float)
    N, B = d.shape
    if arena is not None:
        scores, hits = arena.reserve(N, B)
    else:
        scores, hits = np.empty((N, B), float), np.empty((N, B), bool)
    with np.errstate(divide="ignore"):
        np.log(lf_beam_prob(d, range_max, p) / lf_max_prob(range_max, p), out=scores)

    if p.do_beamskip and converged:
        np.less(d, p.beam_skip_distance, out=hits)
        if in_map is not None:
            hits &= in_map
        mask, _, _ = beam_skip_mask(hits, p.beam_skip_threshold, p.beam_skip_error_threshold)
        log_p = scores[:, mask].sum(axis=1)
    else:
        log_p = scores.sum(axis=1)
    return np.exp(log_p)

def gompertz(p, g):
    p = np.asarray(p, float)*g.input_scale + g.input_shift
    return g.a*np.exp(-g.b*np.exp(-g.c*p)) + g.output_shift

def likelihood_field_gompertz_weights(d, range_max, p: LikelihoodFieldGompertzParams):
    with np.errstate(divide="ignore"):
        log_pz = np.log(lf_beam_prob(d, range_max, p) / lf_max_prob(range_max, p))
    return gompertz(np.exp(log_pz.sum(axis=1)), p.gompertz)


# ╔═══════════════════════════════════════════════════════════════════════╗
# ║                              Map factors                              ║
# ╚═══════════════════════════════════════════════════════════════════════╝
def non_free_space_weight(d, factor, radius):
    d = np.asarray(d, float)
    if radius > 0.0:
        ratio = np.minimum(1.0, d/radius)
    else:
        ratio = (d > 0.0).astype(float)
    return factor + (1.0 - factor)*ratio

def map_factor_weights(robot_poses, field, factors: MapFactors):
    xy = np.asarray(robot_poses, float)[...,:2]
    in_map = field.is_in_map(xy)
    w = non_free_space_weight(field.distance_to_non_free_space(xy),
                              factors.non_free_space_factor, factors.non_free_space_radius)
    return np.where(in_map, w, factors.off_map_factor)


# ╔═══════════════════════════════════════════════════════════════════════╗
# ║                               Dispatch                                ║
# ╚═══════════════════════════════════════════════════════════════════════╝
def compute_weights(model, field, robot_poses, beams, factors=None, arena=None, converged=False):
    """(N,) likelihood multipliers for the sample poses.
    beams: projection of the retained beams (PlanarBeams / CloudBeams) exposing
    ranges, range_max, endpoints() and, for planar scans, expected_ranges(field)."""
    kind = type(model)
    if kind is BeamModelParams:
        z_star = beams.expected_ranges(field)
        return beam_model_weights(beams.ranges, z_star, beams.range_max, model)

    if kind not in LIKELIHOOD_FIELD_FAMILY:
        raise TypeError(f"unknown sensor model {kind.__name__}")

    pts = beams.endpoints()
    d = field.distance_to_nearest_obstacle(pts)
    if kind is LikelihoodFieldParams:
        w = likelihood_field_weights(d, beams.range_max, model)
    elif kind is LikelihoodFieldProbParams:
        in_map = field.is_in_map(pts) if (model.do_beamskip and converged) else None
        w = likelihood_field_prob_weights(d, beams.range_max, model, in_map, arena, converged)
    else:
        w = likelihood_field_gompertz_weights(d, beams.range_max, model)

    if factors is not None and not factors.is_identity:
        w = w*map_factor_weights(robot_poses, field, factors)
    return w
