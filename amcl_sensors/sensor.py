# sensor.py
# Base class for the range-sensor observation models.
# A Sensor owns its model parameters, map factors, scanner offset and scratch
# arena, and holds a (non-owning) reference to the map it scores against.
# Subclasses only decide how an observation becomes a set of beams.

import logging
from abc import ABC, abstractmethod

import numpy as np

from .beam_skip import BeamSkipArena
from .geometry import as_pose
from .models import compute_weights, gompertz
from .params import (LikelihoodFieldParams, LikelihoodFieldProbParams,
                     LikelihoodFieldGompertzParams, GompertzParams, MapFactors)
from .sample_set import SampleSet


class Sensor(ABC):
    def __init__(self, field, max_beams=60, scanner_pose=(0.0, 0.0, 0.0)):
        self.map = field
        self.model = None
        self.map_factors = MapFactors()
        self.max_beams = 0
        self.set_max_beams(max_beams)
        self.scanner_pose = as_pose(scanner_pose)
        self.arena = BeamSkipArena()
        self.total_weight = 0.0
        self._logger = logging.getLogger(f"amcl_sensors.{type(self).__name__}")

    def get_logger(self): return self._logger

    # ── configuration ────────────────────────────────────────────────────
    def set_map(self, field):
        self.map = field
        if isinstance(self.model, LikelihoodFieldParams):
            field.update_cspace(self.model.max_occ_dist)

    def set_max_beams(self, max_beams):
        max_beams = int(max_beams)
        if max_beams < 1:
            raise ValueError(f"max_beams must be >= 1, got {max_beams}")
        self.max_beams = max_beams

    def set_scanner_pose(self, pose):
        self.scanner_pose = as_pose(pose)

    def _set_lf_model(self, model):
        self.map.update_cspace(model.max_occ_dist)
        self.model = model
        self.get_logger().info(f"Sensor model: {model.model_type.value} "
                               f"(z_hit={model.z_hit}, z_rand={model.z_rand}, "
                               f"sigma_hit={model.sigma_hit}, max_occ_dist={model.max_occ_dist})")

    def set_model_likelihood_field(self, z_hit, z_rand, sigma_hit, max_occ_dist):
        self._set_lf_model(LikelihoodFieldParams(z_hit, z_rand, sigma_hit, max_occ_dist))

    def set_model_likelihood_field_prob(self, z_hit, z_rand, sigma_hit, max_occ_dist,
                                        do_beamskip, beam_skip_distance,
                                        beam_skip_threshold, beam_skip_error_threshold):
        self._set_lf_model(LikelihoodFieldProbParams(
            z_hit, z_rand, sigma_hit, max_occ_dist, do_beamskip,
            beam_skip_distance, beam_skip_threshold, beam_skip_error_threshold))
        if do_beamskip:
            self.get_logger().info(f"Beam skipping on: distance={beam_skip_distance}, "
                                   f"threshold={beam_skip_threshold}, "
                                   f"error_threshold={beam_skip_error_threshold}")

    def set_model_likelihood_field_gompertz(self, z_hit, z_rand, sigma_hit, max_occ_dist,
                                            gompertz_a, gompertz_b, gompertz_c,
                                            input_shift, input_scale, output_shift):
        g = GompertzParams(gompertz_a, gompertz_b, gompertz_c, input_shift, input_scale, output_shift)
        self._set_lf_model(LikelihoodFieldGompertzParams(z_hit, z_rand, sigma_hit, max_occ_dist, g))

    def set_map_factors(self, off_map_factor, non_free_space_factor, non_free_space_radius):
        self.map_factors = MapFactors(off_map_factor, non_free_space_factor, non_free_space_radius)

    def apply_gompertz(self, p):
        g = self.model.gompertz if isinstance(self.model, LikelihoodFieldGompertzParams) else GompertzParams()
        out = gompertz(p, g)
        return float(out) if np.ndim(out) == 0 else out

    # ── observation -> beams ─────────────────────────────────────────────
    @abstractmethod
    def _beams(self, poses, data):
        """Project the usable, subsampled beams of `data` for robot poses (N,3).
        Returns None when nothing is usable."""

    # ── update ───────────────────────────────────────────────────────────
    def _likelihoods(self, sample_set, data):
        if self.model is None:
            self.get_logger().debug("No sensor model configured, skipping update")
            return None
        beams = self._beams(sample_set.poses, data)
        if beams is None:
            self.get_logger().debug(f"No usable beams in {data!r}, skipping update")
            return None
        return compute_weights(self.model, self.map, sample_set.poses, beams,
                               self.map_factors, self.arena, sample_set.converged)

    def update_sensor(self, sample_set: SampleSet, data) -> bool:
        """Multiply the observation likelihood into every sample weight.
        False (weights untouched) if there is no model or no usable beam."""
        w = self._likelihoods(sample_set, data)
        if w is None:
            return False
        sample_set.weights *= w
        tot = sample_set.total_weight()
        if not (np.isfinite(tot) and tot > 0.0):
            self.get_logger().warning(f"All {sample_set.sample_count} particles have zero weight "
                                      f"after the {self.model.model_type.value} update")
            tot = 0.0
        self.total_weight = tot
        return True

    def apply_model_to_sample_set(self, data, sample_set: SampleSet) -> float:
        """Total weight the update would produce, without touching the set."""
        w = self._likelihoods(sample_set, data)
        if w is None:
            return sample_set.total_weight()
        tot = float(np.sum(sample_set.weights*w))
        if not (np.isfinite(tot) and tot > 0.0):
            return 0.0
        return tot

    def score_pose(self, pose, data) -> float:
        """Likelihood of `data` from a single robot pose."""
        s = SampleSet(as_pose(pose).reshape(1, 3), [1.0])
        w = self._likelihoods(s, data)
        return 0.0 if w is None else float(w[0])

    def __repr__(self):
        kind = self.model.model_type.value if self.model is not None else None
        return f"{type(self).__name__}(model={kind}, max_beams={self.max_beams}, map={self.map!r})"
