# params.py
# Sensor-model parameter sets. One frozen dataclass per model variant; the
# active variant on a scanner *is* its model selection. Everything is checked
# once here, at configuration time, never per update.

import math
from dataclasses import dataclass
from enum import Enum

MIXTURE_TOL = 1e-6


class PlanarModelType(Enum):
    BEAM = "beam"
    LIKELIHOOD_FIELD = "likelihood_field"
    LIKELIHOOD_FIELD_PROB = "likelihood_field_prob"
    LIKELIHOOD_FIELD_GOMPERTZ = "likelihood_field_gompertz"


def _nonneg(**kw):
    for k, v in kw.items():
        if not (math.isfinite(v) and v >= 0.0):
            raise ValueError(f"{k} must be a finite value >= 0, got {v}")

def _positive(**kw):
    for k, v in kw.items():
        if not (math.isfinite(v) and v > 0.0):
            raise ValueError(f"{k} must be > 0, got {v}")

def _unit(**kw):
    for k, v in kw.items():
        if not (0.0 <= v <= 1.0):
            raise ValueError(f"{k} must be in [0, 1], got {v}")

def _mixture(**kw):
    _nonneg(**kw)
    tot = sum(kw.values())
    if abs(tot - 1.0) > MIXTURE_TOL:
        names = "+".join(kw.keys())
        raise ValueError(f"mixture weights {names} must sum to 1, got {tot:.6g}")


@dataclass(frozen=True)
class BeamModelParams:
    z_hit: float
    z_short: float
    z_max: float
    z_rand: float
    sigma_hit: float
    lambda_short: float
    model_type = PlanarModelType.BEAM

    def __post_init__(self):
        _mixture(z_hit=self.z_hit, z_short=self.z_short, z_max=self.z_max, z_rand=self.z_rand)
        _positive(sigma_hit=self.sigma_hit, lambda_short=self.lambda_short)


@dataclass(frozen=True)
class LikelihoodFieldParams:
    z_hit: float
    z_rand: float
    sigma_hit: float
    max_occ_dist: float
    model_type = PlanarModelType.LIKELIHOOD_FIELD

    def __post_init__(self):
        _mixture(z_hit=self.z_hit, z_rand=self.z_rand)
        _positive(sigma_hit=self.sigma_hit, max_occ_dist=self.max_occ_dist)


@dataclass(frozen=True)
class LikelihoodFieldProbParams(LikelihoodFieldParams):
    do_beamskip: bool = False
    beam_skip_distance: float = 0.5
    beam_skip_threshold: float = 0.3
    beam_skip_error_threshold: float = 0.9
    model_type = PlanarModelType.LIKELIHOOD_FIELD_PROB

    def __post_init__(self):
        super().__post_init__()
        if not isinstance(self.do_beamskip, bool):
            raise ValueError(f"do_beamskip must be a bool, got {self.do_beamskip!r}")
        _nonneg(beam_skip_distance=self.beam_skip_distance)
        _unit(beam_skip_threshold=self.beam_skip_threshold,
              beam_skip_error_threshold=self.beam_skip_error_threshold)


@dataclass(frozen=True)
class GompertzParams:
    a: float = 1.0
    b: float = 1.0
    c: float = 1.0
    input_shift: float = 0.0
    input_scale: float = 1.0
    output_shift: float = 0.0

    def __post_init__(self):
        for k in ("a", "b", "c", "input_shift", "input_scale", "output_shift"):
            if not math.isfinite(getattr(self, k)):
                raise ValueError(f"gompertz {k} must be finite, got {getattr(self, k)}")


@dataclass(frozen=True)
class LikelihoodFieldGompertzParams(LikelihoodFieldParams):
    gompertz: GompertzParams = GompertzParams()
    model_type = PlanarModelType.LIKELIHOOD_FIELD_GOMPERTZ


@dataclass(frozen=True)
class MapFactors:
    off_map_factor: float = 1.0
    non_free_space_factor: float = 1.0
    non_free_space_radius: float = 0.0

    def __post_init__(self):
        _nonneg(off_map_factor=self.off_map_factor,
                non_free_space_factor=self.non_free_space_factor,
                non_free_space_radius=self.non_free_space_radius)

    @property
    def is_identity(self):
        return self.off_map_factor == 1.0 and self.non_free_space_factor == 1.0


# variants scored through beam endpoints and the distance field
LIKELIHOOD_FIELD_FAMILY = (LikelihoodFieldParams, LikelihoodFieldProbParams,
                           LikelihoodFieldGompertzParams)
