# config.py
# Defaults for every sensor option, and the glue that turns a flat option dict
# (ROS params, a JSON file, CLI overrides) into a configured scanner.

from .params import PlanarModelType
from .planar_scanner import PlanarScanner
from .point_cloud_scanner import PointCloudScanner

# ╔═══════════════════════════════════════════════════════════════════════╗
# ║                         TUNING CONSTANTS (TOP)                        ║
# ╚═══════════════════════════════════════════════════════════════════════╝
# Edit these OR override them by name (configure(scanner, {...})).

TUNE = {
    # Model selection
    "model_type":                 "likelihood_field",   # beam | likelihood_field | likelihood_field_prob | likelihood_field_gompertz
    "max_beams":                  60,       # beams actually scored per scan (even stride)

    # Mixture
    "z_hit":                      0.95,
    "z_short":                    0.0,      # beam model only
    "z_max":                      0.0,      # beam model only
    "z_rand":                     0.05,
    "sigma_hit":                  0.2,      # m
    "lambda_short":               0.1,      # 1/m, beam model only
    "max_occ_dist":               2.0,      # m, likelihood field clamp

    # Beam skipping (likelihood_field_prob)
    "do_beamskip":                False,
    "beam_skip_distance":         0.5,      # m, endpoint "agrees" with the map below this
    "beam_skip_threshold":        0.3,      # keep beam if agree fraction > this
    "beam_skip_error_threshold":  0.9,      # skip fraction that trips fail-open

    # Gompertz reshaping (likelihood_field_gompertz)
    "gompertz_a":                 1.0,
    "gompertz_b":                 1.0,
    "gompertz_c":                 1.0,
    "gompertz_input_shift":       0.0,
    "gompertz_input_scale":       1.0,
    "gompertz_output_shift":      0.0,

    # Map factors (1, 1, 0 = off)
    "off_map_factor":             1.0,
    "non_free_space_factor":      1.0,
    "non_free_space_radius":      0.0,      # m

    # Point cloud
    "scanner_height":             0.0,      # m
}


def merged(overrides=None):
    overrides = dict(overrides or {})
    unknown = sorted(set(overrides) - set(TUNE))
    if unknown:
        raise ValueError(f"unknown sensor option(s): {', '.join(unknown)}")
    cfg = dict(TUNE); cfg.update(overrides)
    return cfg


def configure(scanner, overrides=None):
    """Apply TUNE + overrides to `scanner`. Returns the merged option dict."""
    cfg = merged(overrides)
    p = cfg.get
    try:
        kind = PlanarModelType(p("model_type"))
    except ValueError:
        raise ValueError(f"unknown model_type {p('model_type')!r}, expected one of "
                         f"{[m.value for m in PlanarModelType]}") from None

    if kind is PlanarModelType.BEAM:
        if not isinstance(scanner, PlanarScanner):
            raise ValueError(f"model_type 'beam' is not available for {type(scanner).__name__}")
        scanner.set_model_beam(p("z_hit"), p("z_short"), p("z_max"), p("z_rand"),
                               p("sigma_hit"), p("lambda_short"))
    elif kind is PlanarModelType.LIKELIHOOD_FIELD:
        scanner.set_model_likelihood_field(p("z_hit"), p("z_rand"), p("sigma_hit"), p("max_occ_dist"))
    elif kind is PlanarModelType.LIKELIHOOD_FIELD_PROB:
        scanner.set_model_likelihood_field_prob(p("z_hit"), p("z_rand"), p("sigma_hit"), p("max_occ_dist"),
                                                p("do_beamskip"), p("beam_skip_distance"),
                                                p("beam_skip_threshold"), p("beam_skip_error_threshold"))
    else:
        scanner.set_model_likelihood_field_gompertz(p("z_hit"), p("z_rand"), p("sigma_hit"), p("max_occ_dist"),
                                                    p("gompertz_a"), p("gompertz_b"), p("gompertz_c"),
                                                    p("gompertz_input_shift"), p("gompertz_input_scale"),
                                                    p("gompertz_output_shift"))

    scanner.set_map_factors(p("off_map_factor"), p("non_free_space_factor"), p("non_free_space_radius"))
    scanner.set_max_beams(p("max_beams"))
    if isinstance(scanner, PointCloudScanner):
        scanner.set_scanner_height(p("scanner_height"))
    return cfg


def scanner_from_params(field, overrides=None, cloud=False):
    scanner = PointCloudScanner(field) if cloud else PlanarScanner(field)
    configure(scanner, overrides)
    return scanner
