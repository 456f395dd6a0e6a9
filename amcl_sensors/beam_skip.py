# beam_skip.py
# Beam skipping for the likelihood-field-prob model.
# Beams that most particles place far from any mapped obstacle are probably
# hitting something unmapped (people, carts) and get dropped for every
# particle this cycle -- unless so many would be dropped that the filter is
# more likely wrong than the map, in which case everything is integrated.

import logging
import numpy as np

log = logging.getLogger("amcl_sensors.beam_skip")


class BeamSkipArena:
    """Scratch storage for the (particles x beams) log-score and agreement
    matrices. Grows geometrically, never shrinks; contents are garbage at the
    start of every cycle and must be fully overwritten by the caller."""

    def __init__(self):
        self.max_samples = 0
        self.max_obs = 0
        self.scores = np.zeros((0, 0), float)
        self.hits = np.zeros((0, 0), bool)

    def reserve(self, n_samples, n_beams):
        if n_samples > self.max_samples or n_beams > self.max_obs:
            self.max_samples = max(n_samples, 2*self.max_samples)
            self.max_obs = max(n_beams, 2*self.max_obs)
            self.scores = np.empty((self.max_samples, self.max_obs), float)
            self.hits = np.empty((self.max_samples, self.max_obs), bool)
            log.debug(f"Reallocing temp weights {self.max_samples} - {self.max_obs}")
        return self.scores[:n_samples, :n_beams], self.hits[:n_samples, :n_beams]


def beam_skip_mask(hits, threshold, error_threshold):
    """
    hits: (N, B) bool, True where particle n's endpoint for beam b agrees with the map.
    Returns (mask, skipped, failed_open):
      mask: (B,) bool beams to integrate
      skipped: how many beams the rule wanted to drop
      failed_open: True when the skip ratio tripped error_threshold and every beam is kept
    """
    N, B = hits.shape
    if N == 0 or B == 0:
        return np.ones(B, bool), 0, False
    agree = np.count_nonzero(hits, axis=0) / float(N)
    mask = agree > threshold
    skipped = int(B - np.count_nonzero(mask))
    if skipped and skipped >= B*error_threshold:
        log.warning(f"Over {100*error_threshold:.0f}% of the observations were not in the map - "
                    f"pf may have converged to wrong pose - integrating all observations "
                    f"({skipped}/{B} flagged)")
        return np.ones(B, bool), skipped, True
    return mask, skipped, False
