# geometry.py
# Small SE(2) helpers shared by the sensor models. Everything here broadcasts
# over numpy arrays so a whole sample set can be pushed through at once.

import math
import numpy as np

SQRT_2PI = math.sqrt(2.0*math.pi)

def wrap(a): return (a + math.pi) % (2*math.pi) - math.pi

def as_pose(p):
    p = np.asarray(p, float).reshape(-1)
    if p.shape[0] != 3:
        raise ValueError(f"pose must be (x, y, yaw), got shape {p.shape}")
    return p

def coord_add(a, b):
    """Compose pose `a` (expressed in the frame of `b`) onto `b`.
    a: (3,) offset, b: (N,3) or (3,) poses. Returns the same shape as b."""
    a = np.asarray(a, float); b = np.asarray(b, float)
    c, s = np.cos(b[...,2]), np.sin(b[...,2])
    out = np.empty(np.broadcast(a, b).shape, float)
    out[...,0] = b[...,0] + a[...,0]*c - a[...,1]*s
    out[...,1] = b[...,1] + a[...,0]*s + a[...,1]*c
    out[...,2] = wrap(b[...,2] + a[...,2])
    return out

def normal_pdf(x, mu, sigma):
    z = (np.asarray(x, float) - mu) / sigma
    return np.exp(-0.5*z*z) / (sigma*SQRT_2PI)
