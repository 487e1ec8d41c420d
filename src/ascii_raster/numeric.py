import math

import numpy as np


def clamp(value, lo, hi):
    """Clamp a scalar or array into [lo, hi]."""
    return np.clip(value, lo, hi)


def ceil_div(a: float, b: float) -> int:
    return int(math.ceil(a / b))


def to_u8(values: np.ndarray) -> np.ndarray:
    """
    Store float channel values the way a byte-clamped pixel buffer does:
    round half to even, then clamp into 0..255.
    """
    return np.clip(np.rint(values), 0, 255).astype(np.uint8)


def round_half_up(values):
    return np.floor(np.asarray(values, dtype=np.float64) + 0.5)


# -----------------------------
# 3x3 neighbourhoods
# -----------------------------
def correlate3x3(channel: np.ndarray, kernel) -> np.ndarray:
    """
    channel: HxW float array, H and W >= 3
    returns (H-2)x(W-2) array: kernel weighted sum over each interior pixel's
    3x3 neighbourhood (kernel[ky][kx] multiplies channel[y+ky-1, x+kx-1]).
    Border pixels have no full neighbourhood and get no value.
    """
    k = np.asarray(kernel, dtype=np.float64)
    h, w = channel.shape
    out = np.zeros((h - 2, w - 2), dtype=np.float64)
    for ky in range(3):
        for kx in range(3):
            weight = k[ky, kx]
            if weight == 0:
                continue
            out += weight * channel[ky : h - 2 + ky, kx : w - 2 + kx]
    return out


def has_interior(shape) -> bool:
    return shape[0] >= 3 and shape[1] >= 3
