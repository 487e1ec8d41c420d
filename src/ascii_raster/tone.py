"""
Brightness of a pixel and the perturbations applied to it before a glyph is
picked. Every function works on plain floats or elementwise on numpy arrays.
"""

import numpy as np

from .numeric import clamp

# Rec. 601 luma weights
LUMA_WEIGHTS = (0.299, 0.587, 0.114)

BAYER_4X4 = np.array(
    [
        [0, 8, 2, 10],
        [12, 4, 14, 6],
        [3, 11, 1, 9],
        [15, 7, 13, 5],
    ]
)

DITHER_AMOUNT = 0.2


def tone_map(r, g, b, grayscale: bool):
    """
    Reduce an RGB triple (0..255) to a brightness in [0, 1].

    grayscale: plain luma. Color: weighted RMS of the normalized channels,
    which reads saturated colors lighter than luma does.
    """
    wr, wg, wb = LUMA_WEIGHTS
    if grayscale:
        brightness = (r * wr + g * wg + b * wb) / 255
    else:
        rn, gn, bn = r / 255, g / 255, b / 255
        brightness = np.sqrt(wr * rn * rn + wg * gn * gn + wb * bn * bn)
    return clamp(brightness, 0.0, 1.0)


def dither(brightness, x, y, enabled: bool = True):
    """Ordered 4x4 Bayer perturbation keyed on source pixel coordinates."""
    if not enabled:
        return brightness
    threshold = BAYER_4X4[np.asarray(y) % 4, np.asarray(x) % 4] / 16.0
    return clamp(brightness + (threshold - 0.5) * DITHER_AMOUNT, 0.0, 1.0)


def invert(brightness):
    return 1 - brightness
