import numpy as np

from .numeric import round_half_up

# Floor for color-mode channels so dark cells stay legible on dark backgrounds.
MIN_BRIGHTNESS = 40


def brightness_factor(index, ramp_length: int):
    """0.5 for the sparsest glyph up to 2.0 for the densest."""
    return (np.asarray(index, dtype=np.float64) / (ramp_length - 1)) * 1.5 + 0.5


def cell_colors(rgb, index, ramp_length: int, grayscale: bool, foreground=(255, 255, 255)):
    """
    rgb: ...x3 source colors, index: matching glyph indices
    returns ...x3 uint8 display colors
    """
    rgb = np.asarray(rgb)
    if grayscale:
        out = np.empty(rgb.shape, dtype=np.uint8)
        out[...] = foreground
        return out

    factor = brightness_factor(index, ramp_length)[..., np.newaxis]
    scaled = round_half_up(rgb.astype(np.float64) * factor)
    return np.clip(scaled, MIN_BRIGHTNESS, 255).astype(np.uint8)


def cell_color(r: int, g: int, b: int, index: int, ramp_length: int, grayscale: bool, foreground=(255, 255, 255)):
    out = cell_colors((r, g, b), index, ramp_length, grayscale, foreground)
    return tuple(int(v) for v in out)
