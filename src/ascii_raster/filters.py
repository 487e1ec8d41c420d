"""Filter stack applied to the working RGBA buffer before sampling."""

import logging
from dataclasses import dataclass

import numpy as np
from PIL import Image, ImageFilter

from .numeric import correlate3x3, has_interior, to_u8

logger = logging.getLogger(__name__)

SHARPEN_KERNEL = (
    (0, -1, 0),
    (-1, 5, -1),
    (0, -1, 0),
)

SOBEL_X = (
    (-1, 0, 1),
    (-2, 0, 2),
    (-1, 0, 1),
)

SOBEL_Y = (
    (-1, -2, -1),
    (0, 0, 0),
    (1, 2, 1),
)


@dataclass(frozen=True)
class FilterConfig:
    contrast: float = 1.0  # multiplier, 1.0 = neutral
    brightness: float = 1.0  # multiplier, 1.0 = neutral
    blur_radius: float = 0.0  # pixels, 0 = off
    sharpen_amount: float = 0.0  # 0 = off
    edge_detection: bool = False
    dithering: bool = False

    def __post_init__(self):
        if self.blur_radius < 0:
            raise ValueError(f"blur_radius must be >= 0, got {self.blur_radius}")
        if self.sharpen_amount < 0:
            raise ValueError(
                f"sharpen_amount must be >= 0, got {self.sharpen_amount}"
            )


# -----------------------------
# Stages
# -----------------------------
def adjust_tone(pixels: np.ndarray, brightness: float, contrast: float) -> np.ndarray:
    if brightness == 1 and contrast == 1:
        return pixels
    out = pixels.copy()
    rgb = pixels[..., :3].astype(np.float64)
    rgb = ((rgb * brightness) - 128) * contrast + 128
    out[..., :3] = to_u8(rgb)
    return out


def sharpen(pixels: np.ndarray, amount: float) -> np.ndarray:
    """
    Blend each interior pixel with its sharpened value by ``amount``.
    The 1-pixel border keeps its original value.
    """
    if amount <= 0 or not has_interior(pixels.shape):
        return pixels
    out = pixels.copy()
    for c in range(3):
        channel = pixels[..., c].astype(np.float64)
        original = channel[1:-1, 1:-1]
        convolved = correlate3x3(channel, SHARPEN_KERNEL)
        out[1:-1, 1:-1, c] = to_u8(original + (convolved - original) * amount)
    return out


def blur(pixels: np.ndarray, radius: float) -> np.ndarray:
    if radius <= 0:
        return pixels
    img = Image.fromarray(np.ascontiguousarray(pixels))
    blurred = img.filter(ImageFilter.GaussianBlur(radius=radius))
    return np.asarray(blurred, dtype=np.uint8).copy()


def detect_edges(pixels: np.ndarray) -> np.ndarray:
    """
    Sobel gradient magnitude of the (r+g+b)/3 luminance as a grayscale map.
    Border pixels are forced to opaque black.
    """
    out = np.zeros_like(pixels)
    out[..., 3] = 255
    if not has_interior(pixels.shape):
        return out

    gray = pixels[..., :3].astype(np.float64).sum(axis=2) / 3
    gx = correlate3x3(gray, SOBEL_X)
    gy = correlate3x3(gray, SOBEL_Y)
    magnitude = to_u8(np.minimum(255, np.sqrt(gx * gx + gy * gy)))
    for c in range(3):
        out[1:-1, 1:-1, c] = magnitude
    return out


def apply_filters(pixels: np.ndarray, config: FilterConfig) -> np.ndarray:
    """Run tone -> sharpen -> blur -> edges; disabled stages are skipped."""
    pixels = adjust_tone(pixels, config.brightness, config.contrast)
    pixels = sharpen(pixels, config.sharpen_amount)
    pixels = blur(pixels, config.blur_radius)
    if config.edge_detection:
        pixels = detect_edges(pixels)
    logger.debug(
        "Filters: brightness=%s contrast=%s sharpen=%s blur=%s edges=%s",
        config.brightness,
        config.contrast,
        config.sharpen_amount,
        config.blur_radius,
        config.edge_detection,
    )
    return pixels
