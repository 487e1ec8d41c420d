import logging
import math
from typing import NamedTuple

import numpy as np

from .errors import DegenerateSampling
from .numeric import ceil_div

logger = logging.getLogger(__name__)

# Glyphs are roughly twice as tall as they are wide.
FONT_ASPECT = 0.5


class SampleLayout(NamedTuple):
    step_x: int
    step_y: int
    xs: range  # source columns sampled, left to right
    ys: range  # source rows sampled, top to bottom

    @property
    def columns(self) -> int:
        return len(self.xs)

    @property
    def rows(self) -> int:
        return len(self.ys)


def plan_samples(width: int, height: int, resolution: float) -> SampleLayout:
    """
    Decide which source pixels stand in for each output cell.

    ``resolution`` is the fraction of source pixels kept per axis; the
    vertical step is stretched by ``1 / FONT_ASPECT`` so the rendered text
    keeps the source's visual aspect ratio.
    """
    if not math.isfinite(resolution):
        raise DegenerateSampling(f"resolution must be a finite number, got {resolution}")
    out_w = math.floor(width * resolution)
    out_h = math.floor(height * resolution)
    if out_w < 1 or out_h < 1:
        raise DegenerateSampling(
            f"resolution {resolution} yields a {out_w}x{out_h} grid "
            f"for a {width}x{height} image"
        )

    step_x = max(1, ceil_div(width, out_w))
    step_y = max(1, ceil_div(height / out_h, FONT_ASPECT))
    layout = SampleLayout(step_x, step_y, range(0, width, step_x), range(0, height, step_y))
    logger.debug(
        "Sampling %dx%d -> %d cols x %d rows (step %d,%d)",
        width,
        height,
        layout.columns,
        layout.rows,
        step_x,
        step_y,
    )
    return layout


def sample(pixels: np.ndarray, layout: SampleLayout) -> np.ndarray:
    """Point-sample the top-left pixel of each step: rows x cols x channels."""
    return pixels[:: layout.step_y, :: layout.step_x]
