"""
Image -> character grid conversion.

``convert`` runs one synchronous pass:

    raw pixels -> filtered pixels -> per cell
        brightness -> dithered -> inverted -> glyph index -> glyph + color

and either returns a complete ``ConversionResult`` or raises a
``ConversionError``; nothing partial is ever returned.
"""

import logging
import math
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, List, NamedTuple, Optional, Tuple

import numpy as np
from PIL import Image, UnidentifiedImageError

from .charsets import DEFAULT_RAMP, resolve_ramp, select_index
from .colorize import cell_colors
from .errors import BufferUnavailable, ConversionError, InvalidDimensions
from .filters import FilterConfig, apply_filters
from .sampler import plan_samples, sample
from .tone import dither, invert, tone_map

logger = logging.getLogger(__name__)

RGB = Tuple[int, int, int]


# -----------------------------
# Data model
# -----------------------------

@dataclass(frozen=True)
class RasterImage:
    width: int
    height: int
    data: Optional[bytes] = field(default=None, repr=False)  # row-major RGBA

    @classmethod
    def from_image(cls, img: Image.Image) -> "RasterImage":
        return cls.from_array(np.asarray(img.convert("RGBA")))

    @classmethod
    def from_array(cls, arr: np.ndarray) -> "RasterImage":
        arr = np.asarray(arr, dtype=np.uint8)
        if arr.ndim != 3 or arr.shape[2] not in (3, 4):
            raise ValueError(f"expected an HxWx3 or HxWx4 array, got shape {arr.shape}")
        h, w = arr.shape[:2]
        if arr.shape[2] == 3:
            alpha = np.full((h, w, 1), 255, dtype=np.uint8)
            arr = np.concatenate([arr, alpha], axis=2)
        else:
            # fully transparent pixels read back as (0, 0, 0, 0)
            arr = np.where(arr[:, :, 3:] == 0, 0, arr).astype(np.uint8)
        return cls(w, h, np.ascontiguousarray(arr).tobytes())

    @classmethod
    def open(cls, path) -> "RasterImage":
        try:
            with Image.open(path) as img:
                return cls.from_image(img)
        except (OSError, UnidentifiedImageError) as e:
            raise BufferUnavailable(f"could not read pixels from {path}: {e}") from e

    def pixels(self) -> np.ndarray:
        """A fresh, writable HxWx4 uint8 working copy of the buffer."""
        expected = self.width * self.height * 4
        if self.data is None:
            raise BufferUnavailable("image has no pixel data")
        if len(self.data) != expected:
            raise BufferUnavailable(
                f"pixel buffer holds {len(self.data)} bytes, "
                f"expected {expected} for {self.width}x{self.height} RGBA"
            )
        arr = np.frombuffer(self.data, dtype=np.uint8)
        return arr.reshape(self.height, self.width, 4).copy()


class Cell(NamedTuple):
    glyph: str
    color: RGB


@dataclass(frozen=True)
class CellGrid:
    rows: Tuple[Tuple[Cell, ...], ...]

    @property
    def height(self) -> int:
        return len(self.rows)

    @property
    def width(self) -> int:
        return len(self.rows[0]) if self.rows else 0

    def __iter__(self) -> Iterator[Tuple[Cell, ...]]:
        return iter(self.rows)

    def __len__(self) -> int:
        return len(self.rows)

    def __getitem__(self, i):
        return self.rows[i]

    def glyph_rows(self) -> List[str]:
        return ["".join(cell.glyph for cell in row) for row in self.rows]

    def to_text(self) -> str:
        return "\n".join(self.glyph_rows())


@dataclass(frozen=True)
class ConversionConfig:
    resolution: float = 0.11  # fraction of source pixels kept per axis, (0, 1]
    charset: str = DEFAULT_RAMP  # ramp name or custom ramp
    grayscale: bool = False
    inverted: bool = False
    filters: FilterConfig = field(default_factory=FilterConfig)
    foreground: RGB = (255, 255, 255)  # grayscale cell color

    def __post_init__(self):
        if not math.isfinite(self.resolution) or self.resolution > 1:
            raise ValueError(f"resolution must be in (0, 1], got {self.resolution}")
        resolve_ramp(self.charset)

    @property
    def ramp(self) -> str:
        return resolve_ramp(self.charset)


@dataclass(frozen=True)
class ConversionResult:
    grid: CellGrid
    text: str
    grayscale: bool = False
    foreground: RGB = (255, 255, 255)


# -----------------------------
# Orchestration
# -----------------------------

class PipelineState(Enum):
    IDLE = "idle"
    SAMPLING = "sampling"
    FILTERING = "filtering"
    MAPPING = "mapping"
    DONE = "done"
    FAILED = "failed"


def map_cells(samples: np.ndarray, xs, ys, config: ConversionConfig) -> CellGrid:
    """Turn sampled RGBA pixels into glyphs and display colors."""
    ramp = config.ramp
    n = len(ramp)
    rgb = samples[..., :3].astype(np.float64)

    brightness = tone_map(rgb[..., 0], rgb[..., 1], rgb[..., 2], config.grayscale)
    x = np.asarray(xs)[np.newaxis, :]
    y = np.asarray(ys)[:, np.newaxis]
    brightness = dither(brightness, x, y, enabled=config.filters.dithering)
    if config.inverted:
        brightness = invert(brightness)

    index = np.atleast_2d(select_index(brightness, n))
    colors = cell_colors(samples[..., :3], index, n, config.grayscale, config.foreground)

    rows = []
    for r in range(index.shape[0]):
        rows.append(
            tuple(
                Cell(ramp[int(i)], tuple(int(v) for v in colors[r, c]))
                for c, i in enumerate(index[r])
            )
        )
    return CellGrid(tuple(rows))


class AsciiConverter:
    """
    Runs conversions for one configuration and keeps the last good result.

    A failed run moves to ``FAILED`` and re-raises; ``result`` still holds the
    previous success (now stale) so the caller can decide what to show.
    """

    def __init__(self, config: Optional[ConversionConfig] = None):
        self.config = config or ConversionConfig()
        self.state = PipelineState.IDLE
        self.result: Optional[ConversionResult] = None

    def _enter(self, state: PipelineState) -> None:
        logger.debug("Pipeline %s -> %s", self.state.value, state.value)
        self.state = state

    def convert(self, image: RasterImage) -> ConversionResult:
        self.state = PipelineState.IDLE
        t0 = time.perf_counter()
        cfg = self.config
        try:
            self._enter(PipelineState.SAMPLING)
            if image.width <= 0 or image.height <= 0:
                raise InvalidDimensions(
                    f"image is {image.width}x{image.height}; both sides must be > 0"
                )
            layout = plan_samples(image.width, image.height, cfg.resolution)

            self._enter(PipelineState.FILTERING)
            pixels = apply_filters(image.pixels(), cfg.filters)

            self._enter(PipelineState.MAPPING)
            grid = map_cells(sample(pixels, layout), layout.xs, layout.ys, cfg)
        except ConversionError as e:
            logger.warning("Conversion failed in %s: %s", self.state.value, e)
            self._enter(PipelineState.FAILED)
            raise
        except Exception:
            logger.exception("Unexpected error in %s", self.state.value)
            self._enter(PipelineState.FAILED)
            raise

        result = ConversionResult(
            grid=grid,
            text=grid.to_text(),
            grayscale=cfg.grayscale,
            foreground=cfg.foreground,
        )
        self.result = result
        self._enter(PipelineState.DONE)
        logger.debug(
            "Converted %dx%d -> %dx%d cells in %.3fs",
            image.width,
            image.height,
            grid.width,
            grid.height,
            time.perf_counter() - t0,
        )
        return result


def convert(image: RasterImage, config: Optional[ConversionConfig] = None) -> ConversionResult:
    return AsciiConverter(config).convert(image)
