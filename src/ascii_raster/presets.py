#!/usr/bin/env python3
"""Color themes and named conversion presets."""

import argparse
import re
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from .filters import FilterConfig
from .pipeline import ConversionConfig

# -----------------------------
# Themes
# -----------------------------


@dataclass(frozen=True)
class Theme:
    name: str
    background: str
    primary: str
    secondary: str
    accent: str

    @property
    def foreground_rgb(self) -> Tuple[int, int, int]:
        return hex_to_rgb(self.primary)

    @property
    def secondary_rgb(self) -> Tuple[int, int, int]:
        return hex_to_rgb(self.secondary)

    @property
    def background_rgb(self) -> Tuple[int, int, int]:
        return hex_to_rgb(self.background)


THEMES: Dict[str, Theme] = {
    "default": Theme("Default", "#000000", "#ffffff", "#888888", "#666666"),
    "dark": Theme("Dark", "#0a0a0a", "#ffffff", "#a0a0a0", "#333333"),
    "white": Theme("White", "#ffffff", "#000000", "#666666", "#cccccc"),
    "matrix": Theme("Matrix", "#000000", "#00ff00", "#008800", "#004400"),
    "retro": Theme("Retro", "#000000", "#ffb000", "#cc8800", "#996600"),
    "neon": Theme("Neon", "#0a0a0a", "#ff00ff", "#00ffff", "#8800ff"),
    "cyberpunk": Theme("Cyberpunk", "#0d1117", "#ff0080", "#00ff80", "#8000ff"),
}

_HEX_RE = re.compile(r"^#?([0-9a-fA-F]{6})$")


def hex_to_rgb(value: str) -> Tuple[int, int, int]:
    m = _HEX_RE.match(value.strip())
    if not m:
        raise ValueError(f"Not a #rrggbb color: {value!r}")
    h = m.group(1)
    return int(h[0:2], 16), int(h[2:4], 16), int(h[4:6], 16)


def rgb_to_hex(rgb) -> str:
    r, g, b = rgb
    return f"#{r:02x}{g:02x}{b:02x}"


def _slug(name: str) -> str:
    return re.sub(r"[^a-z0-9]+", "-", name.strip().lower()).strip("-")


def get_theme(name: str) -> Theme:
    key = _slug(name)
    for slug, theme in THEMES.items():
        if key in (slug, _slug(theme.name)):
            return theme
    raise KeyError(f"Unknown theme: {name} (choose one of {', '.join(THEMES)})")


# -----------------------------
# Presets
# -----------------------------


@dataclass(frozen=True)
class Preset:
    name: str
    resolution: float
    charset: str
    grayscale: bool
    inverted: bool
    contrast: float
    brightness: float
    blur: float
    edge_detection: bool
    dithering: bool

    def to_config(self, theme: Optional[Theme] = None) -> ConversionConfig:
        # presets never carry a sharpen amount
        filters = FilterConfig(
            contrast=self.contrast,
            brightness=self.brightness,
            blur_radius=self.blur,
            sharpen_amount=0.0,
            edge_detection=self.edge_detection,
            dithering=self.dithering,
        )
        theme = theme or THEMES["default"]
        return ConversionConfig(
            resolution=self.resolution,
            charset=self.charset,
            grayscale=self.grayscale,
            inverted=self.inverted,
            filters=filters,
            foreground=theme.foreground_rgb,
        )


PRESETS: List[Preset] = [
    Preset("Photo Portrait", 0.15, "detailed", False, False, 1.2, 1.0, 0, False, True),
    Preset("Logo", 0.08, "minimal", True, False, 1.5, 1.1, 0, True, False),
    Preset("Pixel Art", 0.05, "blocks", False, False, 1.0, 1.0, 0, False, True),
    Preset("Sketch", 0.12, "standard", True, False, 1.3, 0.9, 0.5, True, False),
]


def get_preset(name: str) -> Preset:
    key = _slug(name)
    for preset in PRESETS:
        if _slug(preset.name) == key:
            return preset
    names = ", ".join(_slug(p.name) for p in PRESETS)
    raise KeyError(f"Unknown preset: {name} (choose one of {names})")


def describe() -> List[str]:
    lines = ["Presets:"]
    for p in PRESETS:
        flags = [f for f, on in (("grayscale", p.grayscale), ("inverted", p.inverted),
                                 ("edges", p.edge_detection), ("dither", p.dithering)) if on]
        lines.append(
            f"  {_slug(p.name):<16} resolution={p.resolution} charset={p.charset} "
            f"contrast={p.contrast} brightness={p.brightness} blur={p.blur}"
            + (f" [{', '.join(flags)}]" if flags else "")
        )
    lines.append("Themes:")
    for slug, t in THEMES.items():
        lines.append(f"  {slug:<16} fg={t.primary} bg={t.background}")
    return lines


def main(argv=None) -> int:
    ap = argparse.ArgumentParser(
        prog="ascii-raster presets",
        description="List the built-in conversion presets and color themes",
    )
    ap.parse_args(argv)
    print("\n".join(describe()))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
