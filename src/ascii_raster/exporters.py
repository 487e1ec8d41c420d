#!/usr/bin/env python3
"""
Serializers for a ConversionResult. They only lay out the glyphs and colors
the pipeline produced; nothing here re-derives either.
"""

import html
import io
import logging
import os
import platform
from dataclasses import dataclass
from typing import Optional, Tuple

from PIL import Image, ImageDraw, ImageFont

from .pipeline import ConversionResult
from .presets import THEMES, Theme, rgb_to_hex

ESC = "\x1b"

FONT_SIZE = 8
CHAR_WIDTH_RATIO = 0.6

LOG = logging.getLogger(__name__)


# -----------------------------
# Plain text / ANSI
# -----------------------------

def to_text(result: ConversionResult) -> str:
    return result.text


def to_ansi(result: ConversionResult, color_spaces: bool = False) -> str:
    """24-bit ANSI lines; escapes are only emitted when the color changes."""
    out_lines = []
    for row in result.grid:
        prev = None
        line = []
        for cell in row:
            if cell.glyph == " " and not color_spaces:
                if prev is not None:
                    line.append(f"{ESC}[0m")
                    prev = None
                line.append(" ")
                continue

            if prev != cell.color:
                r, g, b = cell.color
                line.append(f"{ESC}[38;2;{r};{g};{b}m")
                prev = cell.color

            line.append(cell.glyph)

        line.append(f"{ESC}[0m")
        out_lines.append("".join(line))
    return "\n".join(out_lines)


# -----------------------------
# HTML / SVG
# -----------------------------

def to_html(result: ConversionResult, theme: Optional[Theme] = None, title: str = "ASCII Art") -> str:
    theme = theme or THEMES["default"]
    fg = rgb_to_hex(result.foreground) if result.grayscale else theme.primary

    if result.grayscale:
        body = html.escape(result.text)
    else:
        rows = []
        for row in result.grid:
            rows.append(
                "".join(
                    f'<span style="color: rgb({c.color[0]}, {c.color[1]}, {c.color[2]})">'
                    f"{html.escape(c.glyph)}</span>"
                    for c in row
                )
            )
        body = "\n".join(rows)

    return (
        "<!doctype html>\n"
        "<html>\n<head>\n"
        '  <meta charset="utf-8">\n'
        f"  <title>{html.escape(title)}</title>\n"
        "  <style>\n"
        "    body {\n"
        f"      background: {theme.background};\n"
        f"      color: {fg};\n"
        "      font-family: monospace;\n"
        "      white-space: pre;\n"
        "      margin: 20px;\n"
        f"      font-size: {FONT_SIZE}px;\n"
        f"      line-height: {FONT_SIZE}px;\n"
        "    }\n"
        "  </style>\n"
        "</head>\n<body>" + body + "</body>\n</html>\n"
    )


def _fmt(v: float) -> str:
    return f"{v:g}"


def to_svg(result: ConversionResult, theme: Optional[Theme] = None) -> str:
    theme = theme or THEMES["default"]
    char_w = FONT_SIZE * CHAR_WIDTH_RATIO
    line_h = FONT_SIZE
    grid = result.grid

    parts = [
        f'<svg xmlns="http://www.w3.org/2000/svg" width="{_fmt(grid.width * char_w)}" '
        f'height="{_fmt(grid.height * line_h)}" style="background: {theme.background}">',
        "<style>",
        f"    .ascii-char {{ font-family: monospace; font-size: {FONT_SIZE}px; }}",
        "</style>",
    ]
    for y, row in enumerate(grid):
        for x, cell in enumerate(row):
            parts.append(
                f'<text x="{_fmt(x * char_w)}" y="{_fmt((y + 1) * line_h)}" class="ascii-char" '
                f'fill="{rgb_to_hex(cell.color)}">{html.escape(cell.glyph)}</text>'
            )
    parts.append("</svg>")
    return "\n".join(parts) + "\n"


# -----------------------------
# PNG
# -----------------------------

def find_default_mono_font():
    system = platform.system().lower()

    if "darwin" in system:
        candidates = [
            "/System/Library/Fonts/Menlo.ttc",
            "/System/Library/Fonts/Monaco.ttf",
        ]
    elif "windows" in system:
        windir = os.environ.get("WINDIR", r"C:\Windows")
        candidates = [
            os.path.join(windir, "Fonts", "CONSOLA.TTF"),
            os.path.join(windir, "Fonts", "LUCON.TTF"),
        ]
    else:
        candidates = [
            "/usr/share/fonts/truetype/dejavu/DejaVuSansMono.ttf",
            "/usr/share/fonts/truetype/liberation/LiberationMono-Regular.ttf",
        ]

    for p in candidates:
        if os.path.exists(p):
            return p
    return None


def _load_font(font_path: Optional[str], font_size: int):
    font_path = font_path or find_default_mono_font()
    if font_path:
        LOG.debug("PNG font: %s (size=%d)", font_path, font_size)
        return ImageFont.truetype(font_path, font_size)
    LOG.debug("PNG font: PIL default (size=%d)", font_size)
    return ImageFont.load_default(font_size)


OVERLAY_POS = (50.0, 50.0)
WATERMARK_POS = (90.0, 95.0)
WATERMARK_OPACITY = 0.5


@dataclass(frozen=True)
class TextMark:
    """
    Text stamped on top of a rendered PNG. ``x`` and ``y`` place the text's
    top-left corner in percent of the canvas size.
    """

    text: str
    x: float = 50.0
    y: float = 50.0
    opacity: float = 1.0

    def __post_init__(self):
        if not (0 <= self.x <= 100 and 0 <= self.y <= 100):
            raise ValueError(f"position must be in [0, 100] percent, got ({self.x}, {self.y})")
        if not 0 < self.opacity <= 1:
            raise ValueError(f"opacity must be in (0, 1], got {self.opacity}")

    def anchor(self, size: Tuple[int, int]) -> Tuple[float, float]:
        return size[0] * self.x / 100, size[1] * self.y / 100


def _stamp(img: Image.Image, mark: TextMark, font, theme: Theme, stroke_width: int) -> Image.Image:
    layer = Image.new("RGBA", img.size, (0, 0, 0, 0))
    ImageDraw.Draw(layer).text(
        mark.anchor(img.size),
        mark.text,
        fill=theme.secondary_rgb + (255,),
        font=font,
        stroke_width=stroke_width,
        stroke_fill=theme.background_rgb + (255,),
    )
    if mark.opacity < 1:
        layer.putalpha(layer.getchannel("A").point(lambda a: round(a * mark.opacity)))
    return Image.alpha_composite(img.convert("RGBA"), layer).convert("RGB")


def render_png(
    result: ConversionResult,
    theme: Optional[Theme] = None,
    font_size: int = FONT_SIZE,
    font_path: Optional[str] = None,
    overlay: Optional[TextMark] = None,
    watermark: Optional[TextMark] = None,
) -> Image.Image:
    """
    Draw each cell at a fixed monospace cell size. Grayscale output is sized
    from the text lines and drawn in one foreground color.

    ``overlay`` is drawn in the theme's secondary color at twice the font
    size, outlined in the background color; ``watermark`` follows at the font
    size with a thinner outline and its own opacity.
    """
    theme = theme or THEMES["default"]
    char_w = font_size * CHAR_WIDTH_RATIO
    line_h = font_size

    if result.grayscale:
        lines = result.text.split("\n")
        cols = max(len(ln) for ln in lines)
        rows = len(lines)
    else:
        cols, rows = result.grid.width, result.grid.height

    size = (max(1, int(cols * char_w)), max(1, rows * line_h))
    img = Image.new("RGB", size, theme.background_rgb)
    draw = ImageDraw.Draw(img)
    font = _load_font(font_path, font_size)

    if result.grayscale:
        for y, line in enumerate(lines):
            draw.text((0, y * line_h), line, fill=tuple(result.foreground), font=font)
    else:
        for y, row in enumerate(result.grid):
            for x, cell in enumerate(row):
                draw.text((x * char_w, y * line_h), cell.glyph, fill=cell.color, font=font)

    if overlay and overlay.text:
        img = _stamp(img, overlay, _load_font(font_path, font_size * 2), theme, stroke_width=2)
    if watermark and watermark.text:
        img = _stamp(img, watermark, font, theme, stroke_width=1)
    return img


def to_png(result: ConversionResult, theme: Optional[Theme] = None, **kwargs) -> bytes:
    buf = io.BytesIO()
    render_png(result, theme, **kwargs).save(buf, format="PNG")
    return buf.getvalue()


# -----------------------------
# Dispatch
# -----------------------------

FORMATS = ("text", "ansi", "html", "svg", "png")

EXTENSIONS = {
    ".txt": "text",
    ".ans": "ansi",
    ".html": "html",
    ".htm": "html",
    ".svg": "svg",
    ".png": "png",
}


def format_for_path(path: Optional[str], default: str = "text") -> str:
    if not path or path == "-":
        return default
    return EXTENSIONS.get(os.path.splitext(path)[1].lower(), default)


def export(result: ConversionResult, fmt: str, theme: Optional[Theme] = None, **png_options):
    """
    Return ``str`` for text formats, ``bytes`` for png. ``png_options`` go to
    ``render_png`` and are ignored by the other formats.
    """
    if fmt == "text":
        return to_text(result)
    if fmt == "ansi":
        return to_ansi(result)
    if fmt == "html":
        return to_html(result, theme)
    if fmt == "svg":
        return to_svg(result, theme)
    if fmt == "png":
        return to_png(result, theme, **png_options)
    raise ValueError(f"Unknown format: {fmt} (choose one of {', '.join(FORMATS)})")
