#!/usr/bin/env python3
import argparse
import logging
import sys
import time

from .charsets import CHARACTER_RAMPS
from .errors import ConversionError
from .exporters import (
    FORMATS,
    OVERLAY_POS,
    WATERMARK_OPACITY,
    WATERMARK_POS,
    TextMark,
    export,
    format_for_path,
)
from .filters import FilterConfig
from .pipeline import ConversionConfig, RasterImage, convert
from .presets import THEMES, get_preset, get_theme

LOG = logging.getLogger("ascii_raster")


def setup_logging(debug: bool, log_path: str | None = None) -> None:
    level = logging.DEBUG if debug else logging.WARNING
    LOG.setLevel(logging.DEBUG if (debug or log_path) else logging.WARNING)

    fmt = logging.Formatter("%(levelname)s: %(message)s")

    handlers: list[logging.Handler] = []

    sh = logging.StreamHandler(sys.stderr)
    sh.setLevel(level)
    sh.setFormatter(fmt)
    handlers.append(sh)

    if log_path:
        fh = logging.FileHandler(log_path, encoding="utf-8")
        fh.setLevel(logging.DEBUG)
        fh.setFormatter(logging.Formatter("%(asctime)s %(levelname)s: %(message)s"))
        handlers.append(fh)

    LOG.handlers[:] = handlers
    LOG.propagate = False  # prevent double logging via root logger


# -----------------------------
# CLI
# -----------------------------
def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="ascii-raster image",
        description="Convert an image to (optionally colored) ASCII art",
    )
    ap.add_argument("input", help="Input image path")
    ap.add_argument(
        "-o", "--output", default=None, help="Output file (default: stdout)"
    )
    ap.add_argument(
        "--format",
        choices=FORMATS,
        default=None,
        help="Output format (default: inferred from --output extension, else text)",
    )

    ap.add_argument("--preset", default=None, help="Start from a named preset")
    ap.add_argument(
        "--theme",
        default="default",
        help=f"Color theme ({', '.join(THEMES)})",
    )

    ap.add_argument(
        "-r",
        "--resolution",
        type=float,
        default=None,
        help="Fraction of source pixels kept per axis, in (0, 1] (default 0.11)",
    )
    charset = ap.add_mutually_exclusive_group()
    charset.add_argument(
        "--charset", choices=list(CHARACTER_RAMPS), default=None, help="Character ramp"
    )
    charset.add_argument(
        "--ramp", default=None, help="Custom ramp, sparse to dense (>= 2 glyphs)"
    )
    ap.add_argument("--grayscale", action="store_true", default=None, help="Single-color output")
    ap.add_argument("--invert", action="store_true", default=None, help="Invert brightness")

    # Filters
    ap.add_argument("--contrast", type=float, default=None, help="Contrast multiplier (1 = neutral)")
    ap.add_argument("--brightness", type=float, default=None, help="Brightness multiplier (1 = neutral)")
    ap.add_argument("--blur", type=float, default=None, help="Blur radius in pixels (0 = off)")
    ap.add_argument("--sharpen", type=float, default=None, help="Sharpen amount (0 = off)")
    ap.add_argument("--edges", action="store_true", default=None, help="Sobel edge detection")
    ap.add_argument("--dither", action="store_true", default=None, help="Ordered dithering")

    # PNG only
    ap.add_argument("--overlay", default=None, metavar="TEXT", help="Text drawn over the art")
    ap.add_argument(
        "--overlay-pos",
        type=float,
        nargs=2,
        default=OVERLAY_POS,
        metavar=("X", "Y"),
        help="Overlay position in percent of the canvas (default 50 50)",
    )
    ap.add_argument("--watermark", default=None, metavar="TEXT", help="Watermark text")
    ap.add_argument(
        "--watermark-pos",
        type=float,
        nargs=2,
        default=WATERMARK_POS,
        metavar=("X", "Y"),
        help="Watermark position in percent of the canvas (default 90 95)",
    )
    ap.add_argument(
        "--watermark-opacity",
        type=float,
        default=WATERMARK_OPACITY,
        help="Watermark opacity in (0, 1] (default 0.5)",
    )

    ap.add_argument("--debug", action="store_true", help="Verbose logging to stderr")
    ap.add_argument("--log", default=None, help="Also write a debug log to FILE")
    return ap


def _pick(value, fallback):
    return fallback if value is None else value


def config_from_args(args) -> ConversionConfig:
    """Preset (or defaults) first; explicit flags override it."""
    theme = get_theme(args.theme)
    base = get_preset(args.preset).to_config(theme) if args.preset else ConversionConfig(
        foreground=theme.foreground_rgb
    )
    f = base.filters
    filters = FilterConfig(
        contrast=_pick(args.contrast, f.contrast),
        brightness=_pick(args.brightness, f.brightness),
        blur_radius=_pick(args.blur, f.blur_radius),
        sharpen_amount=_pick(args.sharpen, f.sharpen_amount),
        edge_detection=_pick(args.edges, f.edge_detection),
        dithering=_pick(args.dither, f.dithering),
    )
    return ConversionConfig(
        resolution=_pick(args.resolution, base.resolution),
        charset=args.ramp or args.charset or base.charset,
        grayscale=_pick(args.grayscale, base.grayscale),
        inverted=_pick(args.invert, base.inverted),
        filters=filters,
        foreground=base.foreground,
    )


def marks_from_args(args) -> dict:
    """render_png keyword arguments for the --overlay / --watermark flags."""
    marks = {}
    if args.overlay:
        marks["overlay"] = TextMark(args.overlay, *args.overlay_pos)
    if args.watermark:
        marks["watermark"] = TextMark(
            args.watermark, *args.watermark_pos, opacity=args.watermark_opacity
        )
    return marks


def main(argv=None) -> int:
    ap = build_parser()
    args = ap.parse_args(argv)

    t0 = time.perf_counter()
    setup_logging(args.debug, args.log)

    try:
        config = config_from_args(args)
        theme = get_theme(args.theme)
        marks = marks_from_args(args)
    except (KeyError, ValueError) as e:
        ap.error(str(e.args[0]) if e.args else str(e))

    fmt = args.format or format_for_path(args.output)
    if marks and fmt != "png":
        LOG.warning("--overlay/--watermark only apply to png output; ignored for %s", fmt)
    LOG.debug("Config: %s", config)
    LOG.debug("Output: format=%s path=%s", fmt, args.output)

    try:
        image = RasterImage.open(args.input)
        LOG.debug("Loaded %s: %dx%d", args.input, image.width, image.height)
        result = convert(image, config)
    except ConversionError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    data = export(result, fmt, theme, **marks)
    if isinstance(data, bytes):
        if not args.output or args.output == "-":
            sys.stdout.buffer.write(data)
        else:
            with open(args.output, "wb") as f:
                f.write(data)
    elif args.output and args.output != "-":
        with open(args.output, "w", encoding="utf-8") as f:
            f.write(data + "\n")
    else:
        sys.stdout.write(data + "\n")

    LOG.debug("Done in %.3fs", time.perf_counter() - t0)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
