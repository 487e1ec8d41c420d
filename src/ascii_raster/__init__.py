"""ASCII Raster - Convert raster images to character-grid art."""

__version__ = "0.2.0"

"""
Expose lightweight lazy wrappers to avoid importing submodules at package
import time. Importing submodules in `__init__` causes `runpy` to warn when
executing a module with `-m` because the submodule may already appear in
`sys.modules` before execution. Wrappers import on-demand.
"""


def convert(*args, **kwargs):
    from .pipeline import convert as _c

    return _c(*args, **kwargs)


def image_to_ascii_main(*args, **kwargs):
    from .image_to_ascii import main as _m

    return _m(*args, **kwargs)


def presets_main(*args, **kwargs):
    from .presets import main as _m

    return _m(*args, **kwargs)


__all__ = [
    "convert",
    "image_to_ascii_main",
    "presets_main",
]
