import numpy as np

# -----------------------------
# Ramps (sparse/dark -> dense/bright)
# -----------------------------
CHARACTER_RAMPS = {
    "standard": " .:-=+*#%@",
    "detailed": " .,:;i1tfLCG08@",
    "blocks": " ░▒▓█",
    "minimal": " .:█",
    "extended": (
        " .'`^\",:;Il!i><~+_-?][}{1)(|\\/tfjrxnuvczXYUJCLQ0OZmwqpdbkhao*#MW&8%B@$"
    ),
}

DEFAULT_RAMP = "standard"


def resolve_ramp(charset: str) -> str:
    """
    Return the ramp for a predefined name, or ``charset`` itself when it is a
    custom ramp. Selection divides by ``len(ramp) - 1`` so at least two glyphs
    are required.
    """
    ramp = CHARACTER_RAMPS.get(charset, charset)
    if not isinstance(ramp, str) or len(ramp) < 2:
        raise ValueError(
            f"Unknown charset or ramp too short: {charset!r} "
            f"(choose one of {', '.join(CHARACTER_RAMPS)} or give >= 2 glyphs)"
        )
    return ramp


def select_index(brightness, ramp_length: int):
    """Glyph index for a brightness in [0, 1]; scalar in, int out."""
    index = np.clip(np.floor(np.asarray(brightness) * (ramp_length - 1)), 0, ramp_length - 1)
    index = index.astype(np.int64)
    return int(index) if index.ndim == 0 else index


def select_glyph(brightness: float, ramp: str) -> str:
    return ramp[select_index(brightness, len(ramp))]
