"""Tests for ramps, glyph selection and cell colors."""

import numpy as np
import pytest
from ascii_raster.charsets import CHARACTER_RAMPS, resolve_ramp, select_glyph, select_index
from ascii_raster.colorize import MIN_BRIGHTNESS, brightness_factor, cell_color, cell_colors


class TestRamps:
    def test_predefined(self):
        assert CHARACTER_RAMPS["standard"] == " .:-=+*#%@"
        assert CHARACTER_RAMPS["detailed"] == " .,:;i1tfLCG08@"
        assert CHARACTER_RAMPS["blocks"] == " ░▒▓█"
        assert CHARACTER_RAMPS["minimal"] == " .:█"
        assert CHARACTER_RAMPS["extended"].startswith(" .'`^\",:;Il!i><~+_-?][}{1)(|\\/")
        assert CHARACTER_RAMPS["extended"].endswith("*#MW&8%B@$")

    def test_every_ramp_starts_sparse(self):
        for ramp in CHARACTER_RAMPS.values():
            assert ramp[0] == " "
            assert len(ramp) >= 2

    def test_resolve_name(self):
        assert resolve_ramp("blocks") == " ░▒▓█"

    def test_resolve_custom(self):
        assert resolve_ramp(" x") == " x"

    @pytest.mark.parametrize("bad", ["", "#"])
    def test_too_short_rejected(self, bad):
        with pytest.raises(ValueError):
            resolve_ramp(bad)


class TestSelectIndex:
    @pytest.mark.parametrize("name", list(CHARACTER_RAMPS))
    def test_endpoints_in_range(self, name):
        n = len(CHARACTER_RAMPS[name])
        assert select_index(0.0, n) == 0
        assert select_index(1.0, n) == n - 1

    def test_mid_gray_standard(self):
        assert select_index(128 / 255, 10) == 4
        assert select_glyph(128 / 255, CHARACTER_RAMPS["standard"]) == "="

    def test_out_of_range_is_clamped(self):
        assert select_index(1.7, 10) == 9
        assert select_index(-0.3, 10) == 0

    def test_sweep_stays_in_range(self):
        b = np.linspace(0.0, 1.0, 1001)
        for n in (2, 5, 10, 70):
            idx = select_index(b, n)
            assert idx.min() == 0
            assert idx.max() == n - 1

    def test_scalar_returns_int(self):
        assert isinstance(select_index(0.3, 10), int)


class TestColorize:
    def test_factor_range(self):
        assert brightness_factor(0, 10) == pytest.approx(0.5)
        assert brightness_factor(9, 10) == pytest.approx(2.0)

    def test_grayscale_uses_foreground(self):
        assert cell_color(10, 200, 30, 4, 10, grayscale=True, foreground=(0, 255, 0)) == (0, 255, 0)

    def test_densest_glyph_doubles(self):
        assert cell_color(100, 50, 10, 9, 10, grayscale=False) == (200, 100, MIN_BRIGHTNESS)

    def test_sparsest_glyph_halves_with_floor(self):
        # 101 * 0.5 = 50.5 rounds up, 255 * 0.5 = 127.5 rounds up
        assert cell_color(101, 60, 255, 0, 10, grayscale=False) == (51, MIN_BRIGHTNESS, 128)

    def test_clamped_to_255(self):
        assert cell_color(200, 200, 200, 9, 10, grayscale=False) == (255, 255, 255)

    def test_grid_shape(self):
        rgb = np.full((2, 3, 3), 100, dtype=np.uint8)
        index = np.array([[0, 1, 2], [3, 4, 9]])
        out = cell_colors(rgb, index, 10, grayscale=False)
        assert out.shape == (2, 3, 3)
        assert out.dtype == np.uint8
        assert tuple(out[1, 2]) == (200, 200, 200)
        assert (out >= MIN_BRIGHTNESS).all()
