"""Tests for themes and presets."""

import pytest
from ascii_raster.presets import (
    PRESETS,
    THEMES,
    get_preset,
    get_theme,
    hex_to_rgb,
    main,
    rgb_to_hex,
)


class TestColors:
    def test_hex_to_rgb(self):
        assert hex_to_rgb("#ff8000") == (255, 128, 0)
        assert hex_to_rgb("00FF00") == (0, 255, 0)

    @pytest.mark.parametrize("bad", ["#fff", "red", "#gg0000", ""])
    def test_bad_hex(self, bad):
        with pytest.raises(ValueError):
            hex_to_rgb(bad)

    def test_rgb_to_hex(self):
        assert rgb_to_hex((255, 128, 0)) == "#ff8000"


class TestThemes:
    def test_all_themes_present(self):
        assert set(THEMES) == {"default", "dark", "white", "matrix", "retro", "neon", "cyberpunk"}

    @pytest.mark.parametrize("name", ["matrix", "Matrix", " MATRIX "])
    def test_lookup_is_case_insensitive(self, name):
        assert get_theme(name).primary == "#00ff00"

    def test_foreground_rgb(self):
        assert THEMES["retro"].foreground_rgb == (255, 176, 0)
        assert THEMES["white"].background_rgb == (255, 255, 255)

    def test_unknown_theme(self):
        with pytest.raises(KeyError):
            get_theme("vaporwave")


class TestPresets:
    def test_names(self):
        assert [p.name for p in PRESETS] == ["Photo Portrait", "Logo", "Pixel Art", "Sketch"]

    @pytest.mark.parametrize("name", ["Photo Portrait", "photo-portrait", "PHOTO portrait"])
    def test_lookup(self, name):
        assert get_preset(name).name == "Photo Portrait"

    def test_unknown_preset(self):
        with pytest.raises(KeyError):
            get_preset("watercolor")

    def test_to_config(self):
        cfg = get_preset("sketch").to_config(THEMES["matrix"])
        assert cfg.resolution == 0.12
        assert cfg.charset == "standard"
        assert cfg.grayscale
        assert cfg.foreground == (0, 255, 0)
        assert cfg.filters.contrast == 1.3
        assert cfg.filters.brightness == 0.9
        assert cfg.filters.blur_radius == 0.5
        assert cfg.filters.edge_detection
        assert not cfg.filters.dithering
        assert cfg.filters.sharpen_amount == 0

    def test_every_preset_builds(self):
        for preset in PRESETS:
            cfg = preset.to_config()
            assert 0 < cfg.resolution <= 1
            assert cfg.foreground == (255, 255, 255)


class TestMain:
    def test_lists_presets_and_themes(self, capsys):
        assert main([]) == 0
        out = capsys.readouterr().out
        assert "Presets:" in out
        assert "pixel-art" in out
        assert "Themes:" in out
        assert "cyberpunk" in out

    def test_unknown_argument_is_usage_error(self, capsys):
        with pytest.raises(SystemExit) as exc:
            main(["--bogus"])
        assert exc.value.code == 2
        assert "ascii-raster presets" in capsys.readouterr().err
