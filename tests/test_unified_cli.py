"""Tests for the ascii-raster command dispatcher."""

import logging
from unittest.mock import Mock, patch

import pytest
from ascii_raster.unified_cli import COMMANDS, main

IMPORT = "ascii_raster.unified_cli.importlib.import_module"


@pytest.fixture(autouse=True)
def reset_logger():
    yield
    logger = logging.getLogger("ascii_raster")
    for h in logger.handlers:
        h.close()
    logger.handlers[:] = []


def module_with(entry):
    module = Mock()
    module.main = entry
    return module


class TestUsage:
    @pytest.mark.parametrize("argv", [[], ["-h"], ["--help"]])
    def test_prints_usage(self, argv, capsys):
        assert main(argv) == 0
        out = capsys.readouterr().out
        assert "Usage: ascii-raster <command> [args...]" in out
        assert "Commands: image, presets" in out

    def test_unknown_command(self, capsys):
        assert main(["video"]) == 2
        captured = capsys.readouterr()
        assert "Unknown command: video" in captured.err
        assert "Usage: ascii-raster" in captured.out


class TestDispatch:
    @pytest.mark.parametrize("cmd", sorted(COMMANDS))
    def test_forwards_remaining_args(self, cmd):
        entry = Mock(return_value=0)
        with patch(IMPORT, return_value=module_with(entry)) as mock_import:
            assert main([cmd, "in.png", "-r", "0.2"]) == 0
        mock_import.assert_called_once_with(COMMANDS[cmd])
        entry.assert_called_once_with(["in.png", "-r", "0.2"])

    def test_returns_command_status(self):
        with patch(IMPORT, return_value=module_with(Mock(return_value=1))):
            assert main(["image", "missing.png"]) == 1

    @pytest.mark.parametrize("code,expected", [(2, 2), (None, 0)])
    def test_system_exit_becomes_status(self, code, expected):
        entry = Mock(side_effect=SystemExit(code))
        with patch(IMPORT, return_value=module_with(entry)):
            assert main(["image", "--help"]) == expected

    def test_unexpected_exception(self, capsys):
        entry = Mock(side_effect=RuntimeError("boom"))
        with patch(IMPORT, return_value=module_with(entry)):
            assert main(["image", "x.png"]) == 1
        assert "Error running command: boom" in capsys.readouterr().err

    def test_import_failure(self, capsys):
        with patch(IMPORT, side_effect=ImportError("no numpy")):
            assert main(["image"]) == 3
        err = capsys.readouterr().err
        assert "Failed to import command 'image'" in err
        assert "no numpy" in err

    def test_module_without_main(self, capsys):
        with patch(IMPORT, return_value=Mock(spec=[])):
            assert main(["presets"]) == 4
        assert "has no callable 'main'" in capsys.readouterr().err


class TestRealCommands:
    def test_presets(self, capsys):
        assert main(["presets"]) == 0
        assert "Presets:" in capsys.readouterr().out

    def test_presets_rejects_unknown_flag(self, capsys):
        assert main(["presets", "--bogus"]) == 2

    def test_image_to_stdout(self, tmp_path, capsys):
        from PIL import Image

        path = tmp_path / "gray.png"
        Image.new("RGB", (8, 8), (128, 128, 128)).save(path)
        assert main(["image", str(path), "-r", "1", "--grayscale"]) == 0
        lines = capsys.readouterr().out.rstrip("\n").split("\n")
        assert lines == ["========"] * 4
