# unified_cli.py
import importlib
import sys
from typing import List, Optional, Sequence

PROG = "ascii-raster"

COMMANDS = {
    "image": "ascii_raster.image_to_ascii",
    "presets": "ascii_raster.presets",
}


def usage() -> None:
    print(f"Usage: {PROG} <command> [args...]")
    print(f"Commands: {', '.join(sorted(COMMANDS))}")


def _run(entry, argv: List[str]) -> int:
    # argparse exits on usage errors and --help; fold that into a return code
    try:
        return entry(argv)
    except SystemExit as se:
        return se.code if isinstance(se.code, int) else 0
    except Exception as e:
        print(f"Error running command: {e}", file=sys.stderr)
        return 1


def main(argv: Optional[Sequence[str]] = None) -> int:
    argv = list(sys.argv[1:] if argv is None else argv)

    if not argv or argv[0] in ("-h", "--help"):
        usage()
        return 0

    cmd, *args = argv
    module_path = COMMANDS.get(cmd)
    if not module_path:
        print(f"Unknown command: {cmd}", file=sys.stderr)
        usage()
        return 2

    try:
        module = importlib.import_module(module_path)
    except ImportError as e:
        print(f"Failed to import command '{cmd}' ({module_path}): {e}", file=sys.stderr)
        return 3

    entry = getattr(module, "main", None)
    if not callable(entry):
        print(f"Command module '{module_path}' has no callable 'main'", file=sys.stderr)
        return 4

    return _run(entry, args)


if __name__ == "__main__":
    raise SystemExit(main())
