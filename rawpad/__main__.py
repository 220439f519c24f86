"""rawpad CLI entry point.

Allows running via `python -m rawpad` and provides the console script
defined in `pyproject.toml`.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import platformdirs

from .version import get_version_string

USAGE = "usage: rawpad [--help] [--version] [--keytest] [--init-config] [--debug] [FILE]"


def configure_logging(debug: bool = False) -> None:
    """Send log records to a file; the terminal belongs to the editor."""
    log_dir = Path(platformdirs.user_log_dir("rawpad"))
    try:
        log_dir.mkdir(parents=True, exist_ok=True)
    except OSError:
        return
    logging.basicConfig(
        filename=str(log_dir / "rawpad.log"),
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )


def _escape_bytes(raw: bytes) -> str:
    """Return a printable representation of raw key bytes."""
    return raw.decode('latin-1').encode('unicode_escape').decode('ascii')


def run_keyboard_test() -> None:
    """Print decoded keys until ESC, using the editor's input stack."""
    from .keyboard import KeyDecoder, KeyType
    from .terminal import TerminalInterface

    print("Keyboard test mode - press keys to see decoded events.")
    print("Quit with ESC.")

    term = TerminalInterface()
    decoder = KeyDecoder(term)
    with term.session():
        while True:
            key = decoder.read_key()
            if key.key_type == KeyType.ESC:
                break
            term.write(f"{key}  raw='{_escape_bytes(key.raw)}'\r\n")
    print("Exiting keyboard test.")


def init_config() -> int:
    from .settings import EditorSettings, default_settings_path, save_settings

    path = default_settings_path()
    if path.exists():
        print(f"{path} already exists")
        return 0
    if not save_settings(EditorSettings(), path):
        print(f"Could not write {path}", file=sys.stderr)
        return 1
    print(f"Wrote default settings to {path}")
    return 0


def main() -> None:
    # Very small arg parsing, the editor takes at most one file name
    args = sys.argv[1:]
    debug = False
    if "--debug" in args:
        args.remove("--debug")
        debug = True
    if args and args[0] in ("--version", "-V"):
        print(get_version_string())
        return
    if args and args[0] in ("--help", "-h"):
        print(USAGE)
        return
    if args and args[0] == "--init-config":
        sys.exit(init_config())
    if len(args) > 1 or (args and args[0].startswith("--") and args[0] != "--keytest"):
        print(USAGE, file=sys.stderr)
        sys.exit(2)

    configure_logging(debug)
    if args and args[0] == "--keytest":
        run_keyboard_test()
        return

    # Lazy import to avoid importing UI deps for --version
    from .editor import Editor
    from .settings import load_settings

    editor = Editor(settings=load_settings())
    if args:
        try:
            editor.load_file(args[0])
        except OSError as e:
            print(f"Error loading file: {e}", file=sys.stderr)
            sys.exit(1)
    editor.run()


if __name__ == "__main__":  # pragma: no cover
    main()
