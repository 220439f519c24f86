from __future__ import annotations

import importlib.metadata
import os
import subprocess
from pathlib import Path
from typing import Optional


def _installed_version() -> str:
    try:
        return importlib.metadata.version("rawpad")
    except importlib.metadata.PackageNotFoundError:
        return "0.0.0+unknown"


__version__ = _installed_version()


def _run_git(args: list[str], cwd: Optional[str] = None) -> Optional[str]:
    try:
        out = subprocess.check_output(
            ["git", *args], cwd=cwd or os.getcwd(), stderr=subprocess.DEVNULL
        )
        return out.decode().strip() or None
    except (subprocess.CalledProcessError, OSError):
        return None


def get_commit() -> Optional[str]:
    """Short commit hash when running from a git checkout."""
    here = Path(__file__).resolve().parent
    root = _run_git(["rev-parse", "--show-toplevel"], cwd=str(here))
    if not root:
        return None
    commit = _run_git(["rev-parse", "--short=7", "HEAD"], cwd=root)
    if commit is None:
        return None
    status = _run_git(["status", "--porcelain"], cwd=root)
    return commit + ("-dirty" if status else "")


def get_version_string() -> str:
    commit = get_commit()
    if commit:
        return f"rawpad {__version__} ({commit})"
    return f"rawpad {__version__}"
