from __future__ import annotations

import importlib.metadata
import subprocess
from pathlib import Path
from typing import Optional

FALLBACK_VERSION = "0.0.1"


def get_version() -> str:
    """Installed distribution version, or the fallback when running from a checkout."""
    try:
        return importlib.metadata.version("cilo")
    except importlib.metadata.PackageNotFoundError:
        return FALLBACK_VERSION


def _run_git(args: list[str], cwd: Path) -> Optional[str]:
    try:
        out = subprocess.check_output(
            ["git", *args], cwd=str(cwd), stderr=subprocess.DEVNULL
        )
        return out.decode().strip() or None
    except (subprocess.CalledProcessError, FileNotFoundError, OSError):
        return None


def get_commit() -> Optional[str]:
    """Short hash of the checkout this module lives in, if any."""
    here = Path(__file__).resolve().parent
    return _run_git(["rev-parse", "--short=7", "HEAD"], cwd=here)


def get_version_string() -> str:
    version = get_version()
    commit = get_commit()
    if commit:
        return f"{version} ({commit})"
    return version
