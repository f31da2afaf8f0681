"""Version lookup for Frankenstyle."""

import re
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _metadata_version
from pathlib import Path

_PYPROJECT = Path(__file__).parent.parent.parent / "pyproject.toml"


def get_version() -> str:
    """Read the version from a source checkout's pyproject.toml, else installed metadata."""
    if _PYPROJECT.exists():
        match = re.search(r'^version\s*=\s*"([^"]+)"', _PYPROJECT.read_text(), re.MULTILINE)
        if match:
            return match.group(1)
    try:
        return _metadata_version("frankenstyle")
    except PackageNotFoundError:
        return "0.0.0"
