"""Version lookup for addrstr.

A source checkout reads it from pyproject.toml; an installed copy asks
importlib.metadata.
"""

import re
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _metadata_version
from pathlib import Path

_PYPROJECT = Path(__file__).parent.parent.parent / "pyproject.toml"
_VERSION_RE = re.compile(r'^version\s*=\s*["\']([^"\']+)["\']', re.MULTILINE)


def get_version() -> str:
    """Return the addrstr version, or ``0.0.0`` when neither source knows it."""
    if _PYPROJECT.exists():
        if match := _VERSION_RE.search(_PYPROJECT.read_text()):
            return match.group(1)
    try:
        return _metadata_version("addrstr")
    except PackageNotFoundError:
        return "0.0.0"
