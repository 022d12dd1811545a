"""Version management for tubeloader."""

import tomllib
from importlib import metadata
from pathlib import Path


def get_version() -> str:
    """Get the current version from the installed distribution or pyproject.toml."""
    try:
        return metadata.version("tubeloader")
    except metadata.PackageNotFoundError:
        pass

    pyproject_path = Path(__file__).parent.parent.parent / "pyproject.toml"
    try:
        with open(pyproject_path, "rb") as f:
            data = tomllib.load(f)
            return data["project"]["version"]
    except (OSError, KeyError, tomllib.TOMLDecodeError):
        # Fallback version if we can't read it
        return "0.0.0"


__version__ = get_version()
