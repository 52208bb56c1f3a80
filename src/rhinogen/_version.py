"""Version of the rhinogen distribution."""

import tomllib
from importlib import metadata
from pathlib import Path

DISTRIBUTION = "rhinogen"

# Present in a source checkout; src/rhinogen/_version.py -> repository root
_PYPROJECT = Path(__file__).resolve().parents[2] / "pyproject.toml"


def get_version() -> str:
    """
    Return the installed version of rhinogen.

    A source tree that was never installed falls back to the version declared
    in its pyproject.toml, and to "0.0.0" when that cannot be read either.
    """
    try:
        return metadata.version(DISTRIBUTION)
    except metadata.PackageNotFoundError:
        pass

    try:
        with _PYPROJECT.open("rb") as f:
            return str(tomllib.load(f)["project"]["version"])
    except (OSError, tomllib.TOMLDecodeError, KeyError):
        return "0.0.0"
