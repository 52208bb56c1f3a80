import tomllib
from dataclasses import dataclass, field
from pathlib import Path

from .errors import ManifestError

MANIFEST_FILE = "rhinogen.toml"


@dataclass
class ContextConfig:
    """Where the Rhino context export lives."""

    path: Path | None = None


@dataclass
class OutputConfig:
    """Where the generated module is written."""

    path: Path | None = None
    banner: bool = True  # Prepend the "generated file" comment


@dataclass
class GeneratorManifest:
    """
    Project manifest loaded from rhinogen.toml.

    Example:

        [project]
        name = "smarthome"

        [context]
        path = "context.yml"

        [output]
        path = "smarthome/intents.py"
        banner = true

    Relative paths are resolved against the directory holding the manifest.
    """

    name: str | None = None
    context: ContextConfig = field(default_factory=ContextConfig)
    output: OutputConfig = field(default_factory=OutputConfig)


def _resolve(root: Path, value: object, key: str) -> Path | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ManifestError(f"'{key}' must be a string path in {MANIFEST_FILE}")
    path = Path(value)
    return path if path.is_absolute() else root / path


def _name(value: object, path: Path) -> str | None:
    if value is None or isinstance(value, str):
        return value
    raise ManifestError(f"'project.name' must be a string in {path}")


def _table(data: dict, key: str, path: Path) -> dict:
    value = data.get(key, {})
    if not isinstance(value, dict):
        raise ManifestError(f"[{key}] must be a table in {path}")
    return value


def load_manifest(path: Path) -> GeneratorManifest:
    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise ManifestError(f"Cannot read {path}: {e}") from e
    except tomllib.TOMLDecodeError as e:
        raise ManifestError(f"Invalid TOML in {path}: {e}") from e

    root = path.parent
    project = _table(data, "project", path)
    context_data = _table(data, "context", path)
    output_data = _table(data, "output", path)

    banner = output_data.get("banner", True)
    if not isinstance(banner, bool):
        raise ManifestError(f"'output.banner' must be true or false in {path}")

    return GeneratorManifest(
        name=_name(project.get("name"), path),
        context=ContextConfig(path=_resolve(root, context_data.get("path"), "context.path")),
        output=OutputConfig(
            path=_resolve(root, output_data.get("path"), "output.path"),
            banner=banner,
        ),
    )


def find_manifest(directory: Path) -> Path | None:
    """Return the rhinogen.toml in ``directory`` if there is one."""
    candidate = directory / MANIFEST_FILE
    return candidate if candidate.is_file() else None
