import tomllib
from dataclasses import dataclass, field
from pathlib import Path

from .errors import ManifestError
from .ir import DEFAULT_PAGE_SIZE

MANIFEST_FILENAME = "adminschema.toml"

DEFAULT_BUNDLES = ["tls", "listener"]


@dataclass
class RegistryConfig:
    """Which schema bundles to build, in order."""

    bundles: list[str] = field(default_factory=lambda: list(DEFAULT_BUNDLES))
    page_size: int = DEFAULT_PAGE_SIZE


@dataclass
class LoggingConfig:
    """Logging configuration.

    Examples in adminschema.toml:

        [logging]
        level = "DEBUG"
        log_dir = ".adminschema/logs"   # relative to this file; also write JSONL logs
    """

    level: str = "WARNING"
    log_dir: str | None = None


@dataclass
class ProjectManifest:
    registry: RegistryConfig = field(default_factory=RegistryConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    project_root: Path | None = None


def load_manifest(path: Path) -> ProjectManifest:
    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise ManifestError(f"Cannot read {path}: {e}") from e
    except tomllib.TOMLDecodeError as e:
        raise ManifestError(f"Invalid TOML in {path}: {e}") from e

    registry_data = data.get("registry", {})
    if not isinstance(registry_data, dict):
        raise ManifestError(f"{path}: [registry] must be a table")
    logging_data = data.get("logging", {})
    if not isinstance(logging_data, dict):
        raise ManifestError(f"{path}: [logging] must be a table")

    bundles = registry_data.get("bundles", list(DEFAULT_BUNDLES))
    if not isinstance(bundles, list) or not all(isinstance(b, str) for b in bundles):
        raise ManifestError(f"{path}: registry.bundles must be a list of strings")

    page_size = registry_data.get("page_size", DEFAULT_PAGE_SIZE)
    if not isinstance(page_size, int) or isinstance(page_size, bool) or page_size < 1:
        raise ManifestError(f"{path}: registry.page_size must be a positive integer")

    level = str(logging_data.get("level", "WARNING")).upper()
    if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
        raise ManifestError(f"{path}: unknown logging.level {level!r}")

    log_dir = logging_data.get("log_dir")
    if log_dir is not None:
        if not isinstance(log_dir, str):
            raise ManifestError(f"{path}: logging.log_dir must be a string")
        # Relative to the manifest, not the working directory
        log_dir = str(path.parent / log_dir)

    return ProjectManifest(
        registry=RegistryConfig(bundles=bundles, page_size=page_size),
        logging=LoggingConfig(level=level, log_dir=log_dir),
        project_root=path.parent,
    )


def load_project_manifest(project_dir: Path) -> ProjectManifest:
    """Load adminschema.toml from a project directory, or defaults when absent."""
    path = project_dir / MANIFEST_FILENAME
    if not path.exists():
        return ProjectManifest(project_root=project_dir)
    return load_manifest(path)
