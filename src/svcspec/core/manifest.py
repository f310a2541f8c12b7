import tomllib
from dataclasses import dataclass, field
from pathlib import Path

from .dsl_parser_impl.base import DEFAULT_BASE_KEY
from .errors import ConfigError

MANIFEST_NAME = "svcspec.toml"
INTERCHANGE_FORMATS = ("json", "yaml")


@dataclass
class BuildConfig:
    """Where and what ``svcspec build`` writes."""

    output: str = "generated"
    generators: list[str] = field(default_factory=lambda: ["json", "c"])
    aggregate: str = "spec.json"
    interchange_format: str = "json"  # "json" | "yaml"


@dataclass
class CompileConfig:
    """Document discovery and compilation settings."""

    base: str = DEFAULT_BASE_KEY
    pattern: str = "*.md"


@dataclass
class CHeaderConfig:
    """C header backend settings."""

    prefix: str = "JD"


@dataclass
class ProjectManifest:
    """
    Settings for one directory of service documents.

    Examples in svcspec.toml:

        [project]
        name = "sensors"

        [build]
        output = "generated"
        generators = ["json", "c"]
        interchange_format = "yaml"

        [c]
        prefix = "JD"
    """

    name: str = ""
    build: BuildConfig = field(default_factory=BuildConfig)
    compile: CompileConfig = field(default_factory=CompileConfig)
    c: CHeaderConfig = field(default_factory=CHeaderConfig)


def load_manifest(path: Path) -> ProjectManifest:
    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid manifest {path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Cannot read manifest {path}: {e}") from e

    project = data.get("project", {})
    build_data = data.get("build", {})
    compile_data = data.get("compile", {})
    c_data = data.get("c", {})

    build = BuildConfig(
        output=build_data.get("output", "generated"),
        generators=list(build_data.get("generators", ["json", "c"])),
        aggregate=build_data.get("aggregate", "spec.json"),
        interchange_format=build_data.get("interchange_format", "json"),
    )
    if build.interchange_format not in INTERCHANGE_FORMATS:
        raise ConfigError(
            f"Unknown interchange_format '{build.interchange_format}' in {path}; "
            f"expected one of: {', '.join(INTERCHANGE_FORMATS)}"
        )

    return ProjectManifest(
        name=project.get("name", ""),
        build=build,
        compile=CompileConfig(
            base=compile_data.get("base", DEFAULT_BASE_KEY),
            pattern=compile_data.get("pattern", "*.md"),
        ),
        c=CHeaderConfig(prefix=c_data.get("prefix", "JD")),
    )


def find_manifest(root: Path, explicit: Path | None = None) -> ProjectManifest:
    """Load ``explicit`` or ``root/svcspec.toml``; defaults when neither exists."""
    if explicit is not None:
        if not explicit.is_file():
            raise ConfigError(f"Manifest not found: {explicit}")
        return load_manifest(explicit)
    candidate = root / MANIFEST_NAME
    if candidate.is_file():
        return load_manifest(candidate)
    return ProjectManifest()
