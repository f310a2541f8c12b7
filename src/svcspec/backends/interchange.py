"""
Interchange backends for svcspec.

Serialize the IR as-is, camelCase keys in declaration order, as indented
JSON or block-style YAML. ``load_service_spec`` reads either form back.
"""

import json
from pathlib import Path
from typing import Any

import yaml

from ..core import ir
from ..core.errors import BackendError
from . import Backend, BackendCapabilities

FORMATS = ("json", "yaml")


def _dump(data: Any, fmt: str) -> str:
    if fmt == "json":
        return json.dumps(data, indent=2, ensure_ascii=False) + "\n"
    if fmt == "yaml":
        return yaml.safe_dump(data, sort_keys=False, allow_unicode=True, default_flow_style=False)
    raise BackendError(f"Unsupported format: {fmt}. Use 'json' or 'yaml'.")


def _load(text: str, fmt: str) -> Any:
    if fmt == "json":
        return json.loads(text)
    if fmt == "yaml":
        return yaml.safe_load(text)
    raise BackendError(f"Unsupported format: {fmt}. Use 'json' or 'yaml'.")


def spec_to_dict(spec: ir.ServiceSpec) -> dict[str, Any]:
    return spec.model_dump(mode="json", by_alias=True)


def dump_service_spec(spec: ir.ServiceSpec, fmt: str = "json") -> str:
    return _dump(spec_to_dict(spec), fmt)


def load_service_spec(text: str, fmt: str = "json") -> ir.ServiceSpec:
    """
    Deserialize one document's IR.

    Raises:
        BackendError: If the text does not parse or does not describe a ServiceSpec
    """
    try:
        return ir.ServiceSpec.model_validate(_load(text, fmt))
    except BackendError:
        raise
    except Exception as e:
        raise BackendError(f"Invalid {fmt} service spec: {e}") from e


def dump_corpus(specs: list[ir.ServiceSpec], fmt: str = "json") -> str:
    """Aggregate file listing every compiled document."""
    return _dump([spec_to_dict(spec) for spec in specs], fmt)


def load_corpus(text: str, fmt: str = "json") -> list[ir.ServiceSpec]:
    data = _load(text, fmt)
    if not isinstance(data, list):
        raise BackendError("Aggregate interchange file must contain a list of service specs")
    return [ir.ServiceSpec.model_validate(item) for item in data]


def write_corpus(specs: list[ir.ServiceSpec], path: Path, fmt: str = "json") -> Path:
    """
    Write the aggregate interchange file.

    Raises:
        BackendError: If the file cannot be written
    """
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(dump_corpus(specs, fmt), encoding="utf-8")
    except OSError as e:
        raise BackendError(f"Failed to write {path}: {e}") from e
    return path


class JsonBackend(Backend):
    """Indented JSON rendering of the IR."""

    name = "json"
    extension = "json"
    format = "json"

    def render(self, spec: ir.ServiceSpec, **options: Any) -> str:
        return dump_service_spec(spec, self.format)

    def get_capabilities(self) -> BackendCapabilities:
        return BackendCapabilities(
            name=self.name,
            description=f"IR as {self.format.upper()} with camelCase keys",
            output_formats=[self.extension],
        )


class YamlBackend(JsonBackend):
    """Block-style YAML rendering of the IR."""

    name = "yaml"
    extension = "yaml"
    format = "yaml"
