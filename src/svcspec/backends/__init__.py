"""
Backend plugin system for svcspec.

Backends render one compiled ServiceSpec into a text artifact (a C header,
a JSON or YAML interchange file) and write it under an output directory.
"""

import importlib
import inspect
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from ..core import ir
from ..core.errors import BackendError

logger = logging.getLogger(__name__)


@dataclass
class BackendCapabilities:
    """
    Describes what a backend can generate.

    Used for introspection and CLI help text.
    """

    name: str
    description: str
    output_formats: list[str]  # e.g., ["h"], ["json"]


class Backend(ABC):
    """
    Abstract base class for all svcspec backends.

    Subclasses set ``name`` (used on the command line) and ``extension``
    (suffix of the files they write) and implement ``render``.
    """

    name: str = ""
    extension: str = ""

    @abstractmethod
    def render(self, spec: ir.ServiceSpec, **options: Any) -> str:
        """
        Render a compiled document.

        Args:
            spec: Compiled document without diagnostics
            **options: Backend-specific options

        Returns:
            File contents
        """

    def output_path(self, spec: ir.ServiceSpec, output_dir: Path) -> Path:
        return output_dir / f"{spec.short_id}.{self.extension}"

    def generate(self, spec: ir.ServiceSpec, output_dir: Path, **options: Any) -> Path:
        """
        Render ``spec`` and write it to ``output_dir/<short id>.<extension>``.

        Raises:
            BackendError: If rendering or writing fails
        """
        try:
            output_dir.mkdir(parents=True, exist_ok=True)
            path = self.output_path(spec, output_dir)
            path.write_text(self.render(spec, **options), encoding="utf-8")
        except BackendError:
            raise
        except Exception as e:
            raise BackendError(f"{self.name} backend failed for {spec.short_id}: {e}") from e
        logger.info("Wrote %s", path)
        return path

    def get_capabilities(self) -> BackendCapabilities:
        """
        Get backend capabilities for introspection.

        Override to provide backend metadata.
        """
        return BackendCapabilities(
            name=self.name or self.__class__.__name__,
            description="No description provided",
            output_formats=[self.extension or "unknown"],
        )

    def validate_config(self, **options: Any) -> None:
        """
        Validate backend-specific configuration.

        Called before generate() to catch config errors early.

        Raises:
            BackendError: If config is invalid
        """


class BackendRegistry:
    """
    Registry for backend plugins.

    Supports:
    - Manual registration via register()
    - Discovery of the backend modules shipped in this package
    - Lookup by name
    """

    def __init__(self) -> None:
        self._backends: dict[str, type[Backend]] = {}

    def register(self, name: str, backend_class: type[Backend]) -> None:
        """
        Register a backend class.

        Raises:
            BackendError: If name already registered or class invalid
        """
        if name in self._backends:
            raise BackendError(
                f"Backend '{name}' is already registered. Cannot register {backend_class.__name__}."
            )
        if not issubclass(backend_class, Backend):
            raise BackendError(f"Backend class {backend_class.__name__} must extend Backend")
        self._backends[name] = backend_class

    def get(self, name: str) -> Backend:
        """
        Get a backend instance by name.

        Raises:
            BackendError: If backend not found
        """
        if name not in self._backends:
            available = list(self._backends.keys())
            raise BackendError(f"Backend '{name}' not found. Available backends: {available}")
        return self._backends[name]()

    def list_backends(self) -> list[str]:
        return list(self._backends.keys())

    def discover(self) -> None:
        """
        Register every concrete Backend subclass defined in this package's modules.

        Classes are registered under their ``name`` attribute.
        """
        backends_dir = Path(__file__).parent
        for py_file in sorted(backends_dir.glob("*.py")):
            if py_file.name.startswith("_"):
                continue
            module = importlib.import_module(f"{__name__}.{py_file.stem}")
            for _name, obj in inspect.getmembers(module, inspect.isclass):
                if (
                    issubclass(obj, Backend)
                    and not inspect.isabstract(obj)
                    and obj.name
                    and obj.name not in self._backends
                ):
                    self.register(obj.name, obj)


# Global registry instance
_registry: BackendRegistry | None = None


def get_registry() -> BackendRegistry:
    """
    Get the global backend registry.

    Performs discovery on first call.
    """
    global _registry
    if _registry is None:
        _registry = BackendRegistry()
        _registry.discover()
    return _registry


def register_backend(name: str, backend_class: type[Backend]) -> None:
    get_registry().register(name, backend_class)


def get_backend(name: str) -> Backend:
    """
    Get a backend instance by name.

    Raises:
        BackendError: If backend not found
    """
    return get_registry().get(name)


def list_backends() -> list[str]:
    return get_registry().list_backends()


__all__ = [
    "Backend",
    "BackendCapabilities",
    "BackendRegistry",
    "BackendError",
    "get_registry",
    "register_backend",
    "get_backend",
    "list_backends",
]
