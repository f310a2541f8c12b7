from pathlib import Path

from .manifest import ProjectManifest


def discover_documents(root: Path, manifest: ProjectManifest) -> list[Path]:
    """Service documents directly under ``root``, dot-files skipped, sorted by name."""
    files = [
        p for p in root.glob(manifest.compile.pattern) if p.is_file() and not p.name.startswith(".")
    ]
    return sorted(files, key=lambda p: p.name)
