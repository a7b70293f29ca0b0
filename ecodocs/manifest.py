"""Package manifest (package.json) reader."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict

from .logging import get_logger
from .models import MANIFEST_FIELDS, PackageMetadata

logger = get_logger("manifest")


class ManifestUnreadable(RuntimeError):
    """Raised when the package manifest is missing or not a JSON object."""


def read_package_metadata(path: Path) -> PackageMetadata:
    """Load descriptive package fields from ``path``."""
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        logger.error("Failed to read %s: %s", path, exc)
        raise ManifestUnreadable(f"Cannot read manifest {path}: {exc}") from exc

    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        logger.error("Failed to parse %s: %s", path, exc)
        raise ManifestUnreadable(f"Manifest {path} is not valid JSON: {exc}") from exc

    if not isinstance(data, dict):
        raise ManifestUnreadable(f"Manifest {path} must contain a JSON object")

    fields: Dict[str, Any] = {field: data.get(field) for field in MANIFEST_FIELDS}
    logger.debug("Manifest %s provides %s@%s", path, fields["name"], fields["version"])
    return PackageMetadata(**fields)


__all__ = ["ManifestUnreadable", "read_package_metadata"]
