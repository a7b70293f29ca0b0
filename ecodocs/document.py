"""Generation, loading and merging of the ecosystem document."""

from __future__ import annotations

import copy
import json
from datetime import datetime
from pathlib import Path
from typing import Any, Iterable, List, Mapping, Optional

from .config import DEFAULT_DOCUMENTATION, DEFAULT_UPDATED_BY, REQUIRED_COMPONENTS, ComponentSpec
from .logging import get_logger
from .models import EcosystemDocument, PackageMetadata, RevisionInfo, isoformat

logger = get_logger("document")

# Sub-fields maintained by hand in ecosystem.json; regeneration must keep them.
CURATED_ECOSYSTEM_FIELDS = ("networks", "deployments")


def generate_document(
    metadata: PackageMetadata,
    revision: RevisionInfo,
    now: datetime,
    *,
    components: Iterable[ComponentSpec] = REQUIRED_COMPONENTS,
    documentation: Optional[Mapping[str, str]] = None,
    updated_by: str = DEFAULT_UPDATED_BY,
) -> EcosystemDocument:
    """Build a fresh document from manifest and revision data.

    The result never contains curated data: contract listings are empty and
    the ecosystem registries start out blank. ``merge_documents`` restores
    them from the previously persisted version.
    """
    timestamp = isoformat(now)
    document: EcosystemDocument = metadata.as_dict()
    document["releaseInfo"] = {
        "releaseDate": timestamp,
        "commitHash": revision.commit_hash,
        "commitDate": revision.commit_date,
        "branch": revision.branch,
    }
    document["documentation"] = dict(documentation or DEFAULT_DOCUMENTATION)
    document["components"] = {
        spec.key: {
            "description": spec.description,
            "status": spec.status,
            "mainContracts": [],
        }
        for spec in _with_required(components)
    }
    document["ecosystem"] = {field: [] for field in CURATED_ECOSYSTEM_FIELDS}
    document["metadata"] = {
        "lastUpdated": timestamp,
        "updatedBy": updated_by,
        "generatedAt": timestamp,
    }
    return document


def load_existing_document(path: Path) -> Optional[EcosystemDocument]:
    """Return the persisted document, or ``None`` when there is nothing usable."""
    if not path.exists():
        logger.debug("No existing document at %s", path)
        return None
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
        logger.warning("Could not load existing %s: %s", path.name, exc)
        return None
    if not isinstance(data, dict):
        logger.warning("Ignoring existing %s: expected a JSON object", path.name)
        return None
    return data


def merge_documents(
    new_doc: EcosystemDocument, existing_doc: Optional[Mapping[str, Any]]
) -> EcosystemDocument:
    """Overlay curated fields from ``existing_doc`` onto ``new_doc``.

    Only ``ecosystem.networks``, ``ecosystem.deployments`` and each shared
    component's ``mainContracts`` are carried over; everything else comes
    from the fresh generation. Neither argument is mutated.
    """
    if existing_doc is None:
        return new_doc

    merged = copy.deepcopy(new_doc)

    existing_ecosystem = existing_doc.get("ecosystem")
    if isinstance(existing_ecosystem, Mapping):
        ecosystem = dict(merged.get("ecosystem") or {})
        for field in CURATED_ECOSYSTEM_FIELDS:
            ecosystem[field] = _as_list(existing_ecosystem.get(field))
        merged["ecosystem"] = ecosystem

    existing_components = existing_doc.get("components")
    if isinstance(existing_components, Mapping):
        components = merged.get("components") or {}
        for key, previous in existing_components.items():
            current = components.get(key)
            if not current or not isinstance(previous, Mapping):
                continue
            components[key] = {
                **current,
                "mainContracts": _as_list(previous.get("mainContracts")),
            }
        merged["components"] = components

    return merged


def _with_required(components: Iterable[ComponentSpec]) -> List[ComponentSpec]:
    specs = list(components)
    present = {spec.key for spec in specs}
    missing = [spec for spec in REQUIRED_COMPONENTS if spec.key not in present]
    return missing + specs


def _as_list(value: Any) -> List[Any]:
    if isinstance(value, list):
        return copy.deepcopy(value)
    if value:
        logger.debug("Discarding non-list curated value %r", value)
    return []


__all__ = [
    "CURATED_ECOSYSTEM_FIELDS",
    "generate_document",
    "load_existing_document",
    "merge_documents",
]
