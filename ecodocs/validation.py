"""Advisory validation of the ecosystem document structure."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List, Mapping

from .logging import get_logger

logger = get_logger("validation")

REQUIRED_FIELDS = ("version", "name", "releaseInfo", "metadata")


@dataclass
class ValidationReport:
    """Result of a validation pass; truthy when the document is valid."""

    valid: bool
    warnings: List[str] = field(default_factory=list)

    def __bool__(self) -> bool:
        return self.valid


def validate_document(doc: Mapping[str, Any]) -> ValidationReport:
    """Check required fields, logging one warning per failed check.

    Both checks always run so that a single pass reports every problem.
    Empty mappings and lists count as present; only ``None``, ``False``,
    zero and the empty string count as missing.
    """
    warnings: List[str] = []

    missing = [name for name in REQUIRED_FIELDS if _is_blank(doc.get(name))]
    if missing:
        warnings.append(f"Missing fields: {', '.join(missing)}")

    release_info = doc.get("releaseInfo")
    if not isinstance(release_info, Mapping) or _is_blank(release_info.get("releaseDate")):
        warnings.append("Missing releaseDate in releaseInfo")

    for message in warnings:
        logger.warning("Validation warning: %s", message)

    return ValidationReport(valid=not warnings, warnings=warnings)


def _is_blank(value: Any) -> bool:
    if value is None or value is False or value == "":
        return True
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value == 0 or value != value
    return False


__all__ = ["REQUIRED_FIELDS", "ValidationReport", "validate_document"]
