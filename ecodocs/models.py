"""Core data models shared across ecodocs components."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any, Dict, Mapping, Optional, Union

# Persisted ecosystem.json content; kept as plain JSON-compatible data so that
# curated fields written by hand survive a load/dump cycle untouched.
EcosystemDocument = Dict[str, Any]

UNKNOWN = "unknown"

MANIFEST_FIELDS = (
    "name",
    "version",
    "description",
    "author",
    "license",
    "repository",
    "homepage",
)


def isoformat(moment: datetime) -> str:
    """Render ``moment`` as an ISO-8601 UTC timestamp with millisecond precision."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=UTC)
    moment = moment.astimezone(UTC)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


@dataclass(frozen=True)
class PackageMetadata:
    """Descriptive fields read from the package manifest."""

    name: Optional[str] = None
    version: Optional[str] = None
    description: Optional[str] = None
    author: Union[str, Mapping[str, Any], None] = None
    license: Optional[str] = None
    repository: Union[str, Mapping[str, Any], None] = None
    homepage: Optional[str] = None

    def as_dict(self) -> Dict[str, Any]:
        return {field: getattr(self, field) for field in MANIFEST_FIELDS}


@dataclass(frozen=True)
class RevisionInfo:
    """Snapshot of the current git revision."""

    commit_hash: str
    commit_date: str
    branch: str

    @classmethod
    def unknown(cls, now: datetime) -> "RevisionInfo":
        """Sentinel triple used when git cannot be queried."""
        return cls(commit_hash=UNKNOWN, commit_date=isoformat(now), branch=UNKNOWN)


@dataclass(frozen=True)
class RevisionLookup:
    """Outcome of a revision query: real data or a degraded sentinel."""

    info: RevisionInfo
    degraded: bool = False
    reason: Optional[str] = None

    @classmethod
    def success(cls, info: RevisionInfo) -> "RevisionLookup":
        return cls(info=info)

    @classmethod
    def fallback(cls, info: RevisionInfo, reason: str) -> "RevisionLookup":
        return cls(info=info, degraded=True, reason=reason)


__all__ = [
    "EcosystemDocument",
    "MANIFEST_FIELDS",
    "PackageMetadata",
    "RevisionInfo",
    "RevisionLookup",
    "UNKNOWN",
    "isoformat",
]
