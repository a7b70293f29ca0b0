"""Synchronise ecosystem.json with package metadata and git revision info."""

from .document import generate_document, load_existing_document, merge_documents
from .git.revision import RevisionInspector
from .manifest import ManifestUnreadable, read_package_metadata
from .models import PackageMetadata, RevisionInfo, RevisionLookup
from .validation import ValidationReport, validate_document
from .writer import PersistenceError, write_document

__all__ = [
    "ManifestUnreadable",
    "PackageMetadata",
    "PersistenceError",
    "RevisionInfo",
    "RevisionInspector",
    "RevisionLookup",
    "ValidationReport",
    "generate_document",
    "load_existing_document",
    "merge_documents",
    "read_package_metadata",
    "validate_document",
    "write_document",
]
