"""Pipeline orchestration for ecosystem document synchronisation."""

from __future__ import annotations

import difflib
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path
from typing import Callable, Optional, TextIO

from .config import SyncConfig
from .document import generate_document, load_existing_document, merge_documents
from .git.revision import RevisionInspector
from .logging import get_logger
from .manifest import read_package_metadata
from .models import EcosystemDocument, RevisionLookup
from .validation import ValidationReport, validate_document
from .writer import WriteOutcome, render_document, write_document


@dataclass
class SyncOutcome:
    """Everything a run produced, for callers that want more than the file."""

    document: EcosystemDocument
    revision: RevisionLookup
    validation: ValidationReport
    write: WriteOutcome


class Synchronizer:
    """Runs read → generate → merge → validate → write for one target."""

    def __init__(
        self,
        inspector: RevisionInspector | None = None,
        clock: Callable[[], datetime] | None = None,
        stream: Optional[TextIO] = None,
    ) -> None:
        self._clock = clock or (lambda: datetime.now(UTC))
        self.inspector = inspector or RevisionInspector(clock=self._clock)
        self.stream = stream
        self.logger = get_logger("orchestrator")

    def run(self, config: SyncConfig) -> SyncOutcome:
        """Synchronise ``config.document_path`` with the manifest and git state."""
        self.logger.info("Starting ecosystem documentation update...")
        if config.dry_run:
            self.logger.warning("Running in DRY RUN mode - no files will be modified")

        self.logger.info("Gathering package metadata...")
        metadata = read_package_metadata(config.manifest_path)

        self.logger.info("Retrieving git information...")
        revision = self.inspector.inspect(config.root)

        self.logger.info("Generating ecosystem documentation...")
        document = generate_document(
            metadata,
            revision.info,
            self._clock(),
            components=config.components,
            documentation=config.documentation,
            updated_by=config.updated_by,
        )

        self.logger.info("Loading existing ecosystem documentation...")
        existing = load_existing_document(config.document_path)
        document = merge_documents(document, existing)

        self.logger.info("Validating ecosystem documentation...")
        validation = validate_document(document)
        if not validation and not config.dry_run:
            self.logger.warning("Validation warnings detected, but proceeding with update")

        if config.dry_run:
            self._log_diff(config.document_path, document)

        self.logger.info("Writing ecosystem documentation...")
        write = write_document(
            document,
            config.document_path,
            dry_run=config.dry_run,
            stream=self.stream,
        )

        self.logger.info("Ecosystem documentation updated successfully")
        self.logger.info("  Version: %s", document.get("version"))
        self.logger.info("  Commit: %s", revision.info.commit_hash)
        self.logger.info("  Last Updated: %s", document["metadata"]["lastUpdated"])

        return SyncOutcome(
            document=document,
            revision=revision,
            validation=validation,
            write=write,
        )

    # ------------------------------------------------------------------
    # Internals

    def _log_diff(self, path: Path, document: EcosystemDocument) -> None:
        try:
            previous = path.read_text(encoding="utf-8")
        except OSError:
            previous = ""
        diff = difflib.unified_diff(
            previous.splitlines(),
            render_document(document).splitlines(),
            fromfile=f"a/{path.name}",
            tofile=f"b/{path.name}",
            lineterm="",
        )
        text = "\n".join(diff)
        self.logger.debug("Pending changes for %s:\n%s", path.name, text or "(no diff)")


__all__ = ["SyncOutcome", "Synchronizer"]
