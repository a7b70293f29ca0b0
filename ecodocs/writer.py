"""Serialisation and persistence of the ecosystem document."""

from __future__ import annotations

import json
import os
import stat
import sys
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Optional, TextIO

from .logging import get_logger

logger = get_logger("writer")


class PersistenceError(RuntimeError):
    """Raised when the document cannot be written to disk."""


@dataclass
class WriteOutcome:
    """Result of a write request."""

    path: Path
    content: str
    dry_run: bool
    written: bool


def render_document(doc: Mapping[str, Any]) -> str:
    return json.dumps(doc, indent=2, ensure_ascii=False) + "\n"


def write_document(
    doc: Mapping[str, Any],
    path: Path,
    *,
    dry_run: bool = False,
    stream: Optional[TextIO] = None,
) -> WriteOutcome:
    """Persist ``doc`` at ``path``, or only print it when ``dry_run`` is set."""
    content = render_document(doc)

    if dry_run:
        logger.info("DRY RUN: Would write the following content to %s:", path.name)
        print(content, end="", file=stream or sys.stdout)
        return WriteOutcome(path=path, content=content, dry_run=True, written=False)

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        _replace_file(path, content)
    except OSError as exc:
        logger.error("Failed to write ecosystem documentation: %s", exc)
        raise PersistenceError(f"Cannot write {path}: {exc}") from exc

    logger.info("Successfully wrote ecosystem documentation to %s", path)
    return WriteOutcome(path=path, content=content, dry_run=False, written=True)


def _replace_file(path: Path, content: str) -> None:
    # Readers only ever observe the previous or the complete new content.
    mode = _target_mode(path)
    handle = tempfile.NamedTemporaryFile(
        "w",
        encoding="utf-8",
        dir=path.parent,
        prefix=f".{path.name}.",
        suffix=".tmp",
        delete=False,
    )
    try:
        with handle:
            handle.write(content)
        os.chmod(handle.name, mode)
        os.replace(handle.name, path)
    except OSError:
        Path(handle.name).unlink(missing_ok=True)
        raise


def _target_mode(path: Path) -> int:
    """Permission bits for the replacement: the current file's, else umask defaults."""
    try:
        return stat.S_IMODE(path.stat().st_mode)
    except FileNotFoundError:
        umask = os.umask(0)
        os.umask(umask)
        return 0o666 & ~umask


__all__ = ["PersistenceError", "WriteOutcome", "render_document", "write_document"]
