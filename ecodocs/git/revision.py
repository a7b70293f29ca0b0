"""Git revision inspection."""

from __future__ import annotations

import subprocess
from datetime import UTC, datetime
from pathlib import Path
from typing import Callable, Iterable

from ..logging import get_logger
from ..models import RevisionInfo, RevisionLookup

logger = get_logger("git.revision")


class RevisionInspector:
    """Reads commit hash, commit date and branch name for a working tree."""

    _COMMIT_HASH = ("git", "rev-parse", "--short", "HEAD")
    _COMMIT_DATE = ("git", "log", "-1", "--format=%ci")
    _BRANCH = ("git", "rev-parse", "--abbrev-ref", "HEAD")

    def __init__(
        self,
        runner: Callable[..., str] | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._runner = runner or self._default_runner
        self._clock = clock or _utcnow

    def inspect(self, repo_path: Path) -> RevisionLookup:
        """Return revision details, or the sentinel triple if any query fails."""
        try:
            commit_hash = self._query(self._COMMIT_HASH, repo_path)
            commit_date = self._query(self._COMMIT_DATE, repo_path)
            branch = self._query(self._BRANCH, repo_path)
        except (OSError, subprocess.SubprocessError, UnicodeDecodeError) as exc:
            reason = _describe(exc)
            logger.warning("Could not retrieve git information: %s", reason)
            return RevisionLookup.fallback(RevisionInfo.unknown(self._clock()), reason)

        info = RevisionInfo(commit_hash=commit_hash, commit_date=commit_date, branch=branch)
        logger.debug("Revision %s on %s (%s)", commit_hash, branch, commit_date)
        return RevisionLookup.success(info)

    # ------------------------------------------------------------------
    # Internals

    def _query(self, args: Iterable[str], repo_path: Path) -> str:
        return self._runner(list(args), cwd=repo_path, capture_output=True).strip()

    @staticmethod
    def _default_runner(
        args: Iterable[str],
        *,
        cwd: Path,
        capture_output: bool = False,
    ) -> str:
        completed = subprocess.run(
            list(args),
            cwd=str(cwd),
            check=True,
            text=True,
            errors="replace",
            capture_output=capture_output,
        )
        return completed.stdout if capture_output else ""


def _utcnow() -> datetime:
    return datetime.now(UTC)


def _describe(exc: BaseException) -> str:
    if isinstance(exc, subprocess.CalledProcessError):
        stderr = (exc.stderr or "").strip() if isinstance(exc.stderr, str) else ""
        command = " ".join(exc.cmd) if isinstance(exc.cmd, (list, tuple)) else str(exc.cmd)
        detail = f"`{command}` exited with status {exc.returncode}"
        return f"{detail}: {stderr}" if stderr else detail
    return str(exc) or exc.__class__.__name__


__all__ = ["RevisionInspector"]
