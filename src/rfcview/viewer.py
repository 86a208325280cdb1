"""Open a cached document in the user's editor or pager."""

from __future__ import annotations

import shlex
import subprocess
from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING

import structlog

from rfcview.errors import ErrorCode, RfcError

if TYPE_CHECKING:
    from pathlib import Path

    from rfcview.config import ViewerSettings

log = structlog.get_logger()


@dataclass(frozen=True)
class ViewerConfig:
    """Viewer choices, in priority order: program, editor, pager."""

    program: str | None = None
    editor: str | None = None
    pager: str | None = None

    @classmethod
    def build(
        cls,
        settings: ViewerSettings,
        environ: Mapping[str, str],
        program: str | None = None,
    ) -> ViewerConfig:
        """Combine an explicit program, config file values and $EDITOR/$PAGER."""
        return cls(
            program=program or None,
            editor=settings.editor or environ.get("EDITOR") or None,
            pager=settings.pager or environ.get("PAGER") or None,
        )

    @property
    def command(self) -> str | None:
        """Command line to run, or ``None`` when nothing is configured."""
        for candidate in (self.program, self.editor, self.pager):
            if candidate and candidate.strip():
                return candidate.strip()
        return None


def open_document(path: Path, config: ViewerConfig) -> bool:
    """Run the configured viewer on ``path`` in the foreground.

    Returns False without doing anything when no viewer is configured.

    Raises:
        RfcError: ``VIEWER_LAUNCH_FAILED`` if the program cannot be started or
            exits with a non-zero status.
    """
    command = config.command
    if command is None:
        log.debug("viewer_not_configured", path=str(path))
        return False

    try:
        argv = shlex.split(command)
    except ValueError as exc:
        raise RfcError(
            ErrorCode.VIEWER_LAUNCH_FAILED, f"Cannot parse viewer command {command!r}: {exc}"
        ) from exc
    argv.append(str(path))
    log.debug("viewer_start", argv=argv)
    try:
        result = subprocess.run(argv, check=False)
    except OSError as exc:
        raise RfcError(
            ErrorCode.VIEWER_LAUNCH_FAILED, f"Failed to start {argv[0]!r}: {exc}"
        ) from exc
    if result.returncode != 0:
        raise RfcError(
            ErrorCode.VIEWER_LAUNCH_FAILED,
            f"{argv[0]!r} exited with status {result.returncode}",
        )
    return True
