"""Subprocess runner for drush and composer invocations."""

from __future__ import annotations

import logging
import shlex
import subprocess
from pathlib import Path
from typing import Sequence

from .errors import CommandError
from .models import CommandResult

logger = logging.getLogger(__name__)


class CommandRunner:
    """Runs commands from the project root, optionally inside an environment.

    ``exec_prefix`` is prepended to every command, e.g. ``("ddev", "exec")``
    to run drush inside a container.
    """

    def __init__(self, cwd: Path, exec_prefix: Sequence[str] = (), timeout_s: float | None = None):
        self.cwd = cwd
        self.exec_prefix = tuple(exec_prefix)
        self.timeout_s = timeout_s

    def run(self, args: Sequence[str], *, capture: bool = False) -> CommandResult:
        argv = [*self.exec_prefix, *args]
        logger.debug("Running: %s", shlex.join(argv))
        try:
            proc = subprocess.run(
                argv,
                cwd=self.cwd,
                capture_output=capture,
                text=True,
                timeout=self.timeout_s,
            )
        except FileNotFoundError:
            raise CommandError(f"Executable not found: {argv[0]}")
        except subprocess.TimeoutExpired:
            raise CommandError(f"Command timed out: {shlex.join(argv)}")

        result = CommandResult(
            args=tuple(argv),
            returncode=proc.returncode,
            stdout=proc.stdout or "",
            stderr=proc.stderr or "",
        )
        if result.successful:
            logger.debug("PASS: %s", shlex.join(argv))
        else:
            logger.warning("FAIL (exit=%d): %s", result.returncode, shlex.join(argv))
        return result
