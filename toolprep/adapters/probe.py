"""
Probe — read-only queries about the workstation.

Evaluators ask the probe whether an executable is on PATH, what a query
command prints, whether a path exists and whether the process runs
elevated. A probe never changes anything.

A query that cannot be answered (timeout, exec failure) raises
``EvaluationUncertain``; the evaluator turns that into a conservative
"not installed" status.
"""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
from abc import ABC, abstractmethod
from pathlib import Path

from toolprep.core.errors import EvaluationUncertain

logger = logging.getLogger(__name__)

_QUERY_TIMEOUT = 15


class Probe(ABC):
    """Read-only capability registry."""

    @abstractmethod
    def is_elevated(self) -> bool:
        """Whether the current process has administrative privilege."""

    @abstractmethod
    def which(self, command: str) -> str | None:
        """Resolved path of an executable, or None when absent."""

    @abstractmethod
    def query(self, argv: list[str]) -> str | None:
        """Run a read-only command.

        Returns:
            Stripped stdout on exit code 0, None on any other exit code.

        Raises:
            EvaluationUncertain: The command could not be run at all.
        """

    @abstractmethod
    def path_exists(self, path: str) -> bool:
        """Whether a file or directory exists (``~`` and env vars expanded)."""


class SystemProbe(Probe):
    """Probe backed by the real system."""

    def __init__(self, timeout: int = _QUERY_TIMEOUT):
        self._timeout = timeout

    def is_elevated(self) -> bool:
        if hasattr(os, "geteuid"):
            return os.geteuid() == 0
        try:
            import ctypes

            return bool(ctypes.windll.shell32.IsUserAnAdmin())  # type: ignore[attr-defined]
        except (AttributeError, OSError):
            return False

    def which(self, command: str) -> str | None:
        return shutil.which(command)

    def query(self, argv: list[str]) -> str | None:
        if not argv or shutil.which(argv[0]) is None:
            return None
        logger.debug("Query: %s", " ".join(argv))
        try:
            result = subprocess.run(
                argv,
                capture_output=True,
                text=True,
                timeout=self._timeout,
            )
        except subprocess.TimeoutExpired as e:
            raise EvaluationUncertain(
                f"'{' '.join(argv)}' timed out after {self._timeout}s"
            ) from e
        except OSError as e:
            raise EvaluationUncertain(f"'{' '.join(argv)}' failed: {e}") from e

        if result.returncode != 0:
            return None
        return result.stdout.strip()

    def path_exists(self, path: str) -> bool:
        return Path(os.path.expandvars(os.path.expanduser(path))).exists()
