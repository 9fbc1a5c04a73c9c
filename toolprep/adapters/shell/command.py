"""
Shell command adapter — run remediation and update commands.

Every install, configuration write and module update ends up here as a
shell command string. Output is captured; the exit code is reduced to
ok / failed.
"""

from __future__ import annotations

import logging
import subprocess
import time
from pathlib import Path

from toolprep.adapters.base import Adapter, ExecutionContext
from toolprep.core.models.action import Receipt

logger = logging.getLogger(__name__)


class ShellCommandAdapter(Adapter):
    """Execute shell commands and capture output.

    Action params:
        command (str): The command to execute.
        timeout (int): Timeout in seconds (default: none).
        cwd (str): Override working directory (default: context.working_dir).
    """

    @property
    def name(self) -> str:
        return "shell"

    def validate(self, context: ExecutionContext) -> tuple[bool, str]:
        command = context.action.params.get("command", "")
        if not command:
            return False, "Missing required param: 'command'"

        cwd = context.action.params.get("cwd", context.working_dir)
        if cwd and not Path(cwd).is_dir():
            return False, f"Working directory does not exist: {cwd}"

        return True, ""

    def execute(self, context: ExecutionContext) -> Receipt:
        command = context.action.params.get("command", "")
        timeout = context.action.params.get("timeout")
        cwd = context.action.params.get("cwd", context.working_dir)

        logger.debug("Executing: %s (cwd=%s)", command, cwd)
        start = time.monotonic()

        try:
            result = subprocess.run(
                command,
                shell=True,
                cwd=cwd,
                capture_output=True,
                text=True,
                timeout=timeout,
            )
        except subprocess.TimeoutExpired:
            return Receipt.failure(
                adapter=self.name,
                action_id=context.action.id,
                error=f"Command timed out after {timeout}s",
                metadata={"command": command, "timeout": timeout},
            )
        except OSError as e:
            return Receipt.failure(
                adapter=self.name,
                action_id=context.action.id,
                error=f"Command execution error: {e}",
                metadata={"command": command},
            )

        elapsed_ms = int((time.monotonic() - start) * 1000)
        output = result.stdout.strip()
        stderr = result.stderr.strip()

        if result.returncode == 0:
            return Receipt.success(
                adapter=self.name,
                action_id=context.action.id,
                output=output,
                duration_ms=elapsed_ms,
                metadata={"command": command, "return_code": 0, "stderr": stderr},
            )
        return Receipt.failure(
            adapter=self.name,
            action_id=context.action.id,
            error=stderr or f"Command exited with code {result.returncode}",
            duration_ms=elapsed_ms,
            metadata={
                "command": command,
                "return_code": result.returncode,
                "stdout": output,
            },
        )
