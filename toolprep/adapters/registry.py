"""
Adapter registry — central dispatch for remediation and update actions.

Both the sequential remediation executor and the parallel module updater
call ``execute_action``; they differ only in how they collect receipts.
"""

from __future__ import annotations

import logging
import time

from toolprep.adapters.base import Adapter, ExecutionContext
from toolprep.core.models.action import Action, Receipt

logger = logging.getLogger(__name__)


class AdapterRegistry:
    """Registry and dispatcher for adapters, keyed by adapter name."""

    def __init__(self, working_dir: str = "."):
        self._adapters: dict[str, Adapter] = {}
        self._working_dir = working_dir

    def register(self, adapter: Adapter) -> None:
        """Register an adapter, replacing any with the same name."""
        name = adapter.name
        if name in self._adapters:
            logger.warning("Overwriting existing adapter: %s", name)
        self._adapters[name] = adapter
        logger.debug("Registered adapter: %s", name)

    def execute_action(self, action: Action) -> Receipt:
        """Execute an action through its adapter.

        Resolves the adapter, validates, executes and returns a Receipt.
        Never raises.
        """
        start_time = time.monotonic()

        adapter = self._adapters.get(action.adapter)
        if adapter is None:
            return Receipt.failure(
                adapter=action.adapter,
                action_id=action.id,
                error=f"No adapter registered for '{action.adapter}'",
            )

        context = ExecutionContext(
            action=action,
            working_dir=self._working_dir,
            params=action.params,
        )

        try:
            is_valid, error_msg = adapter.validate(context)
        except Exception as e:
            return Receipt.failure(
                adapter=action.adapter,
                action_id=action.id,
                error=f"Validation error: {e}",
            )
        if not is_valid:
            return Receipt.failure(
                adapter=action.adapter,
                action_id=action.id,
                error=f"Validation failed: {error_msg}",
            )

        try:
            receipt = adapter.execute(context)
        except Exception as e:
            # Adapters should never raise
            logger.error("Adapter %s raised during execution: %s", action.adapter, e)
            receipt = Receipt.failure(
                adapter=action.adapter,
                action_id=action.id,
                error=f"Unexpected error: {e}",
            )

        receipt.duration_ms = int((time.monotonic() - start_time) * 1000)
        return receipt


def default_registry(working_dir: str = ".") -> AdapterRegistry:
    """Registry with the shell adapter registered."""
    from toolprep.adapters.shell.command import ShellCommandAdapter

    registry = AdapterRegistry(working_dir=working_dir)
    registry.register(ShellCommandAdapter())
    return registry
