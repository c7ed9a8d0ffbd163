"""
Adapter dispatch for generator actions.

``AdapterRegistry.execute_action`` is the only way the engine launches
anything. It picks the adapter named by the action, or answers with a
canned success in mock mode, runs the adapter's pre-flight check, stops
there on a dry run, and otherwise executes and stamps the receipt with
its wall-clock duration.
"""

from __future__ import annotations

import logging
import time

from restgen.adapters.base import Adapter, ExecutionContext
from restgen.core.models.action import Action, Receipt

logger = logging.getLogger(__name__)


def _failed(action: Action, error: str) -> Receipt:
    return Receipt.failure(adapter=action.adapter, action_id=action.id, error=error)


def _not_launched(action: Action, **metadata) -> Receipt:
    return Receipt.skip(
        adapter=action.adapter,
        action_id=action.id,
        reason=f"[dry-run] Would execute {action.tool} generator for {action.api_name}",
        metadata={"dry_run": True, **metadata},
    )


class AdapterRegistry:
    """Adapters keyed by name, plus the mock and dry-run switches."""

    def __init__(self, mock_mode: bool = False):
        self.mock_mode = mock_mode
        self._adapters: dict[str, Adapter] = {}

    def register(self, adapter: Adapter) -> None:
        if adapter.name in self._adapters:
            logger.warning("Replacing adapter for '%s' actions", adapter.name)
        self._adapters[adapter.name] = adapter
        logger.debug("%r handles '%s' actions", adapter, adapter.name)

    def execute_action(
        self,
        action: Action,
        working_dir: str | None = None,
        dry_run: bool = False,
    ) -> Receipt:
        """Run one action and return its receipt. Never raises."""
        started = time.monotonic()

        if self.mock_mode:
            if dry_run:
                return _not_launched(action, mock=True)
            return Receipt.success(
                adapter=action.adapter,
                action_id=action.id,
                output=f"[mock] {action.tool} generator for {action.api_name} executed",
                return_code=0,
                metadata={"mock": True},
            )

        adapter = self._adapters.get(action.adapter)
        if adapter is None:
            return _failed(action, f"No adapter registered for '{action.adapter}'")

        context = ExecutionContext(action=action, working_dir=working_dir)
        try:
            valid, reason = adapter.validate(context)
        except Exception as e:
            return _failed(action, f"Validation error: {e}")
        if not valid:
            return _failed(action, f"Validation failed: {reason}")
        if dry_run:
            return _not_launched(action)

        try:
            receipt = adapter.execute(context)
        except Exception as e:
            logger.error("Adapter %s raised while running %s: %s", adapter.name, action.id, e)
            receipt = _failed(action, f"Unexpected error: {e}")

        receipt.duration_ms = int((time.monotonic() - started) * 1000)
        return receipt
