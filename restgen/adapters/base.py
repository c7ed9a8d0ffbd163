"""
Adapter contract for launching a generator.

The engine hands an adapter one Action at a time, wrapped in an
ExecutionContext, and gets a Receipt back. Launch problems, non-zero
exits and timeouts all come back as failed receipts; adapters do not
raise.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from pydantic import BaseModel

from restgen.core.models.action import Action, Receipt


class ExecutionContext(BaseModel):
    """One action plus the directory its process starts in."""

    action: Action
    working_dir: str | None = None


class Adapter(ABC):
    """Runs generator actions and reports each outcome as a Receipt."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Registry key; actions select their adapter through ``Action.adapter``."""

    @abstractmethod
    def execute(self, context: ExecutionContext) -> Receipt:
        """Run ``context.action``. Failures are returned, never raised."""

    def is_available(self) -> bool:
        return True

    def validate(self, context: ExecutionContext) -> tuple[bool, str]:
        """Pre-flight check, run before execute and instead of it on dry runs.

        Returns ``(True, "")`` when the action can run, otherwise
        ``(False, reason)``.
        """
        return True, ""

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r})"
