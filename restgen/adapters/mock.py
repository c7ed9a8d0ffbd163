"""
Recording stand-in for the JVM adapter.

Nothing is launched. Every context is kept in ``call_log`` in arrival
order, and single action ids can be primed to fail so the fail-fast path
runs without a broken generator.
"""

from __future__ import annotations

from restgen.adapters.base import Adapter, ExecutionContext
from restgen.core.models.action import Action, Receipt


class MockAdapter(Adapter):
    """Succeeds for every action except the ids passed to fail_on."""

    def __init__(self, adapter_name: str = "java", output: str = "[mock] executed"):
        self._name = adapter_name
        self._output = output
        self._failing: dict[str, str] = {}
        self.call_log: list[ExecutionContext] = []

    @property
    def name(self) -> str:
        return self._name

    @property
    def call_count(self) -> int:
        return len(self.call_log)

    @property
    def actions(self) -> list[Action]:
        return [ctx.action for ctx in self.call_log]

    def fail_on(self, action_id: str, error: str = "Mock failure") -> None:
        """Make the action with this id exit with code 1."""
        self._failing[action_id] = error

    def execute(self, context: ExecutionContext) -> Receipt:
        self.call_log.append(context)
        action_id = context.action.id

        error = self._failing.get(action_id)
        if error is not None:
            return Receipt.failure(
                adapter=self._name, action_id=action_id, error=error, return_code=1
            )
        return Receipt.success(
            adapter=self._name,
            action_id=action_id,
            output=self._output,
            return_code=0,
            metadata={"mock": True},
        )

    def reset(self) -> None:
        """Forget recorded calls and primed failures."""
        self.call_log.clear()
        self._failing.clear()
