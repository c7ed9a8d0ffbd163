"""
Action and Receipt: what the engine asks an adapter to run, and what
comes back.

An Action is fully resolved at planning time. A Receipt reports the
outcome, including launch failures, so adapters never raise.
"""

from __future__ import annotations

import os
from datetime import UTC, datetime
from typing import Any, Literal

from pydantic import BaseModel, Field

from restgen.core.models.generation import GeneratorTool


def _now_iso() -> str:
    return datetime.now(UTC).isoformat()


class Action(BaseModel):
    """One out-of-process run of a generator tool.

    Everything needed to launch the JVM is resolved at planning time,
    so adapters only assemble the command line.
    """

    id: str                         # unique action identifier
    adapter: str = "java"           # which adapter handles this
    tool: GeneratorTool
    main_class: str
    api_name: str = "unnamed"       # display name of the work unit
    classpath: list[str] = Field(default_factory=list)
    jvm_args: list[str] = Field(default_factory=list)
    system_properties: dict[str, str] = Field(default_factory=dict)
    args: list[str] = Field(default_factory=list)
    timeout: float | None = None

    @property
    def classpath_string(self) -> str:
        """Classpath entries joined with the platform path separator."""
        return os.pathsep.join(self.classpath)


ReceiptStatus = Literal["ok", "skipped", "failed"]


class Receipt(BaseModel):
    """What happened to one Action. Failures are recorded here, not raised."""

    adapter: str
    action_id: str
    status: ReceiptStatus = "ok"
    output: str = ""
    error: str | None = None
    return_code: int | None = None
    finished_at: str = Field(default_factory=_now_iso)
    duration_ms: int = 0
    metadata: dict[str, Any] = Field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.status == "ok"

    @property
    def failed(self) -> bool:
        return self.status == "failed"

    @classmethod
    def success(cls, adapter: str, action_id: str, output: str = "", **extra: Any) -> Receipt:
        return cls(adapter=adapter, action_id=action_id, output=output, **extra)

    @classmethod
    def failure(cls, adapter: str, action_id: str, error: str, **extra: Any) -> Receipt:
        return cls(adapter=adapter, action_id=action_id, status="failed", error=error, **extra)

    @classmethod
    def skip(cls, adapter: str, action_id: str, reason: str = "", **extra: Any) -> Receipt:
        """An action deliberately not launched; ``reason`` becomes the output."""
        return cls(
            adapter=adapter, action_id=action_id, status="skipped", output=reason, **extra
        )
