"""
Java exec adapter — run a generator main class in a fresh JVM.

Each action becomes one ``java ... <main> <args>`` process. The child
inherits stdout/stderr so the generator's own diagnostics reach the
build log untouched; only the exit code is interpreted here.
"""

from __future__ import annotations

import logging
import shlex
import shutil
import subprocess
import time

from restgen.adapters.base import Adapter, ExecutionContext
from restgen.core.models.action import Action, Receipt

logger = logging.getLogger(__name__)


def build_command(java: str, action: Action) -> list[str]:
    """Assemble the full JVM command line for an action."""
    command = [java, *action.jvm_args]
    command.extend(f"-D{key}={value}" for key, value in action.system_properties.items())
    if action.classpath:
        command.extend(["-cp", action.classpath_string])
    command.append(action.main_class)
    command.extend(action.args)
    return command


class JavaExecAdapter(Adapter):
    """Launch generator tools as separate JVM processes.

    Args:
        java: Java launcher to use (name on PATH or absolute path).
    """

    def __init__(self, java: str = "java"):
        self._java = java

    @property
    def name(self) -> str:
        return "java"

    @property
    def java(self) -> str:
        return self._java

    def is_available(self) -> bool:
        return shutil.which(self._java) is not None

    def validate(self, context: ExecutionContext) -> tuple[bool, str]:
        action = context.action
        if not action.main_class:
            return False, "Missing main class"
        if not self.is_available():
            return False, f"Java launcher not found: {self._java}"
        return True, ""

    def execute(self, context: ExecutionContext) -> Receipt:
        action = context.action
        command = build_command(self._java, action)

        logger.debug("Executing: %s (cwd=%s)", shlex.join(command), context.working_dir)
        start = time.monotonic()

        try:
            result = subprocess.run(
                command,
                cwd=context.working_dir,
                timeout=action.timeout,
                check=False,
            )
        except subprocess.TimeoutExpired:
            return Receipt.failure(
                adapter=self.name,
                action_id=action.id,
                error=f"{action.tool} generator timed out after {action.timeout}s",
                metadata={"command": command, "timeout": action.timeout},
            )
        except Exception as e:
            return Receipt.failure(
                adapter=self.name,
                action_id=action.id,
                error=f"Cannot launch {action.tool} generator: {e}",
                metadata={"command": command},
            )

        elapsed_ms = int((time.monotonic() - start) * 1000)

        if result.returncode == 0:
            return Receipt.success(
                adapter=self.name,
                action_id=action.id,
                duration_ms=elapsed_ms,
                return_code=result.returncode,
                metadata={"command": command},
            )

        return Receipt.failure(
            adapter=self.name,
            action_id=action.id,
            error=f"{action.tool} generator exited with code {result.returncode}",
            duration_ms=elapsed_ms,
            return_code=result.returncode,
            metadata={"command": command},
        )
