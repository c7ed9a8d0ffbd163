"""
Engine executor — plan and run generator invocations.

Every work unit turns into two actions, snapshot export first and IDL
export second. Both come out of one parameterized builder; the only
differences are the main class, the destination directory, and the
resolver-path property that only the snapshot exporter receives.

Flow:
    work units → build actions → execute in order → stop at first failure
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path

from restgen.adapters.registry import AdapterRegistry
from restgen.core.models.action import Action, Receipt
from restgen.core.models.generation import GenerationConfig, GeneratorTool, WorkUnit
from restgen.core.services.classpath import IsolatedClasspath

logger = logging.getLogger(__name__)

RESOLVER_PATH_PROPERTY = "generator.resolver.path"

# Lets the alternate (Scala) doc-comment reader load from the JVM classpath
SCALA_USEJAVACP_PROPERTY = "scala.usejavacp"


@dataclass
class PlanStep:
    """One work unit and the actions it expands to."""

    unit: WorkUnit
    actions: list[Action] = field(default_factory=list)


@dataclass
class ExecutionPlan:
    """A planned, ordered set of generator invocations."""

    operation_id: str = ""
    steps: list[PlanStep] = field(default_factory=list)

    @property
    def actions(self) -> list[Action]:
        return [action for step in self.steps for action in step.actions]

    @property
    def total_actions(self) -> int:
        return sum(len(step.actions) for step in self.steps)

    def to_dict(self) -> dict:
        return {
            "operation_id": self.operation_id,
            "work_units": [
                {
                    "name": step.unit.name,
                    "packages": list(step.unit.packages) if step.unit.packages is not None else None,
                    "input_dirs": list(step.unit.input_dirs),
                    "actions": [a.model_dump(mode="json") for a in step.actions],
                }
                for step in self.steps
            ],
        }


@dataclass
class ExecutionReport:
    """Result of executing a plan."""

    operation_id: str = ""
    receipts: list[Receipt] = field(default_factory=list)
    not_run: list[str] = field(default_factory=list)  # action ids skipped after a failure

    @property
    def total(self) -> int:
        return len(self.receipts)

    @property
    def succeeded(self) -> int:
        return sum(1 for r in self.receipts if r.ok)

    @property
    def failed(self) -> int:
        return sum(1 for r in self.receipts if r.failed)

    @property
    def skipped(self) -> int:
        return sum(1 for r in self.receipts if r.status == "skipped")

    @property
    def all_ok(self) -> bool:
        return self.failed == 0

    @property
    def first_failure(self) -> Receipt | None:
        for receipt in self.receipts:
            if receipt.failed:
                return receipt
        return None

    @property
    def status(self) -> str:
        if self.failed == 0:
            return "ok"
        if self.succeeded > 0:
            return "partial"
        return "failed"

    def to_dict(self) -> dict:
        return {
            "operation_id": self.operation_id,
            "status": self.status,
            "total": self.total,
            "succeeded": self.succeeded,
            "failed": self.failed,
            "skipped": self.skipped,
            "not_run": self.not_run,
            "receipts": [r.model_dump(mode="json") for r in self.receipts],
        }


def generate_operation_id() -> str:
    """Generate a unique operation identifier."""
    ts = datetime.now(UTC).strftime("%Y%m%dT%H%M%S")
    short = uuid.uuid4().hex[:8]
    return f"gen-{ts}-{short}"


# ── Argument construction ───────────────────────────────────────────


def prefix_and_flatten(flag: str, values: Sequence[str]) -> list[str]:
    """Encode a multi-valued option as the flag followed by each value.

    Values keep their input order and are never joined or deduplicated.
    """
    return [flag, *values]


def build_generator_args(
    unit: WorkUnit,
    destination: Path | str,
    load_additional_doc_providers: bool = False,
) -> list[str]:
    """Program arguments shared by both generator tools."""
    args: list[str] = []
    if unit.name is not None:
        args.extend(["-name", unit.name])
    args.extend(prefix_and_flatten("-sourcepath", unit.input_dirs))
    args.extend(["-outdir", str(destination)])
    if unit.packages is not None:
        args.extend(prefix_and_flatten("-resourcepackages", unit.packages))
    if load_additional_doc_providers:
        args.append("-loadAdditionalDocProviders")
    return args


def build_generator_action(
    tool: GeneratorTool,
    unit: WorkUnit,
    destination: Path | str,
    classpath: Sequence[str],
    *,
    action_id: str,
    resolver_path: str | None = None,
    load_additional_doc_providers: bool = False,
    jvm_args: Sequence[str] = (),
    timeout: float | None = None,
) -> Action:
    """Build one generator invocation.

    Args:
        tool: Which generator to run.
        unit: Work unit being generated.
        destination: Output directory for this tool.
        classpath: Effective classpath entries.
        action_id: Unique id for the action.
        resolver_path: Joined resolver path, passed as a JVM system
            property. Only given for the snapshot exporter.
        load_additional_doc_providers: Whether to pass
            ``-loadAdditionalDocProviders``.
        jvm_args: Extra JVM arguments.
        timeout: Optional per-invocation timeout in seconds.
    """
    all_jvm_args = list(jvm_args)
    if resolver_path is not None:
        all_jvm_args.append(f"-D{RESOLVER_PATH_PROPERTY}={resolver_path}")

    return Action(
        id=action_id,
        tool=tool,
        main_class=tool.main_class,
        api_name=unit.display_name,
        classpath=list(classpath),
        jvm_args=all_jvm_args,
        system_properties={SCALA_USEJAVACP_PROPERTY: "true"},
        args=build_generator_args(unit, destination, load_additional_doc_providers),
        timeout=timeout,
    )


def build_plan(
    config: GenerationConfig,
    units: Sequence[WorkUnit],
    classpath: IsolatedClasspath,
    operation_id: str | None = None,
) -> ExecutionPlan:
    """Expand work units into snapshot + IDL actions, in order."""
    plan = ExecutionPlan(operation_id=operation_id or generate_operation_id())
    entries = classpath.entries()

    destinations = {
        GeneratorTool.SNAPSHOT: config.snapshot_dir,
        GeneratorTool.IDL: config.idl_dir,
    }

    for index, unit in enumerate(units):
        step = PlanStep(unit=unit)
        for tool in (GeneratorTool.SNAPSHOT, GeneratorTool.IDL):
            step.actions.append(
                build_generator_action(
                    tool,
                    unit,
                    destinations[tool],
                    entries,
                    action_id=f"{plan.operation_id}:{index}:{tool}",
                    resolver_path=(
                        config.resolver_path_string
                        if tool is GeneratorTool.SNAPSHOT
                        else None
                    ),
                    load_additional_doc_providers=config.load_additional_doc_providers,
                    jvm_args=config.jvm_args,
                    timeout=config.timeout,
                )
            )
        plan.steps.append(step)

    return plan


# ── Execution ───────────────────────────────────────────────────────


def _log_unit(unit: WorkUnit) -> None:
    if unit.name:
        logger.info("Generating interface for api: %s ...", unit.name)
    else:
        logger.info("Generating interface for unnamed api ...")


def execute_plan(
    plan: ExecutionPlan,
    registry: AdapterRegistry,
    working_dir: str | None = None,
    dry_run: bool = False,
) -> ExecutionReport:
    """Execute a plan sequentially, stopping at the first failure.

    Args:
        plan: The execution plan.
        registry: Adapter registry for dispatch.
        working_dir: Working directory for the generator processes.
        dry_run: If True, validate but don't execute.

    Returns:
        ExecutionReport with one receipt per action that ran. Actions
        after a failure are listed in ``not_run``.
    """
    report = ExecutionReport(operation_id=plan.operation_id)
    pending = [a.id for a in plan.actions]

    for step in plan.steps:
        _log_unit(step.unit)

        for action in step.actions:
            receipt = registry.execute_action(
                action=action,
                working_dir=working_dir,
                dry_run=dry_run,
            )
            report.receipts.append(receipt)
            pending.remove(action.id)

            status_marker = "✓" if receipt.ok else "✗" if receipt.failed else "⊘"
            logger.debug(
                "%s %s:%s → %s",
                status_marker,
                action.api_name,
                action.tool,
                receipt.status,
            )

            if receipt.failed:
                logger.error(
                    "%s generator failed for %s api: %s",
                    action.tool,
                    action.api_name,
                    receipt.error,
                )
                report.not_run = pending
                return report

    return report
