"""
Generate use case — the top-level orchestrator for one build invocation.

Creates the output directories, stages the codegen classpath, resolves
the API groupings into work units, and runs the snapshot and IDL
generators for each unit in order. The first failing invocation ends
the run; output already written by earlier units is left in place so a
re-run simply overwrites it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from restgen.adapters.registry import AdapterRegistry
from restgen.core.engine.executor import (
    ExecutionPlan,
    ExecutionReport,
    build_plan,
    execute_plan,
)
from restgen.core.models.generation import GenerationConfig, WorkUnit
from restgen.core.services.api_groups import find_package_overlaps, resolve_work_units
from restgen.core.services.classpath import (
    ClasspathIsolationError,
    IsolatedClasspath,
    isolate_classpath,
    planned_classpath,
    staging_conflicts,
)

logger = logging.getLogger(__name__)


@dataclass
class GenerateResult:
    """Result of one generation run."""

    config: GenerationConfig | None = None
    classpath: IsolatedClasspath | None = None
    units: list[WorkUnit] = field(default_factory=list)
    plan: ExecutionPlan | None = None
    report: ExecutionReport | None = None
    overlaps: dict[str, list[str]] = field(default_factory=dict)
    skipped: bool = False
    error: str | None = None

    @property
    def ok(self) -> bool:
        """True only when nothing failed (a skipped run counts as ok)."""
        if self.error:
            return False
        return self.report is None or self.report.all_ok

    def to_dict(self) -> dict:
        result: dict = {"ok": self.ok}
        if self.error:
            result["error"] = self.error
        if self.skipped:
            result["skipped"] = True
            return result

        result["work_units"] = [
            {
                "name": u.name,
                "packages": list(u.packages) if u.packages is not None else None,
                "input_dirs": list(u.input_dirs),
            }
            for u in self.units
        ]
        if self.classpath:
            result["classpath"] = self.classpath.entries()
        if self.overlaps:
            result["overlapping_packages"] = self.overlaps
        if self.report:
            result["report"] = self.report.to_dict()
        return result


def default_registry(config: GenerationConfig, mock_mode: bool = False) -> AdapterRegistry:
    """Registry with the real JVM adapter for this config."""
    from restgen.adapters.java.exec import JavaExecAdapter

    registry = AdapterRegistry(mock_mode=mock_mode)
    registry.register(JavaExecAdapter(java=config.java))
    return registry


def _ensure_output_dirs(config: GenerationConfig) -> None:
    for directory in (config.snapshot_dir, config.idl_dir):
        Path(directory).mkdir(parents=True, exist_ok=True)


def plan_generation(config: GenerationConfig, operation_id: str | None = None) -> ExecutionPlan:
    """Build the invocation plan without touching the filesystem."""
    classpath = planned_classpath(config.codegen_classpath, config.effective_isolated_dir)
    units = resolve_work_units(config.apis, config.input_dir_paths)
    return build_plan(config, units, classpath, operation_id=operation_id)


def run_generation(
    config: GenerationConfig,
    registry: AdapterRegistry | None = None,
    dry_run: bool = False,
    mock_mode: bool = False,
) -> GenerateResult:
    """Generate IDL and snapshot files for every configured API.

    Args:
        config: Immutable configuration for this invocation.
        registry: Optional pre-configured adapter registry.
        dry_run: If True, plan and validate but don't touch the
            filesystem or launch any generator.
        mock_mode: If True, use mock adapter responses.

    Returns:
        GenerateResult; ``ok`` is True only if every invocation succeeded.
    """
    result = GenerateResult(config=config)

    if not config.input_dirs:
        logger.info("No input directories configured, nothing to generate")
        result.skipped = True
        return result

    input_dir_paths = config.input_dir_paths
    logger.debug("GenerateRestModel using input directories %s", input_dir_paths)
    logger.debug("GenerateRestModel using destination dir %s", config.idl_dir)
    logger.debug("GenerateRestModel using snapshot dir %s", config.snapshot_dir)

    # ── Output directories + classpath staging ───────────────────
    conflicts = staging_conflicts(config.effective_isolated_dir, config.protected_dirs)
    if conflicts:
        result.error = (
            f"Classpath staging dir {config.effective_isolated_dir} would delete "
            + ", ".join(str(p) for p in conflicts)
        )
        return result

    if dry_run:
        result.classpath = planned_classpath(
            config.codegen_classpath, config.effective_isolated_dir
        )
    else:
        try:
            _ensure_output_dirs(config)
        except OSError as e:
            result.error = f"Cannot create output directory: {e}"
            return result

        try:
            result.classpath = isolate_classpath(
                config.codegen_classpath,
                config.effective_isolated_dir,
                protected=config.protected_dirs,
            )
        except ClasspathIsolationError as e:
            result.error = str(e)
            return result

    # ── Work units ───────────────────────────────────────────────
    result.units = resolve_work_units(config.apis, input_dir_paths)
    result.overlaps = find_package_overlaps(config.apis)
    for package, names in result.overlaps.items():
        logger.warning(
            "Package '%s' is declared by several apis (%s); "
            "generated definitions may be duplicated",
            package,
            ", ".join(names),
        )

    # ── Execute ──────────────────────────────────────────────────
    plan = build_plan(config, result.units, result.classpath)
    result.plan = plan

    if registry is None:
        registry = default_registry(config, mock_mode=mock_mode)

    report = execute_plan(
        plan,
        registry,
        working_dir=str(config.base_dir),
        dry_run=dry_run,
    )
    result.report = report

    failure = report.first_failure
    if failure is not None:
        result.error = failure.error or "Generator invocation failed"

    return result
