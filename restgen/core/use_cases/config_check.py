"""
Config check use case — validate restgen.yml and report issues.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from restgen.core.config.loader import ConfigError, find_config_file, load_config
from restgen.core.models.generation import GenerationConfig
from restgen.core.services.api_groups import find_package_overlaps
from restgen.core.services.classpath import staging_conflicts


@dataclass
class ConfigCheckResult:
    """Result of configuration validation."""

    valid: bool = False
    config: GenerationConfig | None = None
    config_path: Path | None = None
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "valid": self.valid,
            "config_path": str(self.config_path) if self.config_path else None,
            "errors": self.errors,
            "warnings": self.warnings,
            "task_name": self.config.task_name if self.config else None,
            "api_count": len(self.config.apis) if self.config else 0,
            "input_dir_count": len(self.config.input_dirs) if self.config else 0,
        }


def check_config(config_path: Path | None = None) -> ConfigCheckResult:
    """Validate generation configuration and report issues.

    Args:
        config_path: Optional explicit path to restgen.yml.

    Returns:
        ConfigCheckResult with validation status and any issues.
    """
    result = ConfigCheckResult()

    if config_path is None:
        config_path = find_config_file()

    if config_path is None:
        result.errors.append("No restgen.yml found.")
        return result

    result.config_path = config_path

    try:
        config = load_config(config_path)
        result.config = config
    except ConfigError as e:
        result.errors.append(str(e))
        return result

    # Semantic checks
    if not config.input_dirs:
        result.warnings.append("No input directories configured. Generation will be skipped.")

    for directory in config.input_dirs:
        if not directory.is_dir():
            result.warnings.append(f"Input directory does not exist: {directory}")

    for entry in config.codegen_classpath:
        if not entry.exists():
            result.warnings.append(f"Codegen classpath entry does not exist: {entry}")

    for entry in config.resolver_path:
        if not entry.exists():
            result.warnings.append(f"Resolver path entry does not exist: {entry}")

    names = [a.name for a in config.apis]
    dupes = {n or "unnamed" for n in names if names.count(n) > 1}
    if dupes:
        result.warnings.append(f"Duplicate api names: {', '.join(sorted(dupes))}")

    for package, owners in find_package_overlaps(config.apis).items():
        result.warnings.append(
            f"Package '{package}' is declared by several apis: {', '.join(owners)}"
        )

    if config.idl_dir == config.snapshot_dir:
        result.errors.append("idl_dir and snapshot_dir must be different directories")

    for path in staging_conflicts(config.effective_isolated_dir, config.protected_dirs):
        result.errors.append(
            f"isolated_classpath_dir {config.effective_isolated_dir} is cleared on "
            f"every run and would delete {path}"
        )

    result.valid = len(result.errors) == 0
    return result
