"""
Generation models — what to scan, where to write, which tools to run.

A GenerationConfig is loaded once per build invocation and never
mutated afterwards. WorkUnits are derived from it by the API grouping
resolver; each one turns into exactly two generator invocations.
"""

from __future__ import annotations

import os
from enum import StrEnum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_TASK_NAME = "generateRestModel"

UNNAMED_API = "unnamed"


class GeneratorTool(StrEnum):
    """The two external generator command-line apps."""

    SNAPSHOT = "snapshot"
    IDL = "idl"

    @property
    def main_class(self) -> str:
        return GENERATOR_MAIN_CLASSES[self]


GENERATOR_MAIN_CLASSES: dict[GeneratorTool, str] = {
    GeneratorTool.SNAPSHOT: "com.linkedin.restli.tools.snapshot.gen.RestLiSnapshotExporterCmdLineApp",
    GeneratorTool.IDL: "com.linkedin.restli.tools.idlgen.RestLiResourceModelExporterCmdLineApp",
}


class ApiItem(BaseModel):
    """One declared API grouping.

    An empty name means the unnamed/default API. An empty package list
    means "scan everything under the input directories".
    """

    model_config = ConfigDict(frozen=True)

    name: str = ""
    packages: tuple[str, ...] = ()


class WorkUnit(BaseModel):
    """One scoped generation task: one snapshot run plus one IDL run."""

    model_config = ConfigDict(frozen=True)

    name: str | None = None
    packages: tuple[str, ...] | None = None
    input_dirs: tuple[str, ...] = ()

    @property
    def display_name(self) -> str:
        """Name used in logs and reports ("unnamed" when absent)."""
        return self.name or UNNAMED_API


class GenerationConfig(BaseModel):
    """Everything one orchestration run needs.

    Loaded from restgen.yml by the config loader. Relative paths have
    already been resolved against the config file's directory.
    """

    model_config = ConfigDict(frozen=True)

    task_name: str = DEFAULT_TASK_NAME

    codegen_classpath: tuple[Path, ...] = ()
    resolver_path: tuple[Path, ...] = ()
    input_dirs: tuple[Path, ...] = ()

    idl_dir: Path
    snapshot_dir: Path
    isolated_classpath_dir: Path | None = None   # default: build/<task>Classpath

    apis: tuple[ApiItem, ...] = ()

    load_additional_doc_providers: bool = False
    java: str = "java"
    jvm_args: tuple[str, ...] = ()
    timeout: float | None = Field(default=None, gt=0)

    base_dir: Path = Field(default_factory=Path.cwd)

    @property
    def effective_isolated_dir(self) -> Path:
        """Where classpath archives are copied for this task."""
        if self.isolated_classpath_dir is not None:
            return self.isolated_classpath_dir
        return self.base_dir / "build" / f"{self.task_name}Classpath"

    @property
    def protected_dirs(self) -> list[Path]:
        """Directories the classpath staging step must never clear."""
        return [self.idl_dir, self.snapshot_dir, *self.input_dirs, self.base_dir]

    @property
    def input_dir_paths(self) -> list[str]:
        return [str(p) for p in self.input_dirs]

    @property
    def resolver_path_string(self) -> str:
        return os.pathsep.join(str(p) for p in self.resolver_path)
