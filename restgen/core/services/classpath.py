"""
Classpath isolation — stage codegen archives in a task-private directory.

The generator JVMs get ``<isolated_dir>/*`` instead of the original
archive list. That keeps the command line short and independent of
where upstream steps left their jars. Loose entries (typically other
modules' compiled-class directories) are not copied; they are passed
through on the effective classpath as-is.

Archives are copied in classpath order, so when two entries share a
file name the later one overwrites the earlier copy, the same outcome
as a plain copy of every jar into one directory.
"""

from __future__ import annotations

import logging
import os
import shutil
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path

logger = logging.getLogger(__name__)

ARCHIVE_SUFFIXES = (".jar",)


class ClasspathIsolationError(Exception):
    """Raised when archives cannot be staged into the isolated directory."""


@dataclass(frozen=True)
class IsolatedClasspath:
    """Result of staging a codegen classpath."""

    directory: Path
    archives: tuple[Path, ...] = ()
    passthrough: tuple[Path, ...] = ()

    @property
    def wildcard(self) -> str:
        """JVM wildcard matching every staged archive."""
        return str(self.directory / "*")

    def entries(self) -> list[str]:
        """Effective classpath: staged archives first, then loose entries."""
        return [self.wildcard, *(str(p) for p in self.passthrough)]

    def as_path(self) -> str:
        return os.pathsep.join(self.entries())


def is_archive(entry: Path) -> bool:
    """Whether a classpath entry is an archive file that gets staged."""
    return entry.is_file() and entry.name.endswith(ARCHIVE_SUFFIXES)


@dataclass
class _Partition:
    archives: list[Path] = field(default_factory=list)
    passthrough: list[Path] = field(default_factory=list)


def partition_classpath(codegen_classpath: Iterable[Path]) -> _Partition:
    """Split classpath entries into archives to stage and loose entries."""
    part = _Partition()
    for entry in codegen_classpath:
        entry = Path(entry)
        if is_archive(entry):
            part.archives.append(entry)
        else:
            part.passthrough.append(entry)
    return part


def staging_conflicts(isolated_dir: Path, protected: Iterable[Path]) -> list[Path]:
    """Protected paths that clearing isolated_dir would delete.

    A path conflicts when it is the staging directory itself or lies
    somewhere below it.
    """
    stage = isolated_dir.resolve()
    conflicts = []
    for path in protected:
        resolved = Path(path).resolve()
        if resolved == stage or stage in resolved.parents:
            conflicts.append(Path(path))
    return conflicts


def isolate_classpath(
    codegen_classpath: Iterable[Path],
    isolated_dir: Path,
    protected: Iterable[Path] = (),
) -> IsolatedClasspath:
    """Clear isolated_dir and copy every archive entry into it.

    Args:
        codegen_classpath: Ordered classpath entries (archives and dirs).
        isolated_dir: Task-scoped staging directory. Recreated every call.
        protected: Paths that must survive; staging refuses to clear a
            directory that is or contains any of them.

    Returns:
        IsolatedClasspath describing the staged archives and the
        pass-through entries, in their original order.

    Raises:
        ClasspathIsolationError: If isolated_dir overlaps a protected
            path, cannot be recreated, or an archive cannot be copied.
    """
    conflicts = staging_conflicts(isolated_dir, protected)
    if conflicts:
        raise ClasspathIsolationError(
            f"Refusing to clear {isolated_dir}: it contains "
            + ", ".join(str(p) for p in conflicts)
        )

    part = partition_classpath(codegen_classpath)

    try:
        if isolated_dir.exists():
            shutil.rmtree(isolated_dir)
        isolated_dir.mkdir(parents=True)

        staged: dict[str, Path] = {}
        for archive in part.archives:
            target = isolated_dir / archive.name
            if archive.name in staged:
                logger.debug("Archive %s replaces earlier %s", archive, target)
            shutil.copy2(archive, target)
            staged.setdefault(archive.name, target)
    except OSError as e:
        raise ClasspathIsolationError(
            f"Cannot stage codegen classpath into {isolated_dir}: {e}"
        ) from e

    logger.debug(
        "Staged %d archive(s) into %s, %d pass-through entr%s",
        len(staged),
        isolated_dir,
        len(part.passthrough),
        "y" if len(part.passthrough) == 1 else "ies",
    )

    return IsolatedClasspath(
        directory=isolated_dir,
        archives=tuple(staged.values()),
        passthrough=tuple(part.passthrough),
    )


def planned_classpath(
    codegen_classpath: Iterable[Path],
    isolated_dir: Path,
) -> IsolatedClasspath:
    """Describe the classpath isolate_classpath would produce, without copying."""
    part = partition_classpath(codegen_classpath)
    names = dict.fromkeys(a.name for a in part.archives)
    return IsolatedClasspath(
        directory=isolated_dir,
        archives=tuple(isolated_dir / name for name in names),
        passthrough=tuple(part.passthrough),
    )
