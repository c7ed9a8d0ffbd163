"""
Tests for classpath isolation — staging archives, passing loose entries through.
"""

import os
from pathlib import Path

import pytest

from restgen.core.services.classpath import (
    ClasspathIsolationError,
    isolate_classpath,
    is_archive,
    planned_classpath,
    staging_conflicts,
)


def _classpath(build_dir: Path) -> list[Path]:
    return [
        build_dir / "libs" / "x.jar",
        build_dir / "libs" / "y.jar",
        build_dir / "other" / "classes",
    ]


class TestIsArchive:
    def test_jar_file(self, build_dir: Path):
        assert is_archive(build_dir / "libs" / "x.jar")

    def test_directory(self, build_dir: Path):
        assert not is_archive(build_dir / "other" / "classes")

    def test_directory_named_like_jar(self, tmp_path: Path):
        odd = tmp_path / "weird.jar"
        odd.mkdir()
        assert not is_archive(odd)

    def test_missing_jar(self, tmp_path: Path):
        assert not is_archive(tmp_path / "gone.jar")


class TestIsolateClasspath:
    def test_copies_only_archives(self, build_dir: Path):
        staged = build_dir / "stage"
        result = isolate_classpath(_classpath(build_dir), staged)

        assert sorted(p.name for p in staged.iterdir()) == ["x.jar", "y.jar"]
        assert (staged / "x.jar").read_bytes() == b"PK\x03\x04x"
        assert result.passthrough == (build_dir / "other" / "classes",)

    def test_effective_classpath(self, build_dir: Path):
        staged = build_dir / "stage"
        result = isolate_classpath(_classpath(build_dir), staged)

        assert result.entries() == [
            str(staged / "*"),
            str(build_dir / "other" / "classes"),
        ]
        assert result.as_path() == os.pathsep.join(result.entries())

    def test_clears_previous_contents(self, build_dir: Path):
        staged = build_dir / "stage"
        staged.mkdir()
        (staged / "stale.jar").write_bytes(b"old")

        isolate_classpath(_classpath(build_dir), staged)

        assert not (staged / "stale.jar").exists()
        assert (staged / "x.jar").exists()

    def test_rerun_is_idempotent(self, build_dir: Path):
        staged = build_dir / "stage"
        first = isolate_classpath(_classpath(build_dir), staged)
        second = isolate_classpath(_classpath(build_dir), staged)
        assert first == second
        assert sorted(p.name for p in staged.iterdir()) == ["x.jar", "y.jar"]

    def test_later_archive_with_same_name_overwrites(self, build_dir: Path):
        shadow_dir = build_dir / "shadow"
        shadow_dir.mkdir()
        (shadow_dir / "x.jar").write_bytes(b"shadow")
        staged = build_dir / "stage"

        result = isolate_classpath(
            [build_dir / "libs" / "x.jar", shadow_dir / "x.jar"], staged
        )

        assert (staged / "x.jar").read_bytes() == b"shadow"
        assert result.archives == (staged / "x.jar",)

    def test_refuses_to_clear_protected_dir(self, build_dir: Path):
        out = build_dir / "out"
        (out / "idl").mkdir(parents=True)
        (out / "keep.txt").write_text("user file")

        with pytest.raises(ClasspathIsolationError, match="Refusing to clear"):
            isolate_classpath(_classpath(build_dir), out, protected=[out / "idl"])

        assert (out / "keep.txt").exists()
        assert (out / "idl").is_dir()

    def test_empty_classpath(self, tmp_path: Path):
        staged = tmp_path / "stage"
        result = isolate_classpath([], staged)
        assert staged.is_dir()
        assert result.entries() == [str(staged / "*")]

    def test_unwritable_target_raises(self, build_dir: Path):
        blocker = build_dir / "blocker"
        blocker.write_text("not a directory")
        with pytest.raises(ClasspathIsolationError, match="Cannot stage"):
            isolate_classpath(_classpath(build_dir), blocker / "stage")


class TestPlannedClasspath:
    def test_no_side_effects(self, build_dir: Path):
        staged = build_dir / "stage"
        result = planned_classpath(_classpath(build_dir), staged)
        assert not staged.exists()
        assert result.archives == (staged / "x.jar", staged / "y.jar")
        assert result.entries()[0] == str(staged / "*")


class TestStagingConflicts:
    def test_same_dir(self, tmp_path: Path):
        assert staging_conflicts(tmp_path / "out", [tmp_path / "out"]) == [tmp_path / "out"]

    def test_nested_dir(self, tmp_path: Path):
        nested = tmp_path / "out" / "a" / "idl"
        assert staging_conflicts(tmp_path / "out", [nested]) == [nested]

    def test_sibling_and_parent_are_fine(self, tmp_path: Path):
        stage = tmp_path / "build" / "stage"
        assert staging_conflicts(stage, [tmp_path, tmp_path / "build" / "stage2"]) == []

    def test_relative_paths_compared_resolved(self, tmp_path: Path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        assert staging_conflicts(Path("out"), [tmp_path / "out" / "idl"]) == [
            tmp_path / "out" / "idl"
        ]
