"""
Shared test fixtures and configuration.
"""

import textwrap
from pathlib import Path

import pytest

from restgen.core.models.generation import ApiItem, GenerationConfig


@pytest.fixture
def build_dir(tmp_path: Path) -> Path:
    """A fake module layout: jars, a loose classes dir, compiled output."""
    tmp_path = tmp_path.resolve()
    libs = tmp_path / "libs"
    libs.mkdir()
    (libs / "x.jar").write_bytes(b"PK\x03\x04x")
    (libs / "y.jar").write_bytes(b"PK\x03\x04y")
    (tmp_path / "other" / "classes").mkdir(parents=True)
    (tmp_path / "build" / "classes" / "main").mkdir(parents=True)
    return tmp_path


@pytest.fixture
def make_config(build_dir: Path):
    """Factory for GenerationConfig rooted in build_dir."""

    def _make(apis: list[ApiItem] | None = None, **overrides) -> GenerationConfig:
        values = {
            "codegen_classpath": (
                build_dir / "libs" / "x.jar",
                build_dir / "libs" / "y.jar",
                build_dir / "other" / "classes",
            ),
            "resolver_path": (build_dir / "libs" / "y.jar",),
            "input_dirs": (build_dir / "build" / "classes" / "main",),
            "idl_dir": build_dir / "idl",
            "snapshot_dir": build_dir / "snapshot",
            "apis": tuple(apis or ()),
            "base_dir": build_dir,
        }
        values.update(overrides)
        return GenerationConfig(**values)

    return _make


@pytest.fixture
def config_file(build_dir: Path) -> Path:
    """A restgen.yml with two named apis."""
    content = textwrap.dedent("""\
        codegen_classpath:
          - libs/x.jar
          - libs/y.jar
          - other/classes
        resolver_path:
          - libs/y.jar
        input_dirs:
          - build/classes/main
        idl_dir: idl
        snapshot_dir: snapshot
        apis:
          - name: greetings
            packages: [com.example.greetings]
          - name: groups
            packages: [com.example.groups, com.example.groups.impl]
    """)
    path = build_dir / "restgen.yml"
    path.write_text(content)
    return path
