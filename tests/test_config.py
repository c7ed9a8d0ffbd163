"""
Tests for configuration loading — restgen.yml parsing and validation.
"""

import textwrap
from pathlib import Path

import pytest
from pydantic import ValidationError

from restgen.core.config.loader import (
    ConfigError,
    find_config_file,
    load_config,
    load_config_data,
)
from restgen.core.models.generation import DEFAULT_TASK_NAME, ApiItem
from restgen.core.use_cases.config_check import check_config


class TestLoadConfig:
    def test_load_valid(self, config_file: Path, build_dir: Path):
        config = load_config(config_file)
        assert config.task_name == DEFAULT_TASK_NAME
        assert config.idl_dir == build_dir / "idl"
        assert config.snapshot_dir == build_dir / "snapshot"
        assert config.input_dirs == (build_dir / "build" / "classes" / "main",)
        assert [p.name for p in config.codegen_classpath] == ["x.jar", "y.jar", "classes"]

    def test_api_items_keep_order(self, config_file: Path):
        config = load_config(config_file)
        assert [a.name for a in config.apis] == ["greetings", "groups"]
        assert config.apis[1].packages == ("com.example.groups", "com.example.groups.impl")

    def test_default_isolated_dir(self, config_file: Path, build_dir: Path):
        config = load_config(config_file)
        assert config.effective_isolated_dir == build_dir / "build" / "generateRestModelClasspath"

    def test_explicit_isolated_dir(self, tmp_path: Path):
        config = load_config_data(
            {
                "idl_dir": "idl",
                "snapshot_dir": "snap",
                "isolated_classpath_dir": "stage",
            },
            tmp_path,
        )
        assert config.effective_isolated_dir == tmp_path / "stage"

    def test_absolute_paths_untouched(self, tmp_path: Path):
        config = load_config_data(
            {"idl_dir": "/abs/idl", "snapshot_dir": "snap", "input_dirs": ["/out/classes"]},
            tmp_path,
        )
        assert config.idl_dir == Path("/abs/idl")
        assert config.input_dirs == (Path("/out/classes"),)

    def test_wrapped_under_restgen_key(self, tmp_path: Path):
        path = tmp_path / "restgen.yml"
        path.write_text(textwrap.dedent("""\
            restgen:
              task_name: generateRestModelTest
              idl_dir: idl
              snapshot_dir: snapshot
        """))
        config = load_config(path)
        assert config.task_name == "generateRestModelTest"
        assert config.apis == ()

    def test_null_apis_means_empty(self, tmp_path: Path):
        config = load_config_data(
            {"idl_dir": "idl", "snapshot_dir": "snap", "apis": None}, tmp_path
        )
        assert config.apis == ()

    def test_single_path_string_accepted(self, tmp_path: Path):
        config = load_config_data(
            {"idl_dir": "idl", "snapshot_dir": "snap", "input_dirs": "classes"}, tmp_path
        )
        assert config.input_dirs == (tmp_path / "classes",)

    def test_unnamed_api_item(self, tmp_path: Path):
        config = load_config_data(
            {"idl_dir": "idl", "snapshot_dir": "snap", "apis": [{"packages": []}]},
            tmp_path,
        )
        assert config.apis == (ApiItem(name="", packages=()),)

    def test_missing_required_dirs(self, tmp_path: Path):
        with pytest.raises(ConfigError, match="Invalid generation configuration"):
            load_config_data({"input_dirs": ["classes"]}, tmp_path)

    def test_bad_path_list(self, tmp_path: Path):
        with pytest.raises(ConfigError, match="must be a list"):
            load_config_data(
                {"idl_dir": "idl", "snapshot_dir": "snap", "input_dirs": {"a": 1}}, tmp_path
            )

    def test_invalid_timeout(self, tmp_path: Path):
        with pytest.raises(ConfigError):
            load_config_data({"idl_dir": "idl", "snapshot_dir": "snap", "timeout": 0}, tmp_path)

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(ConfigError, match="not found"):
            load_config(tmp_path / "nope.yml")

    def test_invalid_yaml(self, tmp_path: Path):
        path = tmp_path / "restgen.yml"
        path.write_text("idl_dir: [unclosed\n")
        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_config(path)

    def test_not_a_mapping(self, tmp_path: Path):
        path = tmp_path / "restgen.yml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ConfigError, match="Expected a YAML mapping"):
            load_config(path)

    def test_config_is_immutable(self, config_file: Path):
        config = load_config(config_file)
        with pytest.raises(ValidationError):
            config.task_name = "other"


class TestFindConfigFile:
    def test_finds_in_parent(self, config_file: Path, build_dir: Path):
        nested = build_dir / "build" / "classes" / "main"
        assert find_config_file(nested) == config_file.resolve()

    def test_not_found(self, tmp_path: Path):
        assert find_config_file(tmp_path) is None


class TestCheckConfig:
    def test_valid(self, config_file: Path):
        result = check_config(config_file)
        assert result.valid
        assert result.errors == []
        assert result.to_dict()["api_count"] == 2

    def test_missing_file(self, tmp_path: Path):
        result = check_config(tmp_path / "restgen.yml")
        assert not result.valid
        assert "not found" in result.errors[0]

    def test_warns_on_overlapping_packages(self, build_dir: Path):
        path = build_dir / "restgen.yml"
        path.write_text(textwrap.dedent("""\
            input_dirs: [build/classes/main]
            idl_dir: idl
            snapshot_dir: snapshot
            apis:
              - name: a
                packages: [com.example.shared]
              - name: b
                packages: [com.example.shared, com.example.b]
        """))
        result = check_config(path)
        assert result.valid
        assert any("com.example.shared" in w and "a, b" in w for w in result.warnings)

    def test_warns_on_missing_inputs(self, tmp_path: Path):
        path = tmp_path / "restgen.yml"
        path.write_text(textwrap.dedent("""\
            codegen_classpath: [missing.jar]
            input_dirs: [missing/classes]
            idl_dir: idl
            snapshot_dir: snapshot
        """))
        result = check_config(path)
        assert result.valid
        assert any("Input directory does not exist" in w for w in result.warnings)
        assert any("Codegen classpath entry does not exist" in w for w in result.warnings)

    def test_warns_on_no_input_dirs(self, tmp_path: Path):
        path = tmp_path / "restgen.yml"
        path.write_text("idl_dir: idl\nsnapshot_dir: snapshot\n")
        result = check_config(path)
        assert result.valid
        assert any("skipped" in w for w in result.warnings)

    def test_same_output_dirs_is_error(self, tmp_path: Path):
        path = tmp_path / "restgen.yml"
        path.write_text("idl_dir: out\nsnapshot_dir: out\n")
        result = check_config(path)
        assert not result.valid

    def test_staging_dir_containing_outputs_is_error(self, tmp_path: Path):
        path = tmp_path / "restgen.yml"
        path.write_text(textwrap.dedent("""\
            idl_dir: out/idl
            snapshot_dir: out/snapshot
            isolated_classpath_dir: out
        """))
        result = check_config(path)
        assert not result.valid
        assert len(result.errors) == 2
        assert all("isolated_classpath_dir" in e for e in result.errors)

    def test_staging_dir_at_base_dir_is_error(self, tmp_path: Path):
        path = tmp_path / "restgen.yml"
        path.write_text(textwrap.dedent("""\
            input_dirs: [classes]
            idl_dir: idl
            snapshot_dir: snapshot
            isolated_classpath_dir: .
        """))
        result = check_config(path)
        assert not result.valid
        base = tmp_path.resolve()
        assert any(str(base / "classes") in e for e in result.errors)
        assert any(e.endswith(f"would delete {base}") for e in result.errors)

    def test_staging_dir_beside_outputs_is_fine(self, tmp_path: Path):
        path = tmp_path / "restgen.yml"
        path.write_text(textwrap.dedent("""\
            idl_dir: out/idl
            snapshot_dir: out/snapshot
            isolated_classpath_dir: out/stage
        """))
        assert check_config(path).valid
