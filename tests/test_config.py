from pathlib import Path

import pytest

from env_test.config import RunnerConfig, load_config
from env_test.errors import ConfigError


def test_defaults():
    config = load_config(None)
    assert config.log_dir is None
    assert config.skip == frozenset()
    assert config.namespace == "suites"
    assert config.paths == ["."]


def test_load_yaml(tmp_path):
    path = tmp_path / "env-test.yaml"
    path.write_text(
        "log-dir: build/test-logs\n"
        "skip: [AllocTests, wall]\n"
        "log_level: debug\n"
        "java_home: /usr/lib/jvm/java-21\n"
        "namespace: profiler_suites\n"
        "paths: test\n",
        encoding="utf-8",
    )

    config = load_config(path)

    assert config.log_dir == Path("build/test-logs")
    assert config.skip == {"alloctests", "wall"}
    assert config.log_level == "DEBUG"
    assert config.java_home == Path("/usr/lib/jvm/java-21")
    assert config.namespace == "profiler_suites"
    assert config.paths == ["test"]


def test_skip_as_comma_string(tmp_path):
    path = tmp_path / "env-test.yaml"
    path.write_text("skip: 'CpuTests, lock'\n", encoding="utf-8")
    assert load_config(path).skip == {"cputests", "lock"}


def test_empty_file(tmp_path):
    path = tmp_path / "env-test.yaml"
    path.write_text("", encoding="utf-8")
    assert load_config(path) == RunnerConfig()


@pytest.mark.parametrize("content, message", [
    ("- a\n- b\n", "mapping"),
    ("colour: blue\n", "Unknown config key"),
    ("skip: [unclosed\n", "Invalid YAML"),
    ("paths: {a: 1}\n", "'paths' must be a list"),
    ("log_level: verbose\n", "Invalid log_level"),
])
def test_invalid_files(tmp_path, content, message):
    path = tmp_path / "env-test.yaml"
    path.write_text(content, encoding="utf-8")
    with pytest.raises(ConfigError, match=message):
        load_config(path)


def test_missing_file(tmp_path):
    with pytest.raises(ConfigError, match="not found"):
        load_config(tmp_path / "absent.yaml")


def test_merged_overrides_only_given_values():
    base = RunnerConfig(log_dir=Path("logs"), namespace="custom")
    merged = base.merged(log_dir=None, namespace="other", skip=frozenset({"x"}))

    assert merged.log_dir == Path("logs")
    assert merged.namespace == "other"
    assert merged.skip == {"x"}
    assert base.namespace == "custom"
