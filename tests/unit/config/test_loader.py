"""
increase-models — unit tests for config loader

File: tests/unit/config/test_loader.py

Purpose
- Validate deterministic config loading from defaults, TOML, env overrides, and
  caller overrides.

What this test file should cover
- Precedence: overrides > env > file > defaults.
- Deterministic env var path mapping and type coercion.
- Path normalization relative to the config file.
- Translation of the binding section into BindingOptions.
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from increase_models.config.loader import (
    ConfigLoadError,
    binding_options,
    dump_effective_config,
    load_config,
)
from increase_models.config.schema import ConfigValidationError
from increase_models.core.coercion import BindingOptions


def _write_config(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


def test_loader_precedence_default_file_env_overrides(tmp_path: Path) -> None:
    default_path = _write_config(tmp_path / "default.toml", "")
    config_path = _write_config(
        tmp_path / "increase.toml",
        """
[binding]
strict_enums = true
""".strip(),
    )

    default_loaded = load_config(default_path, environ={})
    file_loaded = load_config(config_path, environ={})
    env_loaded = load_config(config_path, environ={"INCREASE_BINDING_STRICT_ENUMS": "false"})
    override_loaded = load_config(
        config_path,
        environ={"INCREASE_BINDING_STRICT_ENUMS": "false"},
        overrides={"binding.strict_enums": True},
    )

    assert default_loaded["binding"]["strict_enums"] is False
    assert file_loaded["binding"]["strict_enums"] is True
    assert env_loaded["binding"]["strict_enums"] is False
    assert override_loaded["binding"]["strict_enums"] is True


def test_env_values_are_coerced_by_default_type(tmp_path: Path) -> None:
    config_path = _write_config(tmp_path / "increase.toml", "")

    loaded = load_config(
        config_path,
        environ={
            "INCREASE_OBSERVABILITY_LOG_LEVEL": "debug",
            "INCREASE_OBSERVABILITY_LOG_TO_STDOUT": "yes",
            "INCREASE_BINDING_PRESERVE_UNKNOWN_FIELDS": "0",
            "INCREASE_UNRELATED": "ignored",
        },
    )

    assert loaded["observability"]["log_level"] == "DEBUG"
    assert loaded["observability"]["log_to_stdout"] is True
    assert loaded["binding"]["preserve_unknown_fields"] is False


def test_invalid_env_boolean_is_a_load_error(tmp_path: Path) -> None:
    config_path = _write_config(tmp_path / "increase.toml", "")

    expected = "INCREASE_BINDING_STRICT_ENUMS -> binding.strict_enums"
    with pytest.raises(ConfigLoadError, match=expected):
        load_config(config_path, environ={"INCREASE_BINDING_STRICT_ENUMS": "maybe"})


def test_nested_overrides_merge_with_dotted_overrides(tmp_path: Path) -> None:
    config_path = _write_config(tmp_path / "increase.toml", "")

    loaded = load_config(
        config_path,
        environ={},
        overrides={
            "observability": {"log_level": "WARNING"},
            "observability.redact_secrets": False,
        },
    )

    assert loaded["observability"]["log_level"] == "WARNING"
    assert loaded["observability"]["redact_secrets"] is False


def test_log_dir_is_normalized_relative_to_config_file(tmp_path: Path) -> None:
    config_path = _write_config(
        tmp_path / "conf" / "increase.toml",
        """
[observability]
log_dir = "../var/logs"
""".strip(),
    )

    loaded = load_config(config_path, environ={})

    assert loaded["observability"]["log_dir"] == (tmp_path / "var" / "logs").resolve().as_posix()


def test_missing_explicit_file_and_invalid_toml_are_load_errors(tmp_path: Path) -> None:
    with pytest.raises(ConfigLoadError, match="config file not found"):
        load_config(tmp_path / "absent.toml", environ={})

    broken = _write_config(tmp_path / "broken.toml", "[binding\nstrict_enums = true")
    with pytest.raises(ConfigLoadError, match="invalid TOML"):
        load_config(broken, environ={})


def test_implicit_default_file_may_be_absent(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.chdir(tmp_path)

    loaded = load_config(environ={})

    assert loaded["binding"] == {"preserve_unknown_fields": True, "strict_enums": False}


def test_file_validation_errors_list_every_issue(tmp_path: Path) -> None:
    config_path = _write_config(
        tmp_path / "increase.toml",
        """
[binding]
strict_enums = "sometimes"
lenient = true

[observability]
log_level = "TRACE"
""".strip(),
    )

    with pytest.raises(ConfigValidationError) as excinfo:
        load_config(config_path, environ={})

    paths = [issue.path for issue in excinfo.value.issues]
    assert paths == ["binding.lenient", "binding.strict_enums", "observability.log_level"]


def test_binding_options_from_config(tmp_path: Path) -> None:
    config_path = _write_config(tmp_path / "increase.toml", "")
    loaded = load_config(
        config_path,
        environ={},
        overrides={"binding.strict_enums": True, "binding.preserve_unknown_fields": False},
    )

    assert binding_options(loaded) == BindingOptions(
        strict_enums=True, preserve_unknown_fields=False
    )
    with pytest.raises(ConfigLoadError, match="no binding section"):
        binding_options({})


def test_dump_effective_config_is_sorted_and_stable(tmp_path: Path) -> None:
    config_path = _write_config(tmp_path / "increase.toml", "")

    first = dump_effective_config(load_config(config_path, environ={}))
    second = dump_effective_config(load_config(config_path, environ={}))

    assert first == second
    assert list(json.loads(first)) == ["binding", "meta", "observability"]
