from __future__ import annotations

from pathlib import Path

import pytest

from container_secrets.config import ConfigurationError, RunOptions, load_settings


def test_validate_accepts_defaults() -> None:
    RunOptions().validate()


@pytest.mark.parametrize(
    "options",
    [
        RunOptions(secret_name_style="camel"),
        RunOptions(env_mode="inline"),
        RunOptions(secrets_only=True, env_only=True),
    ],
)
def test_validate_rejects(options: RunOptions) -> None:
    with pytest.raises(ConfigurationError):
        options.validate()


def test_resolve_env_mode_coerces_env_only_secretref() -> None:
    options, coerced = RunOptions(env_only=True).resolve_env_mode()

    assert coerced
    assert options.env_mode == "plain"
    assert not options.generate_secrets
    assert options.generate_env_vars


def test_resolve_env_mode_keeps_other_combinations() -> None:
    original = RunOptions(env_mode="secretref")

    options, coerced = original.resolve_env_mode()

    assert not coerced
    assert options is original


def test_load_settings_reads_settings_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CONTAINER_SECRETS_HOME", str(tmp_path))
    # setenv перед delenv: переменная, выставленная load_dotenv, удалится после теста
    monkeypatch.setenv("CONTAINER_SECRETS_CLI", "unused")
    monkeypatch.delenv("CONTAINER_SECRETS_CLI")
    monkeypatch.delenv("CONTAINER_SECRETS_LOG_LEVEL", raising=False)
    (tmp_path / "settings.env").write_text("CONTAINER_SECRETS_CLI=/usr/local/bin/az\n", encoding="utf-8")

    settings = load_settings()

    assert settings.home_dir == tmp_path
    assert settings.preferences_path == tmp_path / "config.json"
    assert settings.cli_binary == "/usr/local/bin/az"
    assert settings.log_level == "WARNING"


def test_environment_overrides_settings_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CONTAINER_SECRETS_HOME", str(tmp_path))
    monkeypatch.setenv("CONTAINER_SECRETS_CLI", "az-dev")
    (tmp_path / "settings.env").write_text("CONTAINER_SECRETS_CLI=az-file\n", encoding="utf-8")

    assert load_settings().cli_binary == "az-dev"
