import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from devdash.core.config import Config, ConfigError, ConfigManager
from devdash.core.config_loader import deep_merge, load_json_file, substitute_env_vars
from devdash.core.global_paths import GlobalPath


def _write_global(content: str, name: str = "devdash.json") -> Path:
    path = Path(GlobalPath.config()) / name
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


def test_config_defaults() -> None:
    config = Config.model_validate({})

    assert config.polling.interval == 60
    assert config.polling.now_playing_interval == 2
    assert config.polling.command_timeout == 10
    assert config.docker.engine_start_attempts == 5
    assert config.optimistic_updates is True
    assert config.title_mode == "isp"
    assert "/opt/homebrew/bin" in config.path
    assert config.logging is None


def test_config_accepts_camel_case_aliases() -> None:
    config = Config.model_validate({
        "polling": {"nowPlayingInterval": 5, "httpTimeout": 1.5},
        "optimisticUpdates": False,
        "titleMode": "playing",
        "ipInfoUrl": "https://example.test/ip",
    })

    assert config.polling.now_playing_interval == 5
    assert config.polling.http_timeout == 1.5
    assert config.optimistic_updates is False
    assert config.title_mode == "playing"
    assert config.ip_info_url == "https://example.test/ip"


def test_config_forbids_unknown_fields() -> None:
    with pytest.raises(ValidationError):
        Config.model_validate({"unknown": 1})

    with pytest.raises(ValidationError):
        Config.model_validate({"polling": {"unknown": True}})


@pytest.mark.parametrize("polling", [{"interval": 0}, {"commandTimeout": -1}])
def test_config_rejects_non_positive_durations(polling: dict) -> None:
    with pytest.raises(ValidationError):
        Config.model_validate({"polling": polling})


def test_deep_merge_replaces_lists_and_merges_dicts() -> None:
    base = {"path": ["/a"], "polling": {"interval": 60, "httpTimeout": 5}}
    override = {"path": ["/b"], "polling": {"interval": 30}}

    assert deep_merge(base, override) == {"path": ["/b"], "polling": {"interval": 30, "httpTimeout": 5}}
    assert base["polling"]["interval"] == 60


def test_substitute_env_vars(monkeypatch) -> None:  # type: ignore[no-untyped-def]
    monkeypatch.setenv("DEVDASH_TEST_URL", "https://ip.test")

    assert substitute_env_vars('{"ipInfoUrl": "{env:DEVDASH_TEST_URL}"}') == '{"ipInfoUrl": "https://ip.test"}'
    assert substitute_env_vars("{env:DEVDASH_TEST_MISSING}") == ""


def test_load_json_file_handles_jsonc(tmp_path: Path) -> None:
    path = tmp_path / "devdash.jsonc"
    path.write_text('{\n  // cadence\n  "polling": {"interval": 30}\n}\n', encoding="utf-8")

    assert load_json_file(str(path)) == {"polling": {"interval": 30}}
    assert load_json_file(str(tmp_path / "missing.json")) == {}


@pytest.mark.parametrize("content", ['{"polling": @}', "[1, 2]"])
def test_load_json_file_rejects_bad_content(tmp_path: Path, content: str) -> None:
    path = tmp_path / "bad.json"
    path.write_text(content, encoding="utf-8")

    with pytest.raises(ConfigError):
        load_json_file(str(path))


def test_manager_uses_defaults_without_sources() -> None:
    manager = ConfigManager()

    assert manager.get() == Config()
    assert manager.sources() == []


def test_manager_layers_sources_in_order(monkeypatch, tmp_path: Path) -> None:  # type: ignore[no-untyped-def]
    global_path = _write_global(json.dumps({"polling": {"interval": 30, "httpTimeout": 2}, "titleMode": "audio"}))
    explicit = tmp_path / "explicit.json"
    explicit.write_text(json.dumps({"polling": {"interval": 15}}), encoding="utf-8")
    monkeypatch.setenv("DEVDASH_CONFIG", str(explicit))
    monkeypatch.setenv("DEVDASH_CONFIG_CONTENT", json.dumps({"titleMode": "playing"}))

    manager = ConfigManager(overrides={"optimisticUpdates": False})
    config = manager.get()

    assert config.polling.interval == 15
    assert config.polling.http_timeout == 2
    assert config.title_mode == "playing"
    assert config.optimistic_updates is False
    assert manager.sources() == [str(global_path), str(explicit), "DEVDASH_CONFIG_CONTENT"]


def test_manager_caches_until_reset() -> None:
    manager = ConfigManager()
    first = manager.get()
    _write_global('{"polling": {"interval": 5}}')

    assert manager.get() is first
    manager.reset()
    assert manager.get().polling.interval == 5


def test_manager_reports_missing_explicit_file(monkeypatch, tmp_path: Path) -> None:  # type: ignore[no-untyped-def]
    monkeypatch.setenv("DEVDASH_CONFIG", str(tmp_path / "nope.json"))

    with pytest.raises(ConfigError, match="file does not exist"):
        ConfigManager().get()


def test_manager_reports_invalid_inline_content(monkeypatch) -> None:  # type: ignore[no-untyped-def]
    monkeypatch.setenv("DEVDASH_CONFIG_CONTENT", "{oops")

    with pytest.raises(ConfigError, match="DEVDASH_CONFIG_CONTENT"):
        ConfigManager().get()


def test_manager_reports_schema_errors_with_source() -> None:
    path = _write_global('{"polling": {"interval": -5}}')

    with pytest.raises(ConfigError) as exc:
        ConfigManager().get()

    assert exc.value.path == str(path)
