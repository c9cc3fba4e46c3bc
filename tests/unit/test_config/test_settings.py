from __future__ import annotations

import importlib

from config import settings
from shared.models.sync import SyncConfiguration
from shared.utils.env import env_bool, env_float, env_int, env_value


def test_install_params_overlay_env_on_yaml(monkeypatch, tmp_path) -> None:
    config_file = tmp_path / "asset_sync.yaml"
    config_file.write_text(
        "install_params:\n"
        "  domain: acme\n"
        "  api_key: from-file\n"
        "  auto_detect_dell: false\n"
        "  dell_asset_type_ids: '10, 20'\n"
    )
    for name in ("FRESHSERVICE_DOMAIN", "AUTO_DETECT_DELL", "DELL_ASSET_TYPE_IDS", "SYNC_SCHEDULE_HOURS"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("FRESHSERVICE_API_KEY", "from-env")

    params = settings.install_params(str(config_file))

    assert params["domain"] == "acme"
    assert params["api_key"] == "from-env"
    assert params["dell_asset_type_ids"] == "10, 20"


def test_install_params_missing_file_uses_env_only(monkeypatch, tmp_path) -> None:
    for name in ("FRESHSERVICE_DOMAIN", "FRESHSERVICE_API_KEY", "DELL_ASSET_TYPE_IDS", "SYNC_SCHEDULE_HOURS"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("AUTO_DETECT_DELL", "true")

    params = settings.install_params(str(tmp_path / "missing.yaml"))

    assert params == {"auto_detect_dell": "true"}


def test_sync_configuration_parses_install_params() -> None:
    config = SyncConfiguration.from_install_params(
        {"auto_detect_dell": "false", "dell_asset_type_ids": " 10, ,20 ,", "sync_schedule": "12"}
    )

    assert config.auto_detect is False
    assert config.asset_type_ids == ("10", "20")
    assert config.sync_interval_hours == 12


def test_sync_configuration_defaults() -> None:
    config = SyncConfiguration.from_install_params({"auto_detect_dell": True, "sync_schedule": -3})

    assert config.auto_detect is True
    assert config.asset_type_ids == ()
    assert config.sync_interval_hours == 24


def test_env_helpers_treat_sentinels_as_unset(monkeypatch) -> None:
    monkeypatch.setenv("ASSET_SYNC_TEST_VALUE", "n/a")
    monkeypatch.setenv("ASSET_SYNC_TEST_FLAG", "yes")
    monkeypatch.setenv("ASSET_SYNC_TEST_INT", "abc")

    assert env_value("ASSET_SYNC_TEST_VALUE", "fallback") == "fallback"
    assert env_bool("ASSET_SYNC_TEST_FLAG", False) is True
    assert env_int("ASSET_SYNC_TEST_INT", 7) == 7


def test_env_float_falls_back_on_bad_value(monkeypatch) -> None:
    monkeypatch.setenv("ASSET_SYNC_TEST_FLOAT", "thirty")
    assert env_float("ASSET_SYNC_TEST_FLOAT", 30.0) == 30.0

    monkeypatch.setenv("ASSET_SYNC_TEST_FLOAT", "12.5")
    assert env_float("ASSET_SYNC_TEST_FLOAT", 30.0) == 12.5


def test_bad_request_timeout_keeps_default(monkeypatch) -> None:
    monkeypatch.setenv("ASSET_SYNC_REQUEST_TIMEOUT_SECONDS", "soon")
    try:
        importlib.reload(settings)
        assert settings.REQUEST_TIMEOUT_SECONDS == 30.0
    finally:
        monkeypatch.delenv("ASSET_SYNC_REQUEST_TIMEOUT_SECONDS")
        importlib.reload(settings)


def test_auto_detect_accepts_env_truthy_spellings() -> None:
    for raw in ("1", "TRUE", " yes ", "on"):
        assert SyncConfiguration.from_install_params({"auto_detect_dell": raw}).auto_detect is True
    assert SyncConfiguration.from_install_params({"auto_detect_dell": "off"}).auto_detect is False
