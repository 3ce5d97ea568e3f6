"""Tests for vnode.settings and vnode.ping.config."""

from pathlib import Path

import pytest
import yaml
from pydantic import ValidationError

from vnode.ping import NodePingController, PingConfig, build_ping_controller
from vnode.settings import (
    get_default_settings,
    get_setting,
    load_settings,
    reload_settings,
)


class _Provider:
    async def ping(self) -> None:
        return None


@pytest.fixture(autouse=True)
def _fresh_settings():
    reload_settings()
    yield
    reload_settings()


def _write_settings(config_dir: Path, data: dict) -> None:
    config_dir.mkdir(parents=True, exist_ok=True)
    (config_dir / "settings.yaml").write_text(yaml.safe_dump(data), encoding="utf-8")


def test_load_settings_without_file_returns_defaults(tmp_path: Path) -> None:
    settings = load_settings(config_dir=tmp_path)
    assert settings == get_default_settings()
    assert get_setting(settings, "node.ping_interval") == 10.0
    assert get_setting(settings, "node.ping_timeout") is None


def test_load_settings_merges_file_values(tmp_path: Path) -> None:
    _write_settings(tmp_path, {"node": {"ping_timeout": 2.5}, "logging": {"level": "DEBUG"}})
    settings = load_settings(config_dir=tmp_path)
    assert get_setting(settings, "node.ping_timeout") == 2.5
    assert get_setting(settings, "node.ping_interval") == 10.0
    assert get_setting(settings, "logging.level") == "DEBUG"
    assert get_setting(settings, "logging.backup_count") == 3


def test_load_settings_is_cached_until_reload(tmp_path: Path) -> None:
    _write_settings(tmp_path, {"node": {"ping_interval": 3}})
    assert get_setting(load_settings(config_dir=tmp_path), "node.ping_interval") == 3
    _write_settings(tmp_path, {"node": {"ping_interval": 4}})
    assert get_setting(load_settings(config_dir=tmp_path), "node.ping_interval") == 3
    reload_settings()
    assert get_setting(load_settings(config_dir=tmp_path), "node.ping_interval") == 4


def test_invalid_yaml_falls_back_to_defaults(tmp_path: Path) -> None:
    (tmp_path / "settings.yaml").write_text("node: [unclosed", encoding="utf-8")
    assert load_settings(config_dir=tmp_path) == get_default_settings()


def test_get_setting_missing_path_returns_default() -> None:
    assert get_setting({"node": {}}, "node.ping_interval", 7) == 7
    assert get_setting({"node": 1}, "node.ping_interval") is None


def test_default_settings_are_independent_copies() -> None:
    a = get_default_settings()
    a["node"]["ping_interval"] = 99
    assert get_default_settings()["node"]["ping_interval"] == 10.0


class TestPingConfig:
    def test_from_settings_defaults(self) -> None:
        cfg = PingConfig.from_settings(get_default_settings())
        assert cfg.interval == 10.0
        assert cfg.timeout is None

    def test_from_settings_reads_node_section(self) -> None:
        cfg = PingConfig.from_settings({"node": {"ping_interval": 0.5, "ping_timeout": 0.2}})
        assert cfg.interval == 0.5
        assert cfg.timeout == 0.2

    @pytest.mark.parametrize(
        "node",
        [{"ping_interval": 0}, {"ping_interval": -1}, {"ping_timeout": 0}],
    )
    def test_rejects_non_positive_durations(self, node: dict) -> None:
        with pytest.raises(ValidationError):
            PingConfig.from_settings({"node": node})

    def test_build_ping_controller(self) -> None:
        c = build_ping_controller(
            _Provider(), {"node": {"ping_interval": 2.0, "ping_timeout": 1.0}}
        )
        assert isinstance(c, NodePingController)
        assert c.interval == 2.0
        assert c.timeout == 1.0

    def test_build_ping_controller_defaults_to_loaded_settings(self, tmp_path: Path) -> None:
        _write_settings(tmp_path, {"node": {"ping_interval": 3.0, "ping_timeout": 0.5}})
        load_settings(config_dir=tmp_path)

        c = build_ping_controller(_Provider())
        assert c.interval == 3.0
        assert c.timeout == 0.5
