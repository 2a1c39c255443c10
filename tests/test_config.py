from __future__ import annotations

from pathlib import Path

import pytest

from auto_powermode.config.config import _Config, find_config_file
from auto_powermode.globals import POWER_SUPPLY_DIR, SYSTEM_CONFIG_FILE


def test_explicit_config_file_wins(tmp_path: Path) -> None:
    conf_file = tmp_path / "custom.conf"
    conf_file.write_text("[policy]\nac = balanced\n")

    assert find_config_file(str(conf_file)) == str(conf_file)


def test_missing_explicit_config_file_exits(tmp_path: Path) -> None:
    with pytest.raises(SystemExit) as excinfo:
        find_config_file(str(tmp_path / "missing.conf"))
    assert excinfo.value.code == 1


def test_user_config_file_before_system(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
    assert find_config_file(None) == SYSTEM_CONFIG_FILE

    user_file = tmp_path / "auto-powermode" / "auto-powermode.conf"
    user_file.parent.mkdir()
    user_file.write_text("[policy]\n")

    assert find_config_file(None) == str(user_file)


def test_update_config_reads_file(tmp_path: Path) -> None:
    conf_file = tmp_path / "auto-powermode.conf"
    conf_file.write_text("[detector]\npower_supply_dir = /tmp/ps\n")
    conf = _Config()

    conf.set_path(str(conf_file))
    assert conf.has_config()
    assert conf.power_supply_dir() == "/tmp/ps"

    conf_file.write_text("[policy]\nac = balanced\n")
    conf.update_config()
    assert conf.power_supply_dir() == POWER_SUPPLY_DIR
    assert conf.get_config().get("policy", "ac") == "balanced"


def test_missing_or_broken_file_falls_back_to_defaults(tmp_path: Path) -> None:
    conf = _Config()
    conf.set_path(str(tmp_path / "absent.conf"))
    assert conf.get_config().sections() == []

    broken = tmp_path / "broken.conf"
    broken.write_text("this is not ini\n[policy\n")
    conf.set_path(str(broken))
    assert conf.get_config().sections() == []
    assert conf.power_supply_dir() == POWER_SUPPLY_DIR


def test_percent_in_values_is_read_literally(tmp_path: Path) -> None:
    conf_file = tmp_path / "auto-powermode.conf"
    conf_file.write_text("[policy]\nac = performance, 100%balanced\n")
    conf = _Config()

    conf.set_path(str(conf_file))

    assert conf.get_config().get("policy", "ac") == "performance, 100%balanced"
