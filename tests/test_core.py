from __future__ import annotations

from pathlib import Path

import pytest

from auto_powermode import core
from auto_powermode.exceptions import MissingDependency


@pytest.fixture
def commands(monkeypatch: pytest.MonkeyPatch) -> list[list[str]]:
    calls: list[list[str]] = []
    monkeypatch.setattr(core, "run", lambda cmd, **kwargs: calls.append(cmd))
    monkeypatch.setattr(core, "does_command_exists", lambda cmd: True)
    monkeypatch.setattr(core, "helper_path", lambda: "/usr/local/bin/auto-powermode-udev")
    return calls


def test_udev_rules_point_at_helper() -> None:
    rules = core.udev_rules("/usr/bin/auto-powermode-udev").splitlines()

    assert rules[1] == (
        'ACTION=="change", SUBSYSTEM=="power_supply", ATTR{type}=="Mains", '
        'ENV{POWER_SUPPLY_ONLINE}=="1", RUN+="/usr/bin/auto-powermode-udev --ac"'
    )
    assert rules[2].endswith('ENV{POWER_SUPPLY_ONLINE}=="0", RUN+="/usr/bin/auto-powermode-udev --battery"')


def test_require_binaries_lists_missing(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(core, "does_command_exists", lambda cmd: cmd == "udevadm")

    with pytest.raises(MissingDependency) as excinfo:
        core.require_binaries("udevadm", "powerprofilesctl", "systemctl")

    assert excinfo.value.binaries == ["powerprofilesctl", "systemctl"]


def test_deploy_udev_writes_rule_reloads_and_applies(commands: list[list[str]], tmp_path: Path) -> None:
    rule = tmp_path / "99-power-mode-auto-switch.rules"

    core.deploy_udev(rule_path=str(rule))

    assert "--ac" in rule.read_text()
    assert commands == [
        ["udevadm", "control", "--reload"],
        ["udevadm", "trigger", "--subsystem-match=power_supply"],
        ["/usr/local/bin/auto-powermode-udev", "--apply"],
    ]


def test_deploy_udev_keeps_existing_rule_unless_forced(commands: list[list[str]], tmp_path: Path) -> None:
    rule = tmp_path / "99-power-mode-auto-switch.rules"
    rule.write_text("# hand edited\n")

    core.deploy_udev(apply=False, rule_path=str(rule))
    assert rule.read_text() == "# hand edited\n"
    assert commands == [["udevadm", "control", "--reload"]]

    core.deploy_udev(force=True, apply=False, rule_path=str(rule))
    assert "auto-powermode-udev --battery" in rule.read_text()


def test_deploy_udev_exits_on_missing_binaries(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setattr(core, "does_command_exists", lambda cmd: False)
    rule = tmp_path / "rule.rules"

    with pytest.raises(SystemExit) as excinfo:
        core.deploy_udev(rule_path=str(rule))

    assert excinfo.value.code == 1
    assert not rule.exists()


def test_remove_udev(commands: list[list[str]], tmp_path: Path) -> None:
    rule = tmp_path / "99-power-mode-auto-switch.rules"
    rule.write_text("x")

    core.remove_udev(rule_path=str(rule))
    core.remove_udev(rule_path=str(rule))

    assert not rule.exists()
    assert commands == [["udevadm", "control", "--reload"]] * 2


def test_deploy_and_remove_user_service(
    commands: list[list[str]], monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
    monkeypatch.setattr(core, "which", lambda name: f"/usr/bin/{name}")

    core.deploy_service()

    unit = tmp_path / "systemd" / "user" / "auto-powermode.service"
    assert "ExecStart=/usr/bin/auto-powermode --daemon" in unit.read_text()
    assert ["systemctl", "--user", "enable", "--now", "auto-powermode.service"] in commands

    core.remove_service()

    assert not unit.exists()
    assert ["systemctl", "--user", "disable", "--now", "auto-powermode.service"] in commands
