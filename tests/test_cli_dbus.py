from __future__ import annotations

from pathlib import Path

import pytest

pytest.importorskip("dasbus")
pytest.importorskip("gi.repository.Gio")

from click.testing import CliRunner  # noqa: E402
from dasbus.error import DBusError  # noqa: E402

import auto_powermode.dbus as dbus_package  # noqa: E402
from auto_powermode.bin import auto_powermode as cli  # noqa: E402
from auto_powermode.modules.controller import ProfileController  # noqa: E402

from tests.conftest import FakeProfileBackend  # noqa: E402


class AbsentWatcher:
    def __getattr__(self, method: str):
        def call():
            raise DBusError("The name io.github.AutoPowerMode.Watcher was not provided by any .service files")

        return call


@pytest.fixture
def no_watcher(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setattr(cli, "setup_logger", lambda tag, debug=False: None)
    monkeypatch.setattr(cli, "ProfileController", lambda: ProfileController(FakeProfileBackend("balanced")))
    monkeypatch.setattr(dbus_package, "get_watcher_proxy", lambda bus=None: AbsentWatcher())
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))


@pytest.mark.parametrize("flag", ["--pause", "--resume", "--stop"])
def test_control_commands_fail_without_watcher(no_watcher: None, flag: str) -> None:
    result = CliRunner().invoke(cli.main, [flag])

    assert result.exit_code == 1
    assert "watcher is not running" in result.output


def test_status_without_watcher_is_stopped(no_watcher: None) -> None:
    result = CliRunner().invoke(cli.main, ["--status"])

    assert result.exit_code == 0
    assert "stopped" in result.output


def test_start_without_upower_exits_cleanly(monkeypatch: pytest.MonkeyPatch, no_watcher: None) -> None:
    class NoUPowerService:
        def __init__(self, watcher) -> None:
            self.watcher = watcher

        def run(self) -> None:
            raise DBusError("The name org.freedesktop.UPower was not provided by any .service files")

    monkeypatch.setattr(cli, "require_binaries", lambda *binaries: None)
    monkeypatch.setattr(dbus_package, "WatcherService", NoUPowerService)

    result = CliRunner().invoke(cli.main, ["--start"])

    assert result.exit_code == 1
    assert "upower" in result.output
    assert not isinstance(result.exception, DBusError)
