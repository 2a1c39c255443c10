from __future__ import annotations

from pathlib import Path
from typing import Callable

import pytest

from auto_powermode.exceptions import ServiceUnreachable, UnsupportedProfileName
from auto_powermode.modules.controller import ProfileController


class FakeProfileBackend:
    """In-memory stand-in for powerprofilesctl."""

    def __init__(
        self,
        current: str = "balanced",
        supported: tuple[str, ...] = ("performance", "balanced", "power-saver"),
        reachable: bool = True,
    ) -> None:
        self.current = current
        self.supported = supported
        self.reachable = reachable
        self.get_calls = 0
        self.set_calls: list[str] = []

    def get(self) -> str:
        self.get_calls += 1
        if not self.reachable:
            raise ServiceUnreachable("power-profiles-daemon is not running")
        return self.current

    def set(self, profile: str) -> None:
        self.set_calls.append(profile)
        if not self.reachable:
            raise ServiceUnreachable("power-profiles-daemon is not running", profile)
        if profile not in self.supported:
            raise UnsupportedProfileName(f"profile {profile!r} not supported", profile)
        self.current = profile


@pytest.fixture
def backend() -> FakeProfileBackend:
    return FakeProfileBackend()


@pytest.fixture
def controller(backend: FakeProfileBackend) -> ProfileController:
    return ProfileController(backend)


@pytest.fixture
def power_supply(tmp_path: Path) -> Callable[..., Path]:
    """Builds a fake /sys/class/power_supply tree; returns its root."""
    root = tmp_path / "power_supply"
    root.mkdir()

    def add(name: str, type_: str | None, online: str | None = None) -> Path:
        dev = root / name
        dev.mkdir()
        if type_ is not None:
            (dev / "type").write_text(f"{type_}\n", encoding="utf-8")
        if online is not None:
            (dev / "online").write_text(f"{online}\n", encoding="utf-8")
        return root

    return add
