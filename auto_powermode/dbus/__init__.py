#!/usr/bin/env python3
"""
D-Bus support for auto-powermode.

Subscribes the watcher to UPower power source notifications and exposes
start/stop/pause/resume/status control on the session bus.
"""

from .service import WatcherInterface, WatcherService, get_watcher_proxy
from .constants import (
    UPOWER_SERVICE_NAME,
    UPOWER_OBJECT_PATH,
    WATCHER_SERVICE_NAME,
    WATCHER_OBJECT_PATH,
    WATCHER_INTERFACE_NAME,
)

__all__ = [
    "WatcherInterface",
    "WatcherService",
    "get_watcher_proxy",
    "UPOWER_SERVICE_NAME",
    "UPOWER_OBJECT_PATH",
    "WATCHER_SERVICE_NAME",
    "WATCHER_OBJECT_PATH",
    "WATCHER_INTERFACE_NAME",
]
