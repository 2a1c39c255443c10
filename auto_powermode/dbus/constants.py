#!/usr/bin/env python3
"""
D-Bus names used by the auto-powermode watcher.

The watcher listens to UPower on the system bus and publishes its own
control object on the session bus.
"""

# UPower, source of power source change notifications
UPOWER_SERVICE_NAME = "org.freedesktop.UPower"
UPOWER_OBJECT_PATH = "/org/freedesktop/UPower"
UPOWER_INTERFACE_NAME = "org.freedesktop.UPower"
UPOWER_ON_BATTERY = "OnBattery"

# watcher control object
WATCHER_NAMESPACE = ("io", "github", "AutoPowerMode")
WATCHER_BASENAME = "Watcher"
WATCHER_SERVICE_NAME = "io.github.AutoPowerMode.Watcher"
WATCHER_OBJECT_PATH = "/io/github/AutoPowerMode/Watcher"
WATCHER_INTERFACE_NAME = "io.github.AutoPowerMode.Watcher"
