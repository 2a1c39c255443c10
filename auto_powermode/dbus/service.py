#!/usr/bin/env python3
"""
D-Bus front-end of the long-running watcher.

Power source changes arrive as UPower PropertiesChanged signals on the
system bus; control commands arrive on the session bus. Both are handled
by one GLib main loop, so the watcher never evaluates concurrently.
"""

import logging
import signal
from typing import Dict, Optional

from dasbus.connection import SessionMessageBus, SystemMessageBus
from dasbus.identifier import DBusServiceIdentifier
from dasbus.loop import EventLoop
from dasbus.server.interface import dbus_interface
from dasbus.server.publishable import Publishable
from dasbus.typing import Bool, Str
from gi.repository import Gio, GLib

from auto_powermode.config.config import config
from auto_powermode.modules.policy import PolicyTable
from auto_powermode.modules.watcher import PowerSourceWatcher
from .constants import (
    UPOWER_INTERFACE_NAME,
    UPOWER_ON_BATTERY,
    WATCHER_BASENAME,
    WATCHER_INTERFACE_NAME,
    WATCHER_NAMESPACE,
)

# Set up logging
log = logging.getLogger(__name__)

CONFIG_RELOAD_EVENTS = (
    Gio.FileMonitorEvent.CHANGES_DONE_HINT,
    Gio.FileMonitorEvent.CREATED,
    Gio.FileMonitorEvent.DELETED,
    Gio.FileMonitorEvent.MOVED_IN,
    Gio.FileMonitorEvent.MOVED_OUT,
)


def _upower_identifier(bus) -> DBusServiceIdentifier:
    return DBusServiceIdentifier(namespace=("org", "freedesktop", "UPower"), message_bus=bus)


def _watcher_identifier(bus) -> DBusServiceIdentifier:
    return DBusServiceIdentifier(namespace=WATCHER_NAMESPACE, basename=WATCHER_BASENAME, message_bus=bus)


def get_watcher_proxy(bus=None):
    """
    Proxy to a running watcher's control object.

    Method calls raise dasbus.error.DBusError (or GLib.Error) when no
    watcher is running.
    """
    return _watcher_identifier(bus or SessionMessageBus()).get_proxy()


@dbus_interface(WATCHER_INTERFACE_NAME)
class WatcherInterface(Publishable):
    """
    Session bus control object of the watcher.
    """

    def __init__(self, watcher: PowerSourceWatcher):
        self._watcher = watcher

    def for_publication(self):
        """Return this object for D-Bus publication."""
        return self

    def Pause(self) -> Bool:
        """Suspend automatic switching. False if the watcher was not active."""
        return self._watcher.pause()

    def Resume(self) -> Bool:
        """Resume automatic switching and evaluate once. False if not paused."""
        return self._watcher.resume()

    def Stop(self):
        """Stop the watcher and leave its event loop."""
        self._watcher.stop()

    def Status(self) -> Dict[Str, Str]:
        """Service state, last applied profile, last outcome and source."""
        return self._watcher.status()


class WatcherService:
    """
    Owns the bus connections, signal subscriptions and main loop of the watcher.
    """

    def __init__(self, watcher: PowerSourceWatcher, system_bus=None, session_bus=None):
        self._watcher = watcher
        self._watcher.on_stop = self._on_watcher_stopped
        self._system_bus = system_bus or SystemMessageBus()
        self._session_bus = session_bus or SessionMessageBus()
        self._interface = WatcherInterface(watcher)
        self._loop: Optional[EventLoop] = None
        self._upower = None
        self._config_monitor = None
        self._registered = False

    @property
    def interface(self) -> WatcherInterface:
        return self._interface

    def get_event_loop(self) -> EventLoop:
        if self._loop is None:
            self._loop = EventLoop()
        return self._loop

    def start(self):
        """
        Publish the control object and subscribe to UPower.

        Raises dasbus' ConnectionError if another watcher already owns the name,
        DBusError or GLib.Error if UPower can't be reached.
        """
        if self._registered:
            log.warning("Service already registered")
            return

        identifier = _watcher_identifier(self._session_bus)
        log.debug("Registering D-Bus service: %s", identifier.service_name)
        self._session_bus.publish_object(identifier.object_path, self._interface)
        self._session_bus.register_service(identifier.service_name)
        self._registered = True

        self._upower = _upower_identifier(self._system_bus).get_proxy()
        self._upower.PropertiesChanged.connect(self._on_upower_properties_changed)
        self._watch_config()

        for signum in (signal.SIGINT, signal.SIGTERM):
            GLib.unix_signal_add(GLib.PRIORITY_DEFAULT, signum, self._on_unix_signal)

    def run(self):
        """Start the service and the watcher, then block in the main loop."""
        try:
            self.start()
            self._watcher.start()
            self.get_event_loop().run()
        finally:
            self.stop()

    def stop(self):
        if not self._registered:
            return

        log.debug("Stopping D-Bus service")
        if self._config_monitor is not None:
            self._config_monitor.cancel()
            self._config_monitor = None

        for bus in (self._session_bus, self._system_bus):
            try:
                bus.disconnect()
            except GLib.Error as e:
                log.error("Error disconnecting from D-Bus: %s", e)

        self._registered = False

    def _on_upower_properties_changed(self, interface, changed, invalidated):
        if interface != UPOWER_INTERFACE_NAME:
            return
        if UPOWER_ON_BATTERY not in changed and UPOWER_ON_BATTERY not in invalidated:
            return
        log.debug("UPower reported a power source change")
        self._watcher.on_power_source_changed()

    def _on_watcher_stopped(self):
        if self._loop is not None:
            self._loop.quit()

    def _on_unix_signal(self) -> bool:
        log.info("termination signal received")
        self._watcher.stop()
        return GLib.SOURCE_REMOVE

    def _watch_config(self):
        if not config.path:
            return
        self._config_monitor = Gio.File.new_for_path(config.path).monitor_file(Gio.FileMonitorFlags.NONE, None)
        self._config_monitor.connect("changed", self._on_config_changed)

    def _on_config_changed(self, monitor, file, other_file, event_type):
        if event_type not in CONFIG_RELOAD_EVENTS:
            return
        config.update_config()
        self._watcher.engine.table = PolicyTable.from_config(config.get_config())
        log.info("config reloaded, policy: %r", self._watcher.engine.table)
