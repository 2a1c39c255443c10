#!/usr/bin/env python3
#
# auto-powermode - switch power-profiles-daemon profiles on AC/battery changes
#
import logging
import sys

import click
import psutil

from auto_powermode.config.config import config as conf, find_config_file
from auto_powermode.core import (
    deploy_service, deploy_udev, footer, missing_dependency_exit, remove_service, remove_udev, require_binaries, root_check,
)
from auto_powermode.exceptions import MissingDependency
from auto_powermode.globals import POWERPROFILESCTL, VERSION, WATCHER_LOG_TAG
from auto_powermode.modules.controller import ProfileController
from auto_powermode.modules.detector import PowerSourceDetector
from auto_powermode.modules.policy import PolicyEngine, PolicyTable
from auto_powermode.modules.watcher import PowerSourceWatcher
from auto_powermode.prints import print_error, print_info, print_status_block, print_warning
from auto_powermode.tools import setup_logger
from auto_powermode.types import ServiceState

log = logging.getLogger(__name__)

def build_watcher() -> PowerSourceWatcher:
    engine = PolicyEngine(ProfileController(), PolicyTable.from_config(conf.get_config()))
    return PowerSourceWatcher(engine, PowerSourceDetector(conf.power_supply_dir()))

def run_watcher():
    try: require_binaries(POWERPROFILESCTL)
    except MissingDependency as e: missing_dependency_exit(e)

    # dasbus and PyGObject are only needed by the watcher itself
    from dasbus.error import DBusError
    from gi.repository import GLib
    from auto_powermode.dbus import WatcherService

    service = WatcherService(build_watcher())
    try: service.run()
    except ConnectionError as e:
        print_error("Unable to register the watcher, is it already running?", e)
        sys.exit(1)
    except (DBusError, GLib.Error) as e:
        print_error("Unable to subscribe to UPower power source changes, is upower running?", e)
        sys.exit(1)

def watcher_call(method:str, required:bool=True):
    """
    Calls a control method of the running watcher.

    Returns None when no watcher answers and `required` is False, exits otherwise.
    """
    from dasbus.error import DBusError
    from gi.repository import GLib
    from auto_powermode.dbus import get_watcher_proxy

    try: return getattr(get_watcher_proxy(), method)()
    except (DBusError, GLib.Error) as e:
        log.debug("watcher call %s failed: %s", method, e)
        if not required: return None
        print_error("auto-powermode watcher is not running")
        sys.exit(1)

def battery_level() -> str:
    battery = psutil.sensors_battery()
    if battery is None: return "no battery"
    return f"{battery.percent:.0f}% ({'plugged in' if battery.power_plugged else 'discharging'})"

def show_status():
    status = watcher_call("Status", required=False) or {"state": ServiceState.STOPPED.value}
    print_status_block(
        ("Watcher", status.get("state", "")),
        ("Last applied profile", status.get("last_applied") or "none"),
        ("Last outcome", status.get("last_outcome") or "none"),
        ("Current profile", ProfileController().current_profile() or "unknown"),
        ("Power source", PowerSourceDetector(conf.power_supply_dir()).detect().value),
        ("Battery", battery_level()),
        ("Policy", repr(PolicyTable.from_config(conf.get_config()))),
    )

@click.command()
@click.option("--start", is_flag=True, help="Run the power source watcher in the foreground")
@click.option("--daemon", is_flag=True, hidden=True)
@click.option("--stop", is_flag=True, help="Stop the running watcher")
@click.option("--pause", is_flag=True, help="Suspend automatic profile switching")
@click.option("--resume", is_flag=True, help="Resume automatic profile switching")
@click.option("--status", is_flag=True, help="Show watcher state and current power profile")
@click.option("--install", is_flag=True, help="Install the watcher as a systemd user service")
@click.option("--remove", is_flag=True, help="Remove the watcher systemd user service")
@click.option("--install-udev", is_flag=True, help="Install the root-level udev rule (needs root)")
@click.option("--remove-udev", is_flag=True, help="Remove the root-level udev rule (needs root)")
@click.option("--force", is_flag=True, help="Reinstall the udev rule even if present")
@click.option("--no-apply", is_flag=True, help="Don't apply a profile right after installing the udev rule")
@click.option("--config", is_flag=False, required=False, help="Use config file at defined path")
@click.option("--debug", is_flag=True, help="Show debug info (include when submitting bugs)")
@click.option("--version", is_flag=True, help="Show currently installed version")
@click.pass_context
def main(ctx, start, daemon, stop, pause, resume, status, install, remove, install_udev, remove_udev,
         force, no_apply, config, debug, version):
    setup_logger(WATCHER_LOG_TAG, debug)
    conf.set_path(find_config_file(config))
    if conf.has_config(): log.debug("Using settings defined in %s", conf.path)

    if start or daemon:
        run_watcher()
    elif stop:
        watcher_call("Stop")
        print_info("auto-powermode watcher stopped")
    elif pause:
        if watcher_call("Pause"): print_info("Automatic power profile switching paused")
        else: print_warning("Watcher is not active, nothing to pause")
    elif resume:
        if watcher_call("Resume"): print_info("Automatic power profile switching resumed")
        else: print_warning("Watcher is not paused, nothing to resume")
    elif status:
        show_status()
    elif install:
        deploy_service()
    elif remove:
        remove_service()
    elif install_udev:
        root_check()
        deploy_udev(force=force, apply=not no_apply)
    elif remove_udev:
        root_check()
        remove_udev()
    elif version:
        print(f"auto-powermode version: {VERSION}")
    else:
        print("\n" + "-" * 22 + " auto-powermode " + "-" * 22 + "\n")
        print("Switch power profiles automatically on AC/battery changes")
        print("\nExample usage:\nauto-powermode --start")
        print("\n-----\n")
        click.echo(ctx.get_help())
        footer()

if __name__ == "__main__":
    main()
