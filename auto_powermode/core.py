#!/usr/bin/env python3
#
# auto-powermode core functionality
#
import os, sys
from pathlib import Path
from shutil import which
from subprocess import run, DEVNULL

from auto_powermode.exceptions import MissingDependency
from auto_powermode.globals import (
    POWERPROFILESCTL, UDEV_HELPER_NAME, UDEV_RULE_PATH, USER_SERVICE_NAME, does_command_exists,
)
from auto_powermode.prints import print_error, print_header, print_info, print_separator, print_warning

def footer(l=60): print("\n"+"-"*l+"\n")

def root_check():
    if os.getuid() != 0:
        print_header("Root access required")
        print("Must be run as root for this functionality to work, i.e: \nsudo " + os.path.basename(sys.argv[0]))
        footer()
        sys.exit(1)

def require_binaries(*binaries:str) -> None:
    missing = [binary for binary in binaries if not does_command_exists(binary)]
    if missing: raise MissingDependency(missing)

def missing_dependency_exit(e:MissingDependency):
    print_error(str(e))
    print("Please install them first. On Ubuntu:")
    print("  sudo apt update && sudo apt install -y power-profiles-daemon udev")
    sys.exit(1)

def helper_path() -> str:
    # the one-shot helper is installed next to this script as a console entry point
    found = which(UDEV_HELPER_NAME)
    if found is not None: return found
    return str(Path(sys.argv[0]).resolve().parent / UDEV_HELPER_NAME)

def udev_rules(helper:str) -> str:
    return (
        "# Power mode auto switch on AC adapter events\n"
        f'ACTION=="change", SUBSYSTEM=="power_supply", ATTR{{type}}=="Mains", ENV{{POWER_SUPPLY_ONLINE}}=="1", RUN+="{helper} --ac"\n'
        f'ACTION=="change", SUBSYSTEM=="power_supply", ATTR{{type}}=="Mains", ENV{{POWER_SUPPLY_ONLINE}}=="0", RUN+="{helper} --battery"\n'
    )

def reload_udev() -> None: run(["udevadm", "control", "--reload"], check=False)

def trigger_once(helper:str) -> None:
    # trigger power_supply events, but also apply directly in case no rule fires
    run(["udevadm", "trigger", "--subsystem-match=power_supply"], check=False)
    run([helper, "--apply"], check=False)

def deploy_udev(force:bool=False, apply:bool=True, rule_path:str=UDEV_RULE_PATH) -> None:
    print_header("Deploying auto-powermode udev rule")
    try: require_binaries("udevadm", POWERPROFILESCTL)
    except MissingDependency as e: missing_dependency_exit(e)

    helper = helper_path()
    if not os.path.isfile(helper): print_warning(f"{helper} not found, the rule will not run until it is installed")

    if not force and os.path.isfile(rule_path):
        print_info("Udev rule already installed; use --force to reinstall")
    else:
        Path(rule_path).write_text(udev_rules(helper))
        os.chmod(rule_path, 0o644)
        print_info("Installed udev rule:", rule_path)

    reload_udev()

    if apply: trigger_once(helper)
    else: print_info("Skipping immediate apply (--no-apply)")

    print("\nDone. Udev will switch power profiles on AC plug/unplug.")
    footer()

def remove_udev(rule_path:str=UDEV_RULE_PATH) -> None:
    print_header("Removing auto-powermode udev rule")
    if os.path.isfile(rule_path):
        os.remove(rule_path)
        print_info("Removed:", rule_path)
    else: print_info("No udev rule installed at", rule_path)
    if does_command_exists("udevadm"): reload_udev()
    footer()

def user_unit_dir() -> Path:
    config_home = os.getenv("XDG_CONFIG_HOME", default=os.path.join(os.path.expanduser("~"), ".config"))
    return Path(config_home) / "systemd" / "user"

def user_unit(executable:str) -> str:
    return "\n".join((
        "[Unit]",
        "Description=auto-powermode - switch power profiles on AC/battery changes",
        "After=graphical-session.target",
        "",
        "[Service]",
        "Type=simple",
        f"ExecStart={executable} --daemon",
        "Restart=on-failure",
        "",
        "[Install]",
        "WantedBy=default.target",
        "",
    ))

def deploy_service() -> None:
    print_header("Deploying auto-powermode watcher")
    try: require_binaries("systemctl", POWERPROFILESCTL)
    except MissingDependency as e: missing_dependency_exit(e)

    executable = which("auto-powermode") or str(Path(sys.argv[0]).resolve())
    unit_dir = user_unit_dir()
    unit_dir.mkdir(parents=True, exist_ok=True)
    unit_file = unit_dir / USER_SERVICE_NAME
    unit_file.write_text(user_unit(executable))
    print_info("Installed user unit:", unit_file)

    run(["systemctl", "--user", "daemon-reload"], check=False)
    run(["systemctl", "--user", "enable", "--now", USER_SERVICE_NAME], check=False)
    print_info("Started", USER_SERVICE_NAME)
    footer()

def remove_service() -> None:
    print_header("Removing auto-powermode watcher")
    unit_file = user_unit_dir() / USER_SERVICE_NAME
    if does_command_exists("systemctl"):
        run(["systemctl", "--user", "disable", "--now", USER_SERVICE_NAME], check=False, stderr=DEVNULL)
    if unit_file.is_file():
        unit_file.unlink()
        print_info("Removed:", unit_file)
    if does_command_exists("systemctl"): run(["systemctl", "--user", "daemon-reload"], check=False)
    print_separator()
