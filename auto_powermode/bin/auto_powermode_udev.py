#!/usr/bin/env python3
#
# auto-powermode-udev - one-shot power profile switch, run by udev on
# power_supply change events
#
import logging
import sys

import click

from auto_powermode.config.config import config as conf, find_config_file
from auto_powermode.core import require_binaries
from auto_powermode.exceptions import MissingDependency
from auto_powermode.globals import POWERPROFILESCTL, SYSTEM_CONFIG_FILE, UDEV_LOG_TAG
from auto_powermode.modules.controller import ProfileController
from auto_powermode.modules.detector import PowerSourceDetector
from auto_powermode.modules.policy import PolicyEngine, PolicyResult, PolicyTable
from auto_powermode.prints import print_error
from auto_powermode.tools import setup_logger
from auto_powermode.types import PowerSource

log = logging.getLogger(__name__)

HINT_SOURCES = {"ac": PowerSource.AC, "battery": PowerSource.BATTERY}

def run_once(hint:str, engine:PolicyEngine, detector:PowerSourceDetector) -> PolicyResult:
    # udev already classified the event for --ac/--battery
    source = HINT_SOURCES[hint] if hint in HINT_SOURCES else detector.detect()
    log.debug("evaluating %s (hint: --%s)", source.value, hint)
    return engine.apply_policy(source)

@click.command()
@click.option("--ac", "hint", flag_value="ac", help="Apply the AC profile without detection")
@click.option("--battery", "hint", flag_value="battery", help="Apply the battery profile without detection")
@click.option("--apply", "hint", flag_value="apply", help="Detect the power source and apply its profile (default)")
@click.option("--config", is_flag=False, required=False, help="Use config file at defined path")
@click.option("--debug", is_flag=True, help="Log debug details")
def main(hint, config, debug):
    setup_logger(UDEV_LOG_TAG, debug)
    try: require_binaries(POWERPROFILESCTL)
    except MissingDependency as e:
        print_error(str(e))
        sys.exit(1)

    # udev runs us without a login environment, so only an explicit file or the system one
    conf.set_path(find_config_file(config) if config is not None else SYSTEM_CONFIG_FILE)
    engine = PolicyEngine(ProfileController(), PolicyTable.from_config(conf.get_config()))
    run_once(hint or "apply", engine, PowerSourceDetector(conf.power_supply_dir()))
    # failed applies are only logged, udev must always see success
    sys.exit(0)

if __name__ == "__main__":
    main()
