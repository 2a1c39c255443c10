from configparser import ConfigParser, Error as ConfigParserError
import logging
import os
import sys
from subprocess import run, PIPE

from auto_powermode.globals import POWER_SUPPLY_DIR, SYSTEM_CONFIG_FILE, USER_CONFIG_NAME
from auto_powermode.prints import print_error

log = logging.getLogger(__name__)

def find_config_file(args_config_file:str|None) -> str:
    """
    Find the config file to use.

    Look for a config file in the following priorization order:
    1. Command line argument
    2. User config file
    3. System config file

    :param args_config_file: Path to the config file provided as a command line argument
    :return: The path to the config file to use (the system one may not exist)
    """
    # use $SUDO_USER or $USER to get home dir since sudo can't access
    # user env vars
    home = run(["getent passwd ${SUDO_USER:-$USER} | cut -d: -f6"],
        shell=True,
        stdout=PIPE,
        universal_newlines=True
    ).stdout.rstrip() or os.path.expanduser("~")
    user_config_dir = os.getenv("XDG_CONFIG_HOME", default=os.path.join(home, ".config"))
    user_config_file = os.path.join(user_config_dir, USER_CONFIG_NAME)

    if args_config_file is not None:                                # (1) Command line argument was specified
        if os.path.isfile(args_config_file): return args_config_file
        print_error(f"Config file specified with '--config {args_config_file}' not found.")
        sys.exit(1)
    elif os.path.isfile(user_config_file): return user_config_file  # (2) User config file
    else: return SYSTEM_CONFIG_FILE                                 # (3) System config file (default if nothing else is found)

class _Config:
    def __init__(self) -> None:
        self.path: str = ""
        self._config: ConfigParser = ConfigParser(interpolation=None)

    def set_path(self, path: str) -> None:
        self.path = path
        self.update_config()

    def has_config(self) -> bool:
        return os.path.isfile(self.path)

    def get_config(self) -> ConfigParser:
        return self._config

    def power_supply_dir(self) -> str:
        return self._config.get("detector", "power_supply_dir", fallback=POWER_SUPPLY_DIR)

    def update_config(self) -> None:
        # create new ConfigParser to prevent old data from remaining
        self._config = ConfigParser(interpolation=None)
        if not self.has_config(): return
        try: self._config.read(self.path)
        except ConfigParserError as e:
            log.error("failed to parse %s, using defaults: %s", self.path, e)
            self._config = ConfigParser(interpolation=None)

config = _Config()
