from os import getenv
from shutil import which

VERSION = "1.2.0"

POWER_SUPPLY_DIR = "/sys/class/power_supply"
MAINS_TYPE = "Mains"

# profile names understood by power-profiles-daemon
PROFILE_PERFORMANCE = "performance"
PROFILE_BALANCED = "balanced"
PROFILE_POWER_SAVER = "power-saver"

POWERPROFILESCTL = "powerprofilesctl"
POWERPROFILESCTL_TIMEOUT = 10 # seconds

# syslog tags
WATCHER_LOG_TAG = "auto-powermode"
UDEV_LOG_TAG = "power-mode-udev"

SYSTEM_CONFIG_FILE = "/etc/auto-powermode.conf"
USER_CONFIG_NAME = "auto-powermode/auto-powermode.conf"

UDEV_RULE_PATH = "/etc/udev/rules.d/99-power-mode-auto-switch.rules"
UDEV_HELPER_NAME = "auto-powermode-udev"
USER_SERVICE_NAME = "auto-powermode.service"

SYSLOG_SOCKET = getenv("AUTO_POWERMODE_SYSLOG_SOCKET", "/dev/log")

# used to check if binary exists on the system
def does_command_exists(cmd:str) -> bool: return which(cmd) is not None
