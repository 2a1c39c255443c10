import logging
from pathlib import Path

from auto_powermode.globals import MAINS_TYPE, POWER_SUPPLY_DIR
from auto_powermode.types import PowerSource

log = logging.getLogger(__name__)


def read_attribute(device: Path, name: str) -> str | None:
    try:
        return (device / name).read_text(errors="ignore").strip()
    except OSError:
        return None


class PowerSourceDetector:
    """
    Classifies the current power source from the power_supply sysfs class.

    A device whose `type` reads "Mains" is an AC adapter. Attributes that
    can't be read make the device count as absent, so detection leans
    towards INDETERMINATE instead of raising.
    """

    def __init__(self, power_supply_dir: str | Path = POWER_SUPPLY_DIR) -> None:
        self.power_supply_dir = Path(power_supply_dir)

    def mains_devices(self) -> list[Path]:
        try:
            devices = sorted(self.power_supply_dir.iterdir())
        except OSError as e:
            log.debug("unable to list %s: %s", self.power_supply_dir, e)
            return []
        return [dev for dev in devices if read_attribute(dev, "type") == MAINS_TYPE]

    def detect(self) -> PowerSource:
        seen_offline = False
        for dev in self.mains_devices():
            online = read_attribute(dev, "online")
            if online == "1":
                log.debug("mains device %s is online", dev.name)
                return PowerSource.AC
            if online == "0":
                seen_offline = True
            else:
                log.debug("mains device %s has unreadable online attribute: %r", dev.name, online)

        return PowerSource.BATTERY if seen_offline else PowerSource.INDETERMINATE
