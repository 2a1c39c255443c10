from enum import Enum


class PowerSource(Enum):
    AC = "ac"
    BATTERY = "battery"
    INDETERMINATE = "indeterminate"


class ApplyOutcome(Enum):
    APPLIED = "applied"
    NOOP = "noop"
    FAILED = "failed"


class ServiceState(Enum):
    ACTIVE = "active"
    PAUSED = "paused"
    STOPPED = "stopped"
