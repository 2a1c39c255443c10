from configparser import ConfigParser
from dataclasses import dataclass
import logging
from typing import Dict, Mapping, Optional, Tuple

from auto_powermode.globals import PROFILE_BALANCED, PROFILE_PERFORMANCE, PROFILE_POWER_SAVER
from auto_powermode.modules.controller import ProfileController
from auto_powermode.types import ApplyOutcome, PowerSource

log = logging.getLogger(__name__)

DEFAULT_POLICY: Dict[PowerSource, Tuple[str, ...]] = {
    PowerSource.AC: (PROFILE_PERFORMANCE, PROFILE_BALANCED),
    PowerSource.BATTERY: (PROFILE_POWER_SAVER,),
}


@dataclass(frozen=True)
class PolicyResult:
    outcome: ApplyOutcome
    source: PowerSource
    profile: Optional[str] = None

    def __repr__(self) -> str:
        if self.profile is None:
            return f"{self.outcome.value} ({self.source.value})"
        return f"{self.outcome.value} {self.profile} ({self.source.value})"


class PolicyTable:
    """
    Ordered candidate profiles per power source.

    Candidates are tried strictly in the listed order, the first one the
    service accepts wins.
    """

    def __init__(self, table: Mapping[PowerSource, Tuple[str, ...]] | None = None) -> None:
        self._table: Dict[PowerSource, Tuple[str, ...]] = dict(DEFAULT_POLICY if table is None else table)

    @classmethod
    def from_config(cls, conf: ConfigParser) -> "PolicyTable":
        """
        Reads `[policy] ac = ...` / `battery = ...` comma separated lists,
        falling back to the default entry for each missing key.
        """
        table = dict(DEFAULT_POLICY)
        for source in (PowerSource.AC, PowerSource.BATTERY):
            if conf.has_option("policy", source.value):
                raw = conf.get("policy", source.value)
                table[source] = tuple(name.strip() for name in raw.split(",") if name.strip())
        return cls(table)

    def candidates(self, source: PowerSource) -> Tuple[str, ...]:
        return self._table.get(source, ())

    def __eq__(self, other: object) -> bool:
        return isinstance(other, PolicyTable) and self._table == other._table

    def __repr__(self) -> str:
        return ", ".join(f"{src.value} -> [{', '.join(names)}]" for src, names in self._table.items())


class PolicyEngine:
    """
    Maps a power source to a profile and applies it through the controller.

    apply_policy() never raises: every per-evaluation failure ends up in the
    returned PolicyResult and the log.
    """

    def __init__(self, controller: ProfileController, table: PolicyTable | None = None) -> None:
        self.controller = controller
        self.table = table if table is not None else PolicyTable()

    def apply_policy(self, source: PowerSource) -> PolicyResult:
        candidates = self.table.candidates(source)
        # nothing to do for ambiguous power supply reporting
        if source is PowerSource.INDETERMINATE or not candidates:
            return PolicyResult(ApplyOutcome.NOOP, source)

        for profile in candidates:
            outcome = self.controller.set_profile(profile)
            if outcome is not ApplyOutcome.FAILED:
                return PolicyResult(outcome, source, profile)
            log.debug("candidate %s failed for %s, trying next", profile, source.value)

        log.error("unable to apply any of [%s] on %s", ", ".join(candidates), source.value)
        return PolicyResult(ApplyOutcome.FAILED, source)
