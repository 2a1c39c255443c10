import logging
from typing import Callable, Dict, Optional

from auto_powermode.modules.detector import PowerSourceDetector
from auto_powermode.modules.policy import PolicyEngine, PolicyResult
from auto_powermode.types import ApplyOutcome, PowerSource, ServiceState

log = logging.getLogger(__name__)


class PowerSourceWatcher:
    """
    Lifecycle and evaluation logic of the long-running watcher.

    States move STOPPED -> ACTIVE <-> PAUSED -> STOPPED. Power source
    notifications trigger one policy evaluation while ACTIVE and are dropped
    while PAUSED, which lets a user override the profile by hand without
    stopping the watcher. Entering ACTIVE always evaluates once so changes
    missed while stopped or paused are caught up.

    This class holds no bus connection: the D-Bus service feeds it
    notifications and commands from a single GLib main loop, so calls never
    overlap.
    """

    def __init__(
        self,
        engine: PolicyEngine,
        detector: Optional[PowerSourceDetector] = None,
        on_stop: Optional[Callable[[], None]] = None,
    ) -> None:
        self.engine = engine
        self.detector = detector if detector is not None else PowerSourceDetector()
        self.on_stop = on_stop
        self.state: ServiceState = ServiceState.STOPPED
        self.last_applied: Optional[str] = None
        self.last_result: Optional[PolicyResult] = None

    def start(self) -> bool:
        if self.state is not ServiceState.STOPPED:
            log.warning("watcher already %s", self.state.value)
            return False
        self.state = ServiceState.ACTIVE
        log.info("watcher started")
        self.evaluate()
        return True

    def pause(self) -> bool:
        if self.state is not ServiceState.ACTIVE:
            log.warning("cannot pause watcher while %s", self.state.value)
            return False
        self.state = ServiceState.PAUSED
        log.info("watcher paused, automatic switching suspended")
        return True

    def resume(self) -> bool:
        if self.state is not ServiceState.PAUSED:
            log.warning("cannot resume watcher while %s", self.state.value)
            return False
        self.state = ServiceState.ACTIVE
        log.info("watcher resumed")
        self.evaluate()
        return True

    def stop(self) -> None:
        if self.state is ServiceState.STOPPED:
            return
        self.state = ServiceState.STOPPED
        log.info("watcher stopped")
        if self.on_stop is not None:
            self.on_stop()

    def on_power_source_changed(self) -> None:
        if self.state is ServiceState.PAUSED:
            log.debug("power source changed while paused, ignoring")
            return
        if self.state is ServiceState.ACTIVE:
            self.evaluate()

    def evaluate(self) -> Optional[PolicyResult]:
        """
        Runs one detection and policy cycle.

        Errors stay inside this cycle; the watcher state is never changed
        by a failed evaluation.
        """
        try:
            source: PowerSource = self.detector.detect()
            result = self.engine.apply_policy(source)
        except Exception:
            log.exception("power profile evaluation failed")
            return None

        self.last_result = result
        # a NOOP with a profile means the policy profile was already active
        if result.profile is not None:
            self.last_applied = result.profile
        elif result.outcome is ApplyOutcome.FAILED:
            log.debug("keeping current profile on %s", source.value)
        return result

    def status(self) -> Dict[str, str]:
        result = self.last_result
        return {
            "state": self.state.value,
            "last_applied": self.last_applied or "",
            "last_outcome": result.outcome.value if result else "",
            "last_source": result.source.value if result else "",
        }
