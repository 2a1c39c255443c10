import logging
from subprocess import CalledProcessError, TimeoutExpired, run
from typing import Protocol

from auto_powermode.exceptions import ProfileServiceError, ServiceUnreachable, UnsupportedProfileName
from auto_powermode.globals import POWERPROFILESCTL, POWERPROFILESCTL_TIMEOUT
from auto_powermode.types import ApplyOutcome

log = logging.getLogger(__name__)

# stderr fragments powerprofilesctl prints when power-profiles-daemon is not on the bus
UNREACHABLE_MARKERS = (
    "ServiceUnknown",
    "NameHasNoOwner",
    "Failed to communicate",
    "Could not connect",
    "No such interface",
)


class ProfileBackend(Protocol):
    def get(self) -> str: ...
    def set(self, profile: str) -> None: ...


class PowerProfilesCtl:
    """
    Talks to power-profiles-daemon through the powerprofilesctl binary.

    Both calls raise ServiceUnreachable or UnsupportedProfileName instead of
    subprocess errors.
    """

    def __init__(self, binary: str = POWERPROFILESCTL, timeout: float = POWERPROFILESCTL_TIMEOUT) -> None:
        self.binary = binary
        self.timeout = timeout

    def _run(self, *args: str) -> str:
        try:
            result = run(
                [self.binary, *args],
                capture_output=True,
                text=True,
                check=True,
                timeout=self.timeout,
            )
        except FileNotFoundError as e:
            raise ServiceUnreachable(f"{self.binary} not found") from e
        except TimeoutExpired as e:
            raise ServiceUnreachable(f"{self.binary} {' '.join(args)} timed out") from e
        return result.stdout.strip()

    def get(self) -> str:
        try:
            profile = self._run("get")
        except CalledProcessError as e:
            raise ServiceUnreachable((e.stderr or "").strip() or str(e)) from e
        if not profile:
            raise ServiceUnreachable(f"{self.binary} get returned nothing")
        return profile

    def set(self, profile: str) -> None:
        try:
            self._run("set", profile)
        except CalledProcessError as e:
            stderr = (e.stderr or "").strip()
            if any(marker in stderr for marker in UNREACHABLE_MARKERS):
                raise ServiceUnreachable(stderr, profile) from e
            raise UnsupportedProfileName(stderr or f"profile {profile!r} rejected", profile) from e


class ProfileController:
    """
    Idempotent compare-and-set wrapper around the power profile service.

    Nothing here retries; a FAILED outcome is left to the policy engine,
    which decides whether another candidate should be tried.
    """

    def __init__(self, backend: ProfileBackend | None = None) -> None:
        self.backend: ProfileBackend = backend if backend is not None else PowerProfilesCtl()

    def current_profile(self) -> str | None:
        """
        Returns the active profile name, or None when the service can't be reached.
        """
        try:
            return self.backend.get()
        except ProfileServiceError as e:
            log.debug("unable to read current profile: %s", e)
            return None

    def set_profile(self, target: str) -> ApplyOutcome:
        """
        Applies `target` unless it is already active.

        :param target: profile name understood by the service
        :return: NOOP if nothing had to change, APPLIED on success, FAILED otherwise
        """
        if self.current_profile() == target:
            return ApplyOutcome.NOOP

        try:
            self.backend.set(target)
        except ServiceUnreachable as e:
            log.warning("profile service unreachable, could not set %s: %s", target, e)
            return ApplyOutcome.FAILED
        except UnsupportedProfileName as e:
            log.warning("profile %s not accepted: %s", target, e)
            return ApplyOutcome.FAILED

        log.info("Set power profile: %s", target)
        return ApplyOutcome.APPLIED
