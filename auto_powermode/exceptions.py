class AutoPowerModeError(Exception):
    """Base exception for auto-powermode errors."""


class ProfileServiceError(AutoPowerModeError):
    """The power profile service could not apply or report a profile."""

    def __init__(self, message:str, profile:str|None = None) -> None:
        super().__init__(message)
        self.message = message
        self.profile = profile


class ServiceUnreachable(ProfileServiceError):
    """power-profiles-daemon (or its client binary) is not reachable."""


class UnsupportedProfileName(ProfileServiceError):
    """The service rejected the requested profile name."""


class MissingDependency(AutoPowerModeError):
    """A required collaborator binary is not installed."""

    def __init__(self, binaries:list[str]) -> None:
        super().__init__("Missing required commands: " + " ".join(binaries))
        self.binaries = binaries
