# washer/errors.py


class WasherError(Exception):
    """Base class for washer engine failures."""


class InvalidParameter(WasherError, ValueError):
    """A phase, program or pattern parameter is out of range."""


class DriverUnavailable(WasherError, RuntimeError):
    """Motor or display hardware could not be reached."""


class EngineBusy(WasherError, RuntimeError):
    """A run is already in progress."""
