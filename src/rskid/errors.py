"""Exception types raised by rskid."""


class RskidError(Exception):
    """Base class for errors raised by rskid."""


class CommandTooLongError(RskidError):
    """Raised when an assembled command line would exceed its length limit."""

    def __init__(self, step: str, length: int, limit: int):
        self.step = step
        self.length = length
        self.limit = limit
        super().__init__(f"{step} too long ({length} > {limit} characters)")


class ConfigWriteError(RskidError):
    """Raised when a configuration file cannot be written."""

    def __init__(self, path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Error creating config file {path}: {reason}")
