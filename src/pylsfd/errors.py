"""Exceptions raised by pylsfd."""


class LsfdError(Exception):
    """Base class for fatal pylsfd errors."""


class UnknownColumnError(LsfdError):
    """An output column name did not match any known column."""

    def __init__(self, name: str) -> None:
        super().__init__(f"unknown column: {name}")
        self.name = name


class EnumerationError(LsfdError):
    """The list of running processes could not be read."""


class CommandNameUnavailable(LsfdError):
    """The command name of a process could not be determined."""

    def __init__(self, pid: int) -> None:
        super().__init__(f"failed to get command name of process {pid}")
        self.pid = pid


class CollectorError(LsfdError):
    """A collector worker failed for a reason other than a vanished entity."""
