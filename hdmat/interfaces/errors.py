"""Exception hierarchy shared by every stage of a conversion."""

from __future__ import annotations


class ConversionError(Exception):
    """Base class for all fatal conversion failures."""


class ConfigurationError(ConversionError):
    """Invalid request detected before anything is written to the store."""


class AmbiguousParameterError(ConfigurationError):
    """A parameter lookup rule matched zero or several catalogue entries."""

    def __init__(self, rule: str, matches: list[str]) -> None:
        self.rule = rule
        self.matches = list(matches)
        if matches:
            detail = f"{len(matches)} entries ({', '.join(repr(m) for m in matches)})"
        else:
            detail = "no entries"
        super().__init__(f"Parameter rule '{rule}' matched {detail}; expected exactly one")


class ArchiveReadError(ConversionError):
    """Reading a vector from the source archive failed."""

    def __init__(
        self,
        message: str,
        *,
        parameter: str | int | None = None,
        timestep: int | None = None,
        position: int | None = None,
    ) -> None:
        self.parameter = parameter
        self.timestep = timestep
        self.position = position
        super().__init__(message)


class SinkWriteError(ConversionError):
    """The destination store could not be written."""
