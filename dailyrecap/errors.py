"""Error taxonomy shared by sources, the reviewer and the CLI."""


class DailyError(RuntimeError):
    """Base class for every failure the CLI reports to the user."""


class SourceError(DailyError):
    """An activity source could not produce a result."""


class ConfigurationError(SourceError):
    """A required credential or endpoint is missing."""


class TransportError(SourceError):
    """The request did not complete (connection failure, non-2xx status)."""


class DecodeError(SourceError):
    """The response did not have the expected shape."""


class InvalidArgument(SourceError, ValueError):
    """A caller passed an unusable argument, e.g. an empty item id."""


class InputTerminated(DailyError):
    """Standard input closed or became unreadable mid-review."""


class ReportWriteError(DailyError):
    """The summary file could not be created or written."""
