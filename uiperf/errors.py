"""Custom exceptions for uiperf."""


class UiperfError(Exception):
    """Base exception for uiperf."""

    pass


class BaselineNotFoundError(UiperfError, FileNotFoundError):
    """Baseline file does not exist."""

    pass


class BaselineParseError(UiperfError, ValueError):
    """Baseline file is not valid JSON or does not match the expected shape."""

    pass


class ReportParseError(UiperfError, ValueError):
    """A persisted report could not be parsed."""

    pass


class AuditError(UiperfError):
    """The Lighthouse audit could not be run or produced no usable output."""

    pass
