"""Exceptions raised by the profiling run."""


class ProfilerError(Exception):
    """Base class for errors that abort a profiling run."""


class IOFailure(ProfilerError):
    """The input file could not be opened or read."""


class ParseFailure(ProfilerError):
    """A line is not a valid JSON object for the active backend."""

    def __init__(self, message, line_number=None, backend=None):
        self.line_number = line_number
        self.backend = backend
        if line_number is not None:
            message = f"line {line_number}: {message}"
        super().__init__(message)


class TelemetryFailure(ProfilerError):
    """Memory statistics could not be sampled."""
