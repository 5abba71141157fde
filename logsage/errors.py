"""Error taxonomy for the search/debug pipeline.

Only transport-level failures are raised. Malformed completions and
uncoercible documents are absorbed where they occur (fallback / drop).
"""

from typing import Optional


class LogSageError(Exception):
    """Base class for every error the pipeline surfaces."""


class ConfigurationError(LogSageError):
    """Backend connection details are unusable, e.g. a URL without scheme or host."""


class UnknownSourceError(LogSageError):
    """The caller asked for a backend source tag that is not registered."""

    def __init__(self, source: str):
        self.source = source
        super().__init__(f"Unknown source: {source}")


class UpstreamError(LogSageError):
    """A log backend was unreachable or answered with a non-success status.

    ``status`` is None when no HTTP response was received at all.
    """

    def __init__(self, source: str, message: str, status: Optional[int] = None, body: str = ""):
        self.source = source
        self.status = status
        self.body = body
        detail = f"{source} API error {status}: {body}" if status is not None else f"{source}: {message}"
        super().__init__(detail)


class CompletionError(LogSageError):
    """The text-completion service was unreachable or returned no content."""
