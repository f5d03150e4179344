from __future__ import annotations


class TimelineError(Exception):
    """Base class for pipeline failures that abort a load/render pass."""


class FetchError(TimelineError):
    """A single fetch attempt failed (bad status or unparsable body)."""


class CriticalDataError(TimelineError):
    """The mandatory document could not be loaded after every retry."""

    def __init__(self, identifier: str, last_error: str) -> None:
        self.identifier = identifier
        self.last_error = last_error
        super().__init__(f"Failed to load critical data file: {identifier}. Last error: {last_error}")


class TemplateTimeoutError(TimelineError):
    """Required templates did not compile within the readiness timeout."""


class RenderPreconditionError(TimelineError):
    """Rendering cannot start, e.g. no primary data is available."""
