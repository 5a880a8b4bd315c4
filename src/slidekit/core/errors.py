"""Error kinds raised by the SDK.

Callers (the tool server, or any UI) turn these into user-visible messages.
"""


class SlideKitError(Exception):
    """Base class for all SDK errors."""


class ResourceUnavailable(SlideKitError):
    """A background image could not be fetched or decoded."""

    def __init__(self, source: str, reason: str):
        self.source = source
        self.reason = reason
        super().__init__(f"Image unavailable ({_short(source)}): {reason}")


class PreconditionFailed(SlideKitError):
    """An operation was requested while a required condition does not hold."""


class ExportInProgress(PreconditionFailed):
    """Another export is still using the rasterization surface."""


def _short(source: str, limit: int = 60) -> str:
    # data: URIs can be megabytes long
    return source if len(source) <= limit else source[:limit] + "..."
