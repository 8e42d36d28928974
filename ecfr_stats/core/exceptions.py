"""
Error taxonomy for the eCFR agency statistics system.

``RemoteFetchError`` and ``TitleNotFoundError`` abort an aggregation call.
``VersionHistoryUnavailable`` never leaves the version history resolver;
it is turned into an empty change list there.
"""

from typing import Optional


class EcfrStatsError(Exception):
    """Base class for all errors raised by this package."""


class RemoteFetchError(EcfrStatsError):
    """The eCFR repository did not return a usable response."""

    def __init__(self, uri: str, reason: str, status_code: Optional[int] = None):
        self.uri = uri
        self.reason = reason
        self.status_code = status_code
        if status_code is not None:
            message = f"{status_code} {reason} for {uri}"
        else:
            message = f"{reason} for {uri}"
        super().__init__(message)


class TitleNotFoundError(EcfrStatsError):
    """The requested title is not in the title catalog."""

    def __init__(self, title_number: int, detail: str = "not found in title catalog"):
        self.title_number = title_number
        super().__init__(f"Title {title_number} {detail}")


class VersionHistoryUnavailable(EcfrStatsError):
    """A title's version list could not be fetched or parsed."""

    def __init__(self, title_number: int, cause: Optional[BaseException] = None):
        self.title_number = title_number
        self.cause = cause
        detail = f": {cause}" if cause is not None else ""
        super().__init__(f"Version history unavailable for title {title_number}{detail}")
