"""Exceptions raised by the Jenkins status client."""

from __future__ import annotations


class JenkinsStatusError(Exception):
    """Base class for every error raised by this package."""


class FetchError(JenkinsStatusError):
    """A request to the Jenkins server did not produce usable data."""


class NetworkError(FetchError):
    """Connection, DNS or timeout failure before a response arrived."""


class ParseError(FetchError):
    """The response body does not have the expected shape."""


class UnexpectedStatus(FetchError):
    """The server answered with a non-2xx HTTP status."""

    def __init__(self, status_code: int, message: str = "") -> None:
        self.status_code = status_code
        super().__init__(message or f"Unexpected HTTP status {status_code}")


class NoSnapshotError(JenkinsStatusError):
    """A query was issued before the first successful refresh."""

    def __init__(self) -> None:
        super().__init__("No Jenkins status has been fetched yet; call refresh() first.")
