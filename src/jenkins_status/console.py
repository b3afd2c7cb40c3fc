"""Console log retrieval."""

from __future__ import annotations

import logging

import jenkins

from jenkins_status import transport

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30


class ConsoleFetcher:
    """Fetch the plain-text console output of builds."""

    def __init__(self, connection: jenkins.Jenkins) -> None:
        self._connection = connection

    def fetch(self, job_name: str, build_number: int) -> str:
        """Return the console text of a build exactly as the server sent it.

        Carriage returns and ANSI sequences are left for the caller to
        render. There is no retry.

        Raises:
            NetworkError, UnexpectedStatus: If the request fails.
        """
        url = transport.build_url(
            self._connection,
            transport.BUILD_CONSOLE_OUTPUT,
            job_path=transport.job_path(job_name),
            number=build_number,
        )
        response = transport.send(self._connection, "GET", url, allow_empty=True)
        text = "" if response is None else response.text
        logger.debug("Fetched %d characters of console for %s #%d", len(text), job_name, build_number)
        return text


def fetch_console(
    base_url: str,
    job_name: str,
    build_number: int,
    username: str | None = None,
    password: str | None = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> str:
    """One-off console fetch without a :class:`~jenkins_status.client.JenkinsClient`."""
    connection = jenkins.Jenkins(base_url, username=username, password=password, timeout=timeout)
    return ConsoleFetcher(connection).fetch(job_name, build_number)
