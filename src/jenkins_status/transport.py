"""HTTP requests against a Jenkins server, with errors mapped to FetchError.

Requests go through ``jenkins.Jenkins.jenkins_request`` so authentication,
CSRF crumbs and the connection timeout are handled by python-jenkins.
python-jenkins rewraps 401/403/404/500 responses in its own exceptions; the
original ``requests.HTTPError`` is recovered from the exception chain to
report the real status code.
"""

from __future__ import annotations

import logging
from urllib.parse import quote

import jenkins
import requests

from jenkins_status.errors import NetworkError, ParseError, UnexpectedStatus

logger = logging.getLogger(__name__)

STATUS_INFO = "api/json?depth=1"
BUILD_CONSOLE_OUTPUT = "%(job_path)s/%(number)d/consoleText"


def job_path(job_name: str) -> str:
    """Turn ``folder/job`` into ``job/folder/job/job`` with each segment quoted."""
    segments = [quote(seg, safe="") for seg in job_name.strip("/").split("/")]
    return "job/" + "/job/".join(segments)


def build_url(connection: jenkins.Jenkins, template: str, **params) -> str:
    """Join an endpoint template onto the server URL of *connection*."""
    server = connection.server if connection.server.endswith("/") else connection.server + "/"
    return server + (template % params)


def _status_code(exc: BaseException) -> int | None:
    for candidate in (exc, exc.__cause__, exc.__context__):
        response = getattr(candidate, "response", None)
        status = getattr(response, "status_code", None)
        if status is not None:
            return status
    return None


def send(
    connection: jenkins.Jenkins, method: str, url: str, allow_empty: bool = False
) -> requests.Response | None:
    """Send one request and return the 2xx response.

    Args:
        connection: Connection carrying the server URL, credentials and timeout.
        method: HTTP method.
        url: Absolute URL, usually from :func:`build_url`.
        allow_empty: Return ``None`` instead of failing when a 2xx response
            has no body at all.

    Raises:
        NetworkError: The server could not be reached in time.
        UnexpectedStatus: The server answered with a non-2xx status.
        ParseError: The response was empty and *allow_empty* is false.
    """
    logger.debug("%s %s", method, url)
    try:
        return connection.jenkins_request(requests.Request(method, url))
    except jenkins.NotFoundException as e:
        raise UnexpectedStatus(404, f"Not found: {url}") from e
    except jenkins.TimeoutException as e:
        raise NetworkError(f"Timed out talking to {connection.server}: {e}") from e
    except jenkins.EmptyResponseException as e:
        if allow_empty:
            return None
        raise ParseError(f"Empty response from {url}") from e
    except (jenkins.JenkinsException, requests.HTTPError) as e:
        status = _status_code(e)
        if status is None:
            raise NetworkError(f"Error talking to {connection.server}: {e}") from e
        raise UnexpectedStatus(status, f"HTTP {status} from {url}") from e
    except (requests.ConnectionError, requests.Timeout) as e:
        raise NetworkError(f"Cannot reach Jenkins at {connection.server}: {e}") from e
