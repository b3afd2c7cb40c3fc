"""Jenkins client construction from environment-based configuration."""

from __future__ import annotations

import os

from jenkins_status.client import JenkinsClient
from jenkins_status.console import DEFAULT_TIMEOUT


def _timeout_from_env() -> float:
    raw = os.environ.get("JENKINS_TIMEOUT", "")
    if not raw:
        return DEFAULT_TIMEOUT
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"JENKINS_TIMEOUT must be a number of seconds, got '{raw}'.") from None


def create_client() -> JenkinsClient:
    """Create a Jenkins status client from environment variables.

    Environment variables:
        JENKINS_URL: Jenkins server URL (required)
        JENKINS_USERNAME: Jenkins username (optional)
        JENKINS_API_TOKEN: Jenkins API token (optional)
        JENKINS_TIMEOUT: HTTP timeout in seconds (optional, default 30)

    Returns:
        A configured client with no status fetched yet.

    Raises:
        ValueError: If JENKINS_URL is not set or JENKINS_TIMEOUT is not a number.
    """
    url = os.environ.get("JENKINS_URL")
    if not url:
        raise ValueError(
            "JENKINS_URL environment variable is required. "
            "Please set it to your Jenkins server URL."
        )
    username = os.environ.get("JENKINS_USERNAME") or None
    token = os.environ.get("JENKINS_API_TOKEN") or None
    return JenkinsClient(url, username=username, password=token, timeout=_timeout_from_env())


# Module-level singleton (lazy); the status snapshot lives as long as it does.
_client: JenkinsClient | None = None


def get_client() -> JenkinsClient:
    """Return the process-wide client, creating it on first use."""
    global _client
    if _client is None:
        _client = create_client()
    return _client


def reset_client() -> None:
    """Forget the process-wide client so the next call re-reads the environment."""
    global _client
    if _client is not None:
        _client.close()
    _client = None
