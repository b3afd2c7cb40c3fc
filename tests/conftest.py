"""Shared fixtures: a sample server status and a mocked python-jenkins connection."""

from __future__ import annotations

import copy
import json
from unittest.mock import MagicMock

import jenkins
import pytest
import requests

from jenkins_status.models import StatusSnapshot

SERVER = "http://jenkins.example/"

STATUS_PAYLOAD = {
    "_class": "hudson.model.Hudson",
    "jobs": [
        {
            "_class": "hudson.model.FreeStyleProject",
            "name": "build-a",
            "displayName": "Build A",
            "url": SERVER + "job/build-a/",
            "color": "blue",
            "description": "Main build",
            "firstBuild": {"number": 1, "url": SERVER + "job/build-a/1/"},
            "lastBuild": {"number": 5, "url": SERVER + "job/build-a/5/"},
            "lastCompletedBuild": {"number": 5, "url": SERVER + "job/build-a/5/"},
            "lastFailedBuild": {"number": 4, "url": SERVER + "job/build-a/4/"},
            "lastStableBuild": {"number": 5, "url": SERVER + "job/build-a/5/"},
            "lastSuccessfulBuild": {"number": 5, "url": SERVER + "job/build-a/5/"},
            "lastUnstableBuild": None,
            "lastUnsuccessfulBuild": {"number": 4, "url": SERVER + "job/build-a/4/"},
            "builds": [
                {"number": 5, "url": SERVER + "job/build-a/5/"},
                {"number": 4, "url": SERVER + "job/build-a/4/"},
                {"number": 3, "url": SERVER + "job/build-a/3/"},
            ],
            "healthReport": [{"score": 80, "description": "Build stability: 1 out of the last 5 builds failed."}],
        },
        {
            "name": "build-b",
            "url": SERVER + "job/build-b/",
            "color": "red_anime",
            "description": None,
            "lastBuild": None,
            "builds": [],
        },
        {"name": "deploy", "url": SERVER + "job/deploy/", "color": "disabled"},
    ],
    "views": [
        {
            "name": "All",
            "url": SERVER,
            "jobs": [{"name": "build-a"}, {"name": "build-b"}, {"name": "deploy"}],
        },
        {
            "name": "Builds",
            "url": SERVER + "view/Builds/",
            "jobs": [{"name": "build-b"}, {"name": "gone"}, {"name": "build-a"}],
        },
    ],
    "primaryView": {
        "name": "All",
        "url": SERVER,
        "jobs": [{"name": "build-a"}, {"name": "build-b"}, {"name": "deploy"}],
    },
}


def make_response(body: str | bytes | dict = b"", status: int = 200, headers: dict | None = None) -> requests.Response:
    """Build a real requests.Response carrying *body*."""
    if isinstance(body, dict):
        body = json.dumps(body)
    if isinstance(body, str):
        body = body.encode("utf-8")
    response = requests.Response()
    response.status_code = status
    response._content = body
    response.encoding = "utf-8"
    response.headers.update(headers or {})
    return response


def http_error(status: int) -> requests.HTTPError:
    response = make_response(b"", status=status)
    return requests.HTTPError(f"{status} Error", response=response)


def wrapped_http_error(status: int) -> jenkins.JenkinsException:
    """What python-jenkins raises for 401/403/500, raised while handling the HTTPError."""
    try:
        try:
            raise http_error(status)
        except requests.HTTPError:
            raise jenkins.JenkinsException(f"Error in request. Possibly authentication failed [{status}]")
    except jenkins.JenkinsException as exc:
        return exc


@pytest.fixture
def payload() -> dict:
    return copy.deepcopy(STATUS_PAYLOAD)


@pytest.fixture
def snapshot(payload) -> StatusSnapshot:
    return StatusSnapshot.model_validate(payload)


@pytest.fixture
def connection() -> MagicMock:
    """Return a MagicMock that replaces jenkins.Jenkins."""
    conn = MagicMock(spec=jenkins.Jenkins)
    conn.server = SERVER
    conn.build_job_url.side_effect = jenkins.Jenkins(SERVER).build_job_url
    return conn
