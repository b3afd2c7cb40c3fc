"""Records for the Jenkins ``api/json?depth=1`` response.

Only the fields the status client reads are declared; anything else the
server sends is ignored. Every model is frozen so a snapshot can be shared
between readers without copying.
"""

from __future__ import annotations

import json
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from jenkins_status.errors import ParseError


class _Record(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")


class JobStatus(str, Enum):
    """Status decoded from a job's ``color`` field."""

    SUCCESS = "success"
    FAILED = "failed"
    UNSTABLE = "unstable"
    ABORTED = "aborted"
    NOT_BUILT = "not built"
    DISABLED = "disabled"
    UNKNOWN = "unknown"


_COLOR_STATUS = {
    "blue": JobStatus.SUCCESS,
    "green": JobStatus.SUCCESS,
    "red": JobStatus.FAILED,
    "yellow": JobStatus.UNSTABLE,
    "aborted": JobStatus.ABORTED,
    "grey": JobStatus.NOT_BUILT,
    "notbuilt": JobStatus.NOT_BUILT,
    "nobuilt": JobStatus.NOT_BUILT,
    "disabled": JobStatus.DISABLED,
}

# Jenkins appends this to the color while a build is running.
_RUNNING_SUFFIX = "_anime"


class BuildRef(_Record):
    number: int
    url: str = ""


class HealthReport(_Record):
    score: int
    description: str = ""


class JobRef(_Record):
    """A view's reference to a job, by name only."""

    name: str


def _empty_if_null(value: Any) -> Any:
    return () if value is None else value


class Job(_Record):
    """A job as listed in the server status."""

    name: str
    display_name: str = Field(default="", alias="displayName")
    url: str = ""
    color: str = ""
    description: str = ""
    first_build: BuildRef | None = Field(default=None, alias="firstBuild")
    last_build: BuildRef | None = Field(default=None, alias="lastBuild")
    last_completed_build: BuildRef | None = Field(default=None, alias="lastCompletedBuild")
    last_failed_build: BuildRef | None = Field(default=None, alias="lastFailedBuild")
    last_stable_build: BuildRef | None = Field(default=None, alias="lastStableBuild")
    last_unstable_build: BuildRef | None = Field(default=None, alias="lastUnstableBuild")
    last_successful_build: BuildRef | None = Field(default=None, alias="lastSuccessfulBuild")
    last_unsuccessful_build: BuildRef | None = Field(
        default=None, alias="lastUnsuccessfulBuild"
    )
    builds: tuple[BuildRef, ...] = ()
    health_report: tuple[HealthReport, ...] = Field(default=(), alias="healthReport")

    @model_validator(mode="before")
    @classmethod
    def _default_display_name(cls, data: Any) -> Any:
        if (
            isinstance(data, dict)
            and "name" in data
            and not (data.get("displayName") or data.get("display_name"))
        ):
            data = {**data, "displayName": data["name"]}
        return data

    @field_validator("description", "color", "url", mode="before")
    @classmethod
    def _null_string(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("builds", "health_report", mode="before")
    @classmethod
    def _null_list(cls, value: Any) -> Any:
        return _empty_if_null(value)

    @property
    def building(self) -> bool:
        """True while Jenkins reports a build in progress."""
        return self.color.endswith(_RUNNING_SUFFIX)

    @property
    def status(self) -> JobStatus:
        base = self.color[: -len(_RUNNING_SUFFIX)] if self.building else self.color
        return _COLOR_STATUS.get(base, JobStatus.UNKNOWN)

    @property
    def health(self) -> int | None:
        """Score of the first health report, if the server sent any."""
        if not self.health_report:
            return None
        return self.health_report[0].score


class View(_Record):
    name: str
    url: str = ""
    jobs: tuple[JobRef, ...] = ()

    @field_validator("jobs", mode="before")
    @classmethod
    def _null_list(cls, value: Any) -> Any:
        return _empty_if_null(value)


class StatusSnapshot(_Record):
    """Server state as returned by one successful fetch."""

    jobs: tuple[Job, ...] = ()
    views: tuple[View, ...] = ()
    primary_view: View | None = Field(default=None, alias="primaryView")

    @field_validator("jobs", "views", mode="before")
    @classmethod
    def _null_list(cls, value: Any) -> Any:
        return _empty_if_null(value)

    @classmethod
    def from_json(cls, text: str | bytes) -> StatusSnapshot:
        """Validate a raw response body.

        Raises:
            ParseError: If the body is not JSON or does not match the schema.
        """
        try:
            return cls.model_validate(json.loads(text))
        except ValueError as e:
            raise ParseError(f"Malformed Jenkins status: {e}") from e
