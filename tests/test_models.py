"""Tests for the status records."""

from __future__ import annotations

import json

import pytest
from pydantic import ValidationError

from jenkins_status.errors import ParseError
from jenkins_status.models import Job, JobStatus, StatusSnapshot, View


class TestStatusSnapshot:
    def test_from_json(self, payload):
        snapshot = StatusSnapshot.from_json(json.dumps(payload))

        assert [job.name for job in snapshot.jobs] == ["build-a", "build-b", "deploy"]
        assert [view.name for view in snapshot.views] == ["All", "Builds"]
        assert snapshot.primary_view.name == "All"

    def test_missing_lists_are_empty(self):
        snapshot = StatusSnapshot.from_json("{}")

        assert snapshot.jobs == ()
        assert snapshot.views == ()
        assert snapshot.primary_view is None

    def test_null_lists_are_empty(self):
        snapshot = StatusSnapshot.from_json('{"jobs": null, "views": null}')

        assert snapshot.jobs == ()
        assert snapshot.views == ()

    def test_not_json(self):
        with pytest.raises(ParseError):
            StatusSnapshot.from_json("<html>Jenkins is starting</html>")

    def test_wrong_shape(self):
        with pytest.raises(ParseError):
            StatusSnapshot.from_json('{"jobs": [{"color": "blue"}]}')

    def test_top_level_list(self):
        with pytest.raises(ParseError):
            StatusSnapshot.from_json("[]")

    def test_frozen(self, snapshot):
        with pytest.raises(ValidationError):
            snapshot.jobs = ()


class TestJob:
    def test_fields(self, snapshot):
        job = snapshot.jobs[0]

        assert job.display_name == "Build A"
        assert job.description == "Main build"
        assert job.last_build.number == 5
        assert job.last_build.url.endswith("/job/build-a/5/")
        assert job.last_unstable_build is None
        assert [b.number for b in job.builds] == [5, 4, 3]

    def test_defaults(self):
        job = Job.model_validate({"name": "bare"})

        assert job.display_name == "bare"
        assert job.url == ""
        assert job.color == ""
        assert job.description == ""
        assert job.last_build is None
        assert job.builds == ()

    def test_null_description(self, snapshot):
        assert snapshot.jobs[1].description == ""

    def test_build_ref_without_url(self):
        job = Job.model_validate({"name": "x", "lastBuild": {"number": 5}})

        assert job.last_build.number == 5
        assert job.last_build.url == ""

    @pytest.mark.parametrize(
        "color, status, building",
        [
            ("blue", JobStatus.SUCCESS, False),
            ("blue_anime", JobStatus.SUCCESS, True),
            ("red", JobStatus.FAILED, False),
            ("red_anime", JobStatus.FAILED, True),
            ("yellow", JobStatus.UNSTABLE, False),
            ("aborted", JobStatus.ABORTED, False),
            ("notbuilt", JobStatus.NOT_BUILT, False),
            ("grey", JobStatus.NOT_BUILT, False),
            ("disabled", JobStatus.DISABLED, False),
            ("", JobStatus.UNKNOWN, False),
            ("purple", JobStatus.UNKNOWN, False),
        ],
    )
    def test_status_from_color(self, color, status, building):
        job = Job.model_validate({"name": "x", "color": color})

        assert job.status is status
        assert job.building is building

    def test_health(self, snapshot):
        assert snapshot.jobs[0].health == 80
        assert snapshot.jobs[1].health is None


class TestView:
    def test_jobs_are_references(self, snapshot):
        view = snapshot.views[1]

        assert [ref.name for ref in view.jobs] == ["build-b", "gone", "build-a"]

    def test_null_jobs(self):
        assert View.model_validate({"name": "Empty", "jobs": None}).jobs == ()
