"""Lookup of a job's builds by number or by special name (last, last failed, ...)."""

from __future__ import annotations

from enum import Enum

from jenkins_status.models import BuildRef, Job


class SpecialBuild(str, Enum):
    """Named builds Jenkins tracks for every job.

    Each value is the name of the job field holding that build.
    """

    FIRST = "firstBuild"
    LAST = "lastBuild"
    LAST_COMPLETED = "lastCompletedBuild"
    LAST_FAILED = "lastFailedBuild"
    LAST_STABLE = "lastStableBuild"
    LAST_UNSTABLE = "lastUnstableBuild"
    LAST_SUCCESSFUL = "lastSuccessfulBuild"
    LAST_UNSUCCESSFUL = "lastUnsuccessfulBuild"

    @property
    def field_name(self) -> str:
        """Attribute of :class:`Job` holding this build."""
        return self.name.lower() + "_build"

    @classmethod
    def parse(cls, text: str) -> SpecialBuild:
        """Accept ``LAST_FAILED``, ``lastFailedBuild``, ``last-failed`` or ``last failed``.

        Raises:
            ValueError: If *text* names no special build.
        """
        key = text.strip().replace("-", "_").replace(" ", "_").upper()
        if key in cls.__members__:
            return cls[key]
        for member in cls:
            if member.value.lower() == text.strip().lower():
                return member
        names = ", ".join(m.name.lower() for m in cls)
        raise ValueError(f"Unknown build selector '{text}'. Expected a build number or one of: {names}")


BuildSelector = int | SpecialBuild


def special_builds(job: Job) -> dict[SpecialBuild, BuildRef | None]:
    return {special: getattr(job, special.field_name) for special in SpecialBuild}


def numbered_builds(job: Job) -> dict[int, BuildRef]:
    return {build.number: build for build in job.builds}


def builds(job: Job) -> tuple[dict[SpecialBuild, BuildRef | None], dict[int, BuildRef]]:
    """Return the special builds and the numbered builds of *job*."""
    return special_builds(job), numbered_builds(job)


def resolve_build(job: Job, selector: BuildSelector) -> BuildRef | None:
    """Find the build *selector* points at.

    ``None`` is a normal answer: a job that never failed has no last failed
    build, and old builds drop out of the build list.

    Raises:
        TypeError: If *selector* is neither a build number nor a SpecialBuild.
    """
    if isinstance(selector, SpecialBuild):
        return special_builds(job)[selector]
    if isinstance(selector, bool) or not isinstance(selector, int):
        raise TypeError(f"Build selector must be an int or SpecialBuild, got {type(selector).__name__}")
    return numbered_builds(job).get(selector)
