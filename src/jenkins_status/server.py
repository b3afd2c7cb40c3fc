"""Jenkins Status MCP Server — browse jobs, views and builds via MCP tools."""

from __future__ import annotations

import logging
import os
from typing import Any

from fastmcp import FastMCP

from jenkins_status.builds import SpecialBuild, special_builds
from jenkins_status.client import JenkinsClient
from jenkins_status.errors import JenkinsStatusError
from jenkins_status.jenkins_client import get_client
from jenkins_status.models import BuildRef, Job

logger = logging.getLogger(__name__)

mcp = FastMCP("Jenkins Status MCP Server")


def _format_error(e: Exception) -> dict[str, Any]:
    """Format an exception into a consistent error response."""
    return {"error": True, "message": str(e)}


def _build_entry(build: BuildRef | None) -> dict[str, Any] | None:
    if build is None:
        return None
    return {"number": build.number, "url": build.url}


def _job_entry(job: Job) -> dict[str, Any]:
    return {
        "name": job.name,
        "display_name": job.display_name,
        "color": job.color,
        "status": job.status.value,
        "building": job.building,
        "health": job.health,
        "url": job.url,
    }


def _ensure_status() -> JenkinsClient:
    """Return the shared client, fetching the status on first use."""
    client = get_client()
    if client.snapshot is None:
        client.refresh()
    return client


# ---------------------------------------------------------------------------
# Tool 1: refresh_status
# ---------------------------------------------------------------------------
@mcp.tool
def refresh_status() -> dict[str, Any]:
    """Fetch the current job and view status from Jenkins.

    Returns:
        A dict with the number of jobs and views in the new status.
    """
    try:
        client = get_client()
        snapshot = client.refresh()
        return {
            "success": True,
            "job_count": len(snapshot.jobs),
            "view_count": len(client.view_names()),
        }
    except JenkinsStatusError as e:
        return _format_error(e)
    except ValueError as e:
        return _format_error(e)


# ---------------------------------------------------------------------------
# Tool 2: list_views
# ---------------------------------------------------------------------------
@mcp.tool
def list_views() -> dict[str, Any]:
    """List the Jenkins views, "Primary" first.

    Returns:
        A dict with each view's name and the number of jobs it holds.
    """
    try:
        client = _ensure_status()
        views = [
            {"name": name, "job_count": len(view.jobs)}
            for name, view in client.views().items()
        ]
        return {"success": True, "views": views}
    except JenkinsStatusError as e:
        return _format_error(e)
    except ValueError as e:
        return _format_error(e)


# ---------------------------------------------------------------------------
# Tool 3: list_jobs
# ---------------------------------------------------------------------------
@mcp.tool
def list_jobs(view: str | None = None) -> dict[str, Any]:
    """List Jenkins jobs with their status.

    Args:
        view: Only list the jobs of this view. All jobs are listed when omitted.

    Returns:
        A dict with one entry per job: name, display name, color, decoded
        status, whether a build is running, health score and URL. View
        members that no longer match a job are listed under ``missing``.
    """
    try:
        client = _ensure_status()
        if view is None:
            jobs = list(client.jobs().values())
            missing: list[str] = []
        else:
            selected = client.view(view)
            if selected is None:
                return _format_error(ValueError(f"View '{view}' does not exist."))
            jobs = client.view_jobs(selected)
            missing = [ref.name for ref, job in zip(selected.jobs, jobs) if job is None]

        entries = [_job_entry(job) for job in jobs if job is not None]
        return {
            "success": True,
            "view": view,
            "job_count": len(entries),
            "jobs": entries,
            "missing": missing,
        }
    except JenkinsStatusError as e:
        return _format_error(e)
    except ValueError as e:
        return _format_error(e)


# ---------------------------------------------------------------------------
# Tool 4: get_job
# ---------------------------------------------------------------------------
@mcp.tool
def get_job(job_name: str) -> dict[str, Any]:
    """Get details of a Jenkins job, including its last builds.

    Args:
        job_name: Name of the Jenkins job.

    Returns:
        A dict with the job description, status, every special build
        (first, last, last failed, ...) and the numbers of the listed builds.
    """
    try:
        client = _ensure_status()
        job = client.job(job_name)
        if job is None:
            return _format_error(ValueError(f"Job '{job_name}' does not exist."))

        return {
            "success": True,
            **_job_entry(job),
            "description": job.description,
            "special_builds": {
                special.name.lower(): _build_entry(build)
                for special, build in special_builds(job).items()
            },
            "builds": [build.number for build in job.builds],
        }
    except JenkinsStatusError as e:
        return _format_error(e)
    except ValueError as e:
        return _format_error(e)


# ---------------------------------------------------------------------------
# Tool 5: resolve_build
# ---------------------------------------------------------------------------
@mcp.tool
def resolve_build(job_name: str, selector: str) -> dict[str, Any]:
    """Find a build of a job by number or by name.

    Args:
        job_name: Name of the Jenkins job.
        selector: A build number ("42") or a special build such as "last",
            "last_failed", "last-successful" or "lastStableBuild".

    Returns:
        A dict with the build number and URL, or ``build: None`` when the job
        has no such build.
    """
    try:
        client = _ensure_status()
        job = client.job(job_name)
        if job is None:
            return _format_error(ValueError(f"Job '{job_name}' does not exist."))

        text = selector.strip()
        parsed = int(text) if text.isdigit() else SpecialBuild.parse(text)
        build = client.resolve_build(job, parsed)
        return {
            "success": True,
            "job_name": job_name,
            "selector": selector,
            "build": _build_entry(build),
        }
    except JenkinsStatusError as e:
        return _format_error(e)
    except ValueError as e:
        return _format_error(e)


# ---------------------------------------------------------------------------
# Tool 6: get_build_log
# ---------------------------------------------------------------------------
@mcp.tool
def get_build_log(
    job_name: str,
    build_number: int,
    start_line: int = 0,
    max_lines: int = 100,
    from_end: bool = False,
) -> dict[str, Any]:
    """Get paginated console output for a Jenkins build.

    Supports reading from the beginning or the end of the log.

    Args:
        job_name: Name of the Jenkins job.
        build_number: The build number to fetch logs for.
        start_line: Line offset. When from_end is False, this is the 0-based
            line number to start reading from. When from_end is True, this is
            the number of lines to skip from the very end (0 means start from
            the last line).
        max_lines: Maximum number of lines to return (default 100).
        from_end: If True, read lines from the end of the log instead of the
            beginning.

    Returns:
        A dict with the log content, total line count, the actual start line
        number, and whether more lines are available.
    """
    try:
        client = get_client()
        # splitlines() also breaks on bare carriage returns from progress bars
        all_lines = client.console(job_name, build_number).splitlines()
        total_lines = len(all_lines)

        if from_end:
            end_idx = max(total_lines - start_line, 0)
            begin_idx = max(end_idx - max_lines, 0)
            has_more = begin_idx > 0
        else:
            begin_idx = min(start_line, total_lines)
            end_idx = min(begin_idx + max_lines, total_lines)
            has_more = end_idx < total_lines
        selected = all_lines[begin_idx:end_idx]

        return {
            "success": True,
            "job_name": job_name,
            "build_number": build_number,
            "log": "\n".join(selected),
            "total_lines": total_lines,
            "start_line": begin_idx,
            "lines_returned": len(selected),
            "has_more": has_more,
            "from_end": from_end,
        }
    except JenkinsStatusError as e:
        return _format_error(e)
    except ValueError as e:
        return _format_error(e)


# ---------------------------------------------------------------------------
# Tool 7: trigger_build
# ---------------------------------------------------------------------------
@mcp.tool
def trigger_build(job_name: str, parameters: dict[str, Any] | None = None) -> dict[str, Any]:
    """Trigger a Jenkins job build, optionally with parameters.

    The build is queued and not waited for.

    Args:
        job_name: Full name of the Jenkins job (use '/' for folder paths).
        parameters: Optional dict of build parameters (key-value pairs).

    Returns:
        A dict containing the queue_id of the triggered build, if Jenkins
        reported one.
    """
    try:
        client = get_client()
        queue_id = client.trigger_build(job_name, parameters=parameters)
        return {
            "success": True,
            "job_name": job_name,
            "queue_id": queue_id,
            "message": f"Job '{job_name}' has been triggered.",
        }
    except JenkinsStatusError as e:
        return _format_error(e)
    except ValueError as e:
        return _format_error(e)


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------
def main() -> None:
    logging.basicConfig(
        level=os.environ.get("JENKINS_LOG_LEVEL", "WARNING").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.info("Starting Jenkins Status MCP Server")
    mcp.run()


if __name__ == "__main__":
    main()
