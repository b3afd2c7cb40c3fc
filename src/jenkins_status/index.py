"""Job and view lookups derived from a status snapshot.

Nothing here is cached: every function recomputes its table from the
snapshot it is given, so results always match the snapshot exactly.
"""

from __future__ import annotations

from jenkins_status.models import Job, StatusSnapshot, View

PRIMARY_VIEW = "Primary"


def jobs(snapshot: StatusSnapshot) -> dict[str, Job]:
    """Map job names to jobs. A later duplicate name replaces an earlier one."""
    return {job.name: job for job in snapshot.jobs}


def job_names(snapshot: StatusSnapshot) -> list[str]:
    return [job.name for job in snapshot.jobs]


def job(snapshot: StatusSnapshot, name: str) -> Job | None:
    return jobs(snapshot).get(name)


def views(snapshot: StatusSnapshot) -> dict[str, View]:
    """Map view names to views.

    ``"Primary"`` is always present and holds the server's primary view. A
    view literally named ``"Primary"`` in the server's view list replaces it.
    """
    primary = snapshot.primary_view or View(name=PRIMARY_VIEW)
    table = {PRIMARY_VIEW: primary.model_copy(update={"name": PRIMARY_VIEW})}
    for view in snapshot.views:
        table[view.name] = view
    return table


def view_names(snapshot: StatusSnapshot) -> list[str]:
    return list(views(snapshot))


def view_jobs(snapshot: StatusSnapshot, view: View) -> list[Job | None]:
    """Resolve the members of *view*, keeping their order.

    A member that no longer matches a job yields ``None`` at its position.
    """
    table = jobs(snapshot)
    return [table.get(ref.name) for ref in view.jobs]
