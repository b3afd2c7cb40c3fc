"""Client that keeps the latest Jenkins status and answers queries over it."""

from __future__ import annotations

import logging
import threading
from enum import Enum
from typing import Any

import jenkins

from jenkins_status import builds as build_resolver
from jenkins_status import index, transport
from jenkins_status.builds import BuildSelector, SpecialBuild
from jenkins_status.console import DEFAULT_TIMEOUT, ConsoleFetcher
from jenkins_status.errors import NoSnapshotError
from jenkins_status.models import BuildRef, Job, StatusSnapshot, View

logger = logging.getLogger(__name__)


class SnapshotState(str, Enum):
    ABSENT = "absent"
    LOADING = "loading"
    PRESENT = "present"


class JenkinsClient:
    """Poll one Jenkins server and query its job, view and build status.

    ``refresh()`` replaces the snapshot wholesale; every query reads the
    snapshot current at call time. Concurrent refreshes are allowed: each
    one draws a generation number before fetching, and a response is only
    committed if no refresh issued after it has committed already. A stale
    response arriving late is dropped.
    """

    def __init__(
        self,
        base_url: str,
        username: str | None = None,
        password: str | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        connection: jenkins.Jenkins | None = None,
    ) -> None:
        self.base_url = base_url
        self._connection = connection or jenkins.Jenkins(
            base_url, username=username, password=password, timeout=timeout
        )
        self._console = ConsoleFetcher(self._connection)
        self._lock = threading.Lock()
        self._snapshot: StatusSnapshot | None = None
        self._issued = 0
        self._committed = 0
        self._in_flight = 0

    # ------------------------------------------------------------------
    # Fetching
    # ------------------------------------------------------------------
    @property
    def snapshot(self) -> StatusSnapshot | None:
        return self._snapshot

    @property
    def state(self) -> SnapshotState:
        with self._lock:
            if self._in_flight:
                return SnapshotState.LOADING
            return SnapshotState.PRESENT if self._snapshot is not None else SnapshotState.ABSENT

    def refresh(self) -> StatusSnapshot:
        """Fetch ``api/json?depth=1`` and replace the stored snapshot.

        Returns:
            The snapshot current after this refresh. It is a newer one when a
            later refresh finished first.

        Raises:
            NetworkError, UnexpectedStatus, ParseError: The stored snapshot
                is left untouched.
            NoSnapshotError: The client was closed while this refresh was
                in flight.
        """
        with self._lock:
            self._issued += 1
            generation = self._issued
            self._in_flight += 1
        try:
            url = transport.build_url(self._connection, transport.STATUS_INFO)
            response = transport.send(self._connection, "GET", url)
            snapshot = StatusSnapshot.from_json(response.content)
        except Exception:
            logger.debug("Refresh #%d of %s failed", generation, self.base_url)
            with self._lock:
                self._in_flight -= 1
            raise

        with self._lock:
            self._in_flight -= 1
            if generation < self._committed:
                logger.info(
                    "Discarding refresh #%d of %s, #%d already committed",
                    generation,
                    self.base_url,
                    self._committed,
                )
            else:
                self._snapshot = snapshot
                self._committed = generation
                logger.debug(
                    "Refresh #%d of %s: %d jobs, %d views",
                    generation,
                    self.base_url,
                    len(snapshot.jobs),
                    len(snapshot.views),
                )
            if self._snapshot is None:
                raise NoSnapshotError()
            return self._snapshot

    def trigger_build(self, job_name: str, parameters: dict[str, Any] | None = None) -> int | None:
        """Ask Jenkins to build *job_name* without waiting for the build.

        Returns:
            The queue item number when the server reports one.

        Raises:
            NetworkError, UnexpectedStatus: If the request is refused.
        """
        url = self._connection.build_job_url(job_name, parameters)
        response = transport.send(self._connection, "POST", url, allow_empty=True)
        location = response.headers.get("Location", "") if response is not None else ""
        queue_id = location.rstrip("/").rsplit("/", 1)[-1]
        logger.debug("Triggered %s, queue location %r", job_name, location)
        return int(queue_id) if queue_id.isdigit() else None

    def console(self, job_name: str, build_number: int) -> str:
        return self._console.fetch(job_name, build_number)

    def close(self) -> None:
        """Drop the snapshot. Refreshes still in flight are discarded."""
        with self._lock:
            self._issued += 1
            self._committed = self._issued
            self._snapshot = None

    # ------------------------------------------------------------------
    # Queries over the current snapshot
    # ------------------------------------------------------------------
    def _current(self) -> StatusSnapshot:
        snapshot = self._snapshot
        if snapshot is None:
            raise NoSnapshotError()
        return snapshot

    def jobs(self) -> dict[str, Job]:
        return index.jobs(self._current())

    def job_names(self) -> list[str]:
        return index.job_names(self._current())

    def job(self, name: str) -> Job | None:
        return index.job(self._current(), name)

    def views(self) -> dict[str, View]:
        return index.views(self._current())

    def view_names(self) -> list[str]:
        return index.view_names(self._current())

    def view(self, name: str) -> View | None:
        return self.views().get(name)

    def view_jobs(self, view: View | str) -> list[Job | None]:
        """Jobs of *view*, given as a View or a view name.

        An unknown view name yields an empty list.
        """
        snapshot = self._current()
        if isinstance(view, str):
            view = index.views(snapshot).get(view)
            if view is None:
                return []
        return index.view_jobs(snapshot, view)

    def special_builds(self, job: Job) -> dict[SpecialBuild, BuildRef | None]:
        return build_resolver.special_builds(job)

    def builds(self, job: Job) -> tuple[dict[SpecialBuild, BuildRef | None], dict[int, BuildRef]]:
        return build_resolver.builds(job)

    def resolve_build(self, job: Job | str, selector: BuildSelector) -> BuildRef | None:
        """Resolve *selector* against *job*, a Job or a job name.

        An unknown job name resolves to ``None``.
        """
        if isinstance(job, str):
            job = self.job(job)
            if job is None:
                return None
        return build_resolver.resolve_build(job, selector)
