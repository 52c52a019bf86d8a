"""
Background layout parsing.

A :class:`ParseCoordinator` opens a layout file on a worker thread and
publishes either the parsed :class:`LayoutDatabase` or an error message into
two lock-protected :class:`ResultSlot` cells. The render path reads them with
:meth:`ParseCoordinator.poll`, which never blocks on the parse.

Both slots are cleared on the calling thread before a new worker starts, so
a redraw right after :meth:`~ParseCoordinator.open` never shows the previous
file's result.

Known race: if a second file is opened while the first one is still being
parsed, both workers write to the same slots and the one finishing last
wins, whichever file it belongs to. Pass ``discard_stale=True`` to tag writes
with the job id and drop results of superseded jobs instead.

Example:
    coordinator = ParseCoordinator()
    coordinator.open('top.gds')
    ...
    outcome = coordinator.poll()      # once per redraw
    if outcome.is_ready:
        draw(outcome.database)
"""

import itertools
import threading
import time
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Callable, Generic, List, Optional, TypeVar

from chipview.backends.base import LayoutReader
from chipview.errors import LayoutError, OpenError
from chipview.layout.database import LayoutDatabase
from chipview.logging import logger

T = TypeVar('T')


class ResultSlot(Generic[T]):
    """
    Single-value, lock-protected hand-off cell with "take last" semantics.

    A later :meth:`put` overwrites an earlier one. The lock is held only for
    the read or write of the stored value.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._value: Optional[T] = None

    def put(self, value: T) -> None:
        with self._lock:
            self._value = value

    def peek(self) -> Optional[T]:
        with self._lock:
            return self._value

    def clear(self) -> None:
        with self._lock:
            self._value = None

    def is_set(self) -> bool:
        with self._lock:
            return self._value is not None


class JobState(Enum):
    RUNNING = 'running'
    SUCCEEDED = 'succeeded'
    FAILED = 'failed'


@dataclass(eq=False)
class ParseJob:
    """
    One "open file" request.

    Attributes:
        job_id: Increasing id, unique per coordinator
        path: File being parsed
        state: RUNNING until the worker finishes, then SUCCEEDED or FAILED
        error: Error message once FAILED
    """
    job_id: int
    path: Path
    state: JobState = JobState.RUNNING
    error: Optional[str] = None
    started: float = field(default_factory=time.monotonic)
    _done: threading.Event = field(default_factory=threading.Event, init=False, repr=False)

    @property
    def done(self) -> bool:
        return self._done.is_set()

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until the worker finished. Returns False on timeout."""
        return self._done.wait(timeout)

    def _finish(self, state: JobState, error: Optional[str] = None) -> None:
        # The worker leaves RUNNING exactly once
        if self._done.is_set():
            raise RuntimeError(f"Job {self.job_id} already finished")
        self.state = state
        self.error = error
        self._done.set()


class JobSupervisor:
    """
    Starts one worker thread per job and remembers the latest job.

    Superseded jobs are not cancelled; they run to completion. Keeping the
    threads here leaves room for cancellation without changing how jobs
    are submitted.
    """

    def __init__(self, name: str = 'chipview-parse'):
        self.name = name
        self._lock = threading.Lock()
        self._latest: Optional[ParseJob] = None
        self._threads: List[threading.Thread] = []

    @property
    def latest(self) -> Optional[ParseJob]:
        with self._lock:
            return self._latest

    def is_latest(self, job: ParseJob) -> bool:
        with self._lock:
            return self._latest is job

    def submit(self, job: ParseJob, target: Callable[[ParseJob], None]) -> threading.Thread:
        thread = threading.Thread(
            target=target, args=(job,),
            name=f'{self.name}-{job.job_id}', daemon=True,
        )
        with self._lock:
            self._latest = job
            self._threads = [t for t in self._threads if t.is_alive()]
            self._threads.append(thread)
        thread.start()
        return thread

    def active(self) -> int:
        """Number of workers still running."""
        with self._lock:
            return sum(t.is_alive() for t in self._threads)

    def join(self, timeout: Optional[float] = None) -> bool:
        """Wait for all workers. Returns False if any is still running."""
        deadline = None if timeout is None else time.monotonic() + timeout
        with self._lock:
            threads = list(self._threads)
        for t in threads:
            remaining = None if deadline is None else max(0.0, deadline - time.monotonic())
            t.join(remaining)
        return not any(t.is_alive() for t in threads)


class OutcomeStatus(Enum):
    NOT_STARTED = 'not started'
    PENDING = 'pending'
    READY = 'ready'
    ERROR = 'error'


@dataclass(frozen=True)
class ParseOutcome:
    """Snapshot of the coordinator state, as seen by one redraw."""
    status: OutcomeStatus
    path: Optional[Path] = None
    database: Optional[LayoutDatabase] = None
    error: Optional[str] = None

    @property
    def is_ready(self) -> bool:
        return self.status is OutcomeStatus.READY

    @property
    def is_error(self) -> bool:
        return self.status is OutcomeStatus.ERROR

    @property
    def is_pending(self) -> bool:
        return self.status is OutcomeStatus.PENDING


class ParseCoordinator:
    """
    Owns the lifecycle "open a file, parse in the background, publish result".

    Only the coordinator's workers write the result and error slots; the
    render path only reads them through :meth:`poll`.

    Attributes:
        reader: LayoutReader used by the workers (gdstk reader by default)
        discard_stale: Drop results of jobs superseded by a later open()
    """

    def __init__(self, reader: Optional[LayoutReader] = None,
                 discard_stale: bool = False):
        if reader is None:
            from chipview.backends.gds import GDSReader
            reader = GDSReader()
        self.reader = reader
        self.discard_stale = discard_stale

        self.result: ResultSlot[LayoutDatabase] = ResultSlot()
        self.error: ResultSlot[str] = ResultSlot()
        self.supervisor = JobSupervisor()
        self._ids = itertools.count(1)
        self._path: Optional[Path] = None

    # ------------------------------------------------------------------
    # Interaction thread
    # ------------------------------------------------------------------

    def open(self, path: str | Path) -> ParseJob:
        """Start parsing *path* in the background and return immediately."""
        path = Path(path)
        job = ParseJob(job_id=next(self._ids), path=path)

        # Invalidate before the worker exists
        self.result.clear()
        self.error.clear()
        self._path = path

        logger.info(f"Opening {path} (job {job.job_id})")
        self.supervisor.submit(job, self._run)
        return job

    def poll(self) -> ParseOutcome:
        """Current state, without blocking. Safe to call on every redraw."""
        path = self._path
        if path is None:
            return ParseOutcome(OutcomeStatus.NOT_STARTED)
        database = self.result.peek()
        if database is not None:
            return ParseOutcome(OutcomeStatus.READY, path=path, database=database)
        message = self.error.peek()
        if message is not None:
            return ParseOutcome(OutcomeStatus.ERROR, path=path, error=message)
        return ParseOutcome(OutcomeStatus.PENDING, path=path)

    @property
    def current_job(self) -> Optional[ParseJob]:
        return self.supervisor.latest

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Wait for every outstanding worker. Never called by the render path."""
        return self.supervisor.join(timeout)

    # ------------------------------------------------------------------
    # Worker thread
    # ------------------------------------------------------------------

    def _run(self, job: ParseJob) -> None:
        try:
            database = self._parse(job.path)
        except LayoutError as e:
            logger.error(f"Job {job.job_id} failed: {e}")
            self._publish_error(job, str(e))
        except Exception as e:
            logger.exception(f"Job {job.job_id}: unexpected error while parsing {job.path}")
            self._publish_error(job, f"Unexpected error while parsing '{job.path}': {e}")
        else:
            elapsed = time.monotonic() - job.started
            logger.info(f"Job {job.job_id} parsed {job.path.name} in {elapsed:.2f}s: {database!r}")
            self._publish_result(job, database)

    def _parse(self, path: Path) -> LayoutDatabase:
        try:
            stream = open(path, 'rb')
        except OSError as e:
            raise OpenError(path, e.strerror or str(e)) from e
        with stream:
            return self.reader.read_layout(stream)

    def _is_stale(self, job: ParseJob) -> bool:
        if self.discard_stale and not self.supervisor.is_latest(job):
            logger.debug(f"Discarding result of superseded job {job.job_id} ({job.path})")
            return True
        return False

    def _publish_result(self, job: ParseJob, database: LayoutDatabase) -> None:
        if not self._is_stale(job):
            self.result.put(database)
        job._finish(JobState.SUCCEEDED)

    def _publish_error(self, job: ParseJob, message: str) -> None:
        if not self._is_stale(job):
            self.error.put(message)
        job._finish(JobState.FAILED, message)
