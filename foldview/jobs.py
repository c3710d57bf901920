"""Background file-mutation jobs reported back through a message queue.

``JobQueue.submit`` starts one daemon worker thread per job. Workers only
post ``JobUpdate`` messages; the owner drains them with ``poll()`` on its own
thread and refreshes its ``Browser`` once a job completes.
"""

from __future__ import annotations

import logging
import shutil
import threading
import time
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from queue import Empty, Queue

from send2trash import send2trash

from .archive import extract_archive

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CopyJob:
    src: Path
    dest: Path

    @property
    def description(self) -> str:
        return f"Copy {self.src.name} -> {self.dest.name}"


@dataclass(frozen=True)
class MoveJob:
    src: Path
    dest: Path

    @property
    def description(self) -> str:
        return f"Move {self.src.name} -> {self.dest.name}"


@dataclass(frozen=True)
class TrashJob:
    path: Path

    @property
    def description(self) -> str:
        return f"Trash {self.path.name}"


@dataclass(frozen=True)
class ExtractJob:
    archive: Path
    dest: Path

    @property
    def description(self) -> str:
        return f"Extract {self.archive.name}"


JobKind = CopyJob | MoveJob | TrashJob | ExtractJob


class JobStatus(Enum):
    PENDING = "pending"
    RUNNING = "running"
    COMPLETE = "complete"
    FAILED = "failed"


@dataclass
class Job:
    id: int
    kind: JobKind
    status: JobStatus = JobStatus.PENDING
    error: str | None = None
    created_at: float = field(default_factory=time.monotonic)
    completed_at: float | None = None

    @property
    def description(self) -> str:
        return self.kind.description

    def is_active(self) -> bool:
        return self.status in (JobStatus.PENDING, JobStatus.RUNNING)

    def is_complete(self) -> bool:
        return self.status is JobStatus.COMPLETE

    def is_failed(self) -> bool:
        return self.status is JobStatus.FAILED


@dataclass(frozen=True)
class JobUpdate:
    """One worker-to-owner message."""

    job_id: int
    status: JobStatus
    error: str | None = None


def copy_path(src: Path, dest: Path) -> None:
    if src.is_dir() and not src.is_symlink():
        shutil.copytree(src, dest, symlinks=True)
    else:
        shutil.copy2(src, dest, follow_symlinks=False)


def run_job(kind: JobKind) -> None:
    """Perform one job synchronously; errors propagate to the caller."""
    if isinstance(kind, CopyJob):
        copy_path(kind.src, kind.dest)
    elif isinstance(kind, MoveJob):
        shutil.move(str(kind.src), str(kind.dest))
    elif isinstance(kind, TrashJob):
        send2trash(str(kind.path))
    elif isinstance(kind, ExtractJob):
        extract_archive(kind.archive, kind.dest)
    else:
        raise TypeError(f"unsupported job kind: {kind!r}")


class JobQueue:
    """Job table plus the update channel shared with worker threads."""

    def __init__(self) -> None:
        self._jobs: list[Job] = []
        self._next_id = 0
        self._updates: Queue[JobUpdate] = Queue()
        # Applied by wait() but not yet returned from poll().
        self._unreported: list[JobUpdate] = []

    def submit(self, kind: JobKind) -> int:
        """Record ``kind`` as a pending job and start its worker."""
        job_id = self._next_id
        self._next_id += 1
        self._jobs.append(Job(id=job_id, kind=kind))
        worker = threading.Thread(
            target=self._worker,
            args=(job_id, kind),
            name=f"foldview-job-{job_id}",
            daemon=True,
        )
        worker.start()
        return job_id

    def _worker(self, job_id: int, kind: JobKind) -> None:
        self._updates.put(JobUpdate(job_id, JobStatus.RUNNING))
        try:
            run_job(kind)
        except Exception as exc:
            logger.warning("%s failed: %s", kind.description, exc)
            self._updates.put(JobUpdate(job_id, JobStatus.FAILED, str(exc)))
            return
        self._updates.put(JobUpdate(job_id, JobStatus.COMPLETE))

    def poll(self) -> list[JobUpdate]:
        """Drain pending updates without blocking and apply them to the table.

        Updates consumed earlier by ``wait()`` are returned first, so every
        update reaches the caller exactly once.
        """
        drained = self._unreported
        self._unreported = []
        while True:
            try:
                update = self._updates.get_nowait()
            except Empty:
                break
            self._apply(update)
            drained.append(update)
        return drained

    def wait(self, job_id: int, timeout: float | None = None) -> Job | None:
        """Block until ``job_id`` finishes or ``timeout`` elapses, then return it."""
        deadline = None if timeout is None else time.monotonic() + timeout
        while True:
            job = self.get(job_id)
            if job is None or not job.is_active():
                return job
            remaining = None if deadline is None else deadline - time.monotonic()
            if remaining is not None and remaining <= 0:
                return job
            try:
                update = self._updates.get(timeout=remaining)
            except Empty:
                return self.get(job_id)
            self._apply(update)
            self._unreported.append(update)

    def _apply(self, update: JobUpdate) -> None:
        job = self.get(update.job_id)
        if job is None:
            return
        job.status = update.status
        if update.status is JobStatus.FAILED:
            job.error = update.error
        if update.status in (JobStatus.COMPLETE, JobStatus.FAILED):
            job.completed_at = time.monotonic()

    def get(self, job_id: int) -> Job | None:
        for job in self._jobs:
            if job.id == job_id:
                return job
        return None

    def all_jobs(self) -> list[Job]:
        return list(self._jobs)

    def active_jobs(self) -> list[Job]:
        return [job for job in self._jobs if job.is_active()]

    def failed_jobs(self) -> list[Job]:
        return [job for job in self._jobs if job.is_failed()]

    def has_active_jobs(self) -> bool:
        return any(job.is_active() for job in self._jobs)

    def clear_finished(self, max_age_seconds: float = 0.0) -> None:
        """Forget completed jobs that finished more than ``max_age_seconds`` ago."""
        now = time.monotonic()
        self._jobs = [
            job
            for job in self._jobs
            if not (job.is_complete() and job.completed_at is not None and now - job.completed_at >= max_age_seconds)
        ]


__all__ = [
    "CopyJob",
    "MoveJob",
    "TrashJob",
    "ExtractJob",
    "JobKind",
    "JobStatus",
    "Job",
    "JobUpdate",
    "JobQueue",
    "copy_path",
    "run_job",
]
