"""Cancellable background jobs for multi-file processing."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from pathlib import Path

from codemaker.models.domain.jobs import FileOutcome, JobReport

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[Path, FileOutcome], None]


class Job:
    """One user-initiated unit of background work."""

    def __init__(self, title: str, on_progress: ProgressCallback | None = None):
        self.title = title
        self.report = JobReport(title=title)
        self.on_progress = on_progress
        self._task: asyncio.Task | None = None

    def record(self, path: Path, outcome: FileOutcome) -> None:
        """Record a file's outcome and notify the progress callback."""
        self.report.record(path, outcome)
        if self.on_progress is not None:
            self.on_progress(path, outcome)

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def cancel(self) -> bool:
        """Request cancellation; files already written stay written."""
        if self._task is None or self._task.done():
            return False
        return self._task.cancel()


class JobRunner:
    """Runs job work as a single cancellable asyncio task."""

    def __init__(self, on_progress: ProgressCallback | None = None):
        self.on_progress = on_progress
        self.current: Job | None = None

    async def run(
        self, title: str, work: Callable[[Job], Awaitable[None]]
    ) -> JobReport:
        """
        Run ``work`` in the background and wait for it.

        Raises:
            asyncio.CancelledError: if the job was cancelled
        """
        job = Job(title, self.on_progress)
        self.current = job
        logger.info(f"{title}: started")

        job._task = asyncio.create_task(work(job))
        try:
            await job._task
        except asyncio.CancelledError:
            job.report.cancelled = True
            raise

        logger.info(
            f"{title}: finished ({len(job.report.processed)} processed, "
            f"{len(job.report.skipped)} skipped, {len(job.report.failed)} failed)"
        )
        return job.report
