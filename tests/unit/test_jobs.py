"""Unit tests for background jobs."""

import asyncio
from pathlib import Path

import pytest

from codemaker.core.jobs import JobRunner
from codemaker.models.domain.jobs import FileOutcome, JobReport


class TestJobReport:
    """Test job report bookkeeping."""

    def test_record_and_totals(self):
        report = JobReport(title="Generating code")
        report.record(Path("a.py"), FileOutcome.PROCESSED)
        report.record(Path("b.py"), FileOutcome.FAILED)
        report.record(Path("c.py"), FileOutcome.SKIPPED)

        assert report.processed == [Path("a.py")]
        assert report.failed == [Path("b.py")]
        assert report.skipped == [Path("c.py")]
        assert report.total == 3
        assert report.success is False


class TestJobRunner:
    """Test running and cancelling jobs."""

    @pytest.mark.asyncio
    async def test_run_reports_progress(self):
        seen = []
        runner = JobRunner(on_progress=lambda path, outcome: seen.append((path, outcome)))

        async def work(job):
            job.record(Path("a.py"), FileOutcome.PROCESSED)

        report = await runner.run("Generating code", work)

        assert report.title == "Generating code"
        assert report.success is True
        assert seen == [(Path("a.py"), FileOutcome.PROCESSED)]
        assert runner.current.running is False

    @pytest.mark.asyncio
    async def test_cancel(self):
        runner = JobRunner()
        started = asyncio.Event()

        async def work(job):
            job.record(Path("a.py"), FileOutcome.PROCESSED)
            started.set()
            await asyncio.Event().wait()

        task = asyncio.create_task(runner.run("Generating code", work))
        await started.wait()

        assert runner.current.cancel() is True
        with pytest.raises(asyncio.CancelledError):
            await task

        assert runner.current.report.cancelled is True
        assert runner.current.report.processed == [Path("a.py")]
        assert runner.current.cancel() is False
