"""Background job domain models."""

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field


class FileOutcome(str, Enum):
    """Result of processing one file."""

    PROCESSED = "processed"
    SKIPPED = "skipped"
    FAILED = "failed"


class JobReport(BaseModel):
    """Summary of a background processing job."""

    title: str
    processed: list[Path] = Field(default_factory=list)
    skipped: list[Path] = Field(default_factory=list)
    failed: list[Path] = Field(default_factory=list)
    cancelled: bool = False
    error: str | None = None

    def record(self, path: Path, outcome: FileOutcome) -> None:
        """Record the outcome of one file."""
        getattr(self, outcome.value).append(path)

    @property
    def total(self) -> int:
        return len(self.processed) + len(self.skipped) + len(self.failed)

    @property
    def success(self) -> bool:
        return not self.cancelled and self.error is None and not self.failed


__all__ = ["FileOutcome", "JobReport"]
