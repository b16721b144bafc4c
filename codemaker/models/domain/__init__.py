"""Domain models for CodeMaker."""

from codemaker.models.domain.jobs import *

__all__ = ["FileOutcome", "JobReport"]
