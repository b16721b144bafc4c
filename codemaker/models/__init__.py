"""Centralized model definitions for CodeMaker.

This package contains all Pydantic models organized by domain:
- api/: wire request/response models
- domain/: job and processing models
- config/: configuration models
"""

from codemaker.models.api import *
from codemaker.models.config import *
from codemaker.models.domain import *
