"""Diagnostics for archive builds.

Records why a build produced no archive so callers that only see a
None result can still report the failure.
"""

from enum import Enum
from typing import Literal

from pydantic import BaseModel, Field


class BuildStatus(str, Enum):
    """Status of an archive build."""

    SUCCESS = "success"  # Bundle built with at least one artifact
    FAILED = "failed"  # Build aborted, no bundle


class DiagnosticError(BaseModel):
    """An error that aborted a build."""

    stage: Literal["preflight", "conversion", "packaging", "persist"]
    code: str  # Error code like "UNSUPPORTED_RESULT_TYPE"
    message: str
    step_identifier: str | None = None
    item_identifier: str | None = None
    details: dict | None = None


class BuildDiagnostics(BaseModel):
    """Diagnostics for one activity result."""

    activity_identifier: str
    task_run_uuid: str
    status: BuildStatus
    errors: list[DiagnosticError] = Field(default_factory=list)
    artifacts_total: int = 0
