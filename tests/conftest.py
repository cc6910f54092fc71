"""Pytest configuration and shared fixtures."""

from datetime import datetime, timezone
from pathlib import Path
from uuid import UUID

import pytest

from bridge_sdk.archive import (
    ActivityReference,
    ActivityResult,
    DataResult,
    FileResult,
    RecordResult,
    ScheduleReference,
    StepResult,
    SurveyReference,
    TaskReference,
)

TASK_RUN_UUID = UUID("6ba7b810-9dad-11d1-80b4-00c04fd430c8")


@pytest.fixture
def task_schedule() -> ScheduleReference:
    """A schedule pointing at an active task."""
    return ScheduleReference(
        schedule_identifier="schedule-guid-123",
        activity=ActivityReference(label="Tapping", task=TaskReference(identifier="1-Tapping")),
    )


@pytest.fixture
def survey_schedule() -> ScheduleReference:
    """A schedule pointing at a published survey."""
    return ScheduleReference(
        schedule_identifier="schedule-guid-456",
        activity=ActivityReference(
            label="Mood",
            survey=SurveyReference(
                guid="survey-guid-789",
                created_on=datetime(2016, 5, 1, 12, 0, tzinfo=timezone.utc),
            ),
        ),
    )


@pytest.fixture
def recording_file(tmp_path: Path) -> Path:
    """A sensor recording on disk."""
    path = tmp_path / "accel.json"
    path.write_text('{"items": []}')
    return path


@pytest.fixture
def step_results(recording_file: Path) -> list[StepResult]:
    """Step results covering every supported result shape."""
    return [
        StepResult(
            identifier="tapping",
            results=[
                FileResult(identifier="accel", path=recording_file),
                RecordResult(identifier="tapping", record={"tapCount": 42}),
            ],
        ),
        StepResult(
            identifier="audio",
            results=[DataResult(identifier="audio", data=b"\x00\x01", filename="audio.m4a")],
        ),
    ]


@pytest.fixture
def make_activity_result(task_schedule: ScheduleReference):
    """Factory for activity results with sensible defaults."""

    def _make(**overrides) -> ActivityResult:
        fields = {
            "identifier": "Tapping Activity",
            "schema_identifier": "Tapping Activity",
            "schema_revision": 5,
            "schedule": task_schedule,
            "task_run_uuid": TASK_RUN_UUID,
            "start_date": datetime(2016, 6, 1, 9, 0, 0, tzinfo=timezone.utc),
            "end_date": datetime(2016, 6, 1, 9, 5, 30, tzinfo=timezone.utc),
            "results": [],
        }
        fields.update(overrides)
        return ActivityResult(**fields)

    return _make
