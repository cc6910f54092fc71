"""Pydantic models for activity results and upload archives.

Inputs (ActivityResult and everything it references) are frozen once
constructed. ArchiveBundle is filled in by the builder and then handed
to the writer for persistence.
"""

from datetime import datetime, timezone
from pathlib import Path
from typing import Annotated, Any, Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator, model_validator

from bridge_sdk.config import SDKConfig
from bridge_sdk.errors import DuplicateArtifactError, InvalidArtifactFilenameError

METADATA_FILENAME = "metadata.json"
INFO_FILENAME = "info.json"


def iso8601(value: datetime) -> str:
    """Render a timestamp as ISO-8601 with millisecond precision.

    Naive datetimes are taken to be UTC.
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.isoformat(timespec="milliseconds")


def check_artifact_filename(filename: str) -> None:
    """Ensure a filename names a single entry at the archive root.

    Raises:
        InvalidArtifactFilenameError: If the name is empty, contains a path
            separator, or is a relative directory reference.
    """
    if not filename or filename in (".", "..") or "/" in filename or "\\" in filename:
        raise InvalidArtifactFilenameError(filename)


class TaskReference(BaseModel):
    """Reference to an active task."""

    identifier: str

    model_config = ConfigDict(frozen=True)


class SurveyReference(BaseModel):
    """Reference to a published survey."""

    guid: str
    created_on: datetime | None = None

    model_config = ConfigDict(frozen=True)


class ActivityReference(BaseModel):
    """The activity a schedule points at: exactly one of task or survey."""

    label: str | None = None
    task: TaskReference | None = None
    survey: SurveyReference | None = None

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def validate_task_xor_survey(self) -> "ActivityReference":
        """Ensure exactly one of task or survey is set."""
        if self.task is not None and self.survey is not None:
            raise ValueError("Cannot set both 'task' and 'survey'; use exactly one")
        if self.task is None and self.survey is None:
            raise ValueError("Must set exactly one of 'task' or 'survey'")
        return self


class ScheduleReference(BaseModel):
    """The scheduled activity a result was recorded against."""

    schedule_identifier: str
    activity: ActivityReference

    model_config = ConfigDict(frozen=True)


class FileResult(BaseModel):
    """A result backed by a file already on disk (e.g. a sensor recording)."""

    kind: Literal["file"] = "file"
    identifier: str
    path: Path
    filename: str | None = None
    content_type: str | None = None

    model_config = ConfigDict(frozen=True)


class RecordResult(BaseModel):
    """A result serialized as a JSON object."""

    kind: Literal["record"] = "record"
    identifier: str
    record: dict[str, Any]

    model_config = ConfigDict(frozen=True)


class DataResult(BaseModel):
    """A result carried as raw bytes."""

    kind: Literal["data"] = "data"
    identifier: str
    data: bytes
    filename: str | None = None

    model_config = ConfigDict(frozen=True)


ResultItem = Annotated[FileResult | RecordResult | DataResult, Field(discriminator="kind")]

RESULT_KINDS = ("file", "record", "data")

_result_item_adapter = TypeAdapter(ResultItem)


class StepResult(BaseModel):
    """Results collected by one step of an activity.

    Mappings tagged with a known `kind` are parsed into result models. Any
    other object is kept as-is and rejected later by the adapter if it
    cannot be archived.
    """

    identifier: str
    results: list[Any] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)

    @field_validator("results", mode="before")
    @classmethod
    def parse_tagged_results(cls, value: Any) -> Any:
        """Parse `{"kind": ...}` mappings through the ResultItem union."""
        if not isinstance(value, (list, tuple)):
            return value
        return [
            _result_item_adapter.validate_python(item)
            if isinstance(item, dict) and item.get("kind") in RESULT_KINDS
            else item
            for item in value
        ]


class ActivityResult(BaseModel):
    """A completed run of a task or survey."""

    identifier: str
    schema_identifier: str
    schema_revision: int = 1
    schedule: ScheduleReference
    task_run_uuid: UUID
    start_date: datetime
    end_date: datetime
    results: list[StepResult] = Field(default_factory=list)
    data_groups: list[str] | None = None

    model_config = ConfigDict(frozen=True)

    @property
    def task_identifier(self) -> str | None:
        """Identifier of the task, if this is a task-based activity."""
        task = self.schedule.activity.task
        return task.identifier if task else None

    @property
    def survey(self) -> SurveyReference | None:
        """The survey reference, if this is a survey-based activity."""
        return self.schedule.activity.survey


class ArchivableArtifact(BaseModel):
    """One named file destined for an archive."""

    kind: Literal["file", "record", "data"]
    filename: str
    payload: Path | dict[str, Any] | bytes
    content_type: str = "application/octet-stream"

    model_config = ConfigDict(frozen=True)


class ArchiveMetadata(BaseModel):
    """Contents of metadata.json."""

    scheduled_activity_guid: str = Field(alias="scheduledActivityGuid")
    task_run_uuid: str = Field(alias="taskRunUUID")
    task_identifier: str | None = Field(alias="taskIdentifier", default=None)
    start_date: str | None = Field(alias="startDate", default=None)
    end_date: str | None = Field(alias="endDate", default=None)
    data_groups: str | None = Field(alias="dataGroups", default=None)

    model_config = ConfigDict(populate_by_name=True)

    def to_dict(self) -> dict[str, Any]:
        """Serialize with wire names, omitting unset keys."""
        return self.model_dump(by_alias=True, exclude_none=True)


class ArchiveInfo(BaseModel):
    """Schema information recorded in info.json."""

    schema_revision: int = Field(alias="schemaRevision")
    survey_guid: str | None = Field(alias="surveyGuid", default=None)
    survey_created_on: str | None = Field(alias="surveyCreatedOn", default=None)

    model_config = ConfigDict(populate_by_name=True)

    def to_dict(self) -> dict[str, Any]:
        """Serialize with wire names, omitting unset keys."""
        return self.model_dump(by_alias=True, exclude_none=True)


class ArchiveBundle(BaseModel):
    """An ordered set of named artifacts plus metadata and info records."""

    reference: str  # schema identifier
    task_run_uuid: str
    created_on: str
    info: ArchiveInfo
    metadata: ArchiveMetadata | None = None
    artifacts: list[ArchivableArtifact] = Field(default_factory=list)
    archive_path: Path | None = None

    def add(self, artifact: ArchivableArtifact) -> None:
        """Append an artifact.

        Raises:
            InvalidArtifactFilenameError: If the filename is not a plain name.
            DuplicateArtifactError: If the filename is already taken.
        """
        check_artifact_filename(artifact.filename)
        if artifact.filename in self.filenames or artifact.filename in (
            METADATA_FILENAME,
            INFO_FILENAME,
        ):
            raise DuplicateArtifactError(artifact.filename)
        self.artifacts.append(artifact)

    def is_empty(self) -> bool:
        """Whether the bundle holds no artifacts besides metadata."""
        return len(self.artifacts) == 0

    @property
    def filenames(self) -> list[str]:
        """Artifact filenames in insertion order (metadata excluded)."""
        return [a.filename for a in self.artifacts]

    def artifact(self, filename: str) -> ArchivableArtifact | None:
        """Get an artifact by its filename."""
        for artifact in self.artifacts:
            if artifact.filename == filename:
                return artifact
        return None

    def info_record(self) -> dict[str, Any]:
        """Build the info.json record, including the file manifest."""
        files = [
            {"filename": a.filename, "timestamp": self.created_on, "contentType": a.content_type}
            for a in self.artifacts
        ]
        if self.metadata is not None:
            files.append(
                {
                    "filename": METADATA_FILENAME,
                    "timestamp": self.created_on,
                    "contentType": "application/json",
                }
            )
        return {"item": self.reference, **self.info.to_dict(), "files": files}

    def write(
        self, directory: Path | str | None = None, config: SDKConfig | None = None
    ) -> Path:
        """Persist the bundle as a zip archive under `directory`.

        Args:
            directory: Target directory. Defaults to `config.archive_directory`.
            config: SDK configuration. Defaults to get_default_config().

        Returns:
            Path to the written archive.

        Raises:
            ArchivePersistError: If writing fails. Nothing is left on disk.
        """
        from bridge_sdk.archive.writer import ArchiveWriter

        self.archive_path = ArchiveWriter(config).write(self, directory)
        return self.archive_path

    def remove(self) -> None:
        """Delete the persisted archive, if any."""
        if self.archive_path is not None:
            self.archive_path.unlink(missing_ok=True)
            self.archive_path = None
