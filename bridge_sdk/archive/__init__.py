"""Upload archives for completed activities.

ArchiveBuilder turns an ActivityResult into an ArchiveBundle, using the
ResultAdapter to convert each result item. ArchiveWriter persists the
bundle as a zip file.
"""

from bridge_sdk.archive.adapter import ArchivableResultSource, ResultAdapter
from bridge_sdk.archive.builder import ArchiveBuilder, ArchiveBuildResult
from bridge_sdk.archive.models import (
    INFO_FILENAME,
    METADATA_FILENAME,
    ActivityReference,
    ActivityResult,
    ArchivableArtifact,
    ArchiveBundle,
    ArchiveInfo,
    ArchiveMetadata,
    DataResult,
    FileResult,
    RecordResult,
    ResultItem,
    ScheduleReference,
    StepResult,
    SurveyReference,
    TaskReference,
)
from bridge_sdk.archive.writer import ArchiveWriter

__all__ = [
    "INFO_FILENAME",
    "METADATA_FILENAME",
    "ActivityReference",
    "ActivityResult",
    "ArchivableArtifact",
    "ArchivableResultSource",
    "ArchiveBuildResult",
    "ArchiveBuilder",
    "ArchiveBundle",
    "ArchiveInfo",
    "ArchiveMetadata",
    "ArchiveWriter",
    "DataResult",
    "FileResult",
    "RecordResult",
    "ResultAdapter",
    "ResultItem",
    "ScheduleReference",
    "StepResult",
    "SurveyReference",
    "TaskReference",
]
