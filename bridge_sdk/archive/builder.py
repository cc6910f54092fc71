"""Builder for activity upload archives.

Turns a completed ActivityResult into an ArchiveBundle:
1. Derive metadata.json and the info record from the result.
2. Convert every result item of every step through the ResultAdapter.
3. Refuse to produce a bundle that would only contain metadata.

The build is all-or-nothing: any conversion failure discards the whole
bundle.
"""

import logging
from datetime import datetime, timezone
from typing import Any

import jsonschema
from pydantic import BaseModel

from bridge_sdk.archive.adapter import ResultAdapter
from bridge_sdk.archive.models import (
    ActivityResult,
    ArchivableArtifact,
    ArchiveBundle,
    ArchiveInfo,
    ArchiveMetadata,
    StepResult,
    iso8601,
)
from bridge_sdk.config import SDKConfig, get_default_config
from bridge_sdk.diagnostics import BuildDiagnostics, BuildStatus, DiagnosticError
from bridge_sdk.errors import (
    ArchiveError,
    ArchiveValidationError,
    EmptyArchiveError,
    EmptyResultError,
    UnsupportedResultTypeError,
)

logger = logging.getLogger(__name__)


class ArchiveBuildResult(BaseModel):
    """Result of building an archive for one activity result."""

    bundle: ArchiveBundle | None
    diagnostics: BuildDiagnostics
    success: bool


class ArchiveBuilder:
    """Builds upload archives from activity results.

    Subclasses that need custom payload shaping override `insert()`. An
    override must raise an ArchiveError subclass on failure so the build
    stays all-or-nothing.
    """

    def __init__(
        self,
        config: SDKConfig | None = None,
        adapter: ResultAdapter | None = None,
        json_validation_mapping: dict[str, dict[str, Any]] | None = None,
    ) -> None:
        """Initialize the builder.

        Args:
            config: SDK configuration. Defaults to get_default_config().
            adapter: Result adapter. Defaults to a plain ResultAdapter.
            json_validation_mapping: Optional map of artifact filename to a
                JSON schema that structured records with that name must satisfy.
        """
        self.config = config or get_default_config()
        self.adapter = adapter or ResultAdapter()
        self.json_validation_mapping = json_validation_mapping or {}

    def build(self, result: ActivityResult) -> ArchiveBundle | None:
        """Build an archive bundle, or None if there is nothing valid to archive."""
        return self.build_with_diagnostics(result).bundle

    def build_or_raise(self, result: ActivityResult) -> ArchiveBundle:
        """Build an archive bundle.

        Raises:
            EmptyResultError: If the result has no step results.
            UnsupportedResultTypeError: If any item cannot be archived.
            EmptyArchiveError: If no artifacts were produced.
        """
        bundle = self._new_bundle(result)

        # exit early if nothing to archive
        if not result.results:
            raise EmptyResultError(result.identifier)

        for step_result in result.results:
            for item in step_result.results:
                self.insert(item, step_result, result, bundle)

        # don't insert the metadata if the archive is otherwise empty
        if bundle.is_empty():
            raise EmptyArchiveError(result.identifier)

        bundle.metadata = self.build_metadata(result)
        logger.debug(
            "Built archive for %s with %d artifacts", result.identifier, len(bundle.artifacts)
        )
        return bundle

    def build_with_diagnostics(self, result: ActivityResult) -> ArchiveBuildResult:
        """Build an archive bundle and report why it failed, if it did."""
        diagnostics = BuildDiagnostics(
            activity_identifier=result.identifier,
            task_run_uuid=str(result.task_run_uuid).upper(),
            status=BuildStatus.FAILED,
        )

        try:
            bundle = self.build_or_raise(result)
        except ArchiveError as e:
            logger.warning("Archive build aborted for %s: %s", result.identifier, e)
            diagnostics.errors.append(_diagnostic_from_error(e))
            return ArchiveBuildResult(bundle=None, diagnostics=diagnostics, success=False)

        diagnostics.status = BuildStatus.SUCCESS
        diagnostics.artifacts_total = len(bundle.artifacts)
        return ArchiveBuildResult(bundle=bundle, diagnostics=diagnostics, success=True)

    def insert(
        self,
        item: Any,
        step_result: StepResult,
        activity_result: ActivityResult,
        bundle: ArchiveBundle,
    ) -> None:
        """Convert one result item and add it to the bundle.

        Raises:
            ArchiveError: If the item cannot be converted or added.
        """
        artifact = self.adapter.convert(
            item,
            step_identifier=step_result.identifier,
            activity_identifier=activity_result.identifier,
        )
        self._validate(artifact)
        bundle.add(artifact)

    def build_metadata(self, result: ActivityResult) -> ArchiveMetadata:
        """Derive metadata.json for an activity result."""
        data_groups = None
        if result.data_groups:
            data_groups = ",".join(result.data_groups)

        return ArchiveMetadata(
            scheduled_activity_guid=result.schedule.schedule_identifier,
            task_run_uuid=str(result.task_run_uuid).upper(),
            task_identifier=result.task_identifier,
            start_date=iso8601(result.start_date),
            end_date=iso8601(result.end_date),
            data_groups=data_groups,
        )

    def build_info(self, result: ActivityResult) -> ArchiveInfo:
        """Derive the info record for an activity result."""
        info = ArchiveInfo(schema_revision=result.schema_revision)

        # surveys are matched by guid and created date rather than schema revision
        survey = result.survey
        if survey is not None:
            created_on = survey.created_on or datetime.now(timezone.utc)
            info.survey_guid = survey.guid
            info.survey_created_on = iso8601(created_on)

        return info

    def _new_bundle(self, result: ActivityResult) -> ArchiveBundle:
        return ArchiveBundle(
            reference=result.schema_identifier,
            task_run_uuid=str(result.task_run_uuid).upper(),
            created_on=iso8601(result.end_date),
            info=self.build_info(result),
        )

    def _validate(self, artifact: ArchivableArtifact) -> None:
        schema = self.json_validation_mapping.get(artifact.filename)
        if schema is None or artifact.kind != "record":
            return
        try:
            jsonschema.validate(artifact.payload, schema)
        except jsonschema.ValidationError as e:
            raise ArchiveValidationError(artifact.filename, e.message) from e


def _diagnostic_from_error(error: ArchiveError) -> DiagnosticError:
    stage = "conversion"
    if isinstance(error, EmptyResultError):
        stage = "preflight"
    elif isinstance(error, EmptyArchiveError):
        stage = "packaging"

    step_identifier = None
    item_identifier = None
    details = None
    if isinstance(error, UnsupportedResultTypeError):
        step_identifier = error.step_identifier
        item_identifier = error.item_identifier
        details = {"type_name": error.type_name}

    return DiagnosticError(
        stage=stage,
        code=error.code,
        message=str(error),
        step_identifier=step_identifier,
        item_identifier=item_identifier,
        details=details,
    )
