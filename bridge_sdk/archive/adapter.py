"""Adapter from result items to archivable artifacts.

The adapter is a pure mapping: it decides the payload shape and target
filename for a result item but never touches the filesystem.
"""

import logging
import mimetypes
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

from pydantic import ValidationError

from bridge_sdk.archive.models import ArchivableArtifact, DataResult, FileResult, RecordResult
from bridge_sdk.errors import UnsupportedResultTypeError

logger = logging.getLogger(__name__)


@runtime_checkable
class ArchivableResultSource(Protocol):
    """Protocol for result objects that know how to archive themselves.

    Implementations return `(payload, filename)` where payload is a `Path`,
    a mapping, or `bytes`, or None if they have nothing to offer.
    """

    identifier: str

    def archivable_result(self, step_identifier: str) -> tuple[Any, str] | None:
        ...


def default_filename(item_identifier: str, step_identifier: str) -> str:
    """Base filename for a result item within a step."""
    if item_identifier == step_identifier:
        return step_identifier
    return f"{step_identifier}.{item_identifier}"


class ResultAdapter:
    """Converts result items into archivable artifacts.

    Supported shapes:
    - file reference (FileResult or a Path payload)
    - structured record (RecordResult or a mapping payload)
    - raw bytes (DataResult or a bytes payload)

    Anything else raises UnsupportedResultTypeError.
    """

    def convert(
        self,
        item: Any,
        step_identifier: str,
        activity_identifier: str | None = None,
    ) -> ArchivableArtifact:
        """Convert a result item to an artifact.

        Args:
            item: The result item.
            step_identifier: Identifier of the step that produced it.
            activity_identifier: Identifier of the activity result, for diagnostics.

        Returns:
            The ArchivableArtifact for this item.

        Raises:
            UnsupportedResultTypeError: If the item has no archivable shape.
        """
        if isinstance(item, FileResult):
            filename = item.filename or item.path.name
            return ArchivableArtifact(
                kind="file",
                filename=filename,
                payload=item.path,
                content_type=item.content_type or _guess_content_type(filename),
            )
        elif isinstance(item, RecordResult):
            return ArchivableArtifact(
                kind="record",
                filename=_with_suffix(default_filename(item.identifier, step_identifier), ".json"),
                payload=dict(item.record),
                content_type="application/json",
            )
        elif isinstance(item, DataResult):
            return ArchivableArtifact(
                kind="data",
                filename=item.filename or default_filename(item.identifier, step_identifier),
                payload=item.data,
            )
        elif isinstance(item, ArchivableResultSource):
            return self._convert_source(item, step_identifier, activity_identifier)

        raise UnsupportedResultTypeError(
            type_name=type(item).__name__,
            item_identifier=getattr(item, "identifier", None),
            step_identifier=step_identifier,
            activity_identifier=activity_identifier,
        )

    def _convert_source(
        self,
        item: ArchivableResultSource,
        step_identifier: str,
        activity_identifier: str | None,
    ) -> ArchivableArtifact:
        """Convert an object that supplies its own payload and filename."""
        archivable = item.archivable_result(step_identifier)
        if not (isinstance(archivable, tuple) and len(archivable) == 2):
            raise self._unsupported(item, archivable, step_identifier, activity_identifier)

        payload, filename = archivable
        if not isinstance(filename, str) or not filename:
            raise self._unsupported(item, filename, step_identifier, activity_identifier)

        try:
            if isinstance(payload, Path):
                return ArchivableArtifact(
                    kind="file",
                    filename=filename,
                    payload=payload,
                    content_type=_guess_content_type(filename),
                )
            elif isinstance(payload, Mapping):
                return ArchivableArtifact(
                    kind="record",
                    filename=filename,
                    payload=dict(payload),
                    content_type="application/json",
                )
            elif isinstance(payload, (bytes, bytearray)):
                return ArchivableArtifact(kind="data", filename=filename, payload=bytes(payload))
        except ValidationError as e:
            logger.debug("Result %r produced an invalid payload: %s", item.identifier, e)

        raise self._unsupported(item, payload, step_identifier, activity_identifier)

    def _unsupported(
        self,
        item: ArchivableResultSource,
        value: Any,
        step_identifier: str,
        activity_identifier: str | None,
    ) -> UnsupportedResultTypeError:
        logger.debug("Result %r produced unsupported value %s", item.identifier, type(value).__name__)
        return UnsupportedResultTypeError(
            type_name=type(value).__name__,
            item_identifier=item.identifier,
            step_identifier=step_identifier,
            activity_identifier=activity_identifier,
        )


def _with_suffix(filename: str, suffix: str) -> str:
    return filename if filename.endswith(suffix) else filename + suffix


def _guess_content_type(filename: str) -> str:
    content_type, _ = mimetypes.guess_type(filename)
    return content_type or "application/octet-stream"
