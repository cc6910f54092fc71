"""Writer that persists archive bundles as zip files.

Artifacts are written into a staging directory next to the target and
zipped. The staging directory is always removed; a zip opened by a
failed write is removed too, so a failed write leaves nothing behind.
"""

import json
import logging
import shutil
import zipfile
from datetime import date, datetime
from pathlib import Path
from typing import Any
from uuid import UUID

from bridge_sdk.archive.models import (
    INFO_FILENAME,
    METADATA_FILENAME,
    ArchivableArtifact,
    ArchiveBundle,
    check_artifact_filename,
)
from bridge_sdk.config import SDKConfig, get_default_config
from bridge_sdk.errors import ArchivePersistError, EmptyArchiveError

logger = logging.getLogger(__name__)


class ArchiveWriter:
    """Writes an ArchiveBundle to `<directory>/<taskRunUUID>.zip`."""

    def __init__(self, config: SDKConfig | None = None) -> None:
        """Initialize the writer.

        Args:
            config: SDK configuration. Supplies the default archive directory.
        """
        self.config = config or get_default_config()

    def write(self, bundle: ArchiveBundle, directory: Path | str | None = None) -> Path:
        """Persist a bundle.

        Args:
            bundle: A bundle produced by ArchiveBuilder.
            directory: Directory the archive is written to. Created if missing.
                Defaults to the configured archive directory.

        Returns:
            Path to the zip archive.

        Raises:
            EmptyArchiveError: If the bundle has no artifacts.
            ArchivePersistError: If there is no target directory or any file
                cannot be written.
        """
        if bundle.is_empty():
            raise EmptyArchiveError(bundle.reference)

        if directory is None:
            directory = self.config.archive_directory
        if directory is None:
            raise ArchivePersistError(
                f"No directory given for {bundle.reference!r} and no archive_directory configured"
            )

        directory = Path(directory)
        staging_path = directory / f".{bundle.task_run_uuid}"
        archive_path = directory / f"{bundle.task_run_uuid}.zip"
        zip_opened = False

        try:
            directory.mkdir(parents=True, exist_ok=True)
            staging_path.mkdir()

            for artifact in bundle.artifacts:
                self._write_artifact(staging_path, artifact)
            if bundle.metadata is not None:
                _write_json(staging_path / METADATA_FILENAME, bundle.metadata.to_dict())
            _write_json(staging_path / INFO_FILENAME, bundle.info_record())

            with zipfile.ZipFile(archive_path, "w", compression=zipfile.ZIP_DEFLATED) as zf:
                zip_opened = True
                for name in [*bundle.filenames, METADATA_FILENAME, INFO_FILENAME]:
                    path = staging_path / name
                    if path.exists():
                        zf.write(path, arcname=name)
        except (OSError, TypeError, ValueError) as e:
            if zip_opened:
                archive_path.unlink(missing_ok=True)
            raise ArchivePersistError(
                f"Failed to write archive for {bundle.reference!r} to {directory}: {e}"
            ) from e
        finally:
            shutil.rmtree(staging_path, ignore_errors=True)

        logger.debug("Wrote archive %s", archive_path)
        return archive_path

    def _write_artifact(self, staging_path: Path, artifact: ArchivableArtifact) -> None:
        """Write one artifact into the staging directory."""
        check_artifact_filename(artifact.filename)
        target = staging_path / artifact.filename
        if not target.resolve().is_relative_to(staging_path.resolve()):
            raise ValueError(f"Artifact {artifact.filename!r} resolves outside {staging_path}")

        if artifact.kind == "file":
            shutil.copyfile(artifact.payload, target)
        elif artifact.kind == "record":
            _write_json(target, artifact.payload)
        else:
            target.write_bytes(artifact.payload)


def _json_default(value: Any) -> Any:
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, (UUID, Path)):
        return str(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def _write_json(path: Path, record: dict[str, Any]) -> None:
    with open(path, "w") as f:
        json.dump(record, f, indent=2, ensure_ascii=False, default=_json_default)
