"""Tests for persisting archive bundles."""

import json
import zipfile
from pathlib import Path

import pytest

from bridge_sdk.archive import (
    ArchivableArtifact,
    ArchiveBuilder,
    ArchiveBundle,
    ArchiveInfo,
    ArchiveWriter,
    FileResult,
    RecordResult,
    StepResult,
)
from bridge_sdk.config import SDKConfig
from bridge_sdk.errors import (
    ArchivePersistError,
    EmptyArchiveError,
    InvalidArtifactFilenameError,
)


@pytest.fixture
def bundle(make_activity_result, step_results) -> ArchiveBundle:
    """A built bundle with file, record and data artifacts."""
    return ArchiveBuilder().build(make_activity_result(results=step_results))


class TestArchiveWriter:
    """Tests for ArchiveWriter.write()."""

    def test_writes_zip_with_all_files(self, bundle: ArchiveBundle, tmp_path: Path) -> None:
        """Test that the zip contains every artifact plus metadata and info."""
        out_dir = tmp_path / "uploads"
        archive_path = ArchiveWriter().write(bundle, out_dir)

        assert archive_path == out_dir / "6BA7B810-9DAD-11D1-80B4-00C04FD430C8.zip"
        with zipfile.ZipFile(archive_path) as zf:
            assert zf.namelist() == [
                "accel.json",
                "tapping.json",
                "audio.m4a",
                "metadata.json",
                "info.json",
            ]
            assert json.loads(zf.read("tapping.json")) == {"tapCount": 42}
            assert zf.read("audio.m4a") == b"\x00\x01"
            assert zf.read("accel.json") == b'{"items": []}'
            metadata = json.loads(zf.read("metadata.json"))
            info = json.loads(zf.read("info.json"))

        assert metadata["scheduledActivityGuid"] == "schedule-guid-123"
        assert metadata["taskRunUUID"] == "6BA7B810-9DAD-11D1-80B4-00C04FD430C8"
        assert info["schemaRevision"] == 5

    def test_staging_directory_removed(self, bundle: ArchiveBundle, tmp_path: Path) -> None:
        """Test that only the zip is left in the output directory."""
        ArchiveWriter().write(bundle, tmp_path / "uploads")

        assert [p.name for p in (tmp_path / "uploads").iterdir()] == [
            "6BA7B810-9DAD-11D1-80B4-00C04FD430C8.zip"
        ]

    def test_missing_file_leaves_nothing(
        self, make_activity_result, tmp_path: Path
    ) -> None:
        """Test that a failed write removes the partial bundle."""
        result = make_activity_result(
            results=[
                StepResult(
                    identifier="walk",
                    results=[FileResult(identifier="accel", path=tmp_path / "gone.json")],
                )
            ]
        )
        bundle = ArchiveBuilder().build(result)
        out_dir = tmp_path / "uploads"

        with pytest.raises(ArchivePersistError):
            ArchiveWriter().write(bundle, out_dir)

        assert list(out_dir.iterdir()) == []

    def test_unserializable_record_leaves_nothing(self, make_activity_result, tmp_path: Path) -> None:
        """Test that a record that cannot be encoded as JSON fails cleanly."""
        result = make_activity_result(
            results=[
                StepResult(
                    identifier="survey",
                    results=[RecordResult(identifier="q1", record={"answer": object()})],
                )
            ]
        )
        bundle = ArchiveBuilder().build(result)
        out_dir = tmp_path / "uploads"

        with pytest.raises(ArchivePersistError):
            ArchiveWriter().write(bundle, out_dir)

        assert list(out_dir.iterdir()) == []


    def test_failed_rewrite_keeps_earlier_archive(
        self, bundle: ArchiveBundle, make_activity_result, tmp_path: Path
    ) -> None:
        """Test that a write failing before the zip is opened leaves an existing archive."""
        out_dir = tmp_path / "uploads"
        archive_path = ArchiveWriter().write(bundle, out_dir)
        original = archive_path.read_bytes()

        broken = ArchiveBuilder().build(
            make_activity_result(
                results=[
                    StepResult(
                        identifier="walk",
                        results=[FileResult(identifier="accel", path=tmp_path / "gone.json")],
                    )
                ]
            )
        )
        with pytest.raises(ArchivePersistError):
            ArchiveWriter().write(broken, out_dir)

        assert [p.name for p in out_dir.iterdir()] == [archive_path.name]
        assert archive_path.read_bytes() == original

    @pytest.mark.parametrize("filename", ["../escaped.bin", "nested/escaped.bin"])
    def test_path_like_filename_stays_inside(self, tmp_path: Path, filename: str) -> None:
        """Test that a hand-built bundle cannot write outside its staging directory."""
        bundle = ArchiveBundle(
            reference="Tapping Activity",
            task_run_uuid="ABC",
            created_on="2016-06-01T09:05:30.000+00:00",
            info=ArchiveInfo(schema_revision=1),
            artifacts=[ArchivableArtifact(kind="data", filename=filename, payload=b"x")],
        )
        out_dir = tmp_path / "uploads"

        with pytest.raises(InvalidArtifactFilenameError):
            ArchiveWriter().write(bundle, out_dir)

        assert list(out_dir.iterdir()) == []
        assert not (tmp_path / "escaped.bin").exists()

    def test_absolute_filename_leaves_target_alone(self, tmp_path: Path) -> None:
        """Test that an absolute filename does not overwrite the named file."""
        victim = tmp_path / "victim.txt"
        victim.write_text("precious")
        bundle = ArchiveBundle(
            reference="Tapping Activity",
            task_run_uuid="ABC",
            created_on="2016-06-01T09:05:30.000+00:00",
            info=ArchiveInfo(schema_revision=1),
            artifacts=[ArchivableArtifact(kind="data", filename=str(victim), payload=b"clobbered")],
        )

        with pytest.raises(InvalidArtifactFilenameError):
            ArchiveWriter().write(bundle, tmp_path / "uploads")

        assert victim.read_text() == "precious"
    def test_empty_bundle_rejected(self, tmp_path: Path) -> None:
        """Test that a bundle without artifacts is never persisted."""
        bundle = ArchiveBundle(
            reference="Tapping Activity",
            task_run_uuid="ABC",
            created_on="2016-06-01T09:05:30.000+00:00",
            info=ArchiveInfo(schema_revision=1),
        )
        with pytest.raises(EmptyArchiveError):
            ArchiveWriter().write(bundle, tmp_path)

        assert list(tmp_path.iterdir()) == []


class TestBundleWriteAndRemove:
    """Tests for ArchiveBundle.write() and remove()."""

    def test_write_records_path(self, bundle: ArchiveBundle, tmp_path: Path) -> None:
        """Test that write() remembers where the archive went."""
        path = bundle.write(tmp_path)

        assert bundle.archive_path == path
        assert path.exists()

    def test_remove(self, bundle: ArchiveBundle, tmp_path: Path) -> None:
        """Test that remove() deletes the persisted archive."""
        path = bundle.write(tmp_path)
        bundle.remove()

        assert not path.exists()
        assert bundle.archive_path is None

    def test_write_to_configured_directory(self, bundle: ArchiveBundle, tmp_path: Path) -> None:
        """Test that write() falls back to the configured archive directory."""
        config = SDKConfig(archive_directory=tmp_path / "uploads")
        path = bundle.write(config=config)

        assert path == tmp_path / "uploads" / "6BA7B810-9DAD-11D1-80B4-00C04FD430C8.zip"
        assert path.exists()

    def test_explicit_directory_wins(self, bundle: ArchiveBundle, tmp_path: Path) -> None:
        """Test that an explicit directory overrides the configured one."""
        config = SDKConfig(archive_directory=tmp_path / "configured")
        path = ArchiveWriter(config).write(bundle, tmp_path / "explicit")

        assert path.parent == tmp_path / "explicit"
        assert not (tmp_path / "configured").exists()

    def test_no_directory_rejected(self, bundle: ArchiveBundle, tmp_path: Path) -> None:
        """Test that writing with no directory anywhere fails without touching disk."""
        with pytest.raises(ArchivePersistError, match="no archive_directory configured"):
            bundle.write()

        assert bundle.archive_path is None
        assert [p.name for p in tmp_path.iterdir()] == ["accel.json"]
