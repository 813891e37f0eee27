"""Tests for backup manifest functionality."""

import tempfile
from pathlib import Path

from droidkeep.adb.root import RootAccess, RootStatus
from droidkeep.backup.manifest import (
    ArtifactEntry,
    BackupManifest,
    DeviceBackupInfo,
    ManifestManager,
    build_artifact_entries,
)
from droidkeep.tasks.base import TaskResult, TaskStatus
from droidkeep.util.hashing import calculate_file_hash


def _device_backup_info():
    return DeviceBackupInfo(
        serial="test123",
        model="Test Model",
        brand="Test Brand",
        android_version="12",
        sdk="31"
    )


class TestBackupManifest:
    """Test backup manifest creation and management."""

    def test_manifest_creation(self):
        """Test creating a new manifest."""
        manifest = BackupManifest(id="android_backup_20240101_120000", device=_device_backup_info())

        assert manifest.version == 1
        assert manifest.device.serial == "test123"
        assert manifest.root_status == "none"
        assert len(manifest.tasks) == 0
        assert len(manifest.artifacts) == 0

    def test_manifest_save_load(self):
        """Test saving and loading manifest."""
        with tempfile.TemporaryDirectory() as temp_dir:
            backup_path = Path(temp_dir)

            manifest = BackupManifest(id="android_backup_20240101_120000", device=_device_backup_info())
            manifest.tasks.append(TaskResult(task_id="sms", status=TaskStatus.SUCCESS, artifacts=["sms/sms.json"]))
            manifest.artifacts.append(ArtifactEntry(path="sms/sms.json", task_id="sms", kind="file", size=42))

            manager = ManifestManager(backup_path)
            manager.save_manifest(manifest)

            loaded_manifest = manager.load_manifest()

            assert loaded_manifest is not None
            assert loaded_manifest.device.serial == "test123"
            assert loaded_manifest.tasks[0].status is TaskStatus.SUCCESS
            assert loaded_manifest.artifacts[0].size == 42

    def test_load_falls_back_to_json(self):
        """Test loading when the YAML copy is gone."""
        with tempfile.TemporaryDirectory() as temp_dir:
            manager = ManifestManager(Path(temp_dir))
            manager.save_manifest(BackupManifest(id="x", device=_device_backup_info()))
            manager.manifest_path.unlink()

            assert manager.load_manifest().id == "x"

    def test_load_missing(self):
        """Test loading from a directory without a manifest."""
        with tempfile.TemporaryDirectory() as temp_dir:
            assert ManifestManager(Path(temp_dir)).load_manifest() is None

    def test_create_manifest(self, device_info):
        """Test building a manifest from task results."""
        with tempfile.TemporaryDirectory() as temp_dir:
            backup_path = Path(temp_dir)
            (backup_path / "wifi").mkdir()
            (backup_path / "wifi" / "wifi_networks.txt").write_text("0 HomeNet wpa2-psk\n")

            results = [
                TaskResult(task_id="wifi", status=TaskStatus.SUCCESS, artifacts=["wifi/wifi_networks.txt"]),
                TaskResult(task_id="aegis", status=TaskStatus.FAILED, message="missing"),
            ]

            manifest = ManifestManager(backup_path).create_manifest(
                "android_backup_20240101_120000", device_info, RootAccess(RootStatus.SU), results
            )

            assert manifest.device.sdk == "33"
            assert manifest.root_status == "su"
            assert len(manifest.tasks) == 2
            assert manifest.total_size == len("0 HomeNet wpa2-psk\n")


class TestArtifactEntries:
    """Test artifact description."""

    def test_files_and_directories(self, tmp_path):
        """Test artifact entries for files and directories; missing paths are skipped."""
        (tmp_path / "apks" / "com.app").mkdir(parents=True)
        (tmp_path / "apks" / "com.app" / "base.apk").write_bytes(b"a" * 100)
        (tmp_path / "apks" / "com.app" / "split_config.en.apk").write_bytes(b"b" * 50)
        (tmp_path / "apks" / "packages.txt").write_text("com.app\n")

        result = TaskResult(
            task_id="apks",
            status=TaskStatus.SUCCESS,
            artifacts=["apks/packages.txt", "apks/com.app", "apks/gone.txt"],
        )

        entries = build_artifact_entries(tmp_path, [result])

        assert len(entries) == 2
        assert entries[0].kind == "file"
        assert entries[0].sha256 == calculate_file_hash(tmp_path / "apks" / "packages.txt")
        assert entries[1].kind == "directory"
        assert entries[1].size == 150
        assert entries[1].file_count == 2
        assert entries[1].sha256 is None
