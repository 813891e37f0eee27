"""Backup manifest model and utilities."""

import json
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from .. import __version__
from ..adb.device import DeviceInfo
from ..adb.root import RootAccess
from ..tasks.base import TaskResult
from ..util.hashing import calculate_file_hash
from ..util.logging import get_logger
from ..util.paths import iter_files
from ..util.timeutil import now_iso

logger = get_logger(__name__)


class ArtifactEntry(BaseModel):
    """A file or directory written by a task."""

    path: str = Field(description="Path relative to the session directory")
    task_id: str = Field(description="Task that produced the artifact")
    kind: str = Field(description="file or directory")
    size: int = Field(default=0, description="Size in bytes (recursive for directories)")
    file_count: int = Field(default=1, description="Number of files contained")
    sha256: Optional[str] = Field(default=None, description="SHA256 of regular files")


class DeviceBackupInfo(BaseModel):
    """Device information in backup manifest."""

    serial: str = Field(description="Device serial number")
    model: str = Field(description="Device model")
    brand: str = Field(description="Device brand")
    android_version: str = Field(description="Android version")
    sdk: str = Field(description="SDK version")

    @classmethod
    def from_device_info(cls, info: DeviceInfo) -> "DeviceBackupInfo":
        return cls(
            serial=info.serial,
            model=info.model,
            brand=info.brand,
            android_version=info.android_version,
            sdk=info.sdk_version,
        )


class BackupManifest(BaseModel):
    """Machine readable record of a backup session."""

    model_config = ConfigDict(validate_assignment=True)

    version: int = Field(default=1, description="Manifest format version")
    tool_version: str = Field(default=__version__, description="DroidKeep version")
    id: str = Field(description="Session name")
    created_at: str = Field(default_factory=now_iso, description="Backup creation timestamp")

    device: DeviceBackupInfo = Field(description="Device information")
    root_status: str = Field(default="none", description="Result of the root probe")

    tasks: List[TaskResult] = Field(default_factory=list, description="Per-task outcome")
    artifacts: List[ArtifactEntry] = Field(default_factory=list, description="Files written by tasks")

    total_size: int = Field(default=0, description="Total artifact size in bytes")


def build_artifact_entries(session_dir: Path, results: List[TaskResult]) -> List[ArtifactEntry]:
    """Describe every artifact of every task; regular files get a SHA256."""
    entries = []

    for result in results:
        for rel_path in result.artifacts:
            path = session_dir / rel_path
            if path.is_file():
                entries.append(ArtifactEntry(
                    path=rel_path,
                    task_id=result.task_id,
                    kind="file",
                    size=path.stat().st_size,
                    sha256=calculate_file_hash(path),
                ))
            elif path.is_dir():
                files = list(iter_files(path))
                entries.append(ArtifactEntry(
                    path=rel_path,
                    task_id=result.task_id,
                    kind="directory",
                    size=sum(f.stat().st_size for f in files),
                    file_count=len(files),
                ))
            else:
                logger.warning(f"Artifact listed by {result.task_id} is missing: {rel_path}")

    return entries


class ManifestManager:
    """Utility for saving and loading backup manifests."""

    def __init__(self, backup_path: Path):
        self.backup_path = backup_path
        self.manifest_path = backup_path / "manifest.yaml"
        self.manifest_json_path = backup_path / "manifest.json"

    def create_manifest(
        self,
        session_name: str,
        device_info: DeviceInfo,
        root: RootAccess,
        results: List[TaskResult]
    ) -> BackupManifest:
        artifacts = build_artifact_entries(self.backup_path, results)
        manifest = BackupManifest(
            id=session_name,
            device=DeviceBackupInfo.from_device_info(device_info),
            root_status=root.status.value,
            tasks=list(results),
            artifacts=artifacts,
            total_size=sum(a.size for a in artifacts),
        )
        logger.debug(f"Created backup manifest: {manifest.id}")
        return manifest

    def save_manifest(self, manifest: BackupManifest) -> None:
        """Save manifest to both YAML and JSON formats."""
        self.backup_path.mkdir(parents=True, exist_ok=True)
        data = manifest.model_dump(mode="json")

        yaml = YAML()
        yaml.default_flow_style = False
        yaml.width = 120

        with open(self.manifest_path, "w", encoding="utf-8") as f:
            yaml.dump(data, f)

        # JSON copy for tools without a YAML parser
        with open(self.manifest_json_path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)

        logger.debug(f"Saved manifest to {self.manifest_path}")

    def load_manifest(self) -> Optional[BackupManifest]:
        """Load manifest from file."""
        if self.manifest_path.exists():
            try:
                yaml = YAML(typ="safe")
                with open(self.manifest_path, "r", encoding="utf-8") as f:
                    data = yaml.load(f)
                return BackupManifest(**data)
            except (YAMLError, ValidationError, TypeError) as e:
                logger.warning(f"Failed to load YAML manifest: {e}")

        if self.manifest_json_path.exists():
            try:
                with open(self.manifest_json_path, "r", encoding="utf-8") as f:
                    data = json.load(f)
                return BackupManifest(**data)
            except (json.JSONDecodeError, ValidationError, TypeError) as e:
                logger.warning(f"Failed to load JSON manifest: {e}")

        return None
