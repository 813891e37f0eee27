"""Configuration management for DroidKeep."""

from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from ruamel.yaml import YAML

DEFAULT_CONFIG_PATH = Path.home() / ".config/droidkeep/config.yaml"


class TaskConfig(BaseModel):
    """Settings consumed by individual backup tasks."""

    storage_paths: List[str] = Field(
        default=["/sdcard"],
        description="Device paths pulled by the internal storage task"
    )
    aegis_path: str = Field(
        default="/sdcard/Download/aegis_vault.json",
        description="Location of the Aegis vault export on the device"
    )
    include_system_apps: bool = Field(default=False, description="Include system packages in APK/app data tasks")
    adb_backup_timeout: int = Field(default=3600, description="Timeout in seconds for legacy adb backup")


class DroidKeepConfig(BaseModel):
    """Main configuration for DroidKeep."""

    model_config = ConfigDict(validate_assignment=True)

    backup_root: Path = Field(default=Path("."), description="Directory that receives backup sessions")

    adb_path: str = Field(default="adb", description="Path to ADB binary")
    command_timeout: int = Field(default=30, description="Timeout in seconds for short ADB commands")
    pull_timeout: int = Field(default=1800, description="Timeout in seconds for directory pulls")

    min_disk_space_mb: int = Field(default=5000, description="Minimum free space required before a backup")
    compress_backup: bool = Field(default=False, description="Archive the session directory as .tar.gz")
    log_level: str = Field(default="INFO", description="Console logging level")

    tasks: TaskConfig = Field(default_factory=TaskConfig)


def load_config(config_path: Optional[Path] = None) -> DroidKeepConfig:
    """Load configuration from file or create default."""

    if config_path is None:
        config_path = DEFAULT_CONFIG_PATH

    if config_path.exists():
        yaml = YAML(typ="safe")
        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.load(f) or {}
        return DroidKeepConfig(**data)

    config = DroidKeepConfig()
    save_config(config, config_path)
    return config


def save_config(config: DroidKeepConfig, config_path: Optional[Path] = None) -> None:
    """Save configuration to file."""

    if config_path is None:
        config_path = DEFAULT_CONFIG_PATH

    config_path.parent.mkdir(parents=True, exist_ok=True)

    yaml = YAML()
    yaml.default_flow_style = False

    with open(config_path, "w", encoding="utf-8") as f:
        yaml.dump(config.model_dump(mode="json"), f)


def get_config() -> DroidKeepConfig:
    """Get the global configuration instance."""

    if not hasattr(get_config, "_config"):
        get_config._config = load_config()

    return get_config._config


def set_config(config: DroidKeepConfig) -> None:
    """Replace the global configuration instance (used by the CLI --config option)."""
    get_config._config = config
