"""Utility module initialization."""

from .compression import compress_directory
from .hashing import calculate_file_hash
from .logging import add_file_handler, get_logger, remove_handler, setup_logging
from .paths import (
    directory_size,
    ensure_directory,
    format_size,
    get_available_space,
    iter_files,
    safe_filename,
)
from .timeutil import (
    android_ms_to_iso,
    format_duration,
    generate_session_name,
    now_iso,
    timestamp_to_iso,
)

__all__ = [
    # compression
    "compress_directory",
    # hashing
    "calculate_file_hash",
    # logging
    "add_file_handler",
    "get_logger",
    "remove_handler",
    "setup_logging",
    # paths
    "directory_size",
    "ensure_directory",
    "format_size",
    "get_available_space",
    "iter_files",
    "safe_filename",
    # timeutil
    "android_ms_to_iso",
    "format_duration",
    "generate_session_name",
    "now_iso",
    "timestamp_to_iso",
]
