"""Compression utilities for finished backup sessions."""

import tarfile
from pathlib import Path
from typing import Optional

from ..util.logging import get_logger

logger = get_logger(__name__)


def compress_directory(source_dir: Path, output_path: Optional[Path] = None) -> Path:
    """Archive a directory into a .tar.gz next to it and return the archive path."""
    if output_path is None:
        output_path = source_dir.with_name(source_dir.name + ".tar.gz")

    logger.info(f"Compressing {source_dir} -> {output_path}")

    with tarfile.open(output_path, "w:gz") as archive:
        archive.add(source_dir, arcname=source_dir.name)

    logger.debug(f"Compressed archive written: {output_path}")
    return output_path
