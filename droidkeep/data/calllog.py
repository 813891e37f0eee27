"""Call log export functionality."""

import csv
import json
from datetime import datetime
from pathlib import Path
from typing import Dict, List

from ..adb.content_providers import ContentProvider
from ..adb.device import ADBDevice
from ..util.logging import get_logger
from ..util.paths import ensure_directory
from ..util.timeutil import android_ms_to_iso

logger = get_logger(__name__)


class CallLogExporter:
    """Exports call log from Android device."""

    def __init__(self, device: ADBDevice):
        self.device = device
        self.content_provider = ContentProvider(device)

    def export_call_log(self, output_dir: Path) -> Dict[str, Path]:
        """Export call log as JSON and CSV.

        Raises ContentProviderError when the provider cannot be read.
        """
        logger.info("Starting call log export...")

        call_log = self.content_provider.get_call_log()
        if not call_log:
            logger.warning("No call log entries found")
            return {}

        ensure_directory(output_dir)
        entries = self._process_call_log_entries(call_log)

        return {
            "json": self._export_json(entries, output_dir),
            "csv": self._export_csv(entries, output_dir),
        }

    def _process_call_log_entries(self, call_log: List[Dict[str, str]]) -> List[Dict[str, object]]:
        """Process and clean call log entries."""
        processed = []

        for entry in call_log:
            duration = entry.get("duration", "0")
            duration_seconds = int(duration) if duration.isdigit() else 0
            processed.append({
                "id": entry.get("_id", ""),
                "number": entry.get("number", ""),
                "name": entry.get("name", ""),
                "call_type": entry.get("call_type", "unknown"),
                "duration": self._format_duration(duration_seconds),
                "duration_seconds": duration_seconds,
                "date": android_ms_to_iso(entry.get("date", "")),
            })

        return processed

    def _format_duration(self, duration_seconds: int) -> str:
        """Format call duration in human readable format."""
        hours = duration_seconds // 3600
        minutes = (duration_seconds % 3600) // 60
        seconds = duration_seconds % 60

        if hours > 0:
            return f"{hours}:{minutes:02d}:{seconds:02d}"
        return f"{minutes}:{seconds:02d}"

    def _export_json(self, entries: List[Dict[str, object]], output_dir: Path) -> Path:
        """Export call log to JSON format."""
        json_file = output_dir / "call_log.json"

        export_data = {
            "export_timestamp": datetime.now().isoformat(),
            "total_entries": len(entries),
            "device_serial": self.device.serial,
            "entries": entries,
        }

        with open(json_file, "w", encoding="utf-8") as f:
            json.dump(export_data, f, indent=2, ensure_ascii=False)

        logger.info(f"Exported {len(entries)} call log entries to {json_file}")
        return json_file

    def _export_csv(self, entries: List[Dict[str, object]], output_dir: Path) -> Path:
        """Export call log to CSV format."""
        csv_file = output_dir / "call_log.csv"

        with open(csv_file, "w", newline="", encoding="utf-8") as f:
            writer = csv.DictWriter(f, fieldnames=list(entries[0].keys()))
            writer.writeheader()
            for entry in entries:
                writer.writerow({k: str(v) for k, v in entry.items()})

        logger.info(f"Exported {len(entries)} call log entries to {csv_file}")
        return csv_file
