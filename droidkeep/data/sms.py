"""SMS export functionality."""

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


class SMSExporter:
    """Exports SMS messages from Android device."""

    def __init__(self, device: ADBDevice):
        self.device = device
        self.content_provider = ContentProvider(device)

    def export_sms(self, output_dir: Path) -> Dict[str, Path]:
        """Export SMS messages as JSON and CSV.

        Raises ContentProviderError when the provider cannot be read.
        """
        logger.info("Starting SMS export...")

        sms_messages = self.content_provider.get_sms_messages()
        if not sms_messages:
            logger.warning("No SMS messages found")
            return {}

        ensure_directory(output_dir)
        messages = self._process_sms_messages(sms_messages)

        return {
            "json": self._export_json(messages, output_dir),
            "csv": self._export_csv(messages, output_dir),
        }

    def _process_sms_messages(self, sms_messages: List[Dict]) -> List[Dict[str, object]]:
        """Process and clean SMS messages."""
        processed = []

        for message in sms_messages:
            is_read = bool(message.get("is_read", False))
            processed.append({
                "id": message.get("_id", ""),
                "thread_id": message.get("thread_id", ""),
                "address": message.get("address", ""),
                "body": message.get("body", ""),
                "message_type": message.get("message_type", "unknown"),
                "date": android_ms_to_iso(message.get("date", "")),
                "date_sent": android_ms_to_iso(message.get("date_sent", "")),
                "read_status": "read" if is_read else "unread",
            })

        return processed

    def _export_json(self, messages: List[Dict[str, object]], output_dir: Path) -> Path:
        """Export SMS messages to JSON format."""
        json_file = output_dir / "sms.json"

        export_data = {
            "export_timestamp": datetime.now().isoformat(),
            "total_messages": len(messages),
            "device_serial": self.device.serial,
            "messages": messages,
        }

        with open(json_file, "w", encoding="utf-8") as f:
            json.dump(export_data, f, indent=2, ensure_ascii=False)

        logger.info(f"Exported {len(messages)} SMS messages to {json_file}")
        return json_file

    def _export_csv(self, messages: List[Dict[str, object]], output_dir: Path) -> Path:
        """Export SMS messages to CSV format."""
        csv_file = output_dir / "sms.csv"

        with open(csv_file, "w", newline="", encoding="utf-8") as f:
            writer = csv.DictWriter(f, fieldnames=list(messages[0].keys()))
            writer.writeheader()

            for message in messages:
                row = {k: str(v) for k, v in message.items()}
                # Keep one message per CSV line
                row["body"] = row["body"].replace("\n", " ").replace("\r", " ")
                writer.writerow(row)

        logger.info(f"Exported {len(messages)} SMS messages to {csv_file}")
        return csv_file
