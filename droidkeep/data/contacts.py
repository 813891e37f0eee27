"""Contacts export functionality."""

import csv
from pathlib import Path
from typing import Dict, List

from ..adb.content_providers import ContentProvider
from ..adb.device import ADBDevice
from ..util.logging import get_logger
from ..util.paths import ensure_directory

logger = get_logger(__name__)

CSV_FIELDS = ["_id", "display_name", "phone_numbers", "email_addresses", "starred", "times_contacted"]


class ContactsExporter:
    """Exports contacts from Android device."""

    def __init__(self, device: ADBDevice):
        self.device = device
        self.content_provider = ContentProvider(device)

    def export_contacts(self, output_dir: Path) -> Dict[str, Path]:
        """Export contacts as vCard and CSV.

        Raises ContentProviderError when the provider cannot be read.
        Returns an empty dict when the device has no contacts.
        """
        logger.info("Starting contacts export...")

        contacts = self.content_provider.get_contacts()
        if not contacts:
            logger.warning("No contacts found")
            return {}

        ensure_directory(output_dir)

        return {
            "vcf": self._export_vcf(contacts, output_dir),
            "csv": self._export_csv(contacts, output_dir),
        }

    def _export_vcf(self, contacts: List[Dict], output_dir: Path) -> Path:
        """Export contacts to vCard format."""
        vcf_file = output_dir / "contacts.vcf"

        with open(vcf_file, "w", encoding="utf-8") as f:
            for contact in contacts:
                f.write(self._create_vcard(contact))
                f.write("\n")

        logger.info(f"Exported {len(contacts)} contacts to {vcf_file}")
        return vcf_file

    def _export_csv(self, contacts: List[Dict], output_dir: Path) -> Path:
        """Export contacts to CSV format."""
        csv_file = output_dir / "contacts.csv"

        with open(csv_file, "w", newline="", encoding="utf-8") as f:
            writer = csv.DictWriter(f, fieldnames=CSV_FIELDS, extrasaction="ignore")
            writer.writeheader()

            for contact in contacts:
                row = {}
                for key, value in contact.items():
                    if isinstance(value, list):
                        row[key] = "; ".join(str(v) for v in value)
                    else:
                        row[key] = str(value) if value else ""
                writer.writerow(row)

        logger.info(f"Exported {len(contacts)} contacts to {csv_file}")
        return csv_file

    def _create_vcard(self, contact: Dict) -> str:
        """Create a vCard entry for a contact."""
        vcard_lines = ["BEGIN:VCARD", "VERSION:3.0"]

        display_name = contact.get("display_name", "").strip()
        if display_name:
            name_parts = display_name.split()
            if len(name_parts) >= 2:
                first_name = name_parts[0]
                last_name = " ".join(name_parts[1:])
                vcard_lines.append(f"N:{last_name};{first_name};;;")
            else:
                vcard_lines.append(f"N:{display_name};;;;")

            vcard_lines.append(f"FN:{display_name}")

        for phone in contact.get("phone_numbers", []):
            if phone:
                vcard_lines.append(f"TEL:{self._clean_phone_number(phone)}")

        for email in contact.get("email_addresses", []):
            if email:
                vcard_lines.append(f"EMAIL:{email}")

        contact_id = contact.get("_id", "")
        if contact_id:
            vcard_lines.append(f"UID:{contact_id}")

        vcard_lines.append("END:VCARD")

        return "\n".join(vcard_lines)

    def _clean_phone_number(self, phone: str) -> str:
        """Clean and format phone number."""
        clean = "".join(c for c in phone if c.isdigit() or c in ["+", "-", " ", "(", ")"])
        return clean.strip()
