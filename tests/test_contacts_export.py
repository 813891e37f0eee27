"""Tests for contacts, call log and SMS export functionality."""

import csv
import json
from unittest.mock import MagicMock, patch

import pytest

from droidkeep.adb.content_providers import ContentProviderError
from droidkeep.data.calllog import CallLogExporter
from droidkeep.data.contacts import ContactsExporter
from droidkeep.data.sms import SMSExporter

MOCK_CONTACTS = [
    {
        "_id": "1",
        "display_name": "John Doe",
        "phone_numbers": ["+1234567890"],
        "email_addresses": ["john@example.com"],
        "starred": "1",
        "times_contacted": "5",
    },
    {
        "_id": "2",
        "display_name": "Jane",
        "phone_numbers": [],
        "email_addresses": ["jane@example.com"],
        "starred": "0",
        "times_contacted": "0",
    },
]


class TestContactsExporter:
    """Test contacts export functionality."""

    def test_exporter_creation(self):
        """Test creating a contacts exporter."""
        mock_device = MagicMock()
        exporter = ContactsExporter(mock_device)

        assert exporter.device == mock_device

    def test_create_vcard(self):
        """Test vCard creation."""
        mock_device = MagicMock()
        exporter = ContactsExporter(mock_device)

        contact = {
            "_id": "123",
            "display_name": "John Doe",
            "phone_numbers": ["+1234567890", "+0987654321"],
            "email_addresses": ["john@example.com", "johndoe@test.com"],
            "times_contacted": "5"
        }

        vcard = exporter._create_vcard(contact)

        assert vcard.startswith("BEGIN:VCARD\nVERSION:3.0")
        assert "END:VCARD" in vcard
        assert "FN:John Doe" in vcard
        assert "N:Doe;John;;;" in vcard
        assert "TEL:+1234567890" in vcard
        assert "TEL:+0987654321" in vcard
        assert "EMAIL:john@example.com" in vcard
        assert "UID:123" in vcard

    def test_single_word_name(self):
        """Test the vCard N field for a one-word name."""
        exporter = ContactsExporter(MagicMock())
        vcard = exporter._create_vcard({"display_name": "Mom", "phone_numbers": ["555"]})

        assert "N:Mom;;;;" in vcard
        assert "UID:" not in vcard

    def test_clean_phone_number(self):
        """Test phone number cleaning."""
        mock_device = MagicMock()
        exporter = ContactsExporter(mock_device)

        assert exporter._clean_phone_number("+1 (234) 567-8900") == "+1 (234) 567-8900"
        assert exporter._clean_phone_number("1234567890") == "1234567890"
        assert exporter._clean_phone_number(" tel:+1-234.567 ") == "+1-234567"

    @patch('droidkeep.data.contacts.ContentProvider')
    def test_export_contacts(self, mock_content_provider, tmp_path):
        """Test writing vCard and CSV files."""
        mock_content_provider.return_value.get_contacts.return_value = MOCK_CONTACTS

        exported = ContactsExporter(MagicMock()).export_contacts(tmp_path)

        assert set(exported) == {"vcf", "csv"}
        assert exported["vcf"].read_text(encoding="utf-8").count("BEGIN:VCARD") == 2

        with open(exported["csv"], newline="", encoding="utf-8") as f:
            rows = list(csv.DictReader(f))
        assert rows[0]["display_name"] == "John Doe"
        assert rows[0]["phone_numbers"] == "+1234567890"
        assert rows[1]["phone_numbers"] == ""

    @patch('droidkeep.data.contacts.ContentProvider')
    def test_no_contacts(self, mock_content_provider, tmp_path):
        """Test that no files are written without contacts."""
        mock_content_provider.return_value.get_contacts.return_value = []

        assert ContactsExporter(MagicMock()).export_contacts(tmp_path / "contacts") == {}
        assert not (tmp_path / "contacts").exists()

    @patch('droidkeep.data.contacts.ContentProvider')
    def test_provider_error_propagates(self, mock_content_provider, tmp_path):
        """Test that provider errors reach the caller."""
        mock_content_provider.return_value.get_contacts.side_effect = ContentProviderError("denied")

        with pytest.raises(ContentProviderError):
            ContactsExporter(MagicMock()).export_contacts(tmp_path)


class TestCallLogExporter:
    """Test call log export."""

    @pytest.mark.parametrize("seconds,expected", [(0, "0:00"), (75, "1:15"), (3725, "1:02:05")])
    def test_format_duration(self, seconds, expected):
        """Test call duration formatting."""
        assert CallLogExporter(MagicMock())._format_duration(seconds) == expected

    @patch('droidkeep.data.calllog.ContentProvider')
    def test_export_call_log(self, mock_content_provider, tmp_path):
        """Test writing call log JSON and CSV files."""
        mock_content_provider.return_value.get_call_log.return_value = [
            {"_id": "1", "number": "555", "name": "", "date": "1700000000000",
             "duration": "75", "type": "2", "call_type": "outgoing"},
        ]
        device = MagicMock()
        device.serial = "abc"

        exported = CallLogExporter(device).export_call_log(tmp_path)

        data = json.loads(exported["json"].read_text(encoding="utf-8"))
        assert data["total_entries"] == 1
        assert data["device_serial"] == "abc"
        assert data["entries"][0]["duration"] == "1:15"
        assert data["entries"][0]["date"].startswith("2023-11-14")
        assert exported["csv"].exists()


class TestSMSExporter:
    """Test SMS export."""

    @patch('droidkeep.data.sms.ContentProvider')
    def test_export_sms(self, mock_content_provider, tmp_path):
        """Test writing SMS JSON and CSV files."""
        mock_content_provider.return_value.get_sms_messages.return_value = [
            {"_id": "7", "thread_id": "2", "address": "+1555", "body": "line one\nline two",
             "date": "1700000000000", "date_sent": "NULL", "message_type": "inbox", "is_read": True},
        ]
        device = MagicMock()
        device.serial = "abc"

        exported = SMSExporter(device).export_sms(tmp_path)

        data = json.loads(exported["json"].read_text(encoding="utf-8"))
        message = data["messages"][0]
        assert message["body"] == "line one\nline two"
        assert message["read_status"] == "read"
        assert message["date_sent"] == ""

        with open(exported["csv"], newline="", encoding="utf-8") as f:
            rows = list(csv.DictReader(f))
        assert rows[0]["body"] == "line one line two"
