"""ADB content provider utilities for accessing contacts, SMS, etc."""

import re
from typing import Dict, List, Optional

from .device import ADBDevice, ADBError
from .shell import ShellCommand
from ..util.logging import get_logger

logger = get_logger(__name__)

ROW_PREFIX = re.compile(r"^Row:\s*\d+\s+")
# Field separator: ", " followed by the next `key=`
FIELD_SPLIT = re.compile(r", (?=[A-Za-z_][A-Za-z0-9_]*=)")

PHONE_MIMETYPE = "vnd.android.cursor.item/phone_v2"
EMAIL_MIMETYPE = "vnd.android.cursor.item/email_v2"

CALL_TYPES = {
    "1": "incoming",
    "2": "outgoing",
    "3": "missed",
    "4": "voicemail",
    "5": "rejected",
    "6": "blocked",
}

MESSAGE_TYPES = {
    "1": "inbox",
    "2": "sent",
    "3": "draft",
    "4": "outbox",
    "5": "failed",
    "6": "queued",
}


class ContentProviderError(Exception):
    """Content provider access error."""
    pass


def parse_content_output(output: str) -> List[Dict[str, str]]:
    """Parse `content query` output into one dict per row.

    Rows look like `Row: 0 _id=1, display_name=Jane, starred=0`. Values
    printed as NULL become empty strings. A line without the `Row:` prefix
    continues the last value of the current row (multi-line SMS bodies);
    fields following the value on that line still belong to the row.
    """
    results: List[Dict[str, str]] = []
    row: Optional[Dict[str, str]] = None
    last_key: Optional[str] = None

    for line in output.split("\n"):
        if ROW_PREFIX.match(line):
            row = {}
            results.append(row)
            last_key = None
            pieces = FIELD_SPLIT.split(ROW_PREFIX.sub("", line, count=1))
        elif row is not None and last_key is not None:
            pieces = FIELD_SPLIT.split(line)
            row[last_key] += "\n" + pieces.pop(0)
        else:
            continue

        for pair in pieces:
            if "=" not in pair:
                continue
            key, value = pair.split("=", 1)
            key = key.strip()
            row[key] = "" if value == "NULL" else value
            last_key = key

    return [r for r in results if r]


class ContentProvider:
    """Utility for accessing Android content providers via ADB."""

    def __init__(self, device: ADBDevice):
        self.device = device
        self.shell = ShellCommand(device)

    def query_content_provider(
        self,
        uri: str,
        projection: Optional[List[str]] = None,
        sort_order: Optional[str] = None
    ) -> List[Dict[str, str]]:
        """Query a content provider and return structured data."""
        cmd = f"content query --uri {uri}"

        if projection:
            cmd += f" --projection {':'.join(projection)}"

        if sort_order:
            cmd += f" --sort \"{sort_order}\""

        logger.debug(f"Querying content provider: {cmd}")
        try:
            output = self.shell.execute(cmd, timeout=300)
        except ADBError as e:
            raise ContentProviderError(f"Content provider query failed for {uri}: {e}") from e

        if output.startswith("Error while accessing provider") or "SecurityException" in output:
            raise ContentProviderError(f"Access denied for {uri}: {output.splitlines()[0]}")

        return parse_content_output(output)

    def get_contacts(self) -> List[Dict[str, object]]:
        """Get contacts with their phone numbers and email addresses."""
        contacts = self.query_content_provider(
            "content://com.android.contacts/contacts",
            projection=["_id", "display_name", "starred", "times_contacted"]
        )

        data_rows = self.query_content_provider(
            "content://com.android.contacts/data",
            projection=["contact_id", "mimetype", "data1"]
        )

        phones: Dict[str, List[str]] = {}
        emails: Dict[str, List[str]] = {}
        for row in data_rows:
            value = row.get("data1", "")
            if not value:
                continue
            if row.get("mimetype") == PHONE_MIMETYPE:
                phones.setdefault(row.get("contact_id", ""), []).append(value)
            elif row.get("mimetype") == EMAIL_MIMETYPE:
                emails.setdefault(row.get("contact_id", ""), []).append(value)

        for contact in contacts:
            contact_id = contact.get("_id", "")
            contact["phone_numbers"] = phones.get(contact_id, [])
            contact["email_addresses"] = emails.get(contact_id, [])

        logger.info(f"Retrieved {len(contacts)} contacts")
        return contacts

    def get_call_log(self) -> List[Dict[str, str]]:
        """Get call log from the device, newest first."""
        call_log = self.query_content_provider(
            "content://call_log/calls",
            projection=["_id", "number", "date", "duration", "type", "name"],
            sort_order="date DESC"
        )

        for call in call_log:
            call_type = call.get("type", "")
            call["call_type"] = CALL_TYPES.get(call_type, f"unknown({call_type})")

        logger.info(f"Retrieved {len(call_log)} call log entries")
        return call_log

    def get_sms_messages(self) -> List[Dict[str, object]]:
        """Get SMS messages from the device, newest first."""
        sms_messages = self.query_content_provider(
            "content://sms",
            projection=["_id", "thread_id", "address", "body", "date", "date_sent", "type", "read"],
            sort_order="date DESC"
        )

        for message in sms_messages:
            msg_type = message.get("type", "")
            message["message_type"] = MESSAGE_TYPES.get(msg_type, f"unknown({msg_type})")
            message["is_read"] = message.get("read", "0") == "1"

        logger.info(f"Retrieved {len(sms_messages)} SMS messages")
        return sms_messages
