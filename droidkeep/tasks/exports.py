"""Contacts, call log and SMS tasks.

Each task exports through the content provider, which works without root.
On a rooted device the provider's SQLite database is pulled as well.
"""

from pathlib import Path
from typing import Dict, List, Optional

from ..adb.content_providers import ContentProviderError
from ..adb.root import RootAccess
from ..data import CallLogExporter, ContactsExporter, SMSExporter
from ..util.logging import get_logger
from .base import BackupTask, TaskContext, TaskError, TaskResult

logger = get_logger(__name__)

CONTACTS_DB = "/data/data/com.android.providers.contacts/databases/contacts2.db"
CALLLOG_DB = "/data/data/com.android.providers.contacts/databases/calllog.db"
SMS_DB = "/data/data/com.android.providers.telephony/databases/mmssms.db"


class ProviderExportTask(BackupTask):
    """Content provider export plus an optional rooted database copy."""

    database_path: str = ""
    provider_package: str = ""

    def export(self, context: TaskContext, output_dir: Path) -> Dict[str, Path]:
        raise NotImplementedError

    def run(self, context: TaskContext) -> TaskResult:
        task_dir = context.task_dir(self)
        artifacts: List[str] = []
        export_error: Optional[ContentProviderError] = None

        try:
            exported = self.export(context, task_dir)
            artifacts.extend(context.relative(path) for path in exported.values())
        except ContentProviderError as e:
            logger.error(f"{self.title} export failed: {e}")
            export_error = e

        elevated = False
        used_fallback = False
        if context.root.rooted:
            target = task_dir / Path(self.database_path).name
            if context.puller.pull_elevated(self.database_path, target, context.root):
                artifacts.append(context.relative(target))
                elevated = True
            else:
                logger.warning(f"Could not copy {self.database_path}; keeping the provider export only")
                used_fallback = True

        if export_error is not None and not elevated:
            raise TaskError(str(export_error))

        if not artifacts:
            message = "nothing to export"
        else:
            message = ", ".join(a.rsplit("/", 1)[-1] for a in artifacts)

        details = {}
        if elevated:
            details["database_path"] = self.database_path
        if export_error is not None:
            details["export_error"] = str(export_error)

        return self.success(
            message,
            artifacts,
            elevated=elevated,
            used_fallback=used_fallback,
            details=details,
        )

    def has_artifact(self, result: TaskResult, name: str) -> bool:
        return f"{self.output_dir}/{name}" in result.artifacts

    def missing_export_note(self, result: TaskResult) -> str:
        if "export_error" in result.details:
            return (
                f"The provider export was not saved ({result.details['export_error']}); "
                "only the database copy is available."
            )
        return "Nothing was exported: the device had no entries."

    def database_restore_steps(self) -> List[str]:
        name = Path(self.database_path).name
        return [
            "Rooted restore of the provider database (replaces all existing entries):",
            f"  adb push {self.output_dir}/{name} /data/local/tmp/",
            f"  adb shell su -c 'am force-stop {self.provider_package}'",
            f"  adb shell su -c 'cp /data/local/tmp/{name} {self.database_path}'",
            f"  adb shell su -c 'rm -f {self.database_path}-wal {self.database_path}-journal'",
            f"  adb shell su -c 'chown $(stat -c %u:%g {Path(self.database_path).parent}) {self.database_path}'",
            f"  adb shell su -c 'restorecon {self.database_path}'",
            "Reboot the device.",
        ]


class ContactsTask(ProviderExportTask):
    task_id = "contacts"
    title = "Contacts"
    description = "vCard and CSV export (contacts2.db with root)"
    database_path = CONTACTS_DB
    provider_package = "com.android.providers.contacts"

    def export(self, context: TaskContext, output_dir: Path) -> Dict[str, Path]:
        return ContactsExporter(context.device).export_contacts(output_dir)

    def restore_steps(self, result: TaskResult, root: RootAccess) -> List[str]:
        if self.has_artifact(result, "contacts.vcf"):
            steps = [
                "  adb push contacts/contacts.vcf /sdcard/Download/",
                "Open the Contacts app, choose Import > .vcf file and pick contacts.vcf.",
            ]
        else:
            steps = [self.missing_export_note(result)]
        if result.elevated and root.rooted:
            steps += self.database_restore_steps()
        return steps


class CallLogTask(ProviderExportTask):
    task_id = "call_log"
    title = "Call log"
    description = "JSON and CSV export (calllog.db with root)"
    database_path = CALLLOG_DB
    provider_package = "com.android.providers.contacts"

    def export(self, context: TaskContext, output_dir: Path) -> Dict[str, Path]:
        return CallLogExporter(context.device).export_call_log(output_dir)

    def restore_steps(self, result: TaskResult, root: RootAccess) -> List[str]:
        if result.elevated and root.rooted:
            return self.database_restore_steps()
        exported = [name for name in ("call_log.json", "call_log.csv") if self.has_artifact(result, name)]
        if not exported:
            return [self.missing_export_note(result)]
        return [
            "Android has no importer for call history without root.",
            f"Kept as a record: {', '.join(f'call_log/{name}' for name in exported)}.",
            "Apps such as 'SMS Backup & Restore' can rebuild the log from an XML conversion of the JSON.",
        ]


class SmsTask(ProviderExportTask):
    task_id = "sms"
    title = "SMS messages"
    description = "JSON and CSV export (mmssms.db with root)"
    database_path = SMS_DB
    provider_package = "com.android.providers.telephony"

    def export(self, context: TaskContext, output_dir: Path) -> Dict[str, Path]:
        return SMSExporter(context.device).export_sms(output_dir)

    def restore_steps(self, result: TaskResult, root: RootAccess) -> List[str]:
        if result.elevated and root.rooted:
            return self.database_restore_steps() + [
                "MMS attachments are not part of mmssms.db and are not restored.",
            ]
        if not self.has_artifact(result, "sms.json"):
            return [self.missing_export_note(result)]
        return [
            "Messages can only be written by the default SMS app.",
            "sms/sms.json keeps every message; convert it for an SMS backup app that is"
            " temporarily set as the default SMS app, import, then switch back.",
        ]
