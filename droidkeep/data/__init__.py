"""Data export module initialization."""

from .calllog import CallLogExporter
from .contacts import ContactsExporter
from .sms import SMSExporter

__all__ = [
    "ContactsExporter",
    "CallLogExporter",
    "SMSExporter",
]
