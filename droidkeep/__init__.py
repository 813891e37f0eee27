"""
DroidKeep - Android user data backup over ADB.

A small task-driven tool for pulling user data off an Android device:
- Internal storage, APKs and (rooted) app data
- Contacts, call log and SMS exports
- Aegis vault, settings and Wi-Fi networks
- A summary and restore guide for every backup session
"""

__version__ = "0.1.0"
__author__ = "DroidKeep Contributors"
