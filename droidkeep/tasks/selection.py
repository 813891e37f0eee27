"""Parsing of the operator's task selection."""

import re
from typing import List

from ..adb.root import RootAccess
from .base import BackupTask
from .registry import TaskRegistry, UnknownTaskError

ALL_TOKENS = {"a", "all", "*"}
QUIT_TOKENS = {"q", "quit", "exit"}
RANGE = re.compile(r"^(\d+)-(\d+)$")


class SelectionError(ValueError):
    """The selection text could not be turned into runnable tasks."""
    pass


def parse_selection(text: str, registry: TaskRegistry, root: RootAccess) -> List[BackupTask]:
    """Turn menu input such as "1,3-5 sms" into tasks in catalog order.

    "all" selects every task available under `root`; "q" returns an empty
    list. Root-only tasks on an unrooted device are rejected.
    """
    text = text.strip().lower()
    if not text:
        raise SelectionError("Nothing selected")

    if text in QUIT_TOKENS:
        return []

    if text in ALL_TOKENS:
        return registry.available(root)

    selected: List[BackupTask] = []
    for token in re.split(r"[,\s]+", text):
        if not token:
            continue
        selected.extend(_resolve_token(token, registry))

    if not selected:
        raise SelectionError("Nothing selected")

    unavailable = [task.task_id for task in selected if not task.is_available(root)]
    if unavailable:
        raise SelectionError(f"Requires root: {', '.join(sorted(set(unavailable)))}")

    return registry.ordered(selected)


def _resolve_token(token: str, registry: TaskRegistry) -> List[BackupTask]:
    try:
        if token.isdigit():
            return [registry.by_number(int(token))]

        match = RANGE.match(token)
        if match:
            start, end = int(match.group(1)), int(match.group(2))
            if start > end:
                raise SelectionError(f"Invalid range: {token}")
            return [registry.by_number(n) for n in range(start, end + 1)]

        return [registry.get(token)]
    except UnknownTaskError as e:
        raise SelectionError(str(e)) from e
