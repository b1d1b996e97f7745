#!/usr/bin/env python3
"""
Operator event log: append-only, capped to the most recent entries, newest first.
"""
import logging
from collections import deque
from typing import Deque, Tuple

from . import constants as C
from .data_models import LogEntry, Severity

log = logging.getLogger(__name__)

_LEVELS = {
    Severity.INFO: logging.INFO,
    Severity.SUCCESS: logging.INFO,
    Severity.WARNING: logging.WARNING,
}


class EventLog:
    def __init__(self, capacity: int = C.LOG_CAPACITY):
        self._entries: Deque[LogEntry] = deque(maxlen=int(capacity))

    @property
    def capacity(self) -> int:
        return self._entries.maxlen

    def append(self, time: float, message: str, severity: Severity = Severity.INFO) -> LogEntry:
        entry = LogEntry(float(time), message, Severity(severity))
        # appendleft evicts from the right, i.e. the oldest entry
        self._entries.appendleft(entry)
        log.log(_LEVELS[entry.severity], "%s", message)
        return entry

    def entries(self) -> Tuple[LogEntry, ...]:
        """Newest-first copy of the log."""
        return tuple(self._entries)

    def __len__(self) -> int:
        return len(self._entries)
