#!/usr/bin/env python3
"""
Data storage and persistence for Branch Tracker.
Handles the session record type and all log file I/O.
"""

import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from .notifier import Notifier

LOG_FILENAME = "timetracker.log.json"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def format_timestamp(moment: datetime) -> str:
    """Format an instant as an ISO 8601 UTC string ending in Z."""
    moment = moment.astimezone(timezone.utc)
    text = moment.strftime("%Y-%m-%dT%H:%M:%S")
    milliseconds = moment.microsecond // 1000
    if milliseconds:
        text += f".{milliseconds:03d}"
    return text + "Z"


def parse_timestamp(text: str) -> datetime:
    """Parse an ISO 8601 string, accepting a trailing Z."""
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    moment = datetime.fromisoformat(text)
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment


def date_key(moment: datetime) -> str:
    """Convert an instant to its UTC calendar date key (YYYY-MM-DD)."""
    return moment.astimezone(timezone.utc).strftime("%Y-%m-%d")


@dataclass
class Session:
    """One tracked interval of work on a single branch.

    Timestamps are kept as the strings found on disk so that reading and
    rewriting an untouched log never changes its content. Unknown fields
    are carried through in ``extra``; ``source_keys`` remembers which keys
    a loaded record had, and in what order.
    """

    branch: str
    start: str
    stop: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)
    source_keys: Tuple[str, ...] = field(default=(), repr=False, compare=False)

    @property
    def is_open(self) -> bool:
        return not self.stop

    @property
    def start_time(self) -> datetime:
        return parse_timestamp(self.start)

    @property
    def stop_time(self) -> Optional[datetime]:
        return parse_timestamp(self.stop) if self.stop else None

    def duration_seconds(self, until: Optional[datetime] = None) -> Optional[float]:
        """Length of the session in seconds.

        An open session is measured up to ``until``; without it, None.
        """
        end = self.stop_time or until
        if end is None:
            return None
        return (end - self.start_time).total_seconds()

    def to_dict(self) -> Dict[str, Any]:
        fields = {"branch": self.branch, "start": self.start, "stop": self.stop}
        data: Dict[str, Any] = {}

        for key in self.source_keys:
            if key in fields:
                data[key] = fields[key]
            elif key in self.extra:
                data[key] = self.extra[key]

        for key, value in fields.items():
            # A key absent on disk stays absent until it gets a value
            if key not in data and (not self.source_keys or value):
                data[key] = value

        for key, value in self.extra.items():
            data.setdefault(key, value)
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Session":
        extra = {
            key: value
            for key, value in data.items()
            if key not in ("branch", "start", "stop")
        }
        return cls(
            branch=data.get("branch", ""),
            start=data.get("start", ""),
            stop=data.get("stop"),
            extra=extra,
            source_keys=tuple(data),
        )


LogDocument = Dict[str, List[Session]]


class LogStore:
    """Sole reader and writer of the session log document.

    Every operation reads or writes the whole file; nothing is cached
    between calls and there is no file lock, so two overlapping
    read-modify-write sequences lose one update.
    """

    def __init__(self, data_dir: str, notifier: Optional[Notifier] = None):
        self.data_dir = Path(data_dir)
        self.notifier = notifier or Notifier()

    @property
    def log_file(self) -> Path:
        """Path of the log file, creating the storage directory if needed."""
        self.data_dir.mkdir(parents=True, exist_ok=True)
        return self.data_dir / LOG_FILENAME

    def read_all(self) -> LogDocument:
        """Load the log document, or an empty one if missing or unreadable."""
        log_file = self.log_file
        if not log_file.exists():
            return {}

        try:
            with open(log_file, "r", encoding="utf-8") as f:
                raw = json.load(f)
            return self._decode(raw)
        except (
            json.JSONDecodeError,
            UnicodeDecodeError,
            ValueError,
            RecursionError,
            OSError,
        ):
            self.notifier.error("Failed to parse time tracker log file.")
            return {}

    def write_all(self, document: LogDocument) -> None:
        """Overwrite the log file with the full document."""
        encoded = {
            day: [session.to_dict() for session in sessions]
            for day, sessions in document.items()
        }
        with open(self.log_file, "w", encoding="utf-8") as f:
            json.dump(encoded, f, indent=2, ensure_ascii=False)

    @staticmethod
    def _decode(raw: Any) -> LogDocument:
        if not isinstance(raw, dict):
            raise ValueError("log document must be a JSON object")

        document: LogDocument = {}
        for day, sessions in raw.items():
            if not isinstance(sessions, list):
                raise ValueError(f"sessions for {day} must be a list")
            if not all(isinstance(item, dict) for item in sessions):
                raise ValueError(f"sessions for {day} must be objects")
            document[day] = [Session.from_dict(item) for item in sessions]
        return document
