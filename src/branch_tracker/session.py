#!/usr/bin/env python3
"""
Session bookkeeping for Branch Tracker.
Opens and closes branch sessions in the log store.
"""

from datetime import datetime
from pathlib import Path
from typing import Callable, Dict, Optional

from .git_branch import BranchResolver
from .notifier import Notifier
from .storage import LogStore, Session, date_key, format_timestamp, utc_now


class SessionController:
    """
    Drives the per-day session state machine (no session / open).

    All changes are a full read-modify-write of the log document. ``start``
    does not refuse to open a second session while one is already running;
    it only warns about it.
    """

    def __init__(
        self,
        store: LogStore,
        notifier: Optional[Notifier] = None,
        resolver: Optional[BranchResolver] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.store = store
        self.notifier = notifier or Notifier()
        self.resolver = resolver or BranchResolver()
        self.clock = clock

    def start(self, branch: str, at: Optional[datetime] = None) -> Session:
        """Append an open session for ``branch`` to today's bucket."""
        now = at or self.clock()
        logs = self.store.read_all()
        day_sessions = logs.setdefault(date_key(now), [])

        if any(session.is_open for session in day_sessions):
            self.notifier.warning(
                self.notifier.labelled("A session is already running today.")
            )

        session = Session(branch=branch, start=format_timestamp(now))
        day_sessions.append(session)
        self.store.write_all(logs)

        self.notifier.info(
            self.notifier.labelled(f"Started tracking on branch: {branch}")
        )
        return session

    def stop(self, at: Optional[datetime] = None) -> Optional[Session]:
        """Close the most recent open session of today, if there is one."""
        now = at or self.clock()
        logs = self.store.read_all()
        day_sessions = logs.get(date_key(now))

        if not day_sessions:
            self.notifier.warning("No running session found to stop.")
            return None

        for session in reversed(day_sessions):
            if session.is_open:
                session.stop = format_timestamp(now)
                self.store.write_all(logs)
                self.notifier.info(self.notifier.labelled("Stopped tracking."))
                return session

        self.notifier.warning(
            self.notifier.labelled("No running session found to stop.")
        )
        return None

    def handle_transition(self, old_branch: Optional[str], new_branch: str) -> None:
        """Close whatever is running and open a session on the new branch."""
        now = self.clock()
        self.stop(at=now)
        self.start(new_branch, at=now)
        self.notifier.info(
            self.notifier.labelled(f"Switched to branch: {new_branch}")
        )

    def start_tracking(self, workspace_path: str) -> Optional[Session]:
        """Explicit start command: resolve the branch fresh, then start."""
        if not workspace_path or not Path(workspace_path).is_dir():
            self.notifier.warning("No workspace folder found.")
            return None

        branch = self.resolver.current_branch(workspace_path)
        if not branch:
            self.notifier.warning("Git branch not found or not a Git repo.")
            return None

        return self.start(branch)

    def branch_totals(self) -> Dict[str, float]:
        """Seconds tracked per branch today, counting open sessions up to now.

        Records whose timestamps cannot be parsed are left out.
        """
        now = self.clock()
        totals: Dict[str, float] = {}
        for session in self.store.read_all().get(date_key(now), []):
            try:
                seconds = session.duration_seconds(until=now)
            except (ValueError, AttributeError):
                continue
            totals[session.branch] = totals.get(session.branch, 0.0) + seconds
        return totals

    def open_session(self) -> Optional[Session]:
        """Most recent open session filed under today, if any."""
        day_sessions = self.store.read_all().get(date_key(self.clock()), [])
        for session in reversed(day_sessions):
            if session.is_open:
                return session
        return None
