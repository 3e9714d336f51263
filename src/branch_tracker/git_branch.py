#!/usr/bin/env python3
"""
Git branch detection for Branch Tracker.
Resolves the checked-out branch and watches HEAD for branch switches.
"""

import subprocess  # nosec B404 - Required for git integration
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional, Tuple

from .notifier import Notifier

HeadSignature = Tuple[int, int, bytes]
TransitionHandler = Callable[[Optional[str], str], None]

EVENT_CREATED = "created"
EVENT_MODIFIED = "modified"
EVENT_DELETED = "deleted"


class BranchResolver:
    """Resolves the current branch name with the git CLI."""

    def current_branch(self, workspace_path: str) -> Optional[str]:
        """Return the checked-out branch, or None if it cannot be resolved."""
        try:
            result = subprocess.run(  # nosec B603 B607
                ["git", "rev-parse", "--abbrev-ref", "HEAD"],
                cwd=workspace_path,
                capture_output=True,
                text=True,
                check=True,
            )
        except (OSError, subprocess.CalledProcessError) as e:
            print(f"Failed to get Git branch: {e}")
            return None

        branch = result.stdout.strip()
        return branch or None


@dataclass
class WatcherState:
    """State owned by a single BranchWatcher between polls."""

    last_branch: Optional[str] = None
    head_signature: Optional[HeadSignature] = None


class BranchWatcher:
    """
    Watches ``.git/HEAD`` in a workspace and reports branch transitions.

    Each poll compares the HEAD file against the previous snapshot and
    turns the difference into a created / modified / deleted event.
    Events are not debounced: every change triggers its own resolution.
    """

    def __init__(
        self,
        workspace_path: str,
        on_transition: TransitionHandler,
        resolver: Optional[BranchResolver] = None,
        notifier: Optional[Notifier] = None,
        poll_interval: float = 1.0,
        state: Optional[WatcherState] = None,
    ):
        self.workspace_path = workspace_path
        self.on_transition = on_transition
        self.notifier = notifier or Notifier()
        self.resolver = resolver or BranchResolver()
        self.poll_interval = poll_interval
        self.state = state or WatcherState()
        self.running = False

    @property
    def head_path(self) -> Path:
        return Path(self.workspace_path) / ".git" / "HEAD"

    def _snapshot(self) -> Optional[HeadSignature]:
        try:
            stat = self.head_path.stat()
            return (stat.st_mtime_ns, stat.st_size, self.head_path.read_bytes())
        except OSError:
            return None

    def prime(self) -> None:
        """Record the current branch and HEAD snapshot without firing."""
        self.state.head_signature = self._snapshot()
        self.state.last_branch = self.resolver.current_branch(self.workspace_path)

    def poll_once(self) -> Optional[str]:
        """Check HEAD once, dispatch any event and return its name."""
        previous = self.state.head_signature
        current = self._snapshot()
        self.state.head_signature = current

        if previous is None and current is None:
            return None
        if previous is None:
            event = EVENT_CREATED
        elif current is None:
            event = EVENT_DELETED
        elif previous != current:
            event = EVENT_MODIFIED
        else:
            return None

        self.handle_event(event)
        return event

    def handle_event(self, event: str) -> None:
        if event == EVENT_DELETED:
            # Next resolved branch counts as a fresh start
            self.state.last_branch = None
            return

        self.handle_branch_change()

    def handle_branch_change(self) -> None:
        """Resolve the branch and fire a transition if it changed."""
        new_branch = self.resolver.current_branch(self.workspace_path)
        if not new_branch or new_branch == self.state.last_branch:
            return

        old_branch = self.state.last_branch
        self.state.last_branch = new_branch
        self.on_transition(old_branch, new_branch)

    def watch(self) -> bool:
        """Poll HEAD until stopped. Returns False if there is nothing to watch."""
        if not self.head_path.exists():
            self.notifier.warning(".git/HEAD not found, not a Git repo.")
            return False

        self.prime()
        self.running = True
        print("Watching for Git branch changes...")

        while self.running:
            try:
                self.poll_once()
                time.sleep(self.poll_interval)
            except KeyboardInterrupt:
                self.running = False
                break

        return True

    def stop(self) -> None:
        self.running = False
