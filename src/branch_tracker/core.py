#!/usr/bin/env python3
"""
Branch Tracker
Wires the log store, branch watcher, session controller and sync manager.
"""

from getpass import getpass
from typing import Optional

from .config import Config, get_config
from .credentials import CredentialStore
from .git_branch import BranchWatcher
from .notifier import Notifier
from .session import SessionController
from .storage import LogStore
from .sync import SyncManager


def format_duration(seconds: float) -> str:
    """Format seconds as H:MM:SS."""
    total = max(int(seconds), 0)
    hours, remainder = divmod(total, 3600)
    minutes, secs = divmod(remainder, 60)
    return f"{hours}:{minutes:02d}:{secs:02d}"


class BranchTracker:
    """
    Command surface of Branch Tracker.

    Each command method returns True on success and False on failure.
    """

    def __init__(self, config: Optional[Config] = None):
        self.config = config or get_config()
        self.notifier = Notifier(verbose=self.config.verbose_logging)

        self.store = LogStore(str(self.config.data_dir), self.notifier)
        self.credentials = CredentialStore(str(self.config.config_dir))
        self.controller = SessionController(self.store, self.notifier)
        self.sync_manager = SyncManager(
            self.store,
            self.credentials,
            self.notifier,
            table=self.config.table,
            timeout=self.config.request_timeout,
        )
        self.watcher: Optional[BranchWatcher] = None

    def set_credentials(self) -> bool:
        """Prompt for the Supabase URL and anon key and store them."""
        url = input("Enter your Supabase URL: ").strip()
        if not url:
            self.notifier.warning("Supabase URL is required.")
            return False

        anon_key = getpass("Enter your Supabase anon key: ").strip()
        if not anon_key:
            self.notifier.warning("Supabase anon key is required.")
            return False

        self.credentials.save(url, anon_key)
        self.notifier.info(
            self.notifier.labelled("Supabase credentials saved securely!")
        )
        return True

    def start(self) -> bool:
        return self.controller.start_tracking(self.config.workspace) is not None

    def stop(self) -> bool:
        return self.controller.stop() is not None

    def sync(self) -> bool:
        return self.sync_manager.sync()["success"]

    def status(self) -> bool:
        """Print the running session, today's time per branch and day count."""
        session = self.controller.open_session()
        if session:
            print(f"Running session: {session.branch} since {session.start}")
        else:
            print("No running session today")

        totals = self.controller.branch_totals()
        if totals:
            print("Today:")
            for branch, seconds in sorted(
                totals.items(), key=lambda x: x[1], reverse=True
            ):
                print(f"  {format_duration(seconds)}  {branch}")

        print(f"Days recorded: {len(self.store.read_all())}")
        print(f"Log file: {self.store.log_file}")
        return True

    def watch(self) -> bool:
        """Follow branch switches in the workspace until interrupted."""
        if self.credentials.get() is None:
            self.notifier.info(
                self.notifier.labelled(
                    "Supabase credentials are not set. "
                    'Run "set-credentials" command to configure.'
                )
            )

        self.watcher = BranchWatcher(
            self.config.workspace,
            self.controller.handle_transition,
            resolver=self.controller.resolver,
            notifier=self.notifier,
            poll_interval=self.config.poll_interval,
        )
        return self.watcher.watch()
