#!/usr/bin/env python3
"""
User-facing notifications for Branch Tracker.
Plays the part of the editor's information / warning / error popups.
"""

import sys
from datetime import datetime

PRODUCT_LABEL = "Branch Tracker"


class Notifier:
    """Handles all messages shown to the user."""

    def __init__(self, verbose: bool = True):
        self.verbose = verbose

    @staticmethod
    def _stamp() -> str:
        return datetime.now().strftime("%H:%M:%S")

    def info(self, message: str) -> None:
        """Show an informational message (suppressed in quiet mode)."""
        if not self.verbose:
            return

        print(f"[{self._stamp()}] {message}")

    def warning(self, message: str) -> None:
        """Show a warning. Always printed."""
        print(f"[{self._stamp()}] [WARN] {message}")

    def error(self, message: str) -> None:
        """Show an error. Always printed, to stderr."""
        print(f"[{self._stamp()}] [ERROR] {message}", file=sys.stderr)

    def labelled(self, message: str) -> str:
        return f"{PRODUCT_LABEL}: {message}"
