"""
Branch Tracker - per-branch working time tracking for git workspaces.

This package records how long you work on each git branch:

- Sessions opened and closed per branch, bucketed by UTC date
- Automatic stop/start when the checked-out branch changes
- JSON-based local log storage
- Per-date upsert of the log to a Supabase table
"""

__version__ = "0.1.0"
__license__ = "MIT"

from .core import BranchTracker
from .session import SessionController
from .storage import LogStore, Session
from .sync import SyncManager

__all__ = [
    "BranchTracker",
    "LogStore",
    "Session",
    "SessionController",
    "SyncManager",
]
