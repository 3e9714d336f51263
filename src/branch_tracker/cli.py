#!/usr/bin/env python3
"""
Command line interface for Branch Tracker.
Usage: branch-tracker <command>
"""

import sys
from typing import List, Optional

from .core import BranchTracker

COMMANDS = {
    "set-credentials": "set_credentials",
    "start": "start",
    "stop": "stop",
    "sync": "sync",
    "watch": "watch",
    "status": "status",
}


def print_help() -> None:
    print("Branch Tracker")
    print("Usage: branch-tracker <command>")
    print("Commands:")
    print("  set-credentials   Store the Supabase URL and anon key")
    print("  start             Start tracking the current branch")
    print("  stop              Stop the running session")
    print("  sync              Upload all local logs to Supabase")
    print("  watch             Follow branch switches until interrupted")
    print("  status            Show the running session")
    print("\nEnvironment Variables:")
    print("  BRANCH_TRACKER_WORKSPACE           Workspace to track (default: cwd)")
    print("  BRANCH_TRACKER_DATA_DIR            Where the session log is kept")
    print("  BRANCH_TRACKER_SUPABASE_URL        Overrides the stored URL")
    print("  BRANCH_TRACKER_SUPABASE_ANON_KEY   Overrides the stored anon key")


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point. Returns the process exit status."""
    args = sys.argv[1:] if argv is None else argv

    if not args or "--help" in args or "-h" in args:
        print_help()
        return 0

    command = args[0]
    if command not in COMMANDS:
        print(f"Unknown command: {command}")
        print("Use --help for usage information")
        return 1

    tracker = BranchTracker()
    try:
        succeeded = getattr(tracker, COMMANDS[command])()
    except KeyboardInterrupt:
        print("\nReceived interrupt signal")
        return 1
    except EOFError:
        print("\nNo input available")
        return 1

    return 0 if succeeded else 1


if __name__ == "__main__":
    sys.exit(main())
