"""Tests for the BranchTracker command surface."""

import json
import os
import tempfile
import unittest
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from branch_tracker.config import Config
from branch_tracker.core import BranchTracker, format_duration


class TestBranchTracker(unittest.TestCase):
    """Test cases for BranchTracker class."""

    def setUp(self):
        """Set up test fixtures."""
        self.temp_dir = tempfile.mkdtemp()
        self.workspace = Path(self.temp_dir) / "repo"
        self.workspace.mkdir()
        config = Config(config_dir=os.path.join(self.temp_dir, "config"))
        config.update(
            {
                "data_dir": os.path.join(self.temp_dir, "data"),
                "workspace": str(self.workspace),
                "verbose_logging": False,
            }
        )
        self.tracker = BranchTracker(config)
        self.tracker.controller.resolver = MagicMock()
        self.tracker.controller.resolver.current_branch.return_value = "main"

        self.env_patcher = patch.dict(os.environ, {}, clear=False)
        self.env_patcher.start()
        os.environ.pop("BRANCH_TRACKER_SUPABASE_URL", None)
        os.environ.pop("BRANCH_TRACKER_SUPABASE_ANON_KEY", None)

    def tearDown(self):
        """Clean up test fixtures."""
        self.env_patcher.stop()
        import shutil

        shutil.rmtree(self.temp_dir)

    def test_components_share_configuration(self):
        self.assertEqual(
            self.tracker.store.data_dir, Path(self.temp_dir) / "data"
        )
        self.assertFalse(self.tracker.notifier.verbose)
        self.assertIs(self.tracker.sync_manager.store, self.tracker.store)

    def test_start_and_stop(self):
        self.assertTrue(self.tracker.start())
        self.assertTrue(self.tracker.stop())

        logs = self.tracker.store.read_all()
        (day_sessions,) = logs.values()
        self.assertEqual(len(day_sessions), 1)
        self.assertFalse(day_sessions[0].is_open)

    def test_stop_without_session(self):
        with patch("builtins.print"):
            self.assertFalse(self.tracker.stop())

    def test_sync_without_credentials(self):
        with patch("builtins.print"):
            self.assertFalse(self.tracker.sync())

    @patch("requests.post")
    def test_sync_with_credentials(self, mock_post):
        mock_post.return_value = MagicMock(status_code=201)
        self.tracker.credentials.save("https://abc.supabase.co", "anon")
        self.tracker.start()

        self.assertTrue(self.tracker.sync())
        mock_post.assert_called_once()

    @patch("branch_tracker.core.getpass", return_value="anon")
    @patch("builtins.input", return_value="https://abc.supabase.co")
    def test_set_credentials(self, mock_input, mock_getpass):
        self.assertTrue(self.tracker.set_credentials())

        with open(self.tracker.credentials.credentials_file, encoding="utf-8") as f:
            saved = json.load(f)
        self.assertEqual(saved["supabaseUrl"], "https://abc.supabase.co")
        self.assertEqual(saved["supabaseAnonKey"], "anon")

    @patch("branch_tracker.core.getpass")
    @patch("builtins.input", return_value="")
    def test_set_credentials_requires_url(self, mock_input, mock_getpass):
        with patch("builtins.print") as mock_print:
            self.assertFalse(self.tracker.set_credentials())

        mock_getpass.assert_not_called()
        self.assertIn("Supabase URL is required.", mock_print.call_args[0][0])
        self.assertIsNone(self.tracker.credentials.get())

    def test_status(self):
        self.tracker.start()

        with patch("builtins.print") as mock_print:
            self.assertTrue(self.tracker.status())

        first_line = mock_print.call_args_list[0][0][0]
        self.assertTrue(first_line.startswith("Running session: main since "))
        mock_print.assert_any_call("Today:")

    @patch("branch_tracker.core.BranchWatcher")
    def test_watch_wires_transitions(self, mock_watcher_class):
        mock_watcher_class.return_value.watch.return_value = True

        self.assertTrue(self.tracker.watch())

        args, kwargs = mock_watcher_class.call_args
        self.assertEqual(args[0], str(self.workspace))
        self.assertEqual(args[1], self.tracker.controller.handle_transition)
        self.assertIs(kwargs["resolver"], self.tracker.controller.resolver)


@pytest.mark.integration
def test_branch_switch_end_to_end(temp_dir):
    """A HEAD change seen by the watcher becomes a stop + start in the log."""
    workspace = Path(temp_dir) / "repo"
    (workspace / ".git").mkdir(parents=True)
    head = workspace / ".git" / "HEAD"
    head.write_text("ref: refs/heads/main\n")

    config = Config(config_dir=os.path.join(temp_dir, "config"))
    config.update(
        {
            "data_dir": os.path.join(temp_dir, "data"),
            "workspace": str(workspace),
            "verbose_logging": False,
        }
    )
    tracker = BranchTracker(config)
    resolver = MagicMock()
    resolver.current_branch.return_value = "main"
    tracker.controller.resolver = resolver
    tracker.start()

    with patch("branch_tracker.core.BranchWatcher.watch", return_value=True):
        tracker.watch()
    tracker.watcher.prime()

    head.write_text("ref: refs/heads/feature-x\n")
    resolver.current_branch.return_value = "feature-x"
    tracker.watcher.poll_once()

    (day_sessions,) = tracker.store.read_all().values()
    assert [s.branch for s in day_sessions] == ["main", "feature-x"]
    assert not day_sessions[0].is_open
    assert day_sessions[1].is_open
    assert day_sessions[0].stop == day_sessions[1].start


@pytest.mark.unit
def test_format_duration():
    assert format_duration(0) == "0:00:00"
    assert format_duration(3725.9) == "1:02:05"
    assert format_duration(-5) == "0:00:00"
