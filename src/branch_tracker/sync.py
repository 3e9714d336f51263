#!/usr/bin/env python3
"""
Sync Manager for Branch Tracker
Pushes every date bucket of the local log to the remote store.
"""

from typing import Any, Callable, Dict, Optional

from .credentials import CredentialStore, MissingCredentialsError
from .http_sync import DEFAULT_TABLE, RemoteStoreError, SupabaseClient
from .notifier import Notifier
from .storage import LogStore


class SyncResultCollector:
    """Collects the outcome of one sync run."""

    def __init__(self):
        self.results: Dict[str, Any] = {
            "synced": [],
            "failed_date": None,
            "error": None,
        }

    def record_sync_success(self, date: str):
        self.results["synced"].append(date)

    def record_sync_failure(self, date: str, message: str):
        self.results["failed_date"] = date
        self.results["error"] = message

    def record_config_error(self, message: str):
        self.results["error"] = message

    @property
    def succeeded(self) -> bool:
        return self.results["error"] is None

    def get_results(self) -> Dict[str, Any]:
        results = dict(self.results)
        results["synced"] = list(self.results["synced"])
        results["success"] = self.succeeded
        return results


class SyncManager:
    """
    Reconciles the local log with the remote table.

    Each date is upserted on its own, in the order the log file lists
    them. The first failing date ends the run; dates already pushed stay
    pushed and nothing is retried.
    """

    def __init__(
        self,
        store: LogStore,
        credentials: CredentialStore,
        notifier: Optional[Notifier] = None,
        table: str = DEFAULT_TABLE,
        timeout: Optional[float] = None,
        client_factory: Callable[..., SupabaseClient] = SupabaseClient,
    ):
        self.store = store
        self.credentials = credentials
        self.notifier = notifier or Notifier()
        self.table = table
        self.timeout = timeout
        self.client_factory = client_factory

    def create_client(self) -> SupabaseClient:
        url, anon_key = self.credentials.require()
        return self.client_factory(
            url, anon_key, table=self.table, timeout=self.timeout
        )

    def sync(self) -> Dict[str, Any]:
        """Upsert every date in the log. See SyncResultCollector for the result."""
        result_collector = SyncResultCollector()

        try:
            client = self.create_client()
        except MissingCredentialsError as e:
            self.notifier.error(str(e))
            result_collector.record_config_error(str(e))
            return result_collector.get_results()

        logs = self.store.read_all()
        if not logs:
            self.notifier.warning("No local logs found to sync.")
            return result_collector.get_results()

        for date, day_sessions in logs.items():
            try:
                client.upsert(date, day_sessions)
            except RemoteStoreError as e:
                self.notifier.error(f"Failed to sync logs for date {date}: {e.message}")
                result_collector.record_sync_failure(date, e.message)
                return result_collector.get_results()

            result_collector.record_sync_success(date)

        self.notifier.info(self.notifier.labelled("Logs synced successfully!"))
        return result_collector.get_results()
