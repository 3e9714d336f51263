#!/usr/bin/env python3
"""
HTTP client for the remote session store.
Talks to a Supabase table through its PostgREST interface.
"""

from typing import Dict, List, Optional

import requests

from .storage import Session

DEFAULT_TABLE = "timetracker_logs"


class RemoteStoreError(Exception):
    """Raised when an upsert for one date is rejected or cannot be sent."""

    def __init__(self, date: str, message: str):
        super().__init__(message)
        self.date = date
        self.message = message


class SupabaseClient:
    """Upserts one row per date into the remote table."""

    def __init__(
        self,
        url: str,
        anon_key: str,
        table: str = DEFAULT_TABLE,
        timeout: Optional[float] = None,
    ):
        self.url = url.rstrip("/")
        self.anon_key = anon_key
        self.table = table
        self.timeout = timeout

    @property
    def endpoint(self) -> str:
        return f"{self.url}/rest/v1/{self.table}"

    def _get_headers(self) -> Dict[str, str]:
        return {
            "Content-Type": "application/json",
            "apikey": self.anon_key,
            "Authorization": f"Bearer {self.anon_key}",
            "Prefer": "resolution=merge-duplicates,return=minimal",
        }

    @staticmethod
    def create_payload(date: str, sessions: List[Session]) -> List[Dict]:
        return [{"date": date, "logs": [session.to_dict() for session in sessions]}]

    def upsert(self, date: str, sessions: List[Session]) -> None:
        """Replace the remote session list for ``date``."""
        try:
            response = requests.post(
                self.endpoint,
                params={"on_conflict": "date"},
                json=self.create_payload(date, sessions),
                headers=self._get_headers(),
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as e:
            raise RemoteStoreError(date, str(e)) from e

        if response.status_code not in (200, 201, 204):
            raise RemoteStoreError(date, self._error_message(response))

    @staticmethod
    def _error_message(response) -> str:
        try:
            body = response.json()
        except ValueError:
            body = None

        if isinstance(body, dict) and body.get("message"):
            return str(body["message"])
        return f"HTTP {response.status_code} - {response.text}"
