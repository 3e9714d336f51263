#!/usr/bin/env python3
"""
Credential storage for the remote session store.
Keeps the Supabase URL and anon key in an owner-only file.
"""

import json
import os
from pathlib import Path
from typing import Dict, Optional, Tuple

URL_KEY = "supabaseUrl"
ANON_KEY_KEY = "supabaseAnonKey"  # nosec B105

ENV_OVERRIDES = {
    URL_KEY: "BRANCH_TRACKER_SUPABASE_URL",
    ANON_KEY_KEY: "BRANCH_TRACKER_SUPABASE_ANON_KEY",  # nosec B105
}


class MissingCredentialsError(Exception):
    """Raised when the URL or the anon key has not been set."""


class CredentialStore:
    """Stores the two named secrets used for syncing."""

    def __init__(self, config_dir: str):
        self.config_dir = Path(config_dir)
        self.credentials_file = self.config_dir / "credentials.json"

    def _load(self) -> Dict[str, str]:
        if not self.credentials_file.exists():
            return {}

        try:
            with open(self.credentials_file, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, IOError) as e:
            print(f"Warning: Could not read credentials file: {e}")
            return {}

        return data if isinstance(data, dict) else {}

    def get_secret(self, name: str) -> Optional[str]:
        env_value = os.getenv(ENV_OVERRIDES.get(name, ""), "")
        if env_value:
            return env_value
        return self._load().get(name) or None

    def get(self) -> Optional[Tuple[str, str]]:
        """Return (url, anon_key), or None if either is missing."""
        url = self.get_secret(URL_KEY)
        anon_key = self.get_secret(ANON_KEY_KEY)
        if not url or not anon_key:
            return None
        return url, anon_key

    def require(self) -> Tuple[str, str]:
        credentials = self.get()
        if credentials is None:
            raise MissingCredentialsError(
                'Supabase credentials not set. Please run "set-credentials" command.'
            )
        return credentials

    def save(self, url: str, anon_key: str) -> None:
        """Write both secrets, readable by the owner only."""
        self.config_dir.mkdir(parents=True, exist_ok=True)
        self.config_dir.chmod(0o700)

        data = self._load()
        data.update({URL_KEY: url, ANON_KEY_KEY: anon_key})

        with open(self.credentials_file, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)
        self.credentials_file.chmod(0o600)
