"""Process-wide session credential shared by the authenticator and every redemption task"""

import threading
from datetime import datetime, timezone
from typing import Optional


class CredentialStore:
    """Holds the current session token.

    One writer (the authenticator loop) and many readers (redemption tasks).
    Reads and writes are serialized by an internal lock, so a reader always
    gets the whole token as it was at the moment of the call.
    """

    def __init__(self, token: str = ""):
        self._lock = threading.Lock()
        self._token = token
        self._updated_at: Optional[datetime] = None

    def set(self, token: str):
        """Replace the stored token"""
        with self._lock:
            self._token = token
            self._updated_at = datetime.now(timezone.utc)

    def get(self) -> str:
        """Snapshot of the current token ("" until the first successful login)"""
        with self._lock:
            return self._token

    @property
    def is_authenticated(self) -> bool:
        with self._lock:
            return bool(self._token)

    @property
    def updated_at(self) -> Optional[datetime]:
        with self._lock:
            return self._updated_at
