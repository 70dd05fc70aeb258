"""Krampus login and the periodic session refresh loop"""

import asyncio
from typing import Optional

import requests

from .config import Config
from .credentials import CredentialStore
from .logs import log_error, log_success, log_warning
from .trpc import INVALID_RESPONSE, decode_batch, encode_batch, error_message

SESSION_COOKIE = "_session"


class AuthenticationError(Exception):
    """Raised by the refresh loop when a login fails under the "exit" policy"""


class Authenticator:
    """Exchanges the configured login for a session cookie and keeps it fresh"""

    def __init__(self, cfg: Config, store: CredentialStore, session: requests.Session):
        self.cfg = cfg
        self.store = store
        self.session = session
        self.login_url = f"{cfg.api_url}/trpc/auth.logIn"

    def login(self) -> Optional[str]:
        """Log in once. Returns None on success, otherwise the failure reason.

        The store is only written on success.
        """
        body = encode_batch([{
            "emailOrUsername": self.cfg.login,
            "password": self.cfg.password,
        }])

        try:
            resp = self.session.post(
                self.login_url,
                params={"batch": 1},
                json=body,
                timeout=self.cfg.timeout
            )
            entries = decode_batch(resp.json(), 1)
        except Exception as e:
            return str(e) or type(e).__name__

        entry = entries[0]

        message = error_message(entry)
        if message is not None:
            return message

        if not isinstance(entry, dict) or "result" not in entry:
            return INVALID_RESPONSE

        cookie = resp.cookies.get(SESSION_COOKIE, "")
        if not cookie:
            log_warning(f"Login succeeded but no {SESSION_COOKIE} cookie was returned")

        self.store.set(cookie)
        return None

    async def run_forever(self):
        """Log in now and then every auth_interval seconds.

        Under the "exit" policy the first failure raises AuthenticationError;
        under "retry" it is reported and the next period tries again.
        """
        while True:
            reason = await asyncio.to_thread(self.login)

            if reason is None:
                if self.cfg.verbose:
                    log_success("Logged into Krampus")
            else:
                log_error(f"Failed to Login: {reason}")
                if self.cfg.auth_failure_policy == "exit":
                    raise AuthenticationError(reason)

            await asyncio.sleep(self.cfg.auth_interval)
