"""HTTP session management"""

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from .config import Config


def build_session(cfg: Config) -> requests.Session:
    """Pooled session with browser headers and retries on gateway errors.

    POST is not in urllib3's default retry methods, so a claim request is
    never re-sent by the transport.
    """
    session = requests.Session()
    session.headers.update({
        'User-Agent': cfg.user_agent,
        'Accept': 'application/json, text/plain, */*',
        'Accept-Language': 'en-US,en;q=0.5',
        'Origin': cfg.origin,
        'Referer': cfg.origin,
    })

    # Sized for the worker pool so concurrent claims don't queue on connections
    pool_size = max(10, cfg.max_workers)
    adapter = HTTPAdapter(
        pool_connections=10,
        pool_maxsize=pool_size,
        max_retries=Retry(
            total=cfg.max_retries,
            backoff_factor=0.3,
            status_forcelist=[500, 502, 503, 504]
        )
    )
    session.mount('http://', adapter)
    session.mount('https://', adapter)
    return session
