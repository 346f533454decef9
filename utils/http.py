"""HTTP session utilities for the deal feed explorer.

Provides a ``SessionManager`` that owns one pooled ``requests.Session`` with
default headers (the feed's static credential) mounted for http and https.
Failed requests are never retried: a failure is reported to the caller once
and the user decides whether to ask again.
"""

from typing import Dict, Optional

import requests
from requests.adapters import HTTPAdapter


class SessionManager:
    """Manages an HTTP session with connection pooling and default headers."""

    def __init__(self, headers: Optional[Dict[str, str]] = None,
                 pool_connections: int = 10, pool_maxsize: int = 20):
        """Initialize session manager.

        Args:
            headers: Headers sent with every request on this session
            pool_connections: Number of connection pools to cache
            pool_maxsize: Maximum number of connections per pool
        """
        self.headers = dict(headers or {})
        self.pool_connections = pool_connections
        self.pool_maxsize = pool_maxsize
        self._session: Optional[requests.Session] = None

    @property
    def session(self) -> requests.Session:
        """Get or create the pooled HTTP session.

        Returns:
            requests.Session object
        """
        if self._session is None:
            self._session = requests.Session()
            self._session.headers.update(self.headers)

            adapter = HTTPAdapter(
                max_retries=0,
                pool_connections=self.pool_connections,
                pool_maxsize=self.pool_maxsize,
            )
            self._session.mount("http://", adapter)
            self._session.mount("https://", adapter)

        return self._session

    def close(self) -> None:
        """Close the session and release resources."""
        if self._session:
            self._session.close()
            self._session = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
