"""
HTTP fetcher for source documents.

One GET per source, no retries, no caching.  Every failure is raised as
SourceFetchError so the orchestrator can record it against the source and
move on.

requests.Session is not thread-safe, so unless a session is passed in,
every worker thread gets its own.  A Fetcher is meant to live for one run:
use it as a context manager so its sessions (cookies, pooled connections)
are closed when the run ends.
"""

import threading
from typing import Optional

import requests

from .exceptions import SourceFetchError
from .markup import detect_charset_from_bytes, map_charset, sanitize_document
from .logger import get_module_logger

logger = get_module_logger("fetcher")


class Fetcher:
    """Fetches source documents over HTTP."""

    def __init__(
        self,
        user_agent: str,
        timeout: float = 20.0,
        session: Optional[requests.Session] = None
    ):
        self.timeout = timeout
        self.headers = {
            "User-Agent": user_agent,
            # Always hit the origin; results are never cached
            "Cache-Control": "no-cache",
            "Pragma": "no-cache",
        }
        self._shared = session
        if session is not None:
            session.headers.update(self.headers)

        self._local = threading.local()
        self._lock = threading.Lock()
        self._sessions: list[requests.Session] = []

    def __enter__(self) -> "Fetcher":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    @property
    def session(self) -> requests.Session:
        """The injected session, or the calling thread's own one."""
        if self._shared is not None:
            return self._shared

        session = getattr(self._local, "session", None)
        if session is None:
            session = requests.Session()
            session.headers.update(self.headers)
            self._local.session = session
            with self._lock:
                self._sessions.append(session)
        return session

    def fetch(self, url: str) -> str:
        """
        Fetch a document and return its text.

        Raises:
            SourceFetchError: transport failure or non-2xx status
        """
        logger.debug(f"GET {url}")
        try:
            response = self.session.get(url, timeout=self.timeout)
        except requests.RequestException as e:
            raise SourceFetchError(str(e) or e.__class__.__name__, source=url,
                                   details={"url": url, "type": e.__class__.__name__})

        if not 200 <= response.status_code < 300:
            raise SourceFetchError(f"HTTP {response.status_code}", source=url,
                                   status_code=response.status_code,
                                   details={"url": url})

        return sanitize_document(self.decode_body(response))

    @staticmethod
    def decode_body(response: requests.Response) -> str:
        """
        Decode the body like a browser would.

        Charset precedence: Content-Type header, then <meta> declaration,
        then UTF-8.  Undecodable bytes are replaced.
        """
        raw_bytes = response.content or b""
        charset = _header_charset(response.headers.get("Content-Type", ""))
        if not charset:
            charset = detect_charset_from_bytes(raw_bytes) or "utf-8"

        try:
            return raw_bytes.decode(charset, errors="replace")
        except LookupError:
            logger.warning(f"Unknown charset '{charset}', decoding as utf-8")
            return raw_bytes.decode("utf-8", errors="replace")

    def close(self) -> None:
        """Close every session this fetcher opened; an injected one is left alone."""
        with self._lock:
            sessions, self._sessions = self._sessions, []
        for session in sessions:
            session.close()
        self._local = threading.local()


def _header_charset(content_type: str) -> Optional[str]:
    for part in content_type.split(";")[1:]:
        key, _, value = part.partition("=")
        if key.strip().lower() == "charset" and value.strip():
            return map_charset(value.strip().strip("\"'"))
    return None
