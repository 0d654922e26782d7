"""Blocking HTTP access to the remote sources."""

from __future__ import annotations

import requests

from search_gwas.errors import RemoteIOError


class HttpClient:
    """Thin ``requests`` wrapper that always applies a finite timeout."""

    def __init__(self, session: requests.Session | None = None, *, timeout: float) -> None:
        if timeout <= 0:
            raise ValueError("timeout must be > 0")
        self.session = session if session is not None else requests.Session()
        self.timeout = timeout

    def get_text(self, url: str) -> str:
        """Download ``url`` and decode it as UTF-8."""

        try:
            response = self.session.get(url, timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as exc:
            raise RemoteIOError(f"GET {url} failed: {exc}") from exc

        try:
            return response.content.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise RemoteIOError(f"GET {url} returned non UTF-8 content: {exc}") from exc

    def head_header(self, url: str, header: str) -> str:
        """Issue a HEAD request and return one response header."""

        try:
            response = self.session.head(url, timeout=self.timeout, allow_redirects=True)
            response.raise_for_status()
        except requests.RequestException as exc:
            raise RemoteIOError(f"HEAD {url} failed: {exc}") from exc

        value = response.headers.get(header)
        if not value:
            raise RemoteIOError(f"HEAD {url} returned no {header} header")
        return value

    def close(self) -> None:
        self.session.close()
