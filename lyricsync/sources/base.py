from __future__ import annotations

from typing import Any

import requests

from lyricsync.config import APP_PLATFORM, DEFAULT_USER_AGENT


class HttpStage:
    """
    Common plumbing of the pipeline stages.

    `http` is anything with a requests-style `get`: the `requests` module itself
    (default), a `requests.Session`, or a fake in tests.
    """

    def __init__(
        self,
        *,
        http: Any = None,
        user_agent: str = DEFAULT_USER_AGENT,
        app_platform: str = APP_PLATFORM,
        timeout_s: float = 10.0,
    ):
        self.http = http if http is not None else requests
        self.user_agent = user_agent
        self.app_platform = app_platform
        self.timeout_s = timeout_s

    def _client_headers(self) -> dict[str, str]:
        return {
            "User-Agent": self.user_agent,
            "App-platform": self.app_platform,
            "Content-Type": "text/html; charset=utf-8",
        }

    @staticmethod
    def _bearer(token: str) -> dict[str, str]:
        return {"Authorization": f"Bearer {token}"}

    def _get(self, url: str, headers: dict[str, str]) -> requests.Response:
        return self.http.get(url, headers=headers, timeout=self.timeout_s)
