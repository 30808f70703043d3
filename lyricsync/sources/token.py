from __future__ import annotations

import logging
from typing import Any

import requests

from lyricsync.config import DEFAULT_TOKEN_URL
from lyricsync.errors import MissingTokenError, TokenTransportError

from .base import HttpStage
from .types import BearerToken

logger = logging.getLogger(__name__)


class TokenProvider(HttpStage):
    def __init__(self, sp_dc: str, *, token_url: str = DEFAULT_TOKEN_URL, **kwargs: Any):
        super().__init__(**kwargs)
        self.sp_dc = sp_dc
        self.token_url = token_url

    def fetch_token(self) -> BearerToken:
        """Exchange the sp_dc session cookie for a short-lived web player token."""
        headers = {"Cookie": f"sp_dc={self.sp_dc};", **self._client_headers()}
        try:
            r = self._get(self.token_url, headers)
        except requests.RequestException as e:
            logger.warning("Failed to fetch token: %s", e)
            raise TokenTransportError(str(e)) from e

        try:
            data = r.json()
        except ValueError as e:
            logger.warning("Token response is not JSON (HTTP %s)", r.status_code)
            raise MissingTokenError("token response is not JSON") from e

        token = data.get("accessToken") if isinstance(data, dict) else None
        if not isinstance(token, str) or not token:
            logger.warning("Access token is missing or invalid (HTTP %s)", r.status_code)
            raise MissingTokenError("access token is missing or invalid")
        return BearerToken(token)
