# -*- coding: utf-8 -*-
# notices/services/remote.py
# Purpose:
# Thin GET client for the banner service (rating flags, stories feed).
# Every failure surfaces as TransientFetchError; callers decide whether to
# keep serving cached data.

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

import requests

from notices.conf import get_setting
from notices.errors import TransientFetchError

logger = logging.getLogger("noticeboard.notices")


@dataclass(frozen=True)
class RemoteResponse:
    status: int
    body: str

    def json(self) -> Any:
        try:
            return json.loads(self.body)
        except ValueError as exc:
            raise TransientFetchError("response body is not JSON") from exc


class HttpClient:
    def __init__(self, timeout: Optional[float] = None):
        self.timeout = float(timeout if timeout is not None else get_setting("HTTP_TIMEOUT"))

    def get(self, url: str, params: Optional[Dict[str, Any]] = None) -> RemoteResponse:
        try:
            resp = requests.get(url, params=params, timeout=self.timeout)
        except requests.RequestException as exc:
            logger.warning("remote GET failed url=%s error=%s", url, exc)
            raise TransientFetchError(f"GET {url} failed") from exc
        return RemoteResponse(status=resp.status_code, body=resp.text or "")

    def get_json(self, url: str, params: Optional[Dict[str, Any]] = None) -> Any:
        resp = self.get(url, params=params)
        if resp.status != 200:
            logger.warning("remote GET non-200 url=%s status=%s", url, resp.status)
            raise TransientFetchError(f"GET {url} returned {resp.status}")
        if not resp.body.strip():
            raise TransientFetchError(f"GET {url} returned an empty body")
        return resp.json()


def endpoint_url(api_url: str, endpoint: str) -> str:
    base = (api_url or "").rstrip("/") + "/"
    return base + (endpoint or "").lstrip("/")
