# -*- coding: utf-8 -*-
# notices/conf.py
# Purpose:
# Resolve the NOTICES settings dict against app defaults.

from __future__ import annotations

from typing import Any

from django.conf import settings

DEFAULTS: dict[str, Any] = {
    "API_URL": "",
    "RATING_ENDPOINT": "plugin-banner/v1/rating",
    "STORIES_ENDPOINT": "cache/stories.json",
    "HTTP_TIMEOUT": 10,
    "STORIES_REFRESH_INTERVAL": 60 * 60 * 6,
    "RATING_SETTINGS_TTL": 60 * 60 * 12,
    "TOKEN_MAX_AGE": 60 * 60 * 24,
    "REGISTRY": "",
}


def get_setting(name: str) -> Any:
    overrides = getattr(settings, "NOTICES", None) or {}
    if name in overrides:
        return overrides[name]
    return DEFAULTS[name]
