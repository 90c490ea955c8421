# -*- coding: utf-8 -*-
# notices/services/stories.py
# Purpose:
# Dashboard "stories" widget fed by a remote JSON list.
#
# Cache (site options, no expiry):
# - <domain>__stories_data        : last good remote list
# - <domain>__stories_last_check  : unix time of the last good refresh
#
# A failed refresh keeps serving the previous list; there is no hard expiry.

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from pathlib import PurePosixPath
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from django.db import transaction
from django.template.loader import render_to_string

from notices.conf import get_setting
from notices.errors import StorageError, TransientFetchError
from notices.services.options import OptionStore
from notices.services.remote import HttpClient, endpoint_url
from notices.services.visibility import RenderContext

logger = logging.getLogger("noticeboard.notices")

STORIES_SCREEN = "dashboard"
ACTIVE_PLUGINS_OPTION = "active_plugins"
TEST_MODE_INTERVAL = 1


def split_tags(value) -> List[str]:
    return [v.strip() for v in str(value or "").split(",") if v.strip()]


def _to_int(value, default: int = 0) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


@dataclass(frozen=True)
class StoryItem:
    id: str
    title: str = ""
    description: str = ""
    type: str = ""
    priority: int = 0
    start: int = 0
    end: int = 0
    plugins: Tuple[str, ...] = ()
    story_link: str = ""
    story_image: str = ""
    whitelist: str = ""
    blacklist: str = ""

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "StoryItem":
        data = raw.get("data") or {}
        if not isinstance(data, dict):
            data = {}
        plugins = raw.get("plugins")
        if plugins in (None, ""):
            plugins = ()
        elif not isinstance(plugins, (list, tuple)):
            plugins = (plugins,)
        return cls(
            id=str(raw.get("id", "")),
            title=str(raw.get("title") or ""),
            description=str(raw.get("description") or ""),
            type=str(raw.get("type") or ""),
            priority=_to_int(raw.get("priority")),
            start=_to_int(raw.get("start")),
            end=_to_int(raw.get("end")),
            plugins=tuple(str(p) for p in plugins),
            story_link=str(data.get("story_link") or ""),
            story_image=str(data.get("story_image") or ""),
            whitelist=str(data.get("whitelist") or ""),
            blacklist=str(data.get("blacklist") or ""),
        )

    def in_window(self, now: int) -> bool:
        if not self.start or not self.end:
            return True
        return self.start <= now <= self.end

    def applies_to(self, slugs: Iterable[str]) -> bool:
        return bool(set(slugs) & set(self.plugins))

    def is_blacklisted(self, tags: Sequence[str]) -> bool:
        own = split_tags(self.blacklist)
        if not own or not tags:
            return False
        return bool(set(own) & set(tags))


@dataclass(frozen=True)
class StoriesConfig:
    domain: str
    title: str = ""
    api_url: str = ""
    refresh_interval: Optional[int] = None
    test_mode: bool = False
    filter_string: str = ""
    plugin_links: Tuple[Tuple[str, str], ...] = ()

    def interval(self) -> int:
        if self.test_mode:
            return TEST_MODE_INTERVAL
        if self.refresh_interval is not None:
            return int(self.refresh_interval)
        return int(get_setting("STORIES_REFRESH_INTERVAL"))

    def widget_title(self) -> str:
        return f"{self.title} Stories" if self.title else "Stories"


def active_plugin_slugs(store: OptionStore) -> List[str]:
    """Slugs from the active_plugins option ("slug/slug.py" -> "slug")."""
    raw = store.get(ACTIVE_PLUGINS_OPTION) or []
    if isinstance(raw, str):
        raw = [raw]
    elif not isinstance(raw, (list, tuple)):
        return []
    slugs = []
    for path in raw:
        stem = PurePosixPath(str(path)).stem
        if stem:
            slugs.append(stem)
    return slugs


def select_stories(
    items: Iterable[StoryItem],
    *,
    domain: str,
    active_plugins: Iterable[str] = (),
    filter_string: str = "",
    now: Optional[int] = None,
) -> List[StoryItem]:
    """
    Filter in order: time window, applicability to the domain or an active
    plugin, caller blacklist. Then first-wins dedup by id and a stable sort
    by ascending priority.
    """
    now = int(time.time()) if now is None else int(now)
    applicable = [domain] + [p for p in active_plugins if p]
    tags = split_tags(filter_string)

    picked: Dict[str, StoryItem] = {}
    for item in items:
        if not item.in_window(now):
            continue
        if not item.applies_to(applicable):
            continue
        if item.is_blacklisted(tags):
            continue
        if item.id in picked:
            continue
        picked[item.id] = item

    return sorted(picked.values(), key=lambda s: s.priority)


class StoriesFeed:
    def __init__(
        self,
        config: StoriesConfig,
        store: OptionStore,
        *,
        client: Optional[HttpClient] = None,
    ):
        self.config = config
        self.store = store
        self.client = client or HttpClient()

    @property
    def data_key(self) -> str:
        return f"{self.config.domain}__stories_data"

    @property
    def last_check_key(self) -> str:
        return f"{self.config.domain}__stories_last_check"

    def now(self) -> int:
        return int(self.store.now().timestamp())

    def cached(self) -> List[Dict[str, Any]]:
        data = self.store.get(self.data_key)
        return data if isinstance(data, list) else []

    def last_check(self) -> int:
        return _to_int(self.store.get(self.last_check_key), 0)

    def is_due(self) -> bool:
        return self.now() - self.last_check() >= self.config.interval()

    def refresh(self, *, force: bool = False) -> bool:
        """
        Pull the remote list when due. Returns True when the cache was
        replaced. Never raises: failures are logged and the old list stays.
        """
        if not force and not self.is_due():
            return False

        api_url = self.config.api_url or get_setting("API_URL")
        if not api_url:
            return False

        url = endpoint_url(api_url, get_setting("STORIES_ENDPOINT"))
        now = self.now()
        try:
            fetched = self.client.get_json(url, params={"nocache": now})
        except TransientFetchError as exc:
            logger.info("stories fetch failed domain=%s error=%s", self.config.domain, exc)
            return False

        # the feed may be keyed by story id
        if isinstance(fetched, dict):
            fetched = list(fetched.values())
        if not isinstance(fetched, list) or not fetched:
            logger.info("stories fetch returned no items domain=%s", self.config.domain)
            return False

        try:
            with transaction.atomic():
                self.store.set(self.data_key, fetched)
                self.store.set(self.last_check_key, now)
        except StorageError:
            logger.exception("stories cache write failed domain=%s", self.config.domain)
            return False
        return True

    def items(self) -> List[StoryItem]:
        out = []
        for raw in self.cached():
            if isinstance(raw, dict) and raw.get("id") not in (None, ""):
                out.append(StoryItem.from_dict(raw))
        return out

    def stories(self, active_plugins: Optional[Iterable[str]] = None) -> List[StoryItem]:
        if active_plugins is None:
            active_plugins = active_plugin_slugs(self.store)
        return select_stories(
            self.items(),
            domain=self.config.domain,
            active_plugins=active_plugins,
            filter_string=self.config.filter_string,
            now=self.now(),
        )

    def render(self, context: RenderContext) -> str:
        if context.screen_id != STORIES_SCREEN:
            return ""
        if not context.claim("stories-widget"):
            return ""

        self.refresh()
        stories = self.stories()
        if not stories:
            return ""

        return render_to_string(
            "notices/stories_widget.html",
            {
                "widget_id": "noticeboard-stories",
                "widget_title": self.config.widget_title(),
                "stories": [
                    {
                        "id": s.id,
                        "title": s.title,
                        "description": s.description,
                        "type": s.type,
                        "link": s.story_link,
                        "image": s.story_image,
                    }
                    for s in stories
                ],
                "plugin_links": [
                    {"title": title, "url": url} for title, url in self.config.plugin_links
                ],
            },
        )
