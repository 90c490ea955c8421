# -*- coding: utf-8 -*-
# notices/services/rating.py
# Purpose:
# "Please rate us" prompt for a plugin domain.
#
# Persisted per domain (site options):
# - <domain>_install_date       : ISO timestamp, written once on first evaluation
# - <domain>_ask_me_later       : "yes" after the first "not good enough" click
# - <domain>_never_show         : "yes" after any decline (terminal)
# - <domain>_first_action_date  : ISO timestamp of the first click (snooze start)
# - <domain>_rating_settings    : remote feature flag, transient (12h)
#
# States only move forward:
#   FRESH -> ELIGIBLE -> SNOOZED -> NEVER_SHOW

from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional, Tuple, Union

from django.template.loader import render_to_string
from django.urls import reverse
from django.utils.dateparse import parse_datetime
from django.utils.html import format_html

from notices.conf import get_setting
from notices.errors import TransientFetchError, ValidationError
from notices.services.notice import NoticeBuilder, NoticeDescriptor, render_notice
from notices.services.options import OptionStore
from notices.services.remote import HttpClient, endpoint_url
from notices.services.tokens import RATING_ACTION, ActionTokens
from notices.services.visibility import RenderContext, VisibilityGate

logger = logging.getLogger("noticeboard.notices")

ALWAYS_ALLOWED_SCREENS = ("dashboard", "plugins")
RATING_NOTICE_SUFFIX = "_plugin_rating_msg_used_in_day"
RATING_SLOT = "rating"
YES = "yes"

_KEY_RE = re.compile(r"[^a-z0-9_\-]")


class RatingState(str, Enum):
    FRESH = "fresh"
    ELIGIBLE = "eligible"
    SNOOZED = "snoozed"
    NEVER_SHOW = "never_show"


@dataclass(frozen=True)
class RatingConfig:
    domain: str
    plugin_name: str
    rating_url: str = "#"
    support_url: str = "#"
    plugin_logo: str = ""
    first_appear_days: int = 7
    snooze_days: int = 30
    screens: Tuple[str, ...] = ()
    # bool, or a zero-argument callable evaluated on every page load
    condition: Union[bool, Callable[[], Any]] = True
    api_url: str = ""

    def allowed_screens(self) -> Tuple[str, ...]:
        return tuple(self.screens) + ALWAYS_ALLOWED_SCREENS

    def condition_met(self) -> bool:
        if isinstance(self.condition, bool):
            return self.condition
        if callable(self.condition):
            return bool(self.condition())
        return False


@dataclass
class RatingStatus:
    state: RatingState
    visible: bool = False
    days: int = 0
    reason: str = ""


# ------------------------------------------------------------
# Keys / dates
# ------------------------------------------------------------

def sanitize_key(value) -> str:
    return _KEY_RE.sub("", str(value or "").lower())


def install_date_key(domain: str) -> str:
    return f"{domain}_install_date"


def never_show_key(domain: str) -> str:
    return f"{domain}_never_show"


def ask_later_key(domain: str) -> str:
    return f"{domain}_ask_me_later"


def first_action_key(domain: str) -> str:
    return f"{domain}_first_action_date"


def settings_key(domain: str) -> str:
    return f"{domain}_rating_settings"


def days_between(from_dt, to_dt) -> int:
    """
    Whole days between two timestamps: the elapsed seconds divided by 86400,
    rounded half away from zero, then made absolute.
    """
    days = (to_dt - from_dt).total_seconds() / 86400
    return int(math.floor(abs(days) + 0.5))


def _parse_stored_date(value):
    if not value:
        return None
    return parse_datetime(str(value))


# ------------------------------------------------------------
# Click handlers (AJAX)
# ------------------------------------------------------------

def _record_first_action(store: OptionStore, domain: str) -> None:
    store.add(first_action_key(domain), store.now().isoformat())


def mark_never_show(store: OptionStore, plugin_name) -> str:
    domain = sanitize_key(plugin_name)
    if not domain:
        raise ValidationError("plugin name is required")
    _record_first_action(store, domain)
    store.add(never_show_key(domain), YES)
    return domain


def mark_ask_later(store: OptionStore, plugin_name) -> RatingState:
    """First click snoozes, a second click turns the prompt off for good."""
    domain = sanitize_key(plugin_name)
    if not domain:
        raise ValidationError("plugin name is required")
    _record_first_action(store, domain)
    if not store.has(ask_later_key(domain)):
        store.add(ask_later_key(domain), YES)
        return RatingState.SNOOZED
    store.add(never_show_key(domain), YES)
    return RatingState.NEVER_SHOW


# ------------------------------------------------------------
# Prompt
# ------------------------------------------------------------

class RatingPrompt:
    def __init__(
        self,
        config: RatingConfig,
        store: OptionStore,
        *,
        client: Optional[HttpClient] = None,
        tokens: Optional[ActionTokens] = None,
    ):
        self.config = config
        self.store = store
        self.client = client or HttpClient()
        self.tokens = tokens or ActionTokens()

    @property
    def domain(self) -> str:
        return self.config.domain

    @property
    def notice_id(self) -> str:
        return f"{self.domain}-{RATING_NOTICE_SUFFIX}"

    # --- remote flag -------------------------------------------------

    def update_settings(self, *, force: bool = False) -> None:
        """Fetch the remote on/off flag for this domain unless one is cached."""
        key = settings_key(self.domain)
        if not force and self.store.has(key):
            return

        api_url = self.config.api_url or get_setting("API_URL")
        if not api_url:
            return

        url = endpoint_url(api_url, get_setting("RATING_ENDPOINT"))
        try:
            data = self.client.get_json(url)
        except TransientFetchError as exc:
            logger.info("rating settings fetch failed domain=%s error=%s", self.domain, exc)
            return

        value = data.get(self.domain, "") if isinstance(data, dict) else ""
        self.store.set(key, value, ttl=get_setting("RATING_SETTINGS_TTL"))

    def is_enabled(self) -> bool:
        return self.store.get(settings_key(self.domain)) == YES

    # --- state -------------------------------------------------------

    def ensure_install_date(self) -> None:
        self.store.add(install_date_key(self.domain), self.store.now().isoformat())

    def days_since(self, key: str) -> int:
        started = _parse_stored_date(self.store.get(key))
        if started is None:
            return 0
        return days_between(started, self.store.now())

    def days_since_install(self) -> int:
        return self.days_since(install_date_key(self.domain))

    def days_since_snooze(self) -> int:
        if self.store.has(first_action_key(self.domain)):
            return self.days_since(first_action_key(self.domain))
        return self.days_since_install()

    def user_allowed(self, user) -> bool:
        if user is None or not getattr(user, "is_authenticated", False):
            return False
        return bool(getattr(user, "is_staff", False) or getattr(user, "is_superuser", False))

    def evaluate(self, screen_id: str, user) -> RatingStatus:
        if self.store.get(never_show_key(self.domain)) == YES:
            return RatingStatus(RatingState.NEVER_SHOW, reason="never_show")

        if not self.user_allowed(user):
            return RatingStatus(self._passive_state(), reason="capability")
        if screen_id not in self.config.allowed_screens():
            return RatingStatus(self._passive_state(), reason="screen")
        if not self.config.condition_met():
            return RatingStatus(self._passive_state(), reason="condition")

        self.ensure_install_date()

        if self.store.get(ask_later_key(self.domain)) == YES:
            days = self.days_since_snooze()
            due = days >= self.config.snooze_days
            return RatingStatus(RatingState.SNOOZED, visible=due, days=days, reason="" if due else "snoozed")

        days = self.days_since_install()
        if days < self.config.first_appear_days:
            return RatingStatus(RatingState.FRESH, days=days, reason="too_early")
        return RatingStatus(RatingState.ELIGIBLE, visible=True, days=days)

    def _passive_state(self) -> RatingState:
        if self.store.get(ask_later_key(self.domain)) == YES:
            return RatingState.SNOOZED
        return RatingState.FRESH

    def should_show(self, screen_id: str, user) -> bool:
        status = self.evaluate(screen_id, user)
        return status.visible and self.is_enabled()

    # --- rendering ---------------------------------------------------

    def build_notice(self, state: RatingState) -> NoticeDescriptor:
        name = self.config.plugin_name
        domain = self.domain
        not_good_id = f"{domain}_btn_never_show" if state == RatingState.SNOOZED else f"{domain}_btn_not_good"

        message = format_html(
            "Hello! Seems like you have used {} to build this website, thanks a lot! <br>"
            "Could you please do us a <b>big favor</b> and give it a <b>5-star</b> rating? "
            "This would boost our motivation and help other users make a comfortable decision "
            "while choosing {}.",
            name,
            name,
        )

        return (
            NoticeBuilder(domain, RATING_NOTICE_SUFFIX)
            .set_logo(self.config.plugin_logo)
            .set_message(message)
            .set_button(
                url=self.config.rating_url,
                label="Ok, you deserved it",
                css_class="button-primary",
                id=f"{domain}_btn_deserved",
            )
            .set_button(
                url="#",
                label="I already did",
                css_class="button-default",
                id=f"{domain}_btn_already_did",
                icon="dashicons-before dashicons-smiley",
            )
            .set_button(
                url=self.config.support_url,
                label="I need support",
                css_class="button-default",
                icon="dashicons-before dashicons-sos",
            )
            .set_button(
                url="#",
                label="Never ask again",
                css_class="button-default",
                id=f"{domain}_btn_never_show",
                icon="dashicons-before dashicons-welcome-comments",
            )
            .set_button(
                url="#",
                label="No, not good enough",
                css_class="button-default",
                id=not_good_id,
                icon="dashicons-before dashicons-thumbs-down",
            )
            .build()
        )

    def script_config(self, user_id: Optional[int]) -> dict:
        domain = self.domain
        return {
            "domain": domain,
            "noticeId": self.notice_id,
            "token": self.tokens.issue(RATING_ACTION, user_id),
            "neverShowUrl": reverse("notices:rating_never_show"),
            "askLaterUrl": reverse("notices:rating_ask_later"),
            "neverShowButtons": [
                f"{domain}_btn_deserved",
                f"{domain}_btn_already_did",
                f"{domain}_btn_never_show",
            ],
            "askLaterButtons": [f"{domain}_btn_not_good"],
        }

    def render(self, context: RenderContext, gate: VisibilityGate, user) -> str:
        status = self.evaluate(context.screen_id, user)
        if not status.visible:
            return ""
        # remote flag only once the local gates pass
        self.update_settings()
        if not self.is_enabled():
            return ""
        if not context.claim(RATING_SLOT):
            return ""

        html = render_notice(self.build_notice(status.state), gate, context)
        if not html:
            return ""

        script = render_to_string(
            "notices/rating_script.html",
            {
                "config": self.script_config(context.user_id),
                "script_id": f"{self.domain}-rating-config",
            },
        )
        return html + script
