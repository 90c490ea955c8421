# -*- coding: utf-8 -*-
# notices/services/notice.py
# Purpose:
# Declarative admin notices.
# NoticeBuilder collects settings fluently, build() freezes them into a
# NoticeDescriptor, render_notice() turns a descriptor into markup when the
# visibility gate allows it.

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, replace
from typing import Any, Dict, List, Optional, Tuple

from django.template.loader import render_to_string

from notices.services.markup import clean_html, clean_url
from notices.services.visibility import DismissScope, RenderContext, VisibilityGate

logger = logging.getLogger("noticeboard.notices")

DEFAULT_DISMISS_TTL = 60 * 60 * 24 * 7


@dataclass(frozen=True)
class Button:
    label: str = "Button"
    url: str = "#"
    css_class: str = "button-secondary"
    icon: str = ""
    id: str = ""


@dataclass(frozen=True)
class NoticeDescriptor:
    notice_id: str
    domain: str = ""
    title: str = ""
    message: str = ""
    html: str = ""
    buttons: Tuple[Button, ...] = ()
    css_class: str = ""
    logo: str = ""
    logo_style: str = ""
    dismiss_scope: DismissScope = DismissScope.NONE
    expiry_seconds: int = 1

    @property
    def is_dismissible(self) -> bool:
        return self.dismiss_scope != DismissScope.NONE


class NoticeBuilder:
    """
    Fluent configuration for one notice. Text setters append, so repeated
    calls accumulate content.

        NoticeBuilder("my-plugin", "welcome")
            .set_type("info")
            .set_title("Welcome")
            .set_button(label="Docs", url="https://example.com/docs")
            .set_dismiss("user")
            .build()
    """

    def __init__(self, domain: str, unique_id: Optional[str] = None):
        domain = (domain or "").strip()
        if not domain:
            raise ValueError("a notice needs a domain")
        self.domain = domain
        self.unique_id = unique_id or uuid.uuid4().hex[:13]
        self.notice_id = f"{self.domain}-{self.unique_id}"
        self.title = ""
        self.message = ""
        self.html = ""
        self.css_class = ""
        self.logo = ""
        self.logo_style = ""
        self.buttons: List[Button] = []
        self.dismiss_scope = DismissScope.NONE
        self.expiry_seconds = 1

    def set_id(self, notice_id: str) -> "NoticeBuilder":
        self.notice_id = notice_id
        return self

    def set_class(self, classname: str = "") -> "NoticeBuilder":
        self.css_class += classname
        return self

    def set_type(self, notice_type: str = "") -> "NoticeBuilder":
        self.css_class += f" notice-{notice_type}"
        return self

    def set_gutter(self, gutter: bool = True) -> "NoticeBuilder":
        if not gutter:
            self.css_class += " no-gutter"
        return self

    def set_title(self, title: str = "") -> "NoticeBuilder":
        self.title += title
        return self

    def set_message(self, message: str = "") -> "NoticeBuilder":
        self.message += message
        return self

    def set_html(self, html: str = "") -> "NoticeBuilder":
        self.html += html
        return self

    def set_logo(self, logo: str = "", logo_style: str = "") -> "NoticeBuilder":
        self.logo = logo
        self.logo_style = logo_style
        return self

    def set_button(self, **fields: Any) -> "NoticeBuilder":
        self.buttons.append(replace(Button(), **fields))
        return self

    def set_dismiss(self, scope="global", ttl: int = DEFAULT_DISMISS_TTL) -> "NoticeBuilder":
        self.dismiss_scope = DismissScope.parse(scope)
        self.expiry_seconds = int(ttl)
        return self

    def build(self) -> NoticeDescriptor:
        return NoticeDescriptor(
            notice_id=self.notice_id,
            domain=self.domain,
            title=self.title,
            message=self.message,
            html=self.html,
            buttons=tuple(self.buttons),
            css_class=self.css_class.strip(),
            logo=self.logo,
            logo_style=self.logo_style,
            dismiss_scope=self.dismiss_scope,
            expiry_seconds=self.expiry_seconds,
        )


def notice_view_model(notice: NoticeDescriptor) -> Dict[str, Any]:
    """
    Template context for notices/notice.html. URL and markup fields are
    cleaned here; plain text stays raw for template autoescaping.
    """
    return {
        "notice_id": notice.notice_id,
        "css_class": notice.css_class,
        "dismissible": notice.is_dismissible,
        "dismiss_scope": notice.dismiss_scope.value if notice.is_dismissible else "",
        "expiry_seconds": notice.expiry_seconds,
        "logo_url": clean_url(notice.logo),
        "logo_style": notice.logo_style,
        "title": notice.title,
        "message_html": clean_html(notice.message),
        "raw_html": clean_html(notice.html),
        "buttons": [
            {
                "id": b.id,
                "label": b.label,
                "url": clean_url(b.url),
                "css_class": b.css_class,
                "icon": b.icon,
            }
            for b in notice.buttons
        ],
    }


def render_notice(
    notice: NoticeDescriptor,
    gate: VisibilityGate,
    context: RenderContext,
) -> str:
    """Markup for the notice, or "" when hidden or already rendered this request."""
    if context.is_claimed(notice.notice_id):
        return ""
    if not gate.should_show(notice.notice_id, notice.dismiss_scope, context.user_id):
        return ""
    if not context.claim(notice.notice_id):
        return ""
    logger.debug("rendering notice %s", notice.notice_id)
    return render_to_string("notices/notice.html", notice_view_model(notice))
