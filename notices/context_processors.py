# -*- coding: utf-8 -*-
# notices/context_processors.py
# Purpose:
# Page render hook. Evaluates every registered notice, rating prompt and
# stories widget once per request and hands the markup to the base template
# as `admin_notices` / `admin_widgets`.

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from django.contrib.auth.models import AnonymousUser
from django.template.loader import render_to_string
from django.urls import reverse
from django.utils.module_loading import import_string
from django.utils.safestring import mark_safe

from notices.conf import get_setting
from notices.registry import ComponentRegistry
from notices.services.notice import render_notice
from notices.services.options import OptionStore
from notices.services.rating import RatingPrompt
from notices.services.stories import StoriesFeed
from notices.services.tokens import DISMISS_ACTION, ActionTokens
from notices.services.visibility import RenderContext, VisibilityGate

logger = logging.getLogger("noticeboard.notices")

_REQUEST_CONTEXT_ATTR = "_notices_render_context"
_REQUEST_RESULT_ATTR = "_notices_rendered"

_EMPTY = {"admin_notices": "", "admin_widgets": ""}


def load_registry() -> Optional[ComponentRegistry]:
    path = get_setting("REGISTRY")
    if not path:
        return None
    return import_string(path)


def screen_id_for(request) -> str:
    explicit = getattr(request, "admin_screen", "")
    if explicit:
        return str(explicit)
    rm = getattr(request, "resolver_match", None)
    return (getattr(rm, "url_name", "") or "") if rm else ""


def render_context_for(request) -> RenderContext:
    ctx = getattr(request, _REQUEST_CONTEXT_ATTR, None)
    if ctx is None:
        user = getattr(request, "user", None)
        ctx = RenderContext(user_id=getattr(user, "id", None), screen_id=screen_id_for(request))
        setattr(request, _REQUEST_CONTEXT_ATTR, ctx)
    return ctx


def _guarded(label: str, fn) -> str:
    """A failing component renders nothing instead of breaking the page."""
    try:
        return fn() or ""
    except Exception:
        logger.exception("component render failed component=%s", label)
        return ""


def render_components(request, registry: ComponentRegistry, store: Optional[OptionStore] = None) -> Dict[str, str]:
    store = store or OptionStore()
    gate = VisibilityGate(store)
    ctx = render_context_for(request)
    user = getattr(request, "user", None)

    notices_parts = []
    for notice in registry.notices:
        notices_parts.append(_guarded(notice.notice_id, lambda n=notice: render_notice(n, gate, ctx)))

    for config in registry.ratings:
        prompt = RatingPrompt(config, store)
        notices_parts.append(_guarded(f"rating:{config.domain}", lambda p=prompt: p.render(ctx, gate, user)))

    widget_parts = []
    for config in registry.stories:
        feed = StoriesFeed(config, store)
        widget_parts.append(_guarded(f"stories:{config.domain}", lambda f=feed: f.render(ctx)))

    return {
        "notices": "".join(notices_parts),
        "widgets": "".join(widget_parts),
    }


def admin_notices(request) -> Dict[str, Any]:
    user = getattr(request, "user", None)
    if not user or isinstance(user, AnonymousUser) or not user.is_authenticated:
        return dict(_EMPTY)

    cached = getattr(request, _REQUEST_RESULT_ATTR, None)
    if cached is not None:
        return cached

    result = dict(_EMPTY)
    try:
        registry = load_registry()
        if registry is not None and not registry.is_empty():
            parts = render_components(request, registry)
            if parts["notices"]:
                result["admin_notices"] = render_to_string(
                    "notices/admin_notices.html",
                    {
                        "notices_html": mark_safe(parts["notices"]),
                        "dismiss_url": reverse("notices:dismiss_notice"),
                        "dismiss_token": ActionTokens().issue(DISMISS_ACTION, user.id),
                    },
                )
            result["admin_widgets"] = mark_safe(parts["widgets"])
    except Exception:
        logger.exception("admin notices hook failed path=%s", getattr(request, "path", ""))
        result = dict(_EMPTY)

    setattr(request, _REQUEST_RESULT_ATTR, result)
    return result
