# -*- coding: utf-8 -*-
# notices/views.py
# Purpose:
# AJAX endpoints behind the notice dismiss control and the rating buttons.
# Responses carry only {"success": bool}; reasons go to the log.

from __future__ import annotations

import logging

from django.contrib.auth.decorators import login_required
from django.http import JsonResponse
from django.views.decorators.http import require_POST

from notices.errors import AuthError, StorageError, ValidationError
from notices.services.dismiss import handle_dismiss
from notices.services.options import OptionStore
from notices.services.rating import mark_ask_later, mark_never_show
from notices.services.tokens import RATING_ACTION, ActionTokens

logger = logging.getLogger("noticeboard.notices")
_SECURITY_LOG = logging.getLogger("noticeboard.security")


def _envelope(success: bool, status: int = 200) -> JsonResponse:
    return JsonResponse({"success": success}, status=status)


def _record_security_event(request, event: str) -> None:
    user_id = getattr(getattr(request, "user", None), "id", None)
    ip = (
        request.META.get("HTTP_X_FORWARDED_FOR", "").split(",")[0].strip()
        or request.META.get("REMOTE_ADDR", "")
    )
    _SECURITY_LOG.warning(
        "security_event=%s user_id=%s ip=%s path=%s",
        event,
        user_id,
        ip,
        request.path,
    )


def _failure(request, exc: Exception) -> JsonResponse:
    if isinstance(exc, AuthError):
        _record_security_event(request, "invalid_action_token")
        return _envelope(False, status=403)
    if isinstance(exc, ValidationError):
        return _envelope(False, status=400)
    logger.error("option write failed path=%s error=%s", request.path, exc)
    return _envelope(False, status=500)


@login_required
@require_POST
def dismiss_notice(request):
    try:
        handle_dismiss(
            store=OptionStore(),
            tokens=ActionTokens(),
            user_id=request.user.id,
            token=request.POST.get("token"),
            notice_id=request.POST.get("notice_id"),
            scope=request.POST.get("dismissible"),
            ttl=request.POST.get("expired_time"),
        )
    except (AuthError, ValidationError, StorageError) as exc:
        return _failure(request, exc)
    return _envelope(True)


def _rating_action(request, action) -> JsonResponse:
    if not ActionTokens().verify(request.POST.get("token"), RATING_ACTION, request.user.id):
        return _failure(request, AuthError("invalid rating token"))
    try:
        action(OptionStore(), request.POST.get("plugin_name"))
    except (ValidationError, StorageError) as exc:
        return _failure(request, exc)
    return _envelope(True)


@login_required
@require_POST
def rating_never_show(request):
    return _rating_action(request, mark_never_show)


@login_required
@require_POST
def rating_ask_later(request):
    return _rating_action(request, mark_ask_later)
