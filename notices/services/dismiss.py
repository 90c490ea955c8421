# -*- coding: utf-8 -*-
# notices/services/dismiss.py

from __future__ import annotations

from typing import Optional

from notices.errors import AuthError, ValidationError
from notices.services.options import OptionStore
from notices.services.tokens import DISMISS_ACTION, ActionTokens
from notices.services.visibility import DismissScope, dismissal_key

MAX_KEY_LENGTH = 191


def handle_dismiss(
    *,
    store: OptionStore,
    tokens: ActionTokens,
    user_id: Optional[int],
    token: Optional[str],
    notice_id: Optional[str],
    scope,
    ttl,
) -> None:
    """
    Persist a dismissal sent back by the client.

    Token first: nothing is read or written for a bad token. Scope "user"
    flags the notice for this user only; anything else hides it for
    everyone for ttl seconds. StorageError from the store propagates.
    """
    if not tokens.verify(token, DISMISS_ACTION, user_id):
        raise AuthError("invalid dismiss token")

    notice_id = (notice_id or "").strip()
    if not notice_id:
        raise ValidationError("notice id is required")
    key = dismissal_key(notice_id)
    if len(key) > MAX_KEY_LENGTH:
        raise ValidationError("notice id is too long")

    try:
        ttl = int(ttl or 0)
    except (TypeError, ValueError):
        ttl = 0

    if DismissScope.parse(scope) == DismissScope.USER:
        store.set_user_scoped(user_id, notice_id, True)
    else:
        store.set(key, True, ttl=ttl)
