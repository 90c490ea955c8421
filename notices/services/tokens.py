# -*- coding: utf-8 -*-
# notices/services/tokens.py
# Purpose:
# Action-bound CSRF tokens for the AJAX endpoints.
# A token is valid only for the action and user it was issued for.

from __future__ import annotations

from typing import Optional

from django.core import signing

from notices.conf import get_setting

DISMISS_ACTION = "dismiss-notice"
RATING_ACTION = "rating"


class ActionTokens:
    def __init__(self, max_age: Optional[int] = None):
        self.max_age = int(max_age if max_age is not None else get_setting("TOKEN_MAX_AGE"))

    def _signer(self, action: str) -> signing.TimestampSigner:
        return signing.TimestampSigner(salt=f"notices.action.{action}")

    def issue(self, action: str, user_id: Optional[int]) -> str:
        return self._signer(action).sign(str(user_id or 0))

    def verify(self, token: Optional[str], action: str, user_id: Optional[int]) -> bool:
        token = (token or "").strip()
        if not token:
            return False
        try:
            value = self._signer(action).unsign(token, max_age=self.max_age)
        except signing.BadSignature:
            return False
        return value == str(user_id or 0)
