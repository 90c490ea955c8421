# -*- coding: utf-8 -*-
# notices/services/visibility.py
# Purpose:
# Decide whether a notice may render for the current user, and keep a
# per-request record of what has already rendered.

from __future__ import annotations

from enum import Enum
from typing import Optional, Set

from notices.services.options import OptionStore

# Global dismissals live in their own key space so a client-supplied
# notice id can never name a real site option.
DISMISSAL_PREFIX = "notice_dismissed:"


def dismissal_key(notice_id: str) -> str:
    return f"{DISMISSAL_PREFIX}{notice_id}"


class DismissScope(str, Enum):
    NONE = "none"
    USER = "user"
    GLOBAL = "global"

    @classmethod
    def parse(cls, value) -> "DismissScope":
        if isinstance(value, cls):
            return value
        v = (str(value or "")).strip().lower()
        for scope in cls:
            if scope.value == v:
                return scope
        return cls.NONE


class VisibilityGate:
    """
    Read-only check against the option store:
    - NONE   : always visible
    - USER   : hidden once the user has a dismissal flag for the id
    - GLOBAL : hidden while a live dismissal transient exists for the id
    """

    def __init__(self, store: OptionStore):
        self.store = store

    def should_show(self, notice_id: str, scope, user_id: Optional[int] = None) -> bool:
        scope = DismissScope.parse(scope)
        if scope == DismissScope.NONE:
            return True
        if scope == DismissScope.USER:
            return not self.store.get_user_scoped(user_id, notice_id)
        return not self.store.get(dismissal_key(notice_id))


class RenderContext:
    """One per request. The first claim of a key wins."""

    def __init__(self, user_id: Optional[int] = None, screen_id: str = ""):
        self.user_id = user_id
        self.screen_id = screen_id
        self._claimed: Set[str] = set()

    def claim(self, key: str) -> bool:
        if key in self._claimed:
            return False
        self._claimed.add(key)
        return True

    def is_claimed(self, key: str) -> bool:
        return key in self._claimed
