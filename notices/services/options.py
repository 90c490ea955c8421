# -*- coding: utf-8 -*-
# notices/services/options.py
# Purpose:
# Persistent key/value store for dismissals, rating counters and cached feeds.
# Site options (optionally expiring) and per-user options. Last write wins.

from __future__ import annotations

from datetime import timedelta
from typing import Any, Callable, Optional

from django.db import DatabaseError, IntegrityError
from django.utils import timezone

from notices.errors import StorageError
from notices.models import Option, UserOption


class OptionStore:
    def __init__(self, clock: Optional[Callable] = None):
        self._clock = clock or timezone.now

    def now(self):
        return self._clock()

    # ------------------------------------------------------------
    # Site options / transients
    # ------------------------------------------------------------

    def get(self, key: str, default: Any = None) -> Any:
        row = Option.objects.filter(key=key).only("value", "expires_at").first()
        if row is None:
            return default
        if self._expired(row):
            return default
        return row.value

    def _expired(self, row: Option) -> bool:
        return row.expires_at is not None and row.expires_at <= self.now()

    def has(self, key: str) -> bool:
        marker = object()
        return self.get(key, marker) is not marker

    def set(self, key: str, value: Any, ttl: Optional[int] = None) -> None:
        """
        Write a site option. ttl > 0 makes it a transient expiring after ttl
        seconds; None, 0 or negative means it never expires.
        """
        expires_at = None
        if ttl is not None and int(ttl) > 0:
            expires_at = self.now() + timedelta(seconds=int(ttl))
        try:
            Option.objects.update_or_create(
                key=key,
                defaults={"value": value, "expires_at": expires_at},
            )
        except DatabaseError as exc:
            raise StorageError(f"could not write option {key!r}") from exc

    def add(self, key: str, value: Any) -> bool:
        """Write only when the key is absent or expired. Returns True if it wrote."""
        try:
            row = Option.objects.filter(key=key).first()
            if row is not None:
                if not self._expired(row):
                    return False
                updated = Option.objects.filter(pk=row.pk, expires_at=row.expires_at).update(
                    value=value, expires_at=None, updated_at=self.now()
                )
                return bool(updated)
            _, created = Option.objects.get_or_create(key=key, defaults={"value": value})
        except IntegrityError:
            return False
        except DatabaseError as exc:
            raise StorageError(f"could not add option {key!r}") from exc
        return created

    def purge_expired(self) -> int:
        """Delete lapsed transients. Reads already treat them as absent."""
        try:
            deleted, _ = Option.objects.filter(expires_at__lte=self.now()).delete()
        except DatabaseError as exc:
            raise StorageError("could not purge expired options") from exc
        return deleted

    # ------------------------------------------------------------
    # Per-user options
    # ------------------------------------------------------------

    def get_user_scoped(self, user_id: int, key: str, default: Any = None) -> Any:
        if not user_id:
            return default
        row = UserOption.objects.filter(user_id=user_id, key=key).only("value").first()
        if row is None:
            return default
        return row.value

    def set_user_scoped(self, user_id: int, key: str, value: Any) -> None:
        if not user_id:
            raise StorageError("per-user options need a user")
        try:
            UserOption.objects.update_or_create(
                user_id=user_id,
                key=key,
                defaults={"value": value},
            )
        except DatabaseError as exc:
            raise StorageError(f"could not write user option {key!r}") from exc
