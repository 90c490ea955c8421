# notices/models.py
# -*- coding: utf-8 -*-

from django.conf import settings
from django.db import models


class Option(models.Model):
    """
    Site-wide key/value option.

    A row with expires_at set is a transient: once expires_at has passed it
    is treated as absent. Rows without expires_at never expire.
    """

    key = models.CharField(max_length=191, unique=True)
    value = models.JSONField(null=True, blank=True)

    expires_at = models.DateTimeField(null=True, blank=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        indexes = [
            models.Index(fields=["expires_at"], name="notices_opt_expires_idx"),
        ]

    def __str__(self) -> str:
        return self.key


class UserOption(models.Model):
    """Per-user key/value option (dismissals scoped to one user)."""

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="notice_options",
    )
    key = models.CharField(max_length=191)
    value = models.JSONField(null=True, blank=True)

    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=["user", "key"], name="uq_notice_user_option"),
        ]

    def __str__(self) -> str:
        return f"{self.user_id} {self.key}"
