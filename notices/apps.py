# -*- coding: utf-8 -*-
# notices/apps.py

from __future__ import annotations

from django.apps import AppConfig


class NoticesConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "notices"
    verbose_name = "Notices"
