# notices/admin.py
# -*- coding: utf-8 -*-

from django.contrib import admin

from notices.models import Option, UserOption


@admin.register(Option)
class OptionAdmin(admin.ModelAdmin):
    list_display = ("key", "expires_at", "updated_at")
    search_fields = ("key",)
    list_filter = ("expires_at",)


@admin.register(UserOption)
class UserOptionAdmin(admin.ModelAdmin):
    list_display = ("user", "key", "updated_at")
    search_fields = ("key", "user__username")
    raw_id_fields = ("user",)
