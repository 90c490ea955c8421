# -*- coding: utf-8 -*-
# notices/templatetags/notice_tags.py

from __future__ import annotations

from django import template

from notices.services.markup import clean_html, clean_url

register = template.Library()


@register.filter(name="notice_url")
def notice_url(value, fallback="#"):
    return clean_url(value) or fallback


@register.filter(name="notice_html")
def notice_html(value):
    return clean_html(value)
