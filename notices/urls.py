# -*- coding: utf-8 -*-
# notices/urls.py
# Purpose:
# AJAX routes for notice dismissal and the rating prompt (POST only).

from __future__ import annotations

from django.urls import path

from . import views

app_name = "notices"

urlpatterns = [
    path("ajax/dismiss-notice/", views.dismiss_notice, name="dismiss_notice"),
    path("ajax/rating-never-show/", views.rating_never_show, name="rating_never_show"),
    path("ajax/rating-ask-later/", views.rating_ask_later, name="rating_ask_later"),
]
