# -*- coding: utf-8 -*-
# dashboard/urls.py

from __future__ import annotations

from django.urls import path

from . import views

app_name = "dashboard"

urlpatterns = [
    path("", views.dashboard_home, name="home"),
    path("plugins/", views.plugins_page, name="plugins"),
]
