# noticeboard/urls.py
# -*- coding: utf-8 -*-
from django.contrib import admin
from django.urls import path, include

urlpatterns = [
    path("admin/", admin.site.urls),
    path("notices/", include("notices.urls")),
    path("", include("dashboard.urls")),
]
