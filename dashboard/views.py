# -*- coding: utf-8 -*-
# dashboard/views.py

from __future__ import annotations

from django.contrib.admin.views.decorators import staff_member_required
from django.shortcuts import render

from notices.services.options import OptionStore
from notices.services.stories import active_plugin_slugs


@staff_member_required
def dashboard_home(request):
    request.admin_screen = "dashboard"
    return render(request, "dashboard/home.html", {})


@staff_member_required
def plugins_page(request):
    request.admin_screen = "plugins"
    return render(
        request,
        "dashboard/plugins.html",
        {"active_plugins": active_plugin_slugs(OptionStore())},
    )
