# -*- coding: utf-8 -*-
# dashboard/components.py
# Purpose:
# The components this admin shows. Named in settings.NOTICES["REGISTRY"].

from __future__ import annotations

from django.conf import settings

from notices.models import Option
from notices.registry import ComponentRegistry
from notices.services.notice import NoticeBuilder
from notices.services.rating import RatingConfig
from notices.services.stories import StoriesConfig

DOMAIN = "noticeboard"


def _has_options() -> bool:
    # Ask for a rating only once the site has stored something.
    return Option.objects.exists()


registry = ComponentRegistry()

registry.add_notice(
    NoticeBuilder(DOMAIN, "welcome")
    .set_type("info")
    .set_title("Welcome to Noticeboard")
    .set_message("Notices, rating prompts and stories are configured in <code>dashboard/components.py</code>.")
    .set_button(label="Read the docs", url="https://example.com/noticeboard/docs", css_class="button-primary")
    .set_dismiss("user")
    .build()
)

registry.add_rating(
    RatingConfig(
        domain=DOMAIN,
        plugin_name="Noticeboard",
        rating_url="https://example.com/noticeboard/reviews",
        support_url="https://example.com/noticeboard/support",
        first_appear_days=7,
        condition=_has_options,
    )
)

registry.add_stories(
    StoriesConfig(
        domain=DOMAIN,
        title="Noticeboard",
        test_mode=bool(getattr(settings, "NOTICES_STORIES_TEST_MODE", False)),
        plugin_links=(("Noticeboard", "https://example.com/noticeboard"),),
    )
)
