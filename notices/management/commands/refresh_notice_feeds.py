# -*- coding: utf-8 -*-
# notices/management/commands/refresh_notice_feeds.py
"""
Refresh the remote data behind the registered components.

- Stories feeds: pull the remote list into the option cache.
- Rating prompts: fetch the per-domain on/off flag.
- Option store: delete lapsed transients (dismissals, cached flags).

Failures are reported and leave the cached data untouched.

Usage
  python manage.py refresh_notice_feeds
  python manage.py refresh_notice_feeds --force
"""

from __future__ import annotations

from django.core.management.base import BaseCommand

from notices.context_processors import load_registry
from notices.services.options import OptionStore
from notices.services.rating import RatingPrompt
from notices.services.stories import StoriesFeed


class Command(BaseCommand):
    help = "Refresh cached stories feeds and rating flags for registered components."

    def add_arguments(self, parser):
        parser.add_argument(
            "--force",
            action="store_true",
            help="Ignore refresh intervals and cached flags.",
        )

    def handle(self, *args, **options):
        force = bool(options.get("force"))
        store = OptionStore()
        purged = store.purge_expired()
        self.stdout.write(f"options: {purged} expired removed")

        registry = load_registry()
        if registry is None or registry.is_empty():
            self.stdout.write("No components registered.")
            return

        for config in registry.stories:
            feed = StoriesFeed(config, store)
            if feed.refresh(force=force):
                self.stdout.write(self.style.SUCCESS(f"stories:{config.domain} refreshed ({len(feed.cached())} items)"))
            else:
                self.stdout.write(f"stories:{config.domain} unchanged")

        for config in registry.ratings:
            prompt = RatingPrompt(config, store)
            prompt.update_settings(force=force)
            state = "enabled" if prompt.is_enabled() else "disabled"
            self.stdout.write(f"rating:{config.domain} {state}")
