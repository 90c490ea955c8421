# -*- coding: utf-8 -*-
# notices/registry.py
# Purpose:
# Explicit list of the notices, rating prompts and stories widgets a host
# wants on its admin pages. The host owns the instance and names it in
# settings.NOTICES["REGISTRY"].

from __future__ import annotations

from typing import List

from notices.services.notice import NoticeDescriptor
from notices.services.rating import RatingConfig
from notices.services.stories import StoriesConfig


class ComponentRegistry:
    def __init__(self):
        self.notices: List[NoticeDescriptor] = []
        self.ratings: List[RatingConfig] = []
        self.stories: List[StoriesConfig] = []

    def add_notice(self, notice: NoticeDescriptor) -> NoticeDescriptor:
        self.notices.append(notice)
        return notice

    def add_rating(self, config: RatingConfig) -> RatingConfig:
        self.ratings.append(config)
        return config

    def add_stories(self, config: StoriesConfig) -> StoriesConfig:
        self.stories.append(config)
        return config

    def is_empty(self) -> bool:
        return not (self.notices or self.ratings or self.stories)
