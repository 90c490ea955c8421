# -*- coding: utf-8 -*-
# notices/errors.py


class NoticeError(Exception):
    """Base class for notice/rating/stories failures."""


class ValidationError(NoticeError):
    """Missing or empty identifier in a request."""


class AuthError(NoticeError):
    """Missing, expired or foreign action token."""


class TransientFetchError(NoticeError):
    """Remote call failed, timed out or returned unusable data."""


class StorageError(NoticeError):
    """Option store write failed."""
