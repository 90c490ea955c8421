"""
Django settings for the Noticeboard admin.

This file is deliberately:
- explicit (no magic defaults)
- conservative (prototype-safe)
- readable

Production hardening is explicitly out of scope.
"""

from pathlib import Path
from dotenv import load_dotenv
import os

load_dotenv()

# --------------------------------------------------
# Core paths
# --------------------------------------------------

BASE_DIR = Path(__file__).resolve().parent.parent

# --------------------------------------------------
# Security (prototype only)
# --------------------------------------------------

# WARNING: Do not use this secret key in production
SECRET_KEY = os.getenv("DJANGO_SECRET_KEY", "noticeboard-dev-only-secret")

DEBUG = os.getenv("DJANGO_DEBUG", "1") == "1"

ALLOWED_HOSTS = ["testserver", "localhost", "127.0.0.1"]

# --------------------------------------------------
# Applications
# --------------------------------------------------

INSTALLED_APPS = [
    # Django core...
    "django.contrib.admin",
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django.contrib.messages",
    "django.contrib.staticfiles",
    "django_extensions",

    # Project apps
    "notices.apps.NoticesConfig",
    "dashboard.apps.DashboardConfig",
]


# --------------------------------------------------
# Middleware
# --------------------------------------------------

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.auth.middleware.AuthenticationMiddleware",
    "django.contrib.messages.middleware.MessageMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
]


# --------------------------------------------------
# URL configuration
# --------------------------------------------------

ROOT_URLCONF = "noticeboard.urls"


# --------------------------------------------------
# Templates
# --------------------------------------------------

TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [BASE_DIR / "templates"],
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.debug",
                "django.template.context_processors.request",
                "django.contrib.auth.context_processors.auth",
                "django.contrib.messages.context_processors.messages",
                "notices.context_processors.admin_notices",
            ],
        },
    },
]

# --------------------------------------------------
# WSGI
# --------------------------------------------------

WSGI_APPLICATION = "noticeboard.wsgi.application"

# --------------------------------------------------
# Database
# --------------------------------------------------

# SQLite is sufficient for the option store
DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": BASE_DIR / "db.sqlite3",
    }
}


# --------------------------------------------------
# Password validation
# --------------------------------------------------

AUTH_PASSWORD_VALIDATORS = [
    {"NAME": "django.contrib.auth.password_validation.UserAttributeSimilarityValidator"},
    {"NAME": "django.contrib.auth.password_validation.MinimumLengthValidator"},
    {"NAME": "django.contrib.auth.password_validation.CommonPasswordValidator"},
    {"NAME": "django.contrib.auth.password_validation.NumericPasswordValidator"},
]


# --------------------------------------------------
# Internationalisation
# --------------------------------------------------

LANGUAGE_CODE = "en-gb"
TIME_ZONE = "UTC"
USE_I18N = True
USE_TZ = True

# --------------------------------------------------
# Logins
# --------------------------------------------------

LOGIN_URL = "admin:login"
LOGIN_REDIRECT_URL = "dashboard:home"


# --------------------------------------------------
# Static files
# --------------------------------------------------

STATIC_URL = "/static/"
STATIC_ROOT = BASE_DIR / "staticfiles"

# --------------------------------------------------
# Default primary key field type
# --------------------------------------------------

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

# --------------------------------------------------
# Logging
# --------------------------------------------------

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "plain": {"format": "%(asctime)s %(levelname)s %(name)s %(message)s"},
    },
    "handlers": {
        "console": {"class": "logging.StreamHandler", "formatter": "plain"},
    },
    "loggers": {
        "noticeboard": {
            "handlers": ["console"],
            "level": os.getenv("NOTICEBOARD_LOG_LEVEL", "INFO"),
        },
    },
}

# --------------------------------------------------
# Notices / rating / stories
# --------------------------------------------------

NOTICES = {
    # Base URL of the banner service (rating flags + stories feed)
    "API_URL": os.getenv("NOTICES_API_URL", ""),
    "RATING_ENDPOINT": "plugin-banner/v1/rating",
    "STORIES_ENDPOINT": "cache/stories.json",
    "HTTP_TIMEOUT": 10,
    "STORIES_REFRESH_INTERVAL": 60 * 60 * 6,
    "RATING_SETTINGS_TTL": 60 * 60 * 12,
    "TOKEN_MAX_AGE": 60 * 60 * 24,
    "REGISTRY": "dashboard.components.registry",
}
