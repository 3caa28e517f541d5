"""Django settings for ``puckhub_manager``.

Deployment-specific values come from :mod:`puckhub_manager.env`
(``PUCKHUB_*`` environment variables). App-level switches are exposed as
``PUCKHUB_*`` settings and read with ``getattr(settings, ..., default)``.
"""

from __future__ import annotations

from pathlib import Path

from puckhub_app.log import setup_logging
from puckhub_manager.env import env

BASE_DIR = Path(__file__).resolve().parent.parent

SECRET_KEY = env.secret_key.get_secret_value()
DEBUG = env.debug
ALLOWED_HOSTS = env.allowed_hosts

INSTALLED_APPS = [
    "django.contrib.admin",
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django.contrib.messages",
    "django.contrib.staticfiles",
    "nested_admin",
    "puckhub_app",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.auth.middleware.AuthenticationMiddleware",
    "django.contrib.messages.middleware.MessageMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
]

ROOT_URLCONF = "puckhub_manager.urls"

TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [],
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.request",
                "django.contrib.auth.context_processors.auth",
                "django.contrib.messages.context_processors.messages",
            ],
        },
    },
]

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": env.sqlite_path if env.sqlite_path == ":memory:" else BASE_DIR / env.sqlite_path,
    }
}

LANGUAGE_CODE = "de"
TIME_ZONE = "Europe/Berlin"
USE_I18N = True
USE_TZ = True

STATIC_URL = "static/"
DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

# --- PuckHub ---------------------------------------------------------------

PUCKHUB_RECALC_ON_SAVE = env.recalc_on_save
PUCKHUB_TEAM_FORM_LIMIT = env.team_form_limit

# --- Logging ---------------------------------------------------------------

setup_logging(
    log_level=env.log_level,
    json_format=env.log_format == "json",
    service_name=env.service_name,
)
