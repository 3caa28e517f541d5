# file: puckhub_app/apps.py
"""App configuration for the PuckHub application.

This module defines :class:`PuckhubAppConfig`, the Django ``AppConfig`` that
registers the app and configures default model primary keys.

Key points:
    * ``name`` is fixed to ``"puckhub_app"`` to keep the app label and import
      paths stable.
    * ``default_auto_field`` is set to ``BigAutoField`` for models without an
      explicit primary key field.
    * ``ready()`` imports :mod:`puckhub_app.signals` so the recalculation
      triggers are connected once the app registry is loaded.
"""

from __future__ import annotations

from django.apps import AppConfig


# --- AppConfig -------------------------------------------------------------

class PuckhubAppConfig(AppConfig):
    """App registration and defaults for ``puckhub_app``."""

    default_auto_field: str = "django.db.models.BigAutoField"
    name: str = "puckhub_app"
    verbose_name: str = "PuckHub"

    def ready(self) -> None:
        from puckhub_app import signals  # noqa: F401
