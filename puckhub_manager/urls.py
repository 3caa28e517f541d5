# file: puckhub_manager/urls.py
"""Project URL configuration for ``puckhub_manager``.

Routes:
* Django admin and ``nested_admin`` helpers.
"""

from __future__ import annotations

from django.contrib import admin
from django.urls import URLPattern, URLResolver, include, path

# --- URL patterns ----------------------------------------------------------

urlpatterns: list[URLPattern | URLResolver] = [
    path("_nested_admin/", include("nested_admin.urls")),
    path("admin/", admin.site.urls),
]
