"""
URL configuration for fmgpback project.

The festival application owns every route; static files are served by
django.contrib.staticfiles in development.
"""

from django.urls import include, path

urlpatterns = [
    path("", include("festival.urls")),
]
