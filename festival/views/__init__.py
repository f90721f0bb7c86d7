"""
Views package for the festival application.

This package contains all view logic, organized by functionality.
"""

from .api import age_api, cities_api, format_field_api, voting_api
from .pages import contacts, health_check, home, whatsapp_groups
from .registration import RegistrationView, discard_draft_view
from .voting import voting_redirect

__all__ = [
    "RegistrationView",
    "age_api",
    "cities_api",
    "contacts",
    "discard_draft_view",
    "format_field_api",
    "health_check",
    "home",
    "voting_api",
    "voting_redirect",
    "whatsapp_groups",
]
