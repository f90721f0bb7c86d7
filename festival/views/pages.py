"""
Informational pages and the health check.

- home: landing page with the registration call to action and one voting
  button per configured city
- whatsapp_groups: shown after a successful registration
- contacts: organizer contact details
- health_check: deployment probe (cache + voting configuration)
"""

import time

from django.conf import settings
from django.core.cache import cache
from django.core.exceptions import ImproperlyConfigured
from django.http import HttpRequest, HttpResponse, JsonResponse
from django.shortcuts import render
from django.views.decorators.http import require_GET
from loguru import logger

from festival.content import CONTACTS, GROUP_GUIDELINES, WHATSAPP_GROUPS
from festival.services.voting_window import VotingWindowResolver, load_voting_windows


@require_GET
def home(request: HttpRequest) -> HttpResponse:
    """
    Landing page.

    The voting buttons are rendered from the current decisions so closed
    cities can be shown as such without a round trip.
    """
    try:
        decisions = VotingWindowResolver.from_settings().resolve_all()
    except ImproperlyConfigured as e:
        logger.error(f"Voting windows unavailable on home page: {e}")
        decisions = []

    return render(request, "festival/home.html", {"voting_decisions": decisions})


@require_GET
def whatsapp_groups(request: HttpRequest) -> HttpResponse:
    return render(
        request,
        "festival/whatsapp_groups.html",
        {"groups": WHATSAPP_GROUPS, "guidelines": GROUP_GUIDELINES},
    )


@require_GET
def contacts(request: HttpRequest) -> HttpResponse:
    return render(request, "festival/contacts.html", {"contacts": CONTACTS})


@require_GET
def health_check(request: HttpRequest) -> JsonResponse:
    """
    Health check endpoint for deployment verification.

    Returns system status including cache connectivity and whether the
    voting windows file can be read.
    """
    health_status = {
        "status": "healthy",
        "timestamp": time.time(),
        "version": settings.APP_VERSION,
        "checks": {},
    }

    # Cache connectivity check
    try:
        cache.set("health_check", "test", 1)
        cache.get("health_check")
        health_status["checks"]["cache"] = "healthy"
    except Exception as e:
        health_status["status"] = "unhealthy"
        health_status["checks"]["cache"] = f"error: {str(e)}"

    # Voting configuration check
    try:
        table = load_voting_windows()
        health_status["checks"]["voting_windows"] = f"healthy ({len(table.windows)} cities)"
    except ImproperlyConfigured as e:
        health_status["status"] = "unhealthy"
        health_status["checks"]["voting_windows"] = f"error: {str(e)}"

    status_code = 200 if health_status["status"] == "healthy" else 503
    return JsonResponse(health_status, status=status_code)
