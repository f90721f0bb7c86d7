"""Voting link view: redirect to the external form or explain why not."""

from django.core.exceptions import ImproperlyConfigured
from django.http import Http404, HttpRequest, HttpResponse
from django.shortcuts import redirect, render
from django.views.decorators.http import require_GET
from loguru import logger

from festival.exceptions import UnknownCityError
from festival.services.voting_window import VotingWindowResolver

UNAVAILABLE_MESSAGE = "Votação indisponível no momento. Tente novamente mais tarde."


@require_GET
def voting_redirect(request: HttpRequest, city_key: str) -> HttpResponse:
    """
    Send the visitor to the city's voting form when it is open.

    Otherwise render the informational modal page (closed, or opening date).
    A broken voting configuration renders the same page with status 503.
    """
    try:
        decision = VotingWindowResolver.from_settings().resolve(city_key)
    except UnknownCityError as e:
        raise Http404("Cidade não encontrada.") from e
    except ImproperlyConfigured as e:
        logger.error(f"Voting windows unavailable for {city_key!r}: {e}")
        return render(
            request,
            "festival/voting_modal.html",
            {"decision": None, "message": UNAVAILABLE_MESSAGE},
            status=503,
        )

    if decision.is_open:
        return redirect(decision.target_url)

    return render(
        request,
        "festival/voting_modal.html",
        {"decision": decision, "message": decision.modal_message},
    )
