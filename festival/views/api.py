"""
JSON endpoints used by the registration page and the voting buttons.

- cities_api: city list (served from the fallback when the backend fails)
- format_field_api: live CPF / phone mask
- age_api: live age eligibility feedback
- voting_api: voting decision for one city
"""

from django.core.exceptions import ImproperlyConfigured
from django.http import HttpRequest, JsonResponse
from django.views.decorators.http import require_GET
from loguru import logger

from festival.exceptions import UnknownCityError
from festival.formatting import format_cpf, format_phone
from festival.services.eligibility import evaluate_age
from festival.services.participant_api import CityDirectory
from festival.services.voting_window import VotingWindowResolver

FORMATTERS = {
    "cpf": format_cpf,
    "phone": format_phone,
}


@require_GET
def cities_api(request: HttpRequest) -> JsonResponse:
    city_list = CityDirectory().load()
    return JsonResponse(
        {
            "cities": [city.to_dict() for city in city_list.cities],
            "from_fallback": city_list.from_fallback,
        }
    )


@require_GET
def format_field_api(request: HttpRequest) -> JsonResponse:
    """
    Apply the display mask for ``field`` (``cpf`` or ``phone``) to ``value``.

    Returns 400 for an unknown field.
    """
    field_name = request.GET.get("field", "")
    formatter = FORMATTERS.get(field_name)
    if formatter is None:
        return JsonResponse(
            {"error": f"Campo desconhecido: {field_name!r}"}, status=400
        )
    return JsonResponse(
        {"field": field_name, "value": formatter(request.GET.get("value", ""))}
    )


@require_GET
def age_api(request: HttpRequest) -> JsonResponse:
    result = evaluate_age(request.GET.get("birth_date", ""))
    return JsonResponse(result.to_dict())


@require_GET
def voting_api(request: HttpRequest, city_key: str) -> JsonResponse:
    try:
        decision = VotingWindowResolver.from_settings().resolve(city_key)
    except UnknownCityError:
        logger.info(f"Voting lookup for unknown city {city_key!r}")
        return JsonResponse({"error": "Cidade não encontrada."}, status=404)
    except ImproperlyConfigured as e:
        logger.error(f"Voting windows unavailable for {city_key!r}: {e}")
        return JsonResponse({"error": "Votação indisponível no momento."}, status=503)
    return JsonResponse(decision.to_dict())
