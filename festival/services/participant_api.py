"""
Client for the remote participant service.

The service owns the city list and stores registrations:
- ``GET {base}/cities?v={version}`` → ``[{"id", "name", "state"?}, ...]``
- ``POST {base}/participants`` → 2xx on acceptance, text body otherwise

Every call carries a total deadline so callers always get an answer: the
socket timeouts bound connecting and the wait for headers, and the body is
streamed and abandoned once the deadline passes, however slowly it trickles in.
"""

import json
import time
from dataclasses import dataclass, field
from typing import Any

import requests
from django.conf import settings
from django.utils.text import slugify
from loguru import logger

from festival.exceptions import (
    ParticipantRejectedError,
    ParticipantServiceTimeout,
    ParticipantServiceUnavailable,
)


@dataclass(frozen=True)
class City:
    """A city taking part in the festival, as served by the backend."""

    id: str
    name: str
    state: str = ""
    slug: str = field(default="", compare=False)

    def __post_init__(self) -> None:
        if not self.slug:
            object.__setattr__(self, "slug", slugify(self.name))

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "City":
        return cls(
            id=str(data["id"]),
            name=str(data["name"]),
            state=str(data.get("state") or ""),
        )

    def to_dict(self) -> dict[str, str]:
        return {"id": self.id, "name": self.name, "state": self.state, "slug": self.slug}


# Served when the backend is slow or down; the city list is non-critical
FALLBACK_CITIES: tuple[City, ...] = (
    City(id="550e8400-e29b-41d4-a716-446655440001", name="Marabá"),
    City(id="550e8400-e29b-41d4-a716-446655440002", name="Santarém"),
    City(id="550e8400-e29b-41d4-a716-446655440003", name="Portel"),
    City(id="550e8400-e29b-41d4-a716-446655440004", name="Benevides"),
    City(id="550e8400-e29b-41d4-a716-446655440005", name="Belém"),
)


class ParticipantAPIClient:
    """
    Thin HTTP client over the participant service.

    Args:
        base_url: Service root; defaults to ``settings.PARTICIPANT_API_BASE_URL``
        session: ``requests.Session`` to reuse (a new one is created otherwise)

    Raises (from the request methods):
        ParticipantServiceTimeout: The time budget elapsed
        ParticipantServiceUnavailable: No HTTP response (DNS, refused, reset)
        ParticipantRejectedError: Non-2xx response
    """

    def __init__(
        self,
        base_url: str | None = None,
        session: requests.Session | None = None,
        version: str | None = None,
    ):
        self.base_url = (base_url or settings.PARTICIPANT_API_BASE_URL).rstrip("/")
        self.version = version or settings.APP_VERSION
        self.session = session or requests.Session()
        self.session.headers.update({"Accept": "application/json"})
        self.clock = time.monotonic

    def _request(self, method: str, path: str, timeout: float, **kwargs: Any) -> bytes:
        """
        Perform one request and return the response body.

        ``timeout`` is the total budget in seconds for the whole exchange.
        """
        url = f"{self.base_url}{path}"
        deadline = self.clock() + timeout
        try:
            response = self.session.request(
                method, url, timeout=timeout, stream=True, **kwargs
            )
            try:
                body = self._read_body(response, deadline, timeout)
            finally:
                response.close()
        except requests.exceptions.Timeout as e:
            # ConnectTimeout is also a ConnectionError: keep this branch first
            logger.warning(f"{method} {url} timed out after {timeout}s")
            raise ParticipantServiceTimeout(str(e)) from e
        except requests.exceptions.RequestException as e:
            logger.warning(f"{method} {url} failed: {e}")
            raise ParticipantServiceUnavailable(str(e)) from e

        if not response.ok:
            logger.warning(f"{method} {url} returned HTTP {response.status_code}")
            raise ParticipantRejectedError(
                response.status_code,
                body.decode(response.encoding or "utf-8", errors="replace"),
            )
        return body

    def _read_body(
        self, response: requests.Response, deadline: float, timeout: float
    ) -> bytes:
        chunks: list[bytes] = []
        try:
            if self.clock() > deadline:
                raise requests.exceptions.ReadTimeout(f"no response within {timeout}s")
            for chunk in response.iter_content(chunk_size=8192):
                chunks.append(chunk)
                if self.clock() > deadline:
                    raise requests.exceptions.ReadTimeout(
                        f"response not complete within {timeout}s"
                    )
        except requests.exceptions.ConnectionError as e:
            # requests reports a stalled body read as ConnectionError
            if self.clock() > deadline:
                raise requests.exceptions.ReadTimeout(str(e)) from e
            raise
        return b"".join(chunks)

    def get_cities(self, timeout: float | None = None) -> list[City]:
        """
        Fetch the city list.

        Raises:
            ValueError: If the body is not a JSON list of ``{id, name}`` objects
        """
        if timeout is None:
            timeout = settings.PARTICIPANT_API_CITIES_TIMEOUT

        body = self._request(
            "GET", "/cities", timeout=timeout, params={"v": self.version}
        )
        payload = json.loads(body)
        if not isinstance(payload, list):
            raise ValueError("Expected a JSON list of cities")
        try:
            return [City.from_api(item) for item in payload]
        except (KeyError, TypeError) as e:
            raise ValueError(f"Malformed city entry: {e}") from e

    def create_participant(
        self, payload: dict[str, Any], timeout: float | None = None
    ) -> dict[str, Any]:
        """
        Register a participant.

        Returns:
            The decoded JSON body, or an empty dict when the body isn't JSON
        """
        if timeout is None:
            timeout = settings.PARTICIPANT_API_SUBMIT_TIMEOUT

        raw = self._request("POST", "/participants", timeout=timeout, json=payload)
        try:
            body = json.loads(raw)
        except ValueError:
            return {}
        return body if isinstance(body, dict) else {"result": body}


@dataclass
class CityList:
    cities: list[City]
    from_fallback: bool = False

    def choices(self) -> list[tuple[str, str]]:
        return [(city.id, city.name) for city in self.cities]

    def get(self, city_id: str) -> City | None:
        for city in self.cities:
            if city.id == city_id:
                return city
        return None


class CityDirectory:
    """
    Load the city list once per page load, never blocking the form.

    Any failure (timeout, transport error, HTTP error, malformed body) is
    absorbed and the built-in list is served instead.
    """

    def __init__(self, client: ParticipantAPIClient | None = None):
        self.client = client or ParticipantAPIClient()

    def load(self) -> CityList:
        try:
            cities = self.client.get_cities()
        except (
            ParticipantServiceTimeout,
            ParticipantServiceUnavailable,
            ParticipantRejectedError,
            ValueError,
        ) as e:
            logger.warning(f"Using fallback city list: {e}")
            return CityList(cities=list(FALLBACK_CITIES), from_fallback=True)

        if not cities:
            logger.warning("Participant service returned no cities; using fallback")
            return CityList(cities=list(FALLBACK_CITIES), from_fallback=True)

        logger.debug(f"Loaded {len(cities)} cities from participant service")
        return CityList(cities=cities)
