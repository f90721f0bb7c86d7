"""
Per-city voting windows.

Each city has an external voting form that becomes available at midnight
(local time, fixed UTC-3) on its opening date. Cities flagged as closed never
open again, whatever the date. Decisions are computed from the configuration
file and the clock on every call, so a city flips from "not yet open" to
"open" as time passes and never flips back.

The configuration lives in a JSON file (``VOTING_WINDOWS_FILE``)::

    {
      "utc_offset_hours": -3,
      "cities": {
        "belem": {
          "name": "Belém",
          "url": "https://...",
          "opens_on": "2025-11-15",
          "closed": false
        }
      }
    }
"""

import json
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone as dt_timezone
from enum import Enum
from pathlib import Path
from typing import Any

from django.conf import settings
from django.core.exceptions import ImproperlyConfigured
from django.utils import timezone
from loguru import logger

from festival.exceptions import UnknownCityError

DEFAULT_UTC_OFFSET_HOURS = -3


class VotingWindowState(str, Enum):
    OPEN = "open"
    NOT_YET_OPEN = "not_yet_open"
    PERMANENTLY_CLOSED = "permanently_closed"


@dataclass(frozen=True)
class VotingWindow:
    """Static configuration for one city."""

    city_key: str
    city_name: str
    url: str
    opens_on: date
    closed: bool = False


@dataclass(frozen=True)
class VotingDecision:
    """
    Result of resolving a city's voting link at a given instant.

    ``target_url`` is set only for OPEN, ``opens_on`` only for NOT_YET_OPEN.
    """

    city_key: str
    city_name: str
    state: VotingWindowState
    target_url: str | None = None
    opens_on: date | None = None

    @property
    def is_open(self) -> bool:
        return self.state == VotingWindowState.OPEN

    @property
    def opens_on_display(self) -> str:
        """Opening date as day/month, e.g. ``15/11``."""
        if self.opens_on is None:
            return ""
        return self.opens_on.strftime("%d/%m")

    @property
    def modal_message(self) -> str:
        """Text for the informational modal shown when the link can't open."""
        if self.state == VotingWindowState.PERMANENTLY_CLOSED:
            return f"A votação de {self.city_name} está encerrada."
        if self.state == VotingWindowState.NOT_YET_OPEN:
            return (
                f"A votação de {self.city_name} abre em {self.opens_on_display}."
            )
        return ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "city_key": self.city_key,
            "city_name": self.city_name,
            "state": self.state.value,
            "target_url": self.target_url,
            "opens_on": self.opens_on.isoformat() if self.opens_on else None,
            "opens_on_display": self.opens_on_display,
            "message": self.modal_message,
        }


@dataclass(frozen=True)
class VotingWindowTable:
    """All configured windows plus the fixed offset their dates are in."""

    windows: dict[str, VotingWindow]
    utc_offset_hours: int = DEFAULT_UTC_OFFSET_HOURS

    @property
    def tzinfo(self) -> dt_timezone:
        return dt_timezone(timedelta(hours=self.utc_offset_hours))

    @property
    def closed_keys(self) -> frozenset[str]:
        return frozenset(key for key, window in self.windows.items() if window.closed)


def parse_voting_windows(data: dict[str, Any]) -> VotingWindowTable:
    """
    Build a ``VotingWindowTable`` from decoded configuration data.

    Raises:
        ImproperlyConfigured: If a required key is missing or a date is invalid
    """
    try:
        offset = int(data.get("utc_offset_hours", DEFAULT_UTC_OFFSET_HOURS))
        cities = data["cities"]
    except (KeyError, TypeError, ValueError) as e:
        raise ImproperlyConfigured(f"Invalid voting windows configuration: {e}") from e

    windows: dict[str, VotingWindow] = {}
    for city_key, entry in cities.items():
        try:
            windows[city_key] = VotingWindow(
                city_key=city_key,
                city_name=entry["name"],
                url=entry["url"],
                opens_on=date.fromisoformat(entry["opens_on"]),
                closed=bool(entry.get("closed", False)),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise ImproperlyConfigured(
                f"Invalid voting window for city '{city_key}': {e}"
            ) from e

    return VotingWindowTable(windows=windows, utc_offset_hours=offset)


def load_voting_windows(path: Path | str | None = None) -> VotingWindowTable:
    """
    Read the voting windows configuration file.

    Args:
        path: File to read; defaults to ``settings.VOTING_WINDOWS_FILE``

    Raises:
        ImproperlyConfigured: If the file is missing, not JSON, or malformed
    """
    path = Path(path or settings.VOTING_WINDOWS_FILE)
    try:
        with open(path, encoding="utf-8") as config_file:
            data = json.load(config_file)
    except (OSError, json.JSONDecodeError) as e:
        raise ImproperlyConfigured(
            f"Could not read voting windows file {path}: {e}"
        ) from e

    return parse_voting_windows(data)


class VotingWindowResolver:
    """
    Decide whether a city's voting link may be opened.

    Decision order:
    1. City flagged closed → PERMANENTLY_CLOSED (ignores dates)
    2. now ≥ midnight of the opening date → OPEN with the external URL
    3. otherwise → NOT_YET_OPEN with the opening date

    Example:
        >>> resolver = VotingWindowResolver(load_voting_windows())
        >>> decision = resolver.resolve("belem", now=datetime(2025, 11, 14, 12, 0))
        >>> decision.state
        <VotingWindowState.NOT_YET_OPEN: 'not_yet_open'>
    """

    def __init__(self, table: VotingWindowTable):
        self.table = table

    @classmethod
    def from_settings(cls) -> "VotingWindowResolver":
        """Build a resolver from the configured file, re-read on each call."""
        return cls(load_voting_windows())

    def opening_instant(self, window: VotingWindow) -> datetime:
        return datetime.combine(window.opens_on, time.min, tzinfo=self.table.tzinfo)

    def resolve(self, city_key: str, now: datetime | None = None) -> VotingDecision:
        """
        Resolve the voting link state for ``city_key`` at ``now``.

        Naive ``now`` values are read in the configured UTC offset.

        Raises:
            UnknownCityError: If the city is not configured
        """
        window = self.table.windows.get(city_key)
        if window is None:
            raise UnknownCityError(city_key)

        if city_key in self.table.closed_keys:
            logger.info(f"Voting for {city_key} is permanently closed")
            return VotingDecision(
                city_key=city_key,
                city_name=window.city_name,
                state=VotingWindowState.PERMANENTLY_CLOSED,
            )

        if now is None:
            now = timezone.now()
        elif timezone.is_naive(now):
            now = now.replace(tzinfo=self.table.tzinfo)

        if now >= self.opening_instant(window):
            logger.info(f"Voting for {city_key} is open")
            return VotingDecision(
                city_key=city_key,
                city_name=window.city_name,
                state=VotingWindowState.OPEN,
                target_url=window.url,
            )

        logger.info(f"Voting for {city_key} opens on {window.opens_on.isoformat()}")
        return VotingDecision(
            city_key=city_key,
            city_name=window.city_name,
            state=VotingWindowState.NOT_YET_OPEN,
            opens_on=window.opens_on,
        )

    def resolve_all(self, now: datetime | None = None) -> list[VotingDecision]:
        """Resolve every configured city at the same instant."""
        if now is None:
            now = timezone.now()
        return [self.resolve(city_key, now=now) for city_key in self.table.windows]
