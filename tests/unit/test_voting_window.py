"""
Unit tests for the voting window resolver.

Opening instants are midnight at UTC-3 on the configured date.
"""

import json
from datetime import date, datetime, timedelta, timezone

import pytest
from django.core.exceptions import ImproperlyConfigured

from festival.exceptions import UnknownCityError
from festival.services.voting_window import (
    VotingWindowResolver,
    VotingWindowState,
    load_voting_windows,
    parse_voting_windows,
)

UTC_MINUS_3 = timezone(timedelta(hours=-3))


@pytest.fixture
def resolver(voting_config):
    return VotingWindowResolver(parse_voting_windows(voting_config))


class TestParseVotingWindows:
    def test_builds_windows(self, voting_config):
        table = parse_voting_windows(voting_config)

        assert set(table.windows) == {"maraba", "portel", "belem"}
        assert table.windows["portel"].opens_on == date(2025, 10, 11)
        assert table.closed_keys == frozenset({"maraba"})
        assert table.utc_offset_hours == -3

    def test_missing_cities_key(self):
        with pytest.raises(ImproperlyConfigured):
            parse_voting_windows({"utc_offset_hours": -3})

    def test_bad_date(self, voting_config):
        voting_config["cities"]["portel"]["opens_on"] = "11/10/2025"
        with pytest.raises(ImproperlyConfigured, match="portel"):
            parse_voting_windows(voting_config)

    def test_missing_url(self, voting_config):
        del voting_config["cities"]["belem"]["url"]
        with pytest.raises(ImproperlyConfigured, match="belem"):
            parse_voting_windows(voting_config)


class TestLoadVotingWindows:
    def test_reads_configured_file(self, voting_windows_file):
        table = load_voting_windows()
        assert "portel" in table.windows

    def test_missing_file(self, tmp_path):
        with pytest.raises(ImproperlyConfigured):
            load_voting_windows(tmp_path / "missing.json")

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(ImproperlyConfigured):
            load_voting_windows(path)

    def test_shipped_configuration_is_valid(self):
        table = load_voting_windows()
        assert {"maraba", "santarem", "portel", "benevides", "belem"} <= set(
            table.windows
        )

    def test_shipped_belem_window(self):
        resolver = VotingWindowResolver(load_voting_windows())

        before = resolver.resolve("belem", now=datetime(2025, 11, 14, 12, 0))
        after = resolver.resolve("belem", now=datetime(2025, 11, 15, 0, 0))

        assert before.state == VotingWindowState.NOT_YET_OPEN
        assert after.state == VotingWindowState.OPEN

    def test_from_settings_rereads_file(self, voting_windows_file, voting_config):
        now = datetime(2025, 10, 12, 12, 0, tzinfo=UTC_MINUS_3)
        assert VotingWindowResolver.from_settings().resolve("portel", now).is_open

        voting_config["cities"]["portel"]["closed"] = True
        voting_windows_file.write_text(json.dumps(voting_config), encoding="utf-8")

        decision = VotingWindowResolver.from_settings().resolve("portel", now)
        assert decision.state == VotingWindowState.PERMANENTLY_CLOSED


class TestVotingWindowResolver:
    """Tests for VotingWindowResolver.resolve()."""

    def test_closed_city_ignores_dates(self, resolver):
        decision = resolver.resolve(
            "maraba", now=datetime(2030, 1, 1, tzinfo=UTC_MINUS_3)
        )

        assert decision.state == VotingWindowState.PERMANENTLY_CLOSED
        assert decision.target_url is None
        assert decision.modal_message == "A votação de Marabá está encerrada."

    def test_open_at_midnight_of_opening_day(self, resolver):
        decision = resolver.resolve(
            "portel", now=datetime(2025, 10, 11, 0, 0, tzinfo=UTC_MINUS_3)
        )

        assert decision.state == VotingWindowState.OPEN
        assert decision.target_url == "https://votacao.test/portel"
        assert decision.modal_message == ""

    def test_not_yet_open_one_minute_before_midnight(self, resolver):
        decision = resolver.resolve(
            "portel", now=datetime(2025, 10, 10, 23, 59, tzinfo=UTC_MINUS_3)
        )

        assert decision.state == VotingWindowState.NOT_YET_OPEN
        assert decision.opens_on == date(2025, 10, 11)
        assert decision.target_url is None
        assert decision.modal_message == "A votação de Portel abre em 11/10."

    def test_compares_in_utc_minus_3(self, resolver):
        # 02:00 UTC on the 11th is still the 10th in Belém
        before = datetime(2025, 10, 11, 2, 0, tzinfo=timezone.utc)
        after = datetime(2025, 10, 11, 3, 0, tzinfo=timezone.utc)

        assert resolver.resolve("portel", now=before).state == (
            VotingWindowState.NOT_YET_OPEN
        )
        assert resolver.resolve("portel", now=after).state == VotingWindowState.OPEN

    def test_naive_now_is_read_as_local_offset(self, resolver):
        assert resolver.resolve("portel", now=datetime(2025, 10, 11, 0, 0)).is_open
        assert not resolver.resolve(
            "portel", now=datetime(2025, 10, 10, 23, 59)
        ).is_open

    def test_stays_open_after_opening(self, resolver):
        decision = resolver.resolve(
            "portel", now=datetime(2026, 3, 1, tzinfo=UTC_MINUS_3)
        )
        assert decision.is_open

    def test_unknown_city(self, resolver):
        with pytest.raises(UnknownCityError):
            resolver.resolve("altamira")

    def test_unknown_city_is_a_key_error(self, resolver):
        with pytest.raises(KeyError):
            resolver.resolve("altamira")

    def test_resolve_all(self, resolver):
        decisions = resolver.resolve_all(
            now=datetime(2025, 10, 12, tzinfo=UTC_MINUS_3)
        )
        states = {decision.city_key: decision.state for decision in decisions}

        assert states == {
            "maraba": VotingWindowState.PERMANENTLY_CLOSED,
            "portel": VotingWindowState.OPEN,
            "belem": VotingWindowState.NOT_YET_OPEN,
        }

    def test_to_dict(self, resolver):
        data = resolver.resolve(
            "belem", now=datetime(2025, 10, 12, tzinfo=UTC_MINUS_3)
        ).to_dict()

        assert data == {
            "city_key": "belem",
            "city_name": "Belém",
            "state": "not_yet_open",
            "target_url": None,
            "opens_on": "2099-11-15",
            "opens_on_display": "15/11",
            "message": "A votação de Belém abre em 15/11.",
        }
