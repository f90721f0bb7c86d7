"""
Pytest configuration and fixtures for the festival tests.
"""

import json

import pytest
from django.core.cache import cache

from festival.drafts import ParticipantDraft

VALID_CPF = "529.982.247-25"


@pytest.fixture(autouse=True)
def clear_cache():
    """Start every test with an empty cache (rate limits, submission locks)."""
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def voting_config():
    """Voting windows configuration with one city in each state."""
    return {
        "utc_offset_hours": -3,
        "cities": {
            "maraba": {
                "name": "Marabá",
                "url": "https://votacao.test/maraba",
                "opens_on": "2025-09-13",
                "closed": True,
            },
            "portel": {
                "name": "Portel",
                "url": "https://votacao.test/portel",
                "opens_on": "2025-10-11",
                "closed": False,
            },
            "belem": {
                "name": "Belém",
                "url": "https://votacao.test/belem",
                "opens_on": "2099-11-15",
                "closed": False,
            },
        },
    }


@pytest.fixture
def voting_windows_file(tmp_path, settings, voting_config):
    """Write ``voting_config`` to disk and point the settings at it."""
    path = tmp_path / "voting_windows.json"
    path.write_text(json.dumps(voting_config), encoding="utf-8")
    settings.VOTING_WINDOWS_FILE = path
    return path


@pytest.fixture
def valid_registration_data():
    """POST data for a valid adult registration."""
    return {
        "full_name": "Maria da Silva",
        "cpf": "52998224725",
        "birth_date": "1990-01-15",
        "phone": "91987654321",
        "email": "Maria@Example.com",
        "city_id": "550e8400-e29b-41d4-a716-446655440005",
        "motivation": "Louvar e conhecer outros músicos.",
        "regulation_accepted": "on",
    }


@pytest.fixture
def complete_draft():
    """A draft that passes every local check."""
    return ParticipantDraft(draft_id="draft-1").update_many(
        {
            "full_name": "Maria da Silva",
            "cpf": "52998224725",
            "birth_date": "1990-01-15",
            "phone": "91987654321",
            "email": "maria@example.com",
            "city_id": "550e8400-e29b-41d4-a716-446655440005",
            "motivation": "Louvar",
            "regulation_accepted": True,
        }
    )
