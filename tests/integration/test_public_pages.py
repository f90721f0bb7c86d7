"""
Integration tests for the public pages, voting links, JSON endpoints and
the health check.
"""

from unittest.mock import patch

import pytest
from django.urls import reverse

from festival.exceptions import ParticipantServiceTimeout


@pytest.fixture
def broken_voting_config(settings, tmp_path):
    path = tmp_path / "voting_windows.json"
    path.write_text("{not json", encoding="utf-8")
    settings.VOTING_WINDOWS_FILE = path
    return path


class TestPages:
    def test_home_lists_voting_cities(self, client, voting_windows_file):
        response = client.get(reverse("festival:home"))

        assert response.status_code == 200
        content = response.content.decode()
        assert "Portel" in content
        assert "A votação de Marabá está encerrada." in content

    def test_every_voting_button_opens_a_new_tab(self, client, voting_windows_file):
        response = client.get(reverse("festival:home"))
        content = response.content.decode()

        # one closed, one open and one future city
        assert content.count('target="_blank"') == 3

    def test_home_survives_broken_voting_config(self, client, settings, tmp_path):
        settings.VOTING_WINDOWS_FILE = tmp_path / "missing.json"

        response = client.get(reverse("festival:home"))

        assert response.status_code == 200
        assert response.context["voting_decisions"] == []

    def test_whatsapp_groups(self, client):
        response = client.get(reverse("festival:whatsapp_groups"))

        assert response.status_code == 200
        assert "https://chat.whatsapp.com/HLvLuXLvJbP0VAqyxW9Mt6" in (
            response.content.decode()
        )

    def test_contacts(self, client):
        response = client.get(reverse("festival:contacts"))

        assert response.status_code == 200
        assert "(91) 99371-4669" in response.content.decode()


class TestVotingViews:
    def test_open_city_redirects(self, client, voting_windows_file):
        response = client.get(reverse("festival:voting", args=["portel"]))

        assert response.status_code == 302
        assert response.url == "https://votacao.test/portel"

    def test_closed_city_shows_modal(self, client, voting_windows_file):
        response = client.get(reverse("festival:voting", args=["maraba"]))

        assert response.status_code == 200
        assert "A votação de Marabá está encerrada." in response.content.decode()

    def test_future_city_shows_opening_date(self, client, voting_windows_file):
        response = client.get(reverse("festival:voting", args=["belem"]))

        assert response.status_code == 200
        assert "A votação de Belém abre em 15/11." in response.content.decode()

    def test_unknown_city_is_404(self, client, voting_windows_file):
        response = client.get(reverse("festival:voting", args=["altamira"]))
        assert response.status_code == 404

    def test_broken_config_is_503(self, client, broken_voting_config):
        response = client.get(reverse("festival:voting", args=["portel"]))

        assert response.status_code == 503
        assert "Votação indisponível no momento." in response.content.decode()


class TestApiViews:
    def test_voting_api(self, client, voting_windows_file):
        response = client.get(reverse("festival:voting_api", args=["belem"]))

        assert response.status_code == 200
        assert response.json()["state"] == "not_yet_open"
        assert response.json()["opens_on_display"] == "15/11"

    def test_voting_api_unknown_city(self, client, voting_windows_file):
        response = client.get(reverse("festival:voting_api", args=["altamira"]))
        assert response.status_code == 404

    def test_voting_api_broken_config(self, client, broken_voting_config):
        response = client.get(reverse("festival:voting_api", args=["portel"]))

        assert response.status_code == 503
        assert "error" in response.json()

    @pytest.mark.parametrize(
        "field, value, expected",
        [
            ("cpf", "5299822", "529.982.2"),
            ("cpf", "52998224725", "529.982.247-25"),
            ("phone", "9198765", "(91) 9876-5"),
            ("phone", "91987654321", "(91) 98765-4321"),
        ],
    )
    def test_format_api(self, client, field, value, expected):
        response = client.get(
            reverse("festival:format_api"), {"field": field, "value": value}
        )

        assert response.status_code == 200
        assert response.json() == {"field": field, "value": expected}

    def test_format_api_unknown_field(self, client):
        response = client.get(
            reverse("festival:format_api"), {"field": "email", "value": "x"}
        )
        assert response.status_code == 400

    def test_age_api(self, client):
        response = client.get(reverse("festival:age_api"), {"birth_date": "1990-01-15"})

        assert response.status_code == 200
        assert response.json()["status"] == "eligible"
        assert response.json()["is_valid"] is True

    def test_age_api_empty(self, client):
        response = client.get(reverse("festival:age_api"))
        assert response.json()["status"] == "empty"

    def test_cities_api_fallback(self, client):
        with patch(
            "festival.services.participant_api.ParticipantAPIClient.get_cities",
            side_effect=ParticipantServiceTimeout("slow"),
        ):
            response = client.get(reverse("festival:cities_api"))

        data = response.json()
        assert response.status_code == 200
        assert data["from_fallback"] is True
        assert len(data["cities"]) == 5


class TestHealthCheck:
    def test_healthy(self, client, voting_windows_file):
        response = client.get(reverse("festival:health_check"))

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["checks"]["cache"] == "healthy"
        assert data["checks"]["voting_windows"].startswith("healthy")

    def test_broken_voting_config(self, client, settings, tmp_path):
        settings.VOTING_WINDOWS_FILE = tmp_path / "missing.json"

        response = client.get(reverse("festival:health_check"))

        assert response.status_code == 503
        assert response.json()["checks"]["voting_windows"].startswith("error")
