"""
URL configuration for the festival application.
"""

from django.urls import path

from festival import views

app_name = "festival"

urlpatterns = [
    path("", views.home, name="home"),
    # Registration
    path("inscricao/", views.RegistrationView.as_view(), name="register"),
    path(
        "inscricao/descartar/", views.discard_draft_view, name="discard_draft"
    ),
    path("grupos-whatsapp/", views.whatsapp_groups, name="whatsapp_groups"),
    path("contatos/", views.contacts, name="contacts"),
    # Voting
    path("votacao/<slug:city_key>/", views.voting_redirect, name="voting"),
    # JSON endpoints
    path("api/cidades/", views.cities_api, name="cities_api"),
    path("api/formatar/", views.format_field_api, name="format_api"),
    path("api/idade/", views.age_api, name="age_api"),
    path("api/votacao/<slug:city_key>/", views.voting_api, name="voting_api"),
    # Health check endpoint
    path("health/", views.health_check, name="health_check"),
]
