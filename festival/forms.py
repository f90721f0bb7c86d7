"""
Forms for the festival application.

Provides the participant registration form, with layered validation:
1. Field-level: masking + sanitization + validation (clean_<field>())
2. Form-level: draft assembly for the submission service
"""

from datetime import date
from typing import Any

from django import forms
from django.core.exceptions import ValidationError

from festival.drafts import ParticipantDraft
from festival.formatting import format_cpf, format_phone
from festival.services.eligibility import AgeEligibilityEvaluator, AgeValidationResult
from festival.services.participant_api import FALLBACK_CITIES, CityList
from festival.validators import sanitize_text_field, validate_cpf, validate_phone_number


class ParticipantForm(forms.Form):
    """
    Registration form for festival participants.

    Features:
    - CPF and phone masks applied on clean, so the stored values are always
      the display format
    - CPF checksum validation
    - Age eligibility with guardian-authorization notice for minors
    - City choices fed from the participant service (or its fallback list)
    - XSS protection through sanitization of free-text fields

    Example:
        >>> form = ParticipantForm(data=request.POST, cities=CityDirectory().load())
        >>> if form.is_valid():
        ...     draft = form.to_draft()
    """

    full_name = forms.CharField(
        max_length=150,
        label="Nome completo",
        widget=forms.TextInput(
            attrs={"placeholder": "Seu nome completo", "autocomplete": "name"}
        ),
    )

    cpf = forms.CharField(
        max_length=14,
        label="CPF",
        widget=forms.TextInput(
            attrs={
                "placeholder": "000.000.000-00",
                "inputmode": "numeric",
                "data-mask": "cpf",
            }
        ),
    )

    birth_date = forms.DateField(
        label="Data de nascimento",
        input_formats=["%Y-%m-%d", "%d/%m/%Y"],
        widget=forms.DateInput(attrs={"type": "date"}, format="%Y-%m-%d"),
    )

    phone = forms.CharField(
        max_length=15,
        label="Celular",
        widget=forms.TextInput(
            attrs={
                "placeholder": "(91) 99999-9999",
                "inputmode": "tel",
                "autocomplete": "tel",
                "data-mask": "phone",
            }
        ),
    )

    email = forms.EmailField(
        label="E-mail",
        widget=forms.EmailInput(
            attrs={"placeholder": "seu@email.com", "autocomplete": "email"}
        ),
    )

    city_id = forms.ChoiceField(label="Cidade", choices=())

    motivation = forms.CharField(
        max_length=2000,
        label="Por que você quer participar do festival?",
        widget=forms.Textarea(attrs={"rows": 4}),
    )

    regulation_accepted = forms.BooleanField(
        required=True,
        label="Li e aceito o regulamento do festival",
        error_messages={
            "required": (
                "Você deve aceitar o regulamento para prosseguir com a inscrição."
            )
        },
    )

    def __init__(
        self,
        *args: Any,
        cities: CityList | None = None,
        draft_id: str | None = None,
        as_of: date | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(*args, **kwargs)
        self.cities = cities or CityList(cities=list(FALLBACK_CITIES), from_fallback=True)
        self.draft_id = draft_id
        self.as_of = as_of
        self.age_result: AgeValidationResult | None = None

        self.fields["city_id"].choices = [("", "Selecione sua cidade")] + list(
            self.cities.choices()
        )

        for field in self.fields.values():
            if isinstance(field.widget, forms.CheckboxInput):
                field.widget.attrs.setdefault("class", "form-check-input")
            else:
                field.widget.attrs.setdefault("class", "form-control")

    def clean_full_name(self) -> str:
        """
        Sanitize and validate the participant name.

        Raises:
            ValidationError: If nothing is left after sanitization
        """
        sanitized = sanitize_text_field(self.cleaned_data.get("full_name", ""))
        if not sanitized:
            raise ValidationError("Informe seu nome completo.")
        return sanitized

    def clean_cpf(self) -> str:
        """
        Mask and validate the CPF.

        Returns:
            CPF in ``###.###.###-##`` format

        Raises:
            ValidationError: If the CPF fails the checksum
        """
        value = format_cpf(self.cleaned_data.get("cpf", ""))
        validate_cpf(value)
        return value

    def clean_birth_date(self) -> date | None:
        """
        Check age eligibility for the birth date.

        The evaluation result stays available as ``self.age_result`` so the
        template can show the guardian-authorization notice for minors.

        Raises:
            ValidationError: If the participant is under 12 or the age is
                implausible
        """
        value = self.cleaned_data.get("birth_date")
        self.age_result = AgeEligibilityEvaluator().evaluate(value, as_of=self.as_of)
        if not self.age_result.is_valid:
            raise ValidationError(self.age_result.message, code=self.age_result.status.value)
        return value

    def clean_phone(self) -> str:
        """
        Mask and validate the phone number.

        Returns:
            Phone in ``(##) #####-####`` or ``(##) ####-####`` format

        Raises:
            ValidationError: If the number is not a valid Brazilian phone
        """
        value = format_phone(self.cleaned_data.get("phone", ""))
        validate_phone_number(value)
        return value

    def clean_email(self) -> str:
        """Normalize email address (lowercase, trimmed)."""
        return self.cleaned_data.get("email", "").lower().strip()

    def clean_motivation(self) -> str:
        sanitized = sanitize_text_field(self.cleaned_data.get("motivation", ""))
        if not sanitized:
            raise ValidationError("Conte um pouco sobre sua motivação.")
        return sanitized

    def to_draft(self) -> ParticipantDraft:
        """
        Build the draft for the submission service from cleaned data.

        Must only be called after ``is_valid()`` returned True.
        """
        birth_date = self.cleaned_data["birth_date"]
        values = {
            "full_name": self.cleaned_data["full_name"],
            "cpf": self.cleaned_data["cpf"],
            "birth_date": birth_date.isoformat() if birth_date else "",
            "phone": self.cleaned_data["phone"],
            "email": self.cleaned_data["email"],
            "city_id": self.cleaned_data["city_id"],
            "motivation": self.cleaned_data["motivation"],
            "regulation_accepted": self.cleaned_data["regulation_accepted"],
        }
        draft = ParticipantDraft(draft_id=self.draft_id) if self.draft_id else ParticipantDraft()
        return draft.update_many(values)

    @classmethod
    def initial_from_draft(cls, draft: ParticipantDraft) -> dict[str, Any]:
        """Initial values to re-open the form from a stored draft."""
        return {name: getattr(draft, name) for name in ParticipantDraft.field_names()}
