"""
Registration draft state.

A ``ParticipantDraft`` holds what the user has typed into the registration
form so far. It is updated one field at a time through ``update()``, which
applies the display masks, and it serializes to a plain dict so it can live
in the session while the form is open. The digits-only values the backend
expects are derived only when building the outbound payload.
"""

import uuid
from dataclasses import asdict, dataclass, field, fields, replace
from typing import Any

from festival.formatting import format_cpf, format_phone, only_digits

SESSION_KEY = "participant_draft"

# Field name → mask applied on every update
FIELD_FORMATTERS = {
    "cpf": format_cpf,
    "phone": format_phone,
}


@dataclass(frozen=True)
class ParticipantDraft:
    """
    Snapshot of the registration form.

    Transitions return new drafts; a draft is never mutated in place.

    Attributes:
        draft_id: Stable id for the lifetime of the open form
        full_name: Participant name
        cpf: Masked CPF (``###.###.###-##``)
        birth_date: ISO date string (``YYYY-MM-DD``) or empty
        phone: Masked phone number
        email: Contact email
        city_id: Backend id of the chosen city
        motivation: Free text ("why do you want to take part?")
        regulation_accepted: Whether the rules were accepted
    """

    draft_id: str = field(default_factory=lambda: uuid.uuid4().hex)
    full_name: str = ""
    cpf: str = ""
    birth_date: str = ""
    phone: str = ""
    email: str = ""
    city_id: str = ""
    motivation: str = ""
    regulation_accepted: bool = False

    @classmethod
    def field_names(cls) -> list[str]:
        return [f.name for f in fields(cls) if f.name != "draft_id"]

    def update(self, field_name: str, raw: Any) -> "ParticipantDraft":
        """
        Return a new draft with ``field_name`` set from raw user input.

        Raises:
            KeyError: If ``field_name`` is not a draft field
        """
        if field_name not in self.field_names():
            raise KeyError(field_name)

        if field_name == "regulation_accepted":
            value: Any = bool(raw)
        else:
            value = "" if raw is None else str(raw)
            formatter = FIELD_FORMATTERS.get(field_name)
            if formatter is not None:
                value = formatter(value)

        return replace(self, **{field_name: value})

    def update_many(self, values: dict[str, Any]) -> "ParticipantDraft":
        draft = self
        for field_name, raw in values.items():
            draft = draft.update(field_name, raw)
        return draft

    def to_payload(self) -> dict[str, str]:
        """Wire payload for ``POST /participants`` (digits-only cpf/phone)."""
        return {
            "name": self.full_name.strip(),
            "email": self.email.strip(),
            "phone": only_digits(self.phone),
            "cpf": only_digits(self.cpf),
            "birthDate": self.birth_date,
            "cityId": self.city_id,
            "reason": self.motivation.strip(),
        }

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> "ParticipantDraft":
        """Rebuild a draft from ``to_dict()`` output, ignoring unknown keys."""
        if not data:
            return cls()
        known = {f.name for f in fields(cls)}
        values = {key: value for key, value in data.items() if key in known}
        if not values.get("draft_id"):
            values.pop("draft_id", None)
        for field_name, formatter in FIELD_FORMATTERS.items():
            if field_name in values:
                values[field_name] = formatter(values[field_name])
        return cls(**values)


def load_draft(session) -> ParticipantDraft:
    """Return the draft stored in ``session`` or a fresh one."""
    return ParticipantDraft.from_dict(session.get(SESSION_KEY))


def save_draft(session, draft: ParticipantDraft) -> None:
    session[SESSION_KEY] = draft.to_dict()


def discard_draft(session) -> None:
    session.pop(SESSION_KEY, None)
