"""
Age eligibility rules for festival participants.

Participants must be at least 12 years old on the evaluation date; minors
(12 to 17) may take part with a signed authorization from a legal guardian.
Ages above 100 are treated as typing mistakes.
"""

from dataclasses import asdict, dataclass
from datetime import date, datetime
from enum import Enum
from typing import Any

from django.utils import timezone
from loguru import logger

MINIMUM_AGE = 12
ADULT_AGE = 18
MAXIMUM_AGE = 100

ACCEPTED_DATE_FORMATS = ("%Y-%m-%d", "%d/%m/%Y")


class AgeStatus(str, Enum):
    """Classification of an evaluated birth date."""

    EMPTY = "empty"
    INVALID_DATE = "invalid_date"
    BELOW_MINIMUM = "below_minimum"
    IMPLAUSIBLE = "implausible"
    GUARDIAN_REQUIRED = "guardian_required"
    ELIGIBLE = "eligible"


AGE_MESSAGES = {
    AgeStatus.EMPTY: "",
    AgeStatus.INVALID_DATE: "Data de nascimento inválida.",
    AgeStatus.BELOW_MINIMUM: (
        "Idade mínima para participação é de 12 anos completos."
    ),
    AgeStatus.IMPLAUSIBLE: "Idade não permitida.",
    AgeStatus.GUARDIAN_REQUIRED: (
        "Menor de 18 anos: Será necessária autorização assinada pelo "
        "responsável legal no dia do evento."
    ),
    AgeStatus.ELIGIBLE: "Idade válida para participação.",
}


@dataclass(frozen=True)
class AgeValidationResult:
    """
    Outcome of an age evaluation.

    Instances are immutable: every birth-date change produces a new result.

    Attributes:
        is_valid: False blocks the submission
        age: Completed years on the evaluation date (0 when no date was given)
        needs_guardian_authorization: True only for valid minors
        message: Text shown next to the birth-date field
        status: Machine-readable classification
    """

    is_valid: bool
    age: int
    needs_guardian_authorization: bool
    message: str
    status: AgeStatus

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["status"] = self.status.value
        return data


def parse_birth_date(value: date | str | None) -> date | None:
    """
    Parse a birth date given as a date, ISO string or dd/mm/yyyy string.

    Returns:
        The parsed date, or None for empty input

    Raises:
        ValueError: If a non-empty string matches no accepted format
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value

    text = value.strip()
    if not text:
        return None

    for fmt in ACCEPTED_DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    raise ValueError(f"Unrecognized birth date: {value!r}")


def calculate_age(birth_date: date, as_of: date) -> int:
    """
    Completed years between ``birth_date`` and ``as_of``.

    One year is subtracted when the anniversary has not yet been reached in
    the ``as_of`` year. Birth dates after ``as_of`` give negative ages.
    """
    age = as_of.year - birth_date.year
    if (as_of.month, as_of.day) < (birth_date.month, birth_date.day):
        age -= 1
    return age


class AgeEligibilityEvaluator:
    """
    Classify a birth date into an eligibility state.

    Rules are evaluated in order:
    1. age < 12 → invalid (below minimum)
    2. age > 100 → invalid (implausible)
    3. 12 ≤ age < 18 → valid, guardian authorization required
    4. otherwise → valid

    An empty birth date means "not entered yet" and yields a neutral, valid
    result so it never blocks unrelated UI state.

    Example:
        >>> evaluator = AgeEligibilityEvaluator()
        >>> result = evaluator.evaluate("2010-05-01", as_of=date(2025, 5, 1))
        >>> result.age, result.needs_guardian_authorization
        (15, True)
    """

    def evaluate(
        self, birth_date: date | str | None, as_of: date | None = None
    ) -> AgeValidationResult:
        try:
            parsed = parse_birth_date(birth_date)
        except ValueError:
            logger.debug(f"Could not parse birth date: {birth_date!r}")
            return self._result(AgeStatus.INVALID_DATE, age=0)

        if parsed is None:
            return self._result(AgeStatus.EMPTY, age=0)

        if as_of is None:
            as_of = timezone.localdate()

        age = calculate_age(parsed, as_of)

        if age < MINIMUM_AGE:
            status = AgeStatus.BELOW_MINIMUM
        elif age > MAXIMUM_AGE:
            status = AgeStatus.IMPLAUSIBLE
        elif age < ADULT_AGE:
            status = AgeStatus.GUARDIAN_REQUIRED
        else:
            status = AgeStatus.ELIGIBLE

        return self._result(status, age=age)

    def _result(self, status: AgeStatus, age: int) -> AgeValidationResult:
        return AgeValidationResult(
            is_valid=status
            in (AgeStatus.EMPTY, AgeStatus.GUARDIAN_REQUIRED, AgeStatus.ELIGIBLE),
            age=age,
            needs_guardian_authorization=status == AgeStatus.GUARDIAN_REQUIRED,
            message=AGE_MESSAGES[status],
            status=status,
        )


def evaluate_age(
    birth_date: date | str | None, as_of: date | None = None
) -> AgeValidationResult:
    """Shortcut for ``AgeEligibilityEvaluator().evaluate(...)``."""
    return AgeEligibilityEvaluator().evaluate(birth_date, as_of=as_of)
