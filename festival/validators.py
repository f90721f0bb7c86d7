"""
Field validators for the festival registration form.

Provides:
- CPF (Brazilian national identification number) checksum validation
- Brazilian phone number validation backed by the phonenumbers library
- Free-text sanitization

The ``is_*`` predicates are total and never raise; the ``validate_*``
functions follow Django's validator protocol and raise ``ValidationError``.
"""

import re

import phonenumbers
from django.core.exceptions import ValidationError
from django.utils.html import strip_tags
from phonenumbers import NumberParseException

from festival.formatting import CPF_LENGTH, only_digits

PHONE_REGION = "BR"


def normalize_cpf(raw: str | None) -> str:
    """Return the digits of a CPF, dropping punctuation and whitespace."""
    return only_digits(raw)


def compute_cpf_check_digits(first_nine: str) -> str:
    """
    Compute the two CPF check digits for a 9-digit base.

    Args:
        first_nine: The first nine digits of the CPF

    Returns:
        Two-character string with the first and second check digits

    Raises:
        ValueError: If ``first_nine`` is not exactly nine digits
    """
    if len(first_nine) != 9 or not first_nine.isdigit():
        raise ValueError("CPF base must be exactly nine digits")

    numbers = [int(digit) for digit in first_nine]

    first_sum = sum(number * (10 - i) for i, number in enumerate(numbers))
    first = (first_sum * 10) % 11
    if first == 10:
        first = 0

    # The first check digit takes weight 2 in the second sum
    second_sum = sum(number * (11 - i) for i, number in enumerate(numbers))
    second = ((second_sum + first * 2) * 10) % 11
    if second == 10:
        second = 0

    return f"{first}{second}"


def is_valid_cpf(raw: str | None) -> bool:
    """
    Check a CPF against its checksum.

    Formatted ("529.982.247-25") and bare ("52998224725") input are both
    accepted. Wrong lengths and the repeated-digit sequences
    ("111.111.111-11") are rejected.
    """
    cpf = normalize_cpf(raw)

    if len(cpf) != CPF_LENGTH:
        return False

    # Repeated digits pass the checksum but are never issued
    if cpf == cpf[0] * CPF_LENGTH:
        return False

    return compute_cpf_check_digits(cpf[:9]) == cpf[9:]


def validate_cpf(value: str) -> None:
    """
    Validate a CPF for use in Django forms.

    Args:
        value: CPF, formatted or not

    Raises:
        ValidationError: If the CPF fails the checksum
    """
    if not is_valid_cpf(value):
        raise ValidationError("CPF inválido.", code="invalid_cpf")


def validate_phone_number(phone_number: str) -> None:
    """
    Validate a Brazilian phone number using the phonenumbers library.

    Empty values are allowed; required-ness is the form's concern.

    Args:
        phone_number: Phone number, masked or bare digits

    Raises:
        ValidationError: If the phone number is invalid
    """
    if not phone_number or not phone_number.strip():
        return

    try:
        parsed_number = phonenumbers.parse(phone_number, PHONE_REGION)

        if not phonenumbers.is_possible_number(parsed_number):
            raise ValidationError(
                f"'{phone_number}' não é um telefone possível.",
                code="invalid_phone",
            )

        if not phonenumbers.is_valid_number(parsed_number):
            raise ValidationError(
                f"'{phone_number}' não é um telefone válido.",
                code="invalid_phone",
            )

    except NumberParseException as e:
        error_messages = {
            NumberParseException.INVALID_COUNTRY_CODE: "Código de país inválido.",
            NumberParseException.NOT_A_NUMBER: "Não é um número de telefone.",
            NumberParseException.TOO_SHORT_NSN: "Telefone muito curto.",
            NumberParseException.TOO_LONG: "Telefone muito longo.",
        }
        message = error_messages.get(e.error_type, "Formato de telefone inválido.")
        raise ValidationError(
            f"'{phone_number}' - {message}", code="invalid_phone"
        ) from e


def sanitize_text_field(value: str) -> str:
    """
    Sanitize free text to prevent XSS and other injection attacks.

    Args:
        value: The text value to sanitize

    Returns:
        Text with script blocks and HTML tags removed, control characters
        dropped and surrounding whitespace trimmed
    """
    if not value:
        return value

    # Remove script tags and their content completely
    value = re.sub(
        r"<script[^>]*>.*?</script>", "", value, flags=re.IGNORECASE | re.DOTALL
    )

    # Strip remaining HTML tags
    value = strip_tags(value)

    # Remove null bytes and other control characters
    value = re.sub(r"[\x00-\x08\x0B\x0C\x0E-\x1F\x7F]", "", value)

    return value.strip()
