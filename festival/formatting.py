"""
Display masks for numeric form fields.

Every function here is total: any string (including empty, partial or
overlong input, and None) produces a string, never an exception. Partial
input yields the matching prefix of the mask so the field can be re-masked
on every keystroke.
"""

import re

_NON_DIGITS = re.compile(r"[^0-9]")

CPF_LENGTH = 11
PHONE_MAX_LENGTH = 11


def only_digits(raw: str | None) -> str:
    """Strip everything that is not an ASCII digit."""
    if not raw:
        return ""
    return _NON_DIGITS.sub("", str(raw))


def format_cpf(raw: str | None) -> str:
    """
    Apply the ``###.###.###-##`` mask over the first 11 digits.

    Digits beyond the eleventh are ignored.

    Example:
        >>> format_cpf("52998224725")
        '529.982.247-25'
        >>> format_cpf("5299")
        '529.9'
    """
    digits = only_digits(raw)[:CPF_LENGTH]

    formatted = digits[:3]
    if len(digits) > 3:
        formatted += "." + digits[3:6]
    if len(digits) > 6:
        formatted += "." + digits[6:9]
    if len(digits) > 9:
        formatted += "-" + digits[9:11]
    return formatted


def format_phone(raw: str | None) -> str:
    """
    Apply ``(##) ####-####`` for up to 10 digits, ``(##) #####-####`` for 11.

    Input beyond 11 digits is truncated to 11.

    Example:
        >>> format_phone("9132221234")
        '(91) 3222-1234'
        >>> format_phone("91987654321")
        '(91) 98765-4321'
    """
    digits = only_digits(raw)[:PHONE_MAX_LENGTH]
    if not digits:
        return ""

    # Mobile numbers carry a fifth digit in the first block
    split_at = 7 if len(digits) == PHONE_MAX_LENGTH else 6

    formatted = "(" + digits[:2]
    if len(digits) > 2:
        formatted += ") " + digits[2:split_at]
    if len(digits) > split_at:
        formatted += "-" + digits[split_at:]
    return formatted
