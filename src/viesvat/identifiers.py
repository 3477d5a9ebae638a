"""Structural checks for VAT identification numbers."""

from __future__ import annotations

import re
from typing import Final

from .errors import InvalidCountryError, InvalidNumberError
from .faults import ERROR_MESSAGES
from .models import VatIdentifier

# VIES uses EL for Greece and XI for Northern Ireland.
COUNTRY_CODES: Final = frozenset(
    {
        "AT",
        "BE",
        "BG",
        "CY",
        "CZ",
        "DE",
        "DK",
        "EE",
        "EL",
        "ES",
        "FI",
        "FR",
        "HR",
        "HU",
        "IE",
        "IT",
        "LT",
        "LU",
        "LV",
        "MT",
        "NL",
        "PL",
        "PT",
        "RO",
        "SE",
        "SI",
        "SK",
        "XI",
        "IX",
    }
)

VAT_ID_PATTERN: Final = re.compile(r"^[A-Z]{2}[0-9A-Z]{2,13}$")

_SEPARATORS = re.compile(r"[\s.\-/]+")


def parse_vat_id(raw_id: str) -> VatIdentifier:
    """Split *raw_id* into country code and number after checking its structure.

    The country code is checked before the overall pattern, so a well-formed ID
    with an unsupported prefix raises :class:`InvalidCountryError` and anything
    else malformed raises :class:`InvalidNumberError`.
    """

    country_code, number = raw_id[:2], raw_id[2:]
    if country_code not in COUNTRY_CODES:
        raise InvalidCountryError(ERROR_MESSAGES["INVALID_INPUT_COUNTRY"])
    # fullmatch: ``$`` alone would accept a trailing newline
    if not VAT_ID_PATTERN.fullmatch(raw_id):
        raise InvalidNumberError(ERROR_MESSAGES["INVALID_INPUT_NUMBER"])
    return VatIdentifier(country_code=country_code, number=number)


def clean_vat_id(value: object) -> str:
    """Normalise user input such as ``" de 123.456.789 "`` to ``"DE123456789"``."""

    if value is None:
        return ""
    return _SEPARATORS.sub("", str(value)).upper()


__all__ = ["COUNTRY_CODES", "VAT_ID_PATTERN", "clean_vat_id", "parse_vat_id"]
