"""Mapping of VIES fault keys to human-readable messages."""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType
from typing import TYPE_CHECKING, Final

if TYPE_CHECKING:  # pragma: no cover
    from .models import FaultInfo

UNKNOWN: Final = "UNKNOWN"

ERROR_MESSAGES: Final[Mapping[str, str]] = MappingProxyType(
    {
        "INVALID_INPUT_COUNTRY": "The country code in the VAT ID is invalid",
        "INVALID_INPUT_NUMBER": "The VAT number part is empty or invalid",
        "SERVICE_UNAVAILABLE": "The VIES VAT service is unavailable, please try again later",
        "MS_UNAVAILABLE": (
            "The VAT database of the requested member country is unavailable, "
            "please try again later"
        ),
        "MS_MAX_CONCURRENT_REQ": (
            "The VAT database of the requested member country has had too many requests, "
            "please try again later"
        ),
        "TIMEOUT": (
            "The request to VAT database of the requested member country has timed out, "
            "please try again later"
        ),
        "SERVER_BUSY": "The service cannot process your request, please try again later",
        UNKNOWN: "Unknown error",
    }
)


def readable_error_message(key: str | None) -> str:
    """Return the catalog text for *key*.

    Unknown keys are returned unchanged so new registry fault codes stay visible.
    """

    if not key:
        return ERROR_MESSAGES[UNKNOWN]
    return ERROR_MESSAGES.get(key, key)


def translate_fault(fault: FaultInfo) -> str:
    return readable_error_message(fault.message)


__all__ = ["ERROR_MESSAGES", "UNKNOWN", "readable_error_message", "translate_fault"]
