"""Zentrale Exporte für das ``viesvat``-Paket."""

from .client import ViesClient, validate_vat
from .envelope import decode_response, encode_identifier, encode_request
from .errors import (
    InvalidCountryError,
    InvalidNumberError,
    InvalidVatIdError,
    MalformedResponseError,
    RegistryFaultError,
    TransportError,
    VatError,
    VatTimeoutError,
)
from .faults import ERROR_MESSAGES, readable_error_message, translate_fault
from .identifiers import COUNTRY_CODES, clean_vat_id, parse_vat_id
from .models import EncodedRequest, FaultInfo, ValidationResult, VatIdentifier
from .transport import RequestsTransport, Transport
from .utils.logging_setup import setup_logger

__all__ = [
    "COUNTRY_CODES",
    "ERROR_MESSAGES",
    "EncodedRequest",
    "FaultInfo",
    "InvalidCountryError",
    "InvalidNumberError",
    "InvalidVatIdError",
    "MalformedResponseError",
    "RegistryFaultError",
    "RequestsTransport",
    "Transport",
    "TransportError",
    "ValidationResult",
    "VatError",
    "VatIdentifier",
    "VatTimeoutError",
    "ViesClient",
    "clean_vat_id",
    "decode_response",
    "encode_identifier",
    "encode_request",
    "parse_vat_id",
    "readable_error_message",
    "setup_logger",
    "translate_fault",
    "validate_vat",
]
