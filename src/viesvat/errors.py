"""Exception hierarchy raised by viesvat."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover
    from .models import FaultInfo


class VatError(Exception):
    """Base class for all errors raised by viesvat."""


class InvalidVatIdError(VatError, ValueError):
    """The VAT ID was rejected locally, before any network call."""


class InvalidCountryError(InvalidVatIdError):
    """The two-letter prefix is not a supported country code."""


class InvalidNumberError(InvalidVatIdError):
    """The VAT ID does not have the expected structure."""


class TransportError(VatError):
    """The registry could not be reached or the connection broke."""


class VatTimeoutError(TransportError):
    """The request to the registry did not finish within the timeout."""


class MalformedResponseError(VatError):
    """The registry answered with a document we cannot parse.

    ``soap_message`` carries the raw response body for diagnostics.
    """

    def __init__(self, field: str, soap_message: str) -> None:
        super().__init__(f"Failed to parse field {field}")
        self.field = field
        self.soap_message = soap_message


class RegistryFaultError(VatError):
    """A SOAP fault that is not covered by the degradation policy."""

    def __init__(self, fault: FaultInfo) -> None:
        super().__init__(fault.readable_message)
        self.fault = fault

    @property
    def code(self) -> str:
        return self.fault.code
