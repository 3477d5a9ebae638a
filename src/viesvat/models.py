"""Value types shared by the viesvat modules."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any

from .faults import readable_error_message


@dataclass(frozen=True)
class VatIdentifier:
    """A structurally valid VAT ID split into country code and number."""

    country_code: str
    number: str

    @property
    def vat_id(self) -> str:
        return f"{self.country_code}{self.number}"

    def __str__(self) -> str:
        return self.vat_id


@dataclass(frozen=True)
class EncodedRequest:
    body: bytes
    content_length: int


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of a single VAT check.

    ``server_validated`` is ``False`` when the registry failed and the ID was
    presumed valid without confirmation.
    """

    country_code: str
    vat_number: str
    valid: bool
    server_validated: bool
    name: str = ""
    address: str = ""

    @classmethod
    def presumed_valid(cls, identifier: VatIdentifier) -> ValidationResult:
        return cls(
            country_code=identifier.country_code,
            vat_number=identifier.number,
            valid=True,
            server_validated=False,
            name="",
            address="",
        )

    def as_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class FaultInfo:
    """SOAP fault returned by the registry instead of a regular answer."""

    code: str
    message: str

    @property
    def readable_message(self) -> str:
        return readable_error_message(self.message)
