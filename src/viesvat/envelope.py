"""Build checkVat request envelopes and decode the registry's answers."""

from __future__ import annotations

import re
from html import unescape
from typing import Final

from .errors import MalformedResponseError
from .models import EncodedRequest, FaultInfo, ValidationResult, VatIdentifier

TYPES_NAMESPACE: Final = "urn:ec.europa.eu:taxud:vies:services:checkVat:types"
EMPTY_PLACEHOLDER: Final = "---"

REQUEST_TEMPLATE: Final = f"""
<soap:Envelope
    xmlns:soap="http://schemas.xmlsoap.org/soap/envelope/"
    xmlns:vat="{TYPES_NAMESPACE}">
  <soap:Header/>
  <soap:Body>
    <vat:checkVat>
      <vat:countryCode>%COUNTRY_CODE%</vat:countryCode>
      <vat:vatNumber>%VAT_NUMBER%</vat:vatNumber>
    </vat:checkVat>
  </soap:Body>
</soap:Envelope>
"""

_FAULT_OPEN = re.compile(r"<(?:[\w.-]+:)?Fault>")
_FAULT_CLOSE = re.compile(r"</(?:[\w.-]+:)?Fault>")
_FAULTSTRING_OPEN = re.compile(r"<faultstring>")
_LINE_BREAK = re.compile(r"\r?\n")


def encode_request(country_code: str, vat_number: str) -> EncodedRequest:
    """Render the checkVat envelope for already validated values.

    The values are inserted without escaping; pass only parts of an ID that went
    through :func:`viesvat.identifiers.parse_vat_id`.
    """

    xml = (
        REQUEST_TEMPLATE.replace("%COUNTRY_CODE%", country_code, 1)
        .replace("%VAT_NUMBER%", vat_number, 1)
        .strip()
    )
    body = xml.encode("utf-8")
    return EncodedRequest(body=body, content_length=len(body))


def encode_identifier(identifier: VatIdentifier) -> EncodedRequest:
    return encode_request(identifier.country_code, identifier.number)


def _field_pattern(tag: str) -> re.Pattern[str]:
    # open and close tag must carry the same namespace prefix (ns2: in practice)
    escaped = re.escape(tag)
    return re.compile(rf"<((?:[\w.-]+:)?){escaped}>(.*?)</\1{escaped}>", re.DOTALL)


_FIELD_PATTERNS: Final = {
    tag: _field_pattern(tag)
    for tag in (
        "faultcode",
        "faultstring",
        "countryCode",
        "vatNumber",
        "valid",
        "name",
        "address",
    )
}


def extract_field(soap_message: str, tag: str) -> str:
    """Return the trimmed text of the first ``<tag>`` element.

    The registry writes ``---`` for values it does not know; those come back as
    an empty string. A missing element raises :class:`MalformedResponseError`.
    """

    pattern = _FIELD_PATTERNS.get(tag) or _field_pattern(tag)
    match = pattern.search(soap_message)
    if match is None:
        raise MalformedResponseError(tag, soap_message)
    value = unescape(match.group(2).strip())
    if value == EMPTY_PLACEHOLDER:
        return ""
    return value


def is_fault(soap_message: str) -> bool:
    return bool(
        _FAULT_OPEN.search(soap_message)
        and _FAULT_CLOSE.search(soap_message)
        and _FAULTSTRING_OPEN.search(soap_message)
    )


def decode_response(soap_message: str) -> ValidationResult | FaultInfo:
    """Decode a checkVat response into a result or the fault it carries."""

    if is_fault(soap_message):
        return FaultInfo(
            code=extract_field(soap_message, "faultcode"),
            message=extract_field(soap_message, "faultstring"),
        )

    return ValidationResult(
        country_code=extract_field(soap_message, "countryCode"),
        vat_number=extract_field(soap_message, "vatNumber"),
        valid=extract_field(soap_message, "valid") == "true",
        server_validated=True,
        name=extract_field(soap_message, "name"),
        address=_LINE_BREAK.sub(", ", extract_field(soap_message, "address")),
    )


__all__ = [
    "REQUEST_TEMPLATE",
    "TYPES_NAMESPACE",
    "decode_response",
    "encode_identifier",
    "encode_request",
    "extract_field",
    "is_fault",
]
