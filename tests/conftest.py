from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

import pytest

SUCCESS_TEMPLATE = """<env:Envelope xmlns:env="http://schemas.xmlsoap.org/soap/envelope/">
<env:Header/>
<env:Body>
<ns2:checkVatResponse xmlns:ns2="urn:ec.europa.eu:taxud:vies:services:checkVat:types">
<ns2:countryCode>{country_code}</ns2:countryCode>
<ns2:vatNumber>{vat_number}</ns2:vatNumber>
<ns2:requestDate>2026-10-17+02:00</ns2:requestDate>
<ns2:valid>{valid}</ns2:valid>
<ns2:name>{name}</ns2:name>
<ns2:address>{address}</ns2:address>
</ns2:checkVatResponse>
</env:Body>
</env:Envelope>"""

FAULT_TEMPLATE = """<env:Envelope xmlns:env="http://schemas.xmlsoap.org/soap/envelope/">
<env:Body>
<env:Fault>
<faultcode>{faultcode}</faultcode>
<faultstring>{faultstring}</faultstring>
</env:Fault>
</env:Body>
</env:Envelope>"""


class StubTransport:
    def __init__(self, responses: list[str | Exception]) -> None:
        self._responses = list(responses)
        self.calls: list[dict[str, Any]] = []

    def send(
        self,
        url: str,
        headers: Mapping[str, str],
        body: bytes,
        timeout: float | None = None,
    ) -> str:
        self.calls.append({"url": url, "headers": headers, "body": body, "timeout": timeout})
        response = self._responses.pop(0) if len(self._responses) > 1 else self._responses[0]
        if isinstance(response, Exception):
            raise response
        return response


@pytest.fixture
def success_envelope() -> Callable[..., str]:
    def _build(
        country_code: str = "DE",
        vat_number: str = "123456789",
        valid: str = "true",
        name: str = "---",
        address: str = "---",
    ) -> str:
        return SUCCESS_TEMPLATE.format(
            country_code=country_code,
            vat_number=vat_number,
            valid=valid,
            name=name,
            address=address,
        )

    return _build


@pytest.fixture
def fault_envelope() -> Callable[..., str]:
    def _build(faultstring: str, faultcode: str = "env:Server") -> str:
        return FAULT_TEMPLATE.format(faultcode=faultcode, faultstring=faultstring)

    return _build


@pytest.fixture
def stub_transport() -> Callable[..., StubTransport]:
    def _build(*responses: str | Exception) -> StubTransport:
        return StubTransport(list(responses))

    return _build
