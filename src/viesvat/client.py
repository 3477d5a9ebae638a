"""Validation of VAT IDs against the VIES registry."""

from __future__ import annotations

from collections.abc import Iterable

from .envelope import decode_response, encode_identifier
from .errors import MalformedResponseError, RegistryFaultError
from .faults import translate_fault
from .identifiers import parse_vat_id
from .models import FaultInfo, ValidationResult, VatIdentifier
from .transport import SERVICE_URL, RequestsTransport, Transport, build_headers
from .utils.logging_setup import setup_logger

_BASE_LOGGER = setup_logger()
LOGGER = _BASE_LOGGER.getChild("client")


class ViesClient:
    """Checks VAT IDs with the VIES ``checkVat`` operation.

    Registry faults are degraded to a presumed-valid result. With
    ``degraded_faults=None`` every fault degrades; otherwise only faults whose
    ``faultstring`` or ``faultcode`` is listed do, and all others raise
    :class:`RegistryFaultError`.
    """

    def __init__(
        self,
        transport: Transport | None = None,
        *,
        service_url: str = SERVICE_URL,
        timeout: float | None = None,
        degraded_faults: Iterable[str] | None = None,
    ) -> None:
        self.transport = transport if transport is not None else RequestsTransport()
        self.service_url = service_url
        self.timeout = timeout
        self.degraded_faults = frozenset(degraded_faults) if degraded_faults is not None else None

    def _degrades(self, fault: FaultInfo) -> bool:
        if self.degraded_faults is None:
            return True
        return fault.message in self.degraded_faults or fault.code in self.degraded_faults

    def _handle_fault(self, identifier: VatIdentifier, fault: FaultInfo) -> ValidationResult:
        message = translate_fault(fault)
        if not self._degrades(fault):
            LOGGER.error("VIES Fehler %s für %s: %s", fault.code, identifier, message)
            raise RegistryFaultError(fault)

        LOGGER.warning(
            "VIES nicht verfügbar für %s (%s: %s), nehme Gültigkeit an",
            identifier,
            fault.code,
            message,
        )
        return ValidationResult.presumed_valid(identifier)

    def validate(self, vat_id: str, timeout: float | None = None) -> ValidationResult:
        """Validate *vat_id*, e.g. ``"DE123456789"``.

        ``timeout`` is in seconds and overrides the client default. Invalid input
        and transport errors propagate unchanged; a response we cannot parse
        raises :class:`MalformedResponseError`.
        """

        identifier = parse_vat_id(vat_id)
        request = encode_identifier(identifier)
        headers = build_headers(self.service_url, request.content_length)
        effective_timeout = timeout if timeout is not None else self.timeout

        LOGGER.debug("Frage VIES für %s (timeout=%s)", identifier, effective_timeout)
        soap_message = self.transport.send(
            self.service_url,
            headers,
            request.body,
            effective_timeout,
        )

        try:
            decoded = decode_response(soap_message)
        except MalformedResponseError as exc:
            LOGGER.error("Unerwartete VIES-Antwort (Feld %s): %s", exc.field, exc.soap_message)
            raise

        if isinstance(decoded, FaultInfo):
            return self._handle_fault(identifier, decoded)
        return decoded


def validate_vat(
    vat_id: str,
    timeout: float | None = None,
    *,
    transport: Transport | None = None,
    degraded_faults: Iterable[str] | None = None,
) -> ValidationResult:
    """Validate a single VAT ID with a one-off :class:`ViesClient`."""

    client = ViesClient(transport, degraded_faults=degraded_faults)
    return client.validate(vat_id, timeout=timeout)


__all__ = ["ViesClient", "validate_vat"]
