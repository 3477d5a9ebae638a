"""HTTP transport used to reach the VIES registry."""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType
from typing import Final, Protocol
from urllib.parse import urlparse

import requests

from .errors import TransportError, VatTimeoutError
from .utils.logging_setup import setup_logger

_BASE_LOGGER = setup_logger()
LOGGER = _BASE_LOGGER.getChild("transport")

SERVICE_URL: Final = "https://ec.europa.eu/taxation_customs/vies/services/checkVatService"

BASE_HEADERS: Final[Mapping[str, str]] = MappingProxyType(
    {
        "Content-Type": "text/xml; charset=utf-8",
        "User-Agent": "viesvat",
        "Accept": "text/html,application/xhtml+xml,application/xml,text/xml;q=0.9,*/*;q=0.8",
        "Accept-Charset": "utf-8",
        "Connection": "close",
    }
)


def build_headers(url: str, content_length: int) -> dict[str, str]:
    """Return a fresh header set for one request."""

    headers = dict(BASE_HEADERS)
    headers["Content-Length"] = str(content_length)
    host = urlparse(url).hostname
    if host:
        headers["Host"] = host
    return headers


class Transport(Protocol):
    """Protocol for anything able to POST a payload and return the body."""

    def send(
        self,
        url: str,
        headers: Mapping[str, str],
        body: bytes,
        timeout: float | None = None,
    ) -> str:
        """Send *body* to *url* and return the decoded response body."""

        ...


class RequestsTransport(Transport):
    """Transport based on :mod:`requests`.

    The response body is returned for every HTTP status, because VIES reports
    SOAP faults with status 500.
    """

    def __init__(self, session: requests.Session | None = None) -> None:
        self._session = session

    def send(
        self,
        url: str,
        headers: Mapping[str, str],
        body: bytes,
        timeout: float | None = None,
    ) -> str:
        post = self._session.post if self._session is not None else requests.post
        try:
            response = post(url, data=body, headers=dict(headers), timeout=timeout)
        except requests.Timeout as exc:
            raise VatTimeoutError(f"Zeitüberschreitung nach {timeout}s bei {url}") from exc
        except requests.RequestException as exc:
            raise TransportError(f"Anfrage an {url} fehlgeschlagen: {exc}") from exc

        LOGGER.debug("VIES antwortet mit HTTP %s", response.status_code)
        response.encoding = "utf-8"
        return response.text


__all__ = ["BASE_HEADERS", "SERVICE_URL", "RequestsTransport", "Transport", "build_headers"]
