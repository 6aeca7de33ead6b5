"""
Transport seam: send one encoded body, return status + raw response bytes.

The uploader depends only on Transport.send. Which concrete mechanism a host
uses (requests session, httpx client, an in-process TestClient) is chosen
outside the upload core, e.g. via make_transport.
"""

import json
import logging
from dataclasses import dataclass
from typing import Any, Protocol

import httpx
import requests

from app.core.config import API_BASE, TRANSFER_TIMEOUT
from app.core.errors import TransferError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TransferResponse:
    status_code: int
    body: bytes

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    def json(self) -> Any:
        return json.loads(self.body)


class Transport(Protocol):
    label: str

    def send(self, path: str, body: bytes, content_type: str) -> TransferResponse: ...


class RequestsTransport:
    """POST through a requests session."""

    label = "requests"

    def __init__(
        self,
        base_url: str = API_BASE,
        session: requests.Session | None = None,
        timeout: float = TRANSFER_TIMEOUT,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout

    def send(self, path: str, body: bytes, content_type: str) -> TransferResponse:
        url = f"{self.base_url}{path}"
        try:
            r = self.session.post(url, data=body, headers={"Content-Type": content_type}, timeout=self.timeout)
        except requests.RequestException as e:
            raise TransferError(str(e)) from e
        return TransferResponse(status_code=r.status_code, body=r.content)


class HttpxTransport:
    """
    POST through an httpx client.

    Pass client= to reuse an existing httpx.Client (FastAPI's TestClient is one);
    otherwise a short-lived client is opened per call.
    """

    label = "httpx"

    def __init__(
        self,
        base_url: str = API_BASE,
        client: httpx.Client | None = None,
        timeout: float = TRANSFER_TIMEOUT,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.client = client
        self.timeout = timeout

    def _post(self, client: httpx.Client, path: str, body: bytes, content_type: str) -> httpx.Response:
        return client.post(path, content=body, headers={"Content-Type": content_type})

    def send(self, path: str, body: bytes, content_type: str) -> TransferResponse:
        try:
            if self.client is not None:
                r = self._post(self.client, path, body, content_type)
            else:
                with httpx.Client(base_url=self.base_url, timeout=self.timeout) as client:
                    r = self._post(client, path, body, content_type)
        except httpx.HTTPError as e:
            raise TransferError(str(e) or e.__class__.__name__) from e
        return TransferResponse(status_code=r.status_code, body=r.content)


TRANSPORTS = {"requests": RequestsTransport, "httpx": HttpxTransport}


def make_transport(kind: str = "requests", base_url: str = API_BASE) -> Transport:
    """Pick a transport by name ('requests' or 'httpx')."""
    try:
        cls = TRANSPORTS[kind]
    except KeyError:
        raise ValueError(f"Unknown transport {kind!r}; expected one of {', '.join(TRANSPORTS)}") from None
    logger.info("[transport:make_transport] kind=%s base_url=%s", kind, base_url)
    return cls(base_url=base_url)
