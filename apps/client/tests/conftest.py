"""Shared fixtures for the maquette client test suite.

Network access is replaced by httpx.MockTransport; storage uses pytest's
tmp_path so every test starts from an empty artifact directory.
"""

from typing import Callable, Optional

import httpx
import pytest

from maquette.storage import LocalArtifactStore
from maquette.upload import MaquetteClient, UploadRequest

BASE_URL = "http://127.0.0.1:8001"
PNG_BYTES = b"\x89PNG\r\n\x1a\nfake-image-data"

# Four-byte payload the stub server returns for each variant query value.
VARIANT_PAYLOADS: dict[Optional[str], bytes] = {
    None: b"ZIP0",
    "match": b"GLB1",
    "interactive": b"GLB2",
    "gesture": b"PNG3",
    "nomatch": b"GLB4",
}


class StubServer:
    """Records every request and answers from VARIANT_PAYLOADS.

    `statuses` overrides the response status per variant query value.
    """

    def __init__(self, statuses: Optional[dict] = None):
        self.statuses = statuses or {}
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        variant = request.url.params.get("variant")
        status = self.statuses.get(variant, 200)
        if status != 200:
            return httpx.Response(status, content=b"server error")
        return httpx.Response(200, content=VARIANT_PAYLOADS[variant])

    @property
    def variants_seen(self) -> list[Optional[str]]:
        return [r.url.params.get("variant") for r in self.requests]


@pytest.fixture
def upload_request() -> UploadRequest:
    return UploadRequest(image_bytes=PNG_BYTES, filename="photo.png", mime_type="image/png")


@pytest.fixture
def store(tmp_path) -> LocalArtifactStore:
    return LocalArtifactStore(tmp_path / "artifacts")


@pytest.fixture
def stub_server() -> StubServer:
    return StubServer()


@pytest.fixture
def make_client(store) -> Callable[..., MaquetteClient]:
    def _make(handler, **kwargs) -> MaquetteClient:
        return MaquetteClient(
            BASE_URL,
            store,
            transport=httpx.MockTransport(handler),
            **kwargs,
        )

    return _make


@pytest.fixture
def make_stub() -> Callable[..., StubServer]:
    return StubServer


@pytest.fixture
def variant_payloads() -> dict[Optional[str], bytes]:
    return dict(VARIANT_PAYLOADS)


@pytest.fixture
def png_bytes() -> bytes:
    return PNG_BYTES
