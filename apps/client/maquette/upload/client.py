"""Maquette upload client — sends one image per variant and stores the results.

The upload flow for one session:
1. Clear any previous artifact stored under each requested variant's key
2. POST the image as multipart/form-data to {base_url}/maquette,
   adding ?variant=<name> for every variant except DEFAULT
3. Require HTTP 200, then write the response body to the store
4. Return an ArtifactSet once every variant has been stored

Any failure aborts the session with a typed MaquetteError. Files written
by variants that completed before the failure stay on disk unless
rollback_on_failure is set. There are no automatic retries: generation is
expensive server-side, so failures go back to the caller.
"""

import asyncio
import ipaddress
import logging
from pathlib import Path
from typing import Callable, Optional, Sequence
from urllib.parse import urlparse

import httpx

from maquette.core.config import Settings, get_settings
from maquette.errors import BadResponseError, ConfigurationError, TransportError
from maquette.storage import ArtifactStore, LocalArtifactStore
from maquette.upload.multipart import build_multipart_body, content_type_header, new_boundary
from maquette.upload.naming import Namer, default_namer
from maquette.upload.types import ArtifactSet, UploadRequest, Variant

logger = logging.getLogger(__name__)

MAQUETTE_PATH = "/maquette"
DEFAULT_TIMEOUT = 300.0

EventCallback = Callable[[str, dict], None]


def _is_loopback(host: str) -> bool:
    if host.lower() == "localhost":
        return True
    try:
        return ipaddress.ip_address(host).is_loopback
    except ValueError:
        return False


def validate_base_url(url: str, allow_insecure_http: bool = False) -> None:
    """Validate the service base URL before any request is made.

    Blocks:
      - Schemes other than http:// and https://
      - URLs without a hostname
      - Plain http:// to a non-loopback host, unless allow_insecure_http

    Raises:
        ConfigurationError: If the URL is unusable.
    """
    if not url:
        raise ConfigurationError("Base URL must not be empty")

    parsed = urlparse(url)
    if parsed.scheme not in ("http", "https"):
        raise ConfigurationError(
            f"Base URL must use http or https (got scheme '{parsed.scheme}'): {url}"
        )

    host = parsed.hostname
    if not host:
        raise ConfigurationError(f"Base URL has no hostname: {url}")

    if parsed.scheme == "http" and not allow_insecure_http and not _is_loopback(host):
        raise ConfigurationError(
            f"Refusing plain http to non-loopback host '{host}'; "
            "use https or set allow_insecure_http"
        )


class MaquetteClient:
    """Uploads images to the maquette service and stores returned artifacts.

    One client can run many sessions, but not two at once against the same
    store: sessions write the same fixed keys, and serialising them is the
    caller's job (e.g. disabling the upload button while one is running).
    """

    def __init__(
        self,
        base_url: str,
        store: ArtifactStore,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        allow_insecure_http: bool = False,
        concurrent: bool = False,
        rollback_on_failure: bool = False,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        on_event: Optional[EventCallback] = None,
    ):
        base_url = base_url.rstrip("/")
        validate_base_url(base_url, allow_insecure_http)
        self.base_url = base_url
        self.store = store
        self.timeout = timeout
        self.concurrent = concurrent
        self.rollback_on_failure = rollback_on_failure
        self._transport = transport
        self._on_event = on_event

    @classmethod
    def from_settings(
        cls,
        settings: Optional[Settings] = None,
        *,
        store: Optional[ArtifactStore] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        on_event: Optional[EventCallback] = None,
    ) -> "MaquetteClient":
        settings = settings or get_settings()
        return cls(
            settings.base_url,
            store or LocalArtifactStore(settings.storage_dir),
            timeout=settings.request_timeout,
            allow_insecure_http=settings.allow_insecure_http,
            concurrent=settings.concurrent_variants,
            rollback_on_failure=settings.rollback_on_failure,
            transport=transport,
            on_event=on_event,
        )

    async def upload(
        self,
        request: UploadRequest,
        variants: Sequence[Variant],
        namer: Namer = default_namer,
        *,
        concurrent: Optional[bool] = None,
    ) -> ArtifactSet:
        """Run one upload session: one POST per variant, each result stored.

        Args:
            request: The image to upload.
            variants: Non-empty, duplicate-free list of variants, issued in order.
            namer: Maps each variant to the storage key its artifact is
                written under.
            concurrent: Override the client's concurrency setting for this call.

        Returns:
            ArtifactSet with exactly one stored path per requested variant.

        Raises:
            ValueError: On an empty or duplicated variant list, or when two
                variants map to the same storage key.
            BodyConstructionError, TransportError, BadResponseError, StorageError
        """
        variants = list(variants)
        if not variants:
            raise ValueError("At least one variant must be requested")
        if len(set(variants)) != len(variants):
            raise ValueError(f"Duplicate variants requested: {[v.label for v in variants]}")

        keys = {variant: namer(variant) for variant in variants}
        if len(set(keys.values())) != len(keys):
            raise ValueError(f"Variants must map to distinct storage keys: {keys}")

        run_concurrently = self.concurrent if concurrent is None else concurrent

        # Results from a previous session must not survive a partial one.
        for key in keys.values():
            self.store.remove(key)

        logger.info(
            "Upload session starting: %d variant(s) [%s] to %s (concurrent=%s)",
            len(variants), ", ".join(v.label for v in variants), self.base_url, run_concurrently,
        )

        written: list[str] = []
        try:
            async with httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self._transport,
            ) as http:
                if run_concurrently:
                    paths = await self._run_concurrently(http, request, variants, keys, written)
                else:
                    paths = {}
                    for variant in variants:
                        paths[variant] = await self._fetch_and_store(
                            http, request, variant, keys[variant], written,
                        )
        except Exception as exc:
            logger.error("Upload session failed: %s", exc)
            self._emit("session_failed", {"error": str(exc), "written": list(written)})
            if self.rollback_on_failure:
                self._rollback(written)
            raise

        result = ArtifactSet(paths)
        logger.info("Upload session complete: %d artifact(s) stored", len(result))
        self._emit("session_completed", result.to_dict())
        return result

    async def _run_concurrently(
        self,
        http: httpx.AsyncClient,
        request: UploadRequest,
        variants: list[Variant],
        keys: dict,
        written: list[str],
    ) -> dict:
        """Issue every variant at once; the first failure cancels the rest."""
        tasks = {
            variant: asyncio.create_task(
                self._fetch_and_store(http, request, variant, keys[variant], written)
            )
            for variant in variants
        }
        try:
            await asyncio.wait(tasks.values(), return_when=asyncio.FIRST_EXCEPTION)
        finally:
            pending = [task for task in tasks.values() if not task.done()]
            for task in pending:
                task.cancel()
            if pending:
                await asyncio.gather(*pending, return_exceptions=True)

        # Report the earliest-requested failure, not the earliest to arrive.
        for task in tasks.values():
            if not task.cancelled() and task.exception() is not None:
                raise task.exception()

        return {variant: task.result() for variant, task in tasks.items()}

    async def _fetch_and_store(
        self,
        http: httpx.AsyncClient,
        request: UploadRequest,
        variant: Variant,
        key: str,
        written: list[str],
    ) -> Path:
        self._emit("variant_started", {"variant": variant.label})
        data = await self._request_variant(http, request, variant)
        path = self.store.write(key, data)
        written.append(key)
        logger.info("Stored %s artifact (%d bytes) at %s", variant.label, len(data), path)
        self._emit("variant_stored", {
            "variant": variant.label,
            "artifact": variant.artifact_name,
            "path": str(path),
            "bytes": len(data),
        })
        return path

    async def _request_variant(
        self,
        http: httpx.AsyncClient,
        request: UploadRequest,
        variant: Variant,
    ) -> bytes:
        """POST the image for one variant and return the raw response body."""
        boundary = new_boundary()
        body = build_multipart_body(request, boundary)
        params = {"variant": variant.query_value} if variant.query_value else None

        try:
            response = await http.post(
                MAQUETTE_PATH,
                params=params,
                content=body,
                headers={"Content-Type": content_type_header(boundary)},
            )
        except httpx.HTTPError as exc:
            raise TransportError(variant, exc) from exc

        if response.status_code != 200:
            raise BadResponseError(variant, response.status_code)

        return response.content

    def _rollback(self, written: list[str]) -> None:
        for key in written:
            try:
                self.store.remove(key)
            except Exception as exc:
                logger.warning("Rollback could not remove '%s': %s", key, exc)
        logger.info("Rolled back %d artifact(s)", len(written))

    def _emit(self, event_type: str, data: dict) -> None:
        if self._on_event is None:
            return
        try:
            self._on_event(event_type, data)
        except Exception as exc:
            logger.warning("Event callback failed for %s: %s", event_type, exc)
