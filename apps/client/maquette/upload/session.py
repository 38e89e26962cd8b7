"""One-shot upload session.

A session wraps a single user action: one image, one variant list, one
run. It is built fresh from picker output, run once, and then discarded;
running it again raises SessionStateError. The session ID is bound into
the logging context while it runs.
"""

import uuid
from enum import Enum
from typing import Optional, Sequence

import structlog

from maquette.core.logging import bind_session_id, reset_session_id
from maquette.errors import SessionStateError
from maquette.upload.client import MaquetteClient
from maquette.upload.naming import Namer, default_namer
from maquette.upload.types import CANONICAL_VARIANTS, ArtifactSet, UploadRequest, Variant

logger = structlog.get_logger(__name__)


class SessionState(str, Enum):
    PENDING = "pending"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class UploadSession:
    def __init__(
        self,
        client: MaquetteClient,
        request: UploadRequest,
        variants: Sequence[Variant] = CANONICAL_VARIANTS,
        namer: Namer = default_namer,
    ):
        self.id = uuid.uuid4().hex
        self.client = client
        self.request = request
        self.variants = tuple(variants)
        self.namer = namer
        self.state = SessionState.PENDING
        self.result: Optional[ArtifactSet] = None
        self.error: Optional[BaseException] = None

    async def run(self) -> ArtifactSet:
        """Run the upload once and return the stored artifacts.

        Raises:
            SessionStateError: If the session has already been started.
            MaquetteError: Whatever the client raised; also kept on `error`.
        """
        if self.state is not SessionState.PENDING:
            raise SessionStateError(f"Session {self.id} already {self.state.value}")

        self.state = SessionState.RUNNING
        token = bind_session_id(self.id)
        log = logger.bind(filename=self.request.filename, variants=[v.label for v in self.variants])
        log.info("session_started", image_bytes=len(self.request.image_bytes))
        try:
            self.result = await self.client.upload(self.request, self.variants, self.namer)
        except BaseException as exc:
            # Cancellation lands here too; the session is over either way.
            self.state = SessionState.FAILED
            self.error = exc
            log.warning("session_failed", error=str(exc), error_type=type(exc).__name__)
            raise
        else:
            self.state = SessionState.SUCCEEDED
            log.info("session_succeeded", artifacts=self.result.to_dict())
        finally:
            reset_session_id(token)

        return self.result

    @property
    def is_running(self) -> bool:
        return self.state is SessionState.RUNNING
