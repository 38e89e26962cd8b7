"""Maquette upload client.

Public API:
    MaquetteClient(base_url, store, ...).upload(request, variants, namer) -> ArtifactSet
    UploadSession(client, request, variants).run() -> ArtifactSet
    UploadRequest, Variant, ArtifactSet, CANONICAL_VARIANTS
    build_multipart_body(request, boundary) -> bytes
    default_namer(variant) -> str
    describe_success(artifacts), describe_failure(exc)
"""

from maquette.upload.client import MaquetteClient, validate_base_url
from maquette.upload.multipart import build_multipart_body, content_type_header, new_boundary
from maquette.upload.naming import DEFAULT_FILENAMES, default_namer
from maquette.upload.session import SessionState, UploadSession
from maquette.upload.status import describe_failure, describe_success
from maquette.upload.types import CANONICAL_VARIANTS, ArtifactSet, UploadRequest, Variant

__all__ = [
    "MaquetteClient",
    "validate_base_url",
    "build_multipart_body",
    "content_type_header",
    "new_boundary",
    "DEFAULT_FILENAMES",
    "default_namer",
    "SessionState",
    "UploadSession",
    "describe_failure",
    "describe_success",
    "CANONICAL_VARIANTS",
    "ArtifactSet",
    "UploadRequest",
    "Variant",
]
