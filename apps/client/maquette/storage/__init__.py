"""Artifact storage.

Public API:
    ArtifactStore        protocol the upload client writes through
    LocalArtifactStore   directory-backed implementation
    validate_key(key)
"""

from maquette.storage.store import ArtifactStore, LocalArtifactStore, validate_key

__all__ = ["ArtifactStore", "LocalArtifactStore", "validate_key"]
