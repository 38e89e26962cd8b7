"""Local artifact storage.

Artifacts live as flat files in a single directory, one file per key.
Writes are delete-then-atomic-create: any existing file is removed, the
payload is written to a temporary file beside the target, and the
temporary file is renamed into place, so a reader never sees a
half-written artifact.

Security:
  - `validate_key()` rejects `.`, `..` and keys containing path separators or
    null bytes, so a key can never address a file outside the root.
"""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from typing import Protocol, Union, runtime_checkable

from maquette.errors import StorageError

logger = logging.getLogger(__name__)


def validate_key(key: str) -> None:
    """Reject keys that could escape the storage root.

    Raises:
        StorageError: If the key is empty or contains invalid components.
    """
    if not key:
        raise StorageError(key, "storage key must not be empty")
    if key in (".", ".."):
        raise StorageError(key, "path traversal detected")
    if "/" in key or "\\" in key:
        raise StorageError(key, "storage key must not contain path separators")
    if "\x00" in key:
        raise StorageError(key, "null byte detected")


@runtime_checkable
class ArtifactStore(Protocol):
    """Protocol for artifact sinks.

    The upload client only ever talks to this interface.
    """

    def path_for(self, key: str) -> Path:
        ...  # noqa: PLR6301

    def exists(self, key: str) -> bool:
        ...  # noqa: PLR6301

    def write(self, key: str, data: bytes) -> Path:
        """Store `data` under `key`, replacing any previous payload.

        Returns:
            The handle (path) the artifact can be read back from.

        Raises:
            StorageError: On any filesystem failure.
        """
        ...  # noqa: PLR6301

    def remove(self, key: str) -> None:
        """Delete the payload stored under `key`; a missing key is not an error."""
        ...  # noqa: PLR6301


class LocalArtifactStore:
    """ArtifactStore backed by one directory on the local filesystem."""

    def __init__(self, root: Union[str, Path]):
        self.root = Path(root).expanduser()

    def path_for(self, key: str) -> Path:
        validate_key(key)
        return self.root / key

    def exists(self, key: str) -> bool:
        return self.path_for(key).is_file()

    def write(self, key: str, data: bytes) -> Path:
        target = self.path_for(key)
        try:
            self.root.mkdir(parents=True, exist_ok=True)
            target.unlink(missing_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self.root, prefix=f".{key}.", suffix=".tmp")
        except OSError as exc:
            raise StorageError(key, str(exc), cause=exc) from exc

        try:
            with os.fdopen(fd, "wb") as fh:
                fh.write(data)
            os.replace(tmp_name, target)
        except OSError as exc:
            Path(tmp_name).unlink(missing_ok=True)
            raise StorageError(key, str(exc), cause=exc) from exc

        logger.debug("Stored %d bytes at %s", len(data), target)
        return target

    def remove(self, key: str) -> None:
        target = self.path_for(key)
        try:
            target.unlink(missing_ok=True)
        except OSError as exc:
            raise StorageError(key, str(exc), cause=exc) from exc
