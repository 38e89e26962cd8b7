"""Types for the upload module.

UploadRequest is the immutable input of one session.
Variant names the server-side rendering mode requested per HTTP call.
ArtifactSet is the immutable output of a successful session.
"""

import mimetypes
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import Iterator, Mapping, Optional, Union

DEFAULT_FILENAME = "photo.png"
DEFAULT_MIME_TYPE = "image/jpeg"


class Variant(Enum):
    """Server-side rendering mode, sent as the ``variant`` query parameter.

    DEFAULT sends no parameter at all; the server treats absence as its
    own mode (the zip bundle of every variant).
    """

    DEFAULT = None
    MATCH = "match"
    INTERACTIVE = "interactive"
    GESTURE = "gesture"
    NOMATCH = "nomatch"

    @property
    def query_value(self) -> Optional[str]:
        return self.value

    @property
    def label(self) -> str:
        return self.value or "default"

    @property
    def artifact_name(self) -> str:
        """Logical name of the artifact this variant produces."""
        return _ARTIFACT_NAMES[self]


_ARTIFACT_NAMES: dict[Variant, str] = {
    Variant.DEFAULT: "zip",
    Variant.MATCH: "non_interactive",
    Variant.INTERACTIVE: "interactive",
    Variant.GESTURE: "gesture",
    Variant.NOMATCH: "nomatch",
}

# The multi-variant session the mobile app runs. NOMATCH is an alternate
# mode and intentionally not part of it.
CANONICAL_VARIANTS: tuple[Variant, ...] = (
    Variant.DEFAULT,
    Variant.MATCH,
    Variant.INTERACTIVE,
    Variant.GESTURE,
)


@dataclass(frozen=True)
class UploadRequest:
    """One image to upload.

    filename only feeds the Content-Disposition header; it has no effect
    on where artifacts are stored.
    """

    image_bytes: bytes
    filename: str
    mime_type: str

    def __post_init__(self) -> None:
        if not self.image_bytes:
            raise ValueError("image_bytes must not be empty")
        if not self.mime_type:
            raise ValueError("mime_type must not be empty")

    @classmethod
    def from_picker(
        cls,
        data: bytes,
        suggested_filename: Optional[str] = None,
        mime_type: Optional[str] = None,
    ) -> "UploadRequest":
        """Build a request from photo-picker output, filling in defaults.

        The MIME type falls back to a guess from the filename extension,
        then to image/jpeg.
        """
        filename = suggested_filename or DEFAULT_FILENAME
        resolved = mime_type or mimetypes.guess_type(filename)[0] or DEFAULT_MIME_TYPE
        return cls(image_bytes=data, filename=filename, mime_type=resolved)

    @classmethod
    def from_path(cls, path: Union[str, Path], mime_type: Optional[str] = None) -> "UploadRequest":
        path = Path(path)
        if not path.is_file():
            raise FileNotFoundError(f"Input image not found: {path}")
        return cls.from_picker(path.read_bytes(), path.name, mime_type)


@dataclass(frozen=True)
class ArtifactSet:
    """Stored artifacts of one successful session, keyed by variant.

    Lookups accept either a Variant or its logical artifact name
    ("zip", "non_interactive", "interactive", "gesture", "nomatch").
    """

    paths: Mapping[Variant, Path] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "paths", MappingProxyType(dict(self.paths)))

    def __hash__(self) -> int:
        return hash(frozenset(self.paths.items()))

    def __getitem__(self, key: Union[Variant, str]) -> Path:
        return self.paths[self._resolve(key)]

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, (Variant, str)):
            return False
        try:
            return self._resolve(key) in self.paths
        except KeyError:
            return False

    def __iter__(self) -> Iterator[Variant]:
        return iter(self.paths)

    def __len__(self) -> int:
        return len(self.paths)

    def get(self, key: Union[Variant, str], default: Optional[Path] = None) -> Optional[Path]:
        if key not in self:
            return default
        return self[key]

    def by_name(self) -> dict[str, Path]:
        return {variant.artifact_name: path for variant, path in self.paths.items()}

    def to_dict(self) -> dict:
        return {name: str(path) for name, path in self.by_name().items()}

    @staticmethod
    def _resolve(key: Union[Variant, str]) -> Variant:
        if isinstance(key, Variant):
            return key
        for variant, name in _ARTIFACT_NAMES.items():
            if name == key:
                return variant
        raise KeyError(key)
