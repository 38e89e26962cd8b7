"""multipart/form-data encoding for the image upload.

The body always carries exactly one part, named ``image``:

    --{boundary}\\r\\n
    Content-Disposition: form-data; name="image"; filename="{filename}"\\r\\n
    Content-Type: {mime_type}\\r\\n
    \\r\\n
    {image bytes}\\r\\n
    --{boundary}--\\r\\n

The body is built by hand rather than through httpx's ``files=`` so that
the bytes on the wire are exactly the ones above for a given boundary.
"""

import uuid

from maquette.errors import BodyConstructionError
from maquette.upload.types import UploadRequest

CRLF = b"\r\n"
BOUNDARY_PREFIX = "Boundary-"


def new_boundary() -> str:
    """Return a fresh boundary token (random UUID4, collision-resistant)."""
    return BOUNDARY_PREFIX + str(uuid.uuid4()).upper()


def content_type_header(boundary: str) -> str:
    return f"multipart/form-data; boundary={boundary}"


def _header_value(name: str, value: str) -> bytes:
    """Encode a header value, rejecting anything that would break the header line."""
    if "\r" in value or "\n" in value:
        raise BodyConstructionError(f"{name} must not contain line breaks: {value!r}")
    try:
        return value.encode("utf-8")
    except UnicodeEncodeError as exc:
        raise BodyConstructionError(f"{name} is not encodable as UTF-8: {value!r}", cause=exc) from exc


def build_multipart_body(request: UploadRequest, boundary: str) -> bytes:
    """Assemble the multipart body for `request` using `boundary`.

    Deterministic: the same request and boundary always yield the same bytes.

    Raises:
        BodyConstructionError: If the boundary, filename or MIME type cannot
            be encoded into a well-formed header.
    """
    if not boundary:
        raise BodyConstructionError("boundary must not be empty")

    delimiter = b"--" + _header_value("boundary", boundary)
    # A double quote would terminate the filename parameter early.
    filename = _header_value("filename", request.filename.replace('"', "%22"))
    mime_type = _header_value("mime_type", request.mime_type)

    return b"".join([
        delimiter, CRLF,
        b'Content-Disposition: form-data; name="image"; filename="', filename, b'"', CRLF,
        b"Content-Type: ", mime_type, CRLF,
        CRLF,
        request.image_bytes, CRLF,
        delimiter, b"--", CRLF,
    ])
