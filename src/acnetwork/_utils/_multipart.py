"""multipart/form-data body encoding.

The layout is byte-exact: CRLF line endings, `--{boundary}` part delimiters and a
single `--{boundary}--` terminator.
"""

import uuid
from typing import Any, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from ..models.http import UploadFile
from ._parameters import render_value

CRLF = b"\r\n"

FormFields = Union[Mapping[str, Any], Sequence[Tuple[str, Any]]]


def generate_boundary() -> str:
    """Return a fresh boundary token, never shared between two requests."""
    return f"Boundary-{str(uuid.uuid4()).upper()}"


def _field_pairs(fields: Optional[FormFields]) -> List[Tuple[str, Any]]:
    if not fields:
        return []
    if isinstance(fields, Mapping):
        return list(fields.items())
    return list(fields)


def encode_multipart(
    boundary: str,
    fields: Optional[FormFields] = None,
    file_key: str = "",
    files: Iterable[UploadFile] = (),
) -> bytes:
    """Encode scalar fields and file attachments as a multipart/form-data body.

    Scalar parts come first, followed by one part per file under ``file_key``. Both
    keep the order they were given in. The body ends with ``--{boundary}--\\r\\n``.

    Args:
        boundary: Delimiter token, as also sent in the Content-Type header.
        fields: Scalar form fields, as a mapping or a sequence of ``(key, value)`` pairs.
        file_key: Form field name shared by all file parts.
        files: Attachments to embed.

    Returns:
        bytes: The encoded body.
    """
    delimiter = f"--{boundary}".encode()
    body = bytearray()

    for key, value in _field_pairs(fields):
        body += delimiter + CRLF
        body += f'Content-Disposition: form-data; name="{key}"'.encode() + CRLF + CRLF
        body += render_value(value).encode() + CRLF

    for file in files:
        body += delimiter + CRLF
        body += (
            f'Content-Disposition: form-data; name="{file_key}"; '
            f'filename="{file.filename}"'
        ).encode() + CRLF
        body += f"Content-Type: {file.content_type}".encode() + CRLF + CRLF
        body += file.data + CRLF

    body += delimiter + b"--" + CRLF
    return bytes(body)
