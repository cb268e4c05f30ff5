# services/attachments.py
"""Attachment codec.

Files travel and rest as self-describing data URLs
(``data:<mime>;base64,<payload>``) embedded in the owning document. A payload
that is a plain http(s) link is treated as a remote locator and is never
decoded.
"""
import base64
import binascii
import logging
import random
import string
from datetime import datetime, timezone
from typing import NamedTuple, Optional
from urllib.parse import quote

from .errors import FormatError, ReadError, ValidationError

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

DEFAULT_MIME_TYPE = "application/octet-stream"
ATTACHMENT_ID_ALPHABET = string.ascii_lowercase + string.digits


class Payload(NamedTuple):
    mime_type: Optional[str]
    data: Optional[bytes]
    url: Optional[str] = None

    @property
    def is_remote(self) -> bool:
        return self.url is not None


def encode_bytes(data: bytes, mime_type: Optional[str] = None) -> str:
    encoded = base64.b64encode(data).decode("ascii")
    return f"data:{mime_type or DEFAULT_MIME_TYPE};base64,{encoded}"


async def encode(file, max_bytes: Optional[int] = None) -> str:
    """Read an uploaded file and return it as a data URL.

    ``file`` is a Starlette ``UploadFile`` or anything exposing an async
    ``read()`` plus an optional ``content_type``.
    """
    name = getattr(file, "filename", None) or "<unnamed>"
    try:
        data = await file.read()
    except Exception as e:
        logger.error(f"Could not read upload {name}: {str(e)}")
        raise ReadError(f"Could not read file {name}: {str(e)}") from e
    if max_bytes is not None and len(data) > max_bytes:
        raise ValidationError(f"File {name} exceeds the {max_bytes} byte limit")
    return encode_bytes(data, getattr(file, "content_type", None))


def decode(payload: str) -> Payload:
    if not isinstance(payload, str):
        raise FormatError("Attachment payload must be a string")
    if payload.startswith("http"):
        return Payload(mime_type=None, data=None, url=payload)
    if not payload.startswith("data:"):
        raise FormatError("Attachment payload is neither a link nor a data URL")

    metadata, sep, data = payload.partition(",")
    if not sep:
        raise FormatError("Data URL has no data section")
    mime_type = metadata[len("data:"):].split(";", 1)[0] or DEFAULT_MIME_TYPE
    try:
        raw = base64.b64decode(data, validate=True)
    except (binascii.Error, ValueError) as e:
        raise FormatError(f"Data URL carries invalid base64: {str(e)}") from e
    return Payload(mime_type=mime_type, data=raw)


def new_attachment_id(length: int = 9) -> str:
    return "".join(random.choices(ATTACHMENT_ID_ALPHABET, k=length))


def make_attachment(name: str, url: str, mime_type: Optional[str] = None) -> dict:
    return {
        "id": new_attachment_id(),
        "name": name,
        "url": url,
        "type": mime_type or DEFAULT_MIME_TYPE,
        "createdAt": datetime.now(timezone.utc).isoformat(),
    }


def content_disposition(filename: str) -> str:
    return f"attachment; filename*=utf-8''{quote(filename or 'download')}"
