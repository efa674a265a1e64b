from __future__ import annotations

import base64
import binascii
import hashlib
import json

from pydantic import ValidationError

from .documents import ChecklistDocument
from .errors import DecodeError


def serialize_document(document: ChecklistDocument) -> str:
    return json.dumps(document.to_stored_doc(), indent=2, ensure_ascii=False)


def encode_content(text: str) -> str:
    """Base64 over the UTF-8 bytes, so multi-byte characters survive the trip."""
    return base64.b64encode(text.encode("utf-8")).decode("ascii")


def decode_content(encoded: str) -> str:
    # The contents API wraps base64 at 60 columns; drop the line breaks first.
    compact = "".join(encoded.split())
    try:
        raw = base64.b64decode(compact, validate=True)
        return raw.decode("utf-8")
    except (binascii.Error, UnicodeDecodeError) as e:
        raise DecodeError(f"Stored content is not valid base64 UTF-8: {e}") from e


def parse_document(text: str) -> ChecklistDocument:
    try:
        raw = json.loads(text)
    except json.JSONDecodeError as e:
        raise DecodeError(f"Stored content is not valid JSON: {e}") from e
    if not isinstance(raw, dict):
        raise DecodeError(f"Stored content must be a JSON object, got {type(raw).__name__}")
    try:
        return ChecklistDocument.from_stored_doc(raw)
    except ValidationError as e:
        raise DecodeError(f"Stored content does not match the document schema: {e}") from e


def content_token(text: str) -> str:
    """Git blob hash of the serialized text; stable across stores for equal content."""
    data = text.encode("utf-8")
    header = f"blob {len(data)}\0".encode("ascii")
    return hashlib.sha1(header + data).hexdigest()
