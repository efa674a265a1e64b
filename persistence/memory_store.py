from __future__ import annotations

import asyncio
import logging

from .documents import ChecklistDocument
from .errors import ConflictError
from .interfaces import VersionedDocumentStore
from .transport import content_token, encode_content, decode_content, parse_document, serialize_document

logger = logging.getLogger(__name__)


class InMemoryDocumentStore(VersionedDocumentStore):
    """
    Keeps the encoded document in process memory.

    Used when no remote store is configured and as a test double. It applies
    the same token rules as the remote store, so conflicts behave identically.
    All changes are lost when the process exits.
    """

    def __init__(self, initial: ChecklistDocument | None = None):
        self._guard = asyncio.Lock()
        self._content: str | None = None
        self._token: str | None = None
        self.commits: list[str] = []
        if initial is not None:
            self._put(initial, "Initial data seed")

    @property
    def token(self) -> str | None:
        return self._token

    def _put(self, document: ChecklistDocument, description: str) -> None:
        text = serialize_document(document)
        self._content = encode_content(text)
        self.commits.append(description)
        # Revision prefix: rewriting identical content still invalidates old tokens.
        self._token = f"r{len(self.commits)}-{content_token(text)[:12]}"

    async def load(self) -> tuple[ChecklistDocument | None, str | None]:
        async with self._guard:
            if self._content is None:
                return None, None
            content, token = self._content, self._token
        return parse_document(decode_content(content)), token

    async def save(self, document: ChecklistDocument, expected_token: str | None, description: str) -> None:
        async with self._guard:
            if expected_token is None and self._content is not None:
                raise ConflictError("Document already exists", status_code=422)
            if expected_token is not None and expected_token != self._token:
                raise ConflictError(
                    f"Version token {expected_token} does not match {self._token}",
                    status_code=409,
                )
            self._put(document, description)
            logger.debug("IN-MEMORY COMMIT: %s -> %s", description, self._token)
