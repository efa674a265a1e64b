from __future__ import annotations

from typing import Protocol

from .documents import ChecklistDocument


class VersionedDocumentStore(Protocol):
    """
    A single JSON document guarded by an opaque version token.

    Implementations enforce compare-and-swap on save; they never lock locally.
    """

    async def load(self) -> tuple[ChecklistDocument | None, str | None]:
        """Return (document, token), or (None, None) when nothing is stored yet."""
        ...

    async def save(self, document: ChecklistDocument, expected_token: str | None, description: str) -> None:
        """
        Write the full document if the stored token still equals expected_token.
        expected_token=None means create; it conflicts if a document already exists.
        Does not return the new token: callers load() again.
        """
        ...
