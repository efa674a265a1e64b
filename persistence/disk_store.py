from __future__ import annotations

import asyncio
import logging
import threading
from pathlib import Path

from json_store import atomic_write_text, read_text

from .documents import ChecklistDocument
from .errors import ConflictError, RemoteFetchError, RemoteWriteError
from .interfaces import VersionedDocumentStore
from .transport import content_token, parse_document, serialize_document

logger = logging.getLogger(__name__)


class _PathLocks:
    """One lock per resolved file path, shared by every store pointing at it."""

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._by_path: dict[str, threading.Lock] = {}

    def lock_for(self, path: Path) -> threading.Lock:
        key = str(path.resolve())
        with self._guard:
            return self._by_path.setdefault(key, threading.Lock())


_PATH_LOCKS = _PathLocks()


class DiskDocumentStore(VersionedDocumentStore):
    """
    Stores the document as a JSON file; the version token is the git blob
    hash of the file text, so a token goes stale whenever the content changes.

    - The compare-and-swap runs under a per-path lock, off the event loop.
      The lock only covers stores in this process; separate server processes
      sharing one file can both pass the token check, and the later write
      wins. Run a single process per file.
    - Writes are atomic (temp file + replace).
    """

    def __init__(self, path: Path):
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    async def load(self) -> tuple[ChecklistDocument | None, str | None]:
        return await asyncio.to_thread(self._load_sync)

    async def save(self, document: ChecklistDocument, expected_token: str | None, description: str) -> None:
        await asyncio.to_thread(self._save_sync, document, expected_token, description)

    def _read(self) -> str | None:
        try:
            return read_text(self._path)
        except OSError as e:
            raise RemoteFetchError(f"Failed to read {self._path}: {e}") from e

    def _load_sync(self) -> tuple[ChecklistDocument | None, str | None]:
        with _PATH_LOCKS.lock_for(self._path):
            text = self._read()
        if text is None:
            return None, None
        return parse_document(text), content_token(text)

    def _save_sync(self, document: ChecklistDocument, expected_token: str | None, description: str) -> None:
        text = serialize_document(document) + "\n"
        with _PATH_LOCKS.lock_for(self._path):
            current = self._read()
            if expected_token is None and current is not None:
                raise ConflictError(f"{self._path} already exists", status_code=422)
            if expected_token is not None:
                if current is None:
                    raise ConflictError(f"{self._path} no longer exists", status_code=409)
                if content_token(current) != expected_token:
                    raise ConflictError(f"{self._path} changed since it was read", status_code=409)
            try:
                atomic_write_text(self._path, text)
            except OSError as e:
                raise RemoteWriteError(f"Failed to write {self._path}: {e}") from e
        logger.info("DISK COMMIT: %s (%s)", description, self._path)
