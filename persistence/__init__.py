from __future__ import annotations

from .disk_store import DiskDocumentStore
from .documents import ChecklistDocument, ChecklistRecord, ReportRecord, SubmissionRecord
from .errors import ConflictError, DecodeError, RemoteFetchError, RemoteWriteError, StoreError
from .github_store import GithubDocumentStore, GithubStoreConfig
from .interfaces import VersionedDocumentStore
from .memory_store import InMemoryDocumentStore
from .repositories import ChecklistRepository

__all__ = [
    "ChecklistDocument",
    "ChecklistRecord",
    "SubmissionRecord",
    "ReportRecord",
    "VersionedDocumentStore",
    "GithubDocumentStore",
    "GithubStoreConfig",
    "InMemoryDocumentStore",
    "DiskDocumentStore",
    "ChecklistRepository",
    "StoreError",
    "RemoteFetchError",
    "DecodeError",
    "ConflictError",
    "RemoteWriteError",
]
