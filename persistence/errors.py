from __future__ import annotations


class StoreError(Exception):
    """Base class for failures talking to a versioned document store."""

    def __init__(self, message: str, *, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class RemoteFetchError(StoreError):
    """The store could not be read (network, auth, unexpected status)."""


class DecodeError(StoreError):
    """The stored content is not a valid document (bad encoding, JSON, or schema)."""


class ConflictError(StoreError):
    """
    The write precondition failed: the version token is stale, or a create
    raced another writer. Recover by reloading; never resubmit the same draft.
    """


class RemoteWriteError(StoreError):
    """The store rejected a write for a reason other than a version conflict."""


class ChecklistError(ValueError):
    """Base class for checklist rule violations (raised before any write)."""


class ChecklistNotFoundError(ChecklistError):
    def __init__(self, checklist_id: str):
        super().__init__(f"Checklist not found: {checklist_id}")
        self.checklist_id = checklist_id


class ProtectedChecklistError(ChecklistError):
    pass


class SubmissionRejectedError(ChecklistError):
    pass
