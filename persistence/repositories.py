from __future__ import annotations

import asyncio
import logging
import uuid
from datetime import datetime, timezone
from typing import Callable, TypeVar

from . import checklist_rules as rules
from .checklist_rules import ReportDraft, SubmissionDraft
from .documents import ChecklistDocument, ChecklistRecord, ReportRecord, SubmissionRecord
from .errors import ConflictError, RemoteFetchError, StoreError
from .interfaces import VersionedDocumentStore
from .seed_data import initial_document

logger = logging.getLogger(__name__)

SEED_DESCRIPTION = "Initial data seed"

IdGenerator = Callable[[], str]
Clock = Callable[[], datetime]
T = TypeVar("T")


def new_uuid() -> str:
    return str(uuid.uuid4())


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class ChecklistRepository:
    """
    Read-modify-write access to the shared checklist document.

    Holds the last authoritative (document, token) pair from the store plus an
    optional optimistic draft that is visible while a save is in flight.
    Writes are serialized: at most one save per repository at a time.

    On a version conflict the draft is dropped and state is reloaded; the
    *transformation* may then be re-run against the fresh document, but the
    stale draft is never resubmitted.
    """

    def __init__(
        self,
        store: VersionedDocumentStore,
        *,
        new_id: IdGenerator | None = None,
        now: Clock | None = None,
        seed: Callable[[], ChecklistDocument] | None = None,
        notification_email: str | None = None,
    ) -> None:
        self._store = store
        self._new_id = new_id or new_uuid
        self._now = now or utc_now
        self._seed = seed or initial_document
        self._notification_email = notification_email
        self._document: ChecklistDocument | None = None
        self._token: str | None = None
        self._draft: ChecklistDocument | None = None
        self._write_lock = asyncio.Lock()

    @property
    def store(self) -> VersionedDocumentStore:
        return self._store

    @property
    def token(self) -> str | None:
        return self._token

    @property
    def document(self) -> ChecklistDocument | None:
        """The optimistic view: the in-flight draft if any, else the last loaded document."""
        return self._draft if self._draft is not None else self._document

    @property
    def authoritative_document(self) -> ChecklistDocument | None:
        return self._document

    async def load(self) -> ChecklistDocument:
        """Fetch the current document, seeding the store first if it is empty."""
        document, token = await self._store.load()
        if document is None:
            logger.info("Seeding initial checklist data.")
            try:
                await self._store.save(self._seed(), None, SEED_DESCRIPTION)
            except ConflictError:
                logger.info("Another client seeded the store first; using its document.")
            document, token = await self._store.load()
            if document is None:
                raise RemoteFetchError("Document is still missing after seeding the store")
        self._document, self._token = document, token
        return document

    async def ensure_loaded(self) -> ChecklistDocument:
        if self._document is None:
            return await self.load()
        return self.document or self._document

    async def update(
        self,
        transform: Callable[[ChecklistDocument], T],
        description: str,
        *,
        retries: int = 0,
    ) -> T:
        """
        Apply transform to a copy of the authoritative document and save it.

        transform mutates the copy it is given and returns a value that is
        handed back to the caller. Rule violations it raises abort before any
        write. After a successful save the document is reloaded to pick up
        the new token (and anything other writers committed).
        """
        async with self._write_lock:
            if self._document is None or self._token is None:
                await self.load()
            attempt = 0
            while True:
                if self._document is None:
                    raise RemoteFetchError("No document loaded from the store")
                draft = self._document.model_copy(deep=True)
                result = transform(draft)
                try:
                    await self._save_draft(draft, description)
                except ConflictError as e:
                    logger.info("CONFLICT on %r (attempt %d); reloading.", description, attempt + 1)
                    await self._reload_after_failure(e)
                    if attempt >= retries:
                        raise
                    attempt += 1
                    continue
                except Exception as e:
                    logger.warning("SAVE FAILED on %r: %s; reverting to stored state.", description, e)
                    await self._reload_after_failure(e)
                    raise
                try:
                    await self.load()
                except StoreError as e:
                    # The write is committed; the next update reloads before saving.
                    logger.warning("Saved %r but the reload failed: %s; token cleared.", description, e)
                    self._document, self._token = draft, None
                return result

    async def _save_draft(self, draft: ChecklistDocument, description: str) -> None:
        self._draft = draft
        try:
            await self._store.save(draft, self._token, description)
        finally:
            self._draft = None

    async def _reload_after_failure(self, error: Exception) -> None:
        try:
            await self.load()
        except StoreError as reload_error:
            logger.warning("Reload after failed save also failed: %s", reload_error)
            raise error from reload_error

    def _timestamp(self) -> str:
        return self._now().isoformat()

    async def add_submission(self, draft: SubmissionDraft, *, retries: int = 1) -> SubmissionRecord:
        submission_id = self._new_id()
        timestamp = self._timestamp()

        def _apply(doc: ChecklistDocument) -> SubmissionRecord:
            submission = rules.build_submission(
                doc,
                draft,
                submission_id=submission_id,
                timestamp=timestamp,
                notification_email=self._notification_email,
            )
            doc.submissions.append(submission)
            return submission

        submission = await self.update(_apply, f"Add submission: {draft.checklistId}", retries=retries)
        logger.info(
            "CHECKLIST COMPLETED: %s by %s at %s (notify %s)",
            submission.checklistName,
            submission.employeeName,
            submission.location,
            submission.notificationEmail,
        )
        return submission

    async def add_report(
        self,
        draft: ReportDraft,
        *,
        submitted_by: str | None = None,
        uid: str | None = None,
        retries: int = 1,
    ) -> ReportRecord:
        report_id = self._new_id()
        timestamp = self._timestamp()

        def _apply(doc: ChecklistDocument) -> ReportRecord:
            report = rules.build_report(draft, report_id=report_id, timestamp=timestamp, submitted_by=submitted_by, uid=uid)
            doc.reports.append(report)
            return report

        return await self.update(_apply, f"Add {draft.type.lower()} report", retries=retries)

    # Checklist edits are not retried: a conflicting edit goes back to the manager.

    async def create_checklist(self, name: str) -> ChecklistRecord:
        suffix = self._new_id().replace("-", "")[:8]
        return await self.update(
            lambda doc: rules.create_checklist(doc, name, suffix),
            f"Create checklist: {name.strip()}",
        )

    async def add_task(self, checklist_id: str, text: str) -> ChecklistRecord:
        return await self.update(lambda doc: rules.add_task(doc, checklist_id, text), f"Add task to {checklist_id}")

    async def delete_task(self, checklist_id: str, index: int) -> ChecklistRecord:
        return await self.update(
            lambda doc: rules.delete_task(doc, checklist_id, index),
            f"Delete task {index} from {checklist_id}",
        )

    async def delete_checklist(self, checklist_id: str) -> None:
        await self.update(lambda doc: rules.delete_checklist(doc, checklist_id), f"Delete checklist: {checklist_id}")
