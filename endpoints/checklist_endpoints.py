from __future__ import annotations

import logging
from datetime import date
from typing import Any, Awaitable, Literal, TypeVar

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel

from endpoints.identity import Identity, current_identity, require_auditor
from persistence.activity_log import ActivityFilter, build_activity_log
from persistence.checklist_rules import ReportDraft, SubmissionDraft, sort_for_display
from persistence.errors import (
    ChecklistError,
    ChecklistNotFoundError,
    ConflictError,
    StoreError,
    SubmissionRejectedError,
)
from persistence.repositories import ChecklistRepository

router = APIRouter(prefix="/api", tags=["checklists"])
logger = logging.getLogger(__name__)

T = TypeVar("T")


class NewChecklistBody(BaseModel):
    name: str


class NewTaskBody(BaseModel):
    text: str


def get_repository(request: Request) -> ChecklistRepository:
    return request.app.state.repository


async def _call(op: Awaitable[T]) -> T:
    """Run a repository call, mapping store and rule errors to HTTP errors."""
    try:
        return await op
    except ConflictError as e:
        logger.info("CONFLICT: %s", e.message)
        raise HTTPException(
            status_code=409,
            detail=f"Someone else changed the data first; it has been reloaded. Please retry. ({e.message})",
        ) from e
    except StoreError as e:
        logger.warning("STORE ERROR (%s): %s", type(e).__name__, e.message)
        raise HTTPException(status_code=502, detail=f"Could not reach backend: {e.message}") from e
    except ChecklistNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    except SubmissionRejectedError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e
    except ChecklistError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e


@router.get("/checklists")
async def list_checklists(repo: ChecklistRepository = Depends(get_repository)) -> list[dict[str, Any]]:
    document = await _call(repo.ensure_loaded())
    return [c.model_dump(mode="json") for c in sort_for_display(document.checklists)]


@router.get("/document")
async def get_document(
    repo: ChecklistRepository = Depends(get_repository),
    _auditor: Identity = Depends(require_auditor),
) -> dict[str, Any]:
    await _call(repo.ensure_loaded())
    return {"document": repo.authoritative_document.to_stored_doc(), "token": repo.token}


@router.post("/reload")
async def reload_document(repo: ChecklistRepository = Depends(get_repository)) -> dict[str, Any]:
    await _call(repo.load())
    return {"token": repo.token}


@router.post("/submissions", status_code=201)
async def add_submission(
    body: SubmissionDraft,
    request: Request,
    repo: ChecklistRepository = Depends(get_repository),
) -> dict[str, Any]:
    identity = current_identity(request)
    if identity is not None and not body.submitterId:
        body = body.model_copy(update={"submitterId": identity.user_id})
    submission = await _call(repo.add_submission(body))
    return submission.model_dump(mode="json")


@router.post("/reports", status_code=201)
async def add_report(
    body: ReportDraft,
    repo: ChecklistRepository = Depends(get_repository),
    auditor: Identity = Depends(require_auditor),
) -> dict[str, Any]:
    report = await _call(repo.add_report(body, submitted_by=auditor.email, uid=auditor.user_id))
    return report.model_dump(mode="json")


@router.get("/activity")
async def activity_log(
    kind: Literal["submission", "report"] | None = None,
    checklist_id: str | None = None,
    location: str | None = None,
    person: str | None = None,
    report_type: str | None = None,
    q: str | None = None,
    date_from: date | None = None,
    date_to: date | None = None,
    repo: ChecklistRepository = Depends(get_repository),
    _auditor: Identity = Depends(require_auditor),
) -> list[dict[str, Any]]:
    document = await _call(repo.ensure_loaded())
    flt = ActivityFilter(
        kind=kind,
        checklist_id=checklist_id,
        location=location,
        person=person,
        report_type=report_type,
        query=q,
        date_from=date_from,
        date_to=date_to,
    )
    return [e.model_dump(mode="json") for e in build_activity_log(document, flt)]


@router.post("/checklists", status_code=201)
async def create_checklist(
    body: NewChecklistBody,
    repo: ChecklistRepository = Depends(get_repository),
    _auditor: Identity = Depends(require_auditor),
) -> dict[str, Any]:
    checklist = await _call(repo.create_checklist(body.name))
    return checklist.model_dump(mode="json")


@router.post("/checklists/{checklist_id}/tasks")
async def add_task(
    checklist_id: str,
    body: NewTaskBody,
    repo: ChecklistRepository = Depends(get_repository),
    _auditor: Identity = Depends(require_auditor),
) -> dict[str, Any]:
    checklist = await _call(repo.add_task(checklist_id, body.text))
    return checklist.model_dump(mode="json")


@router.delete("/checklists/{checklist_id}/tasks/{index}")
async def delete_task(
    checklist_id: str,
    index: int,
    repo: ChecklistRepository = Depends(get_repository),
    _auditor: Identity = Depends(require_auditor),
) -> dict[str, Any]:
    checklist = await _call(repo.delete_task(checklist_id, index))
    return checklist.model_dump(mode="json")


@router.delete("/checklists/{checklist_id}", status_code=204)
async def delete_checklist(
    checklist_id: str,
    repo: ChecklistRepository = Depends(get_repository),
    _auditor: Identity = Depends(require_auditor),
) -> None:
    await _call(repo.delete_checklist(checklist_id))
