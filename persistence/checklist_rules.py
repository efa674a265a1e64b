from __future__ import annotations

import math
import re
from datetime import date
from typing import Iterable

from pydantic import BaseModel, Field

from .documents import ChecklistDocument, ChecklistRecord, ReportRecord, ReportType, SubmissionRecord
from .errors import ChecklistError, ChecklistNotFoundError, ProtectedChecklistError, SubmissionRejectedError
from .seed_data import (
    DISPLAY_ORDER_IDS,
    STRUCTURAL_CHECKLIST_IDS,
    TEMP_LOG_CHECKLIST_IDS,
    TEMP_LOG_TASK_PREFIX,
    TEMPERATURE_LOG_KEYS,
    TEMPERATURE_LOG_STANDARDS,
)

_STANDARD_RE = re.compile(r"(-?\d+(?:\.\d+)?)\s*°F or below")
_SLUG_RE = re.compile(r"[^a-z0-9]")


class SubmissionDraft(BaseModel):
    """What an employee sends when finishing a checklist."""

    checklistId: str
    employeeName: str
    location: str
    completionDate: str
    completionTime: str
    completedTasks: list[str] = Field(default_factory=list)
    tempLogs: dict[str, str] | None = None
    submitterId: str | None = None


class ReportDraft(BaseModel):
    type: ReportType = "Incident"
    content: str


def sort_for_display(checklists: Iterable[ChecklistRecord]) -> list[ChecklistRecord]:
    """Known lists in the fixed display order, then the rest by name."""

    def key(checklist: ChecklistRecord) -> tuple[int, int, str]:
        if checklist.id in DISPLAY_ORDER_IDS:
            return (0, DISPLAY_ORDER_IDS.index(checklist.id), "")
        return (1, 0, checklist.name)

    return sorted(checklists, key=key)


def requires_temp_log(checklist_id: str) -> bool:
    return checklist_id in TEMP_LOG_CHECKLIST_IDS


def is_valid_reading(value: str | None) -> bool:
    if value is None or not value.strip():
        return False
    try:
        return math.isfinite(float(value))
    except ValueError:
        return False


def standard_limit(standard: str) -> float | None:
    m = _STANDARD_RE.search(standard)
    return float(m.group(1)) if m else None


def out_of_range_units(temp_logs: dict[str, str] | None) -> list[str]:
    """Units whose reading is above the unit's standard, in logging order."""
    if not temp_logs:
        return []
    flagged: list[str] = []
    for key, value in temp_logs.items():
        limit = standard_limit(TEMPERATURE_LOG_STANDARDS.get(key, ""))
        if limit is None or not is_valid_reading(value):
            continue
        if float(value) > limit:
            flagged.append(key)
    return flagged


def require_checklist(document: ChecklistDocument, checklist_id: str) -> ChecklistRecord:
    checklist = document.find_checklist(checklist_id)
    if checklist is None:
        raise ChecklistNotFoundError(checklist_id)
    return checklist


def build_submission(
    document: ChecklistDocument,
    draft: SubmissionDraft,
    *,
    submission_id: str,
    timestamp: str,
    notification_email: str | None = None,
) -> SubmissionRecord:
    checklist = require_checklist(document, draft.checklistId)

    employee_name = draft.employeeName.strip()
    if not employee_name or not draft.location.strip() or not draft.completionDate or not draft.completionTime:
        raise SubmissionRejectedError("Please enter your Name, Location, Date, and Time.")
    try:
        date.fromisoformat(draft.completionDate)
    except ValueError as e:
        raise SubmissionRejectedError(f"Invalid completion date: {draft.completionDate}") from e

    unknown = [t for t in draft.completedTasks if t not in checklist.tasks]
    if unknown:
        raise SubmissionRejectedError(f"Tasks not on checklist {checklist.name!r}: {unknown}")

    temp_logs: dict[str, str] | None = None
    needs_temps = requires_temp_log(checklist.id)
    if needs_temps:
        readings = draft.tempLogs or {}
        missing = [k for k in TEMPERATURE_LOG_KEYS if not is_valid_reading(readings.get(k))]
        if missing:
            raise SubmissionRejectedError(
                f"Please ensure all {len(TEMPERATURE_LOG_KEYS)} temperature fields are filled with numbers."
            )
        temp_logs = {k: readings[k].strip() for k in TEMPERATURE_LOG_KEYS}

    requested = set(draft.completedTasks)
    completed = [
        task
        for task in checklist.tasks
        if task in requested or (needs_temps and task.startswith(TEMP_LOG_TASK_PREFIX))
    ]
    if len(completed) < len(checklist.tasks):
        raise SubmissionRejectedError("Please complete all checklist tasks before submitting.")

    return SubmissionRecord(
        id=submission_id,
        checklistId=checklist.id,
        checklistName=checklist.name,
        submitterId=draft.submitterId,
        employeeName=employee_name,
        location=draft.location.strip(),
        completionDate=draft.completionDate,
        completionTime=draft.completionTime,
        completedTasks=completed,
        totalTasks=len(checklist.tasks),
        timestamp=timestamp,
        notificationEmail=notification_email,
        tempLogs=temp_logs,
    )


def build_report(draft: ReportDraft, *, report_id: str, timestamp: str, submitted_by: str | None, uid: str | None) -> ReportRecord:
    content = draft.content.strip()
    if not content:
        raise ChecklistError("Report details are required.")
    return ReportRecord(id=report_id, type=draft.type, content=content, submittedBy=submitted_by, uid=uid, timestamp=timestamp)


def checklist_slug(name: str) -> str:
    return _SLUG_RE.sub("_", name.strip().lower())


def create_checklist(document: ChecklistDocument, name: str, suffix: str) -> ChecklistRecord:
    clean = name.strip()
    if not clean:
        raise ChecklistError("Checklist name is required.")
    checklist = ChecklistRecord(id=f"{checklist_slug(clean)}_{suffix}", name=clean, tasks=[])
    if document.find_checklist(checklist.id) is not None:
        raise ChecklistError(f"Checklist id already exists: {checklist.id}")
    document.checklists.append(checklist)
    return checklist


def add_task(document: ChecklistDocument, checklist_id: str, text: str) -> ChecklistRecord:
    task = text.strip()
    if not task:
        raise ChecklistError("Task text is required.")
    checklist = require_checklist(document, checklist_id)
    checklist.tasks.append(task)
    return checklist


def delete_task(document: ChecklistDocument, checklist_id: str, index: int) -> ChecklistRecord:
    checklist = require_checklist(document, checklist_id)
    if not 0 <= index < len(checklist.tasks):
        raise ChecklistError(f"Task index {index} out of range for {checklist_id}")
    del checklist.tasks[index]
    return checklist


def delete_checklist(document: ChecklistDocument, checklist_id: str) -> None:
    checklist = require_checklist(document, checklist_id)
    if checklist.id in STRUCTURAL_CHECKLIST_IDS:
        raise ProtectedChecklistError(f'Cannot delete core structural checklists: "{checklist.name}".')
    # Submissions keep their copied name and task text; nothing else to touch.
    document.checklists = [c for c in document.checklists if c.id != checklist_id]
