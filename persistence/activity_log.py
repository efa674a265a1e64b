from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Literal

from pydantic import BaseModel, Field

from .checklist_rules import out_of_range_units
from .documents import ChecklistDocument, ReportRecord, SubmissionRecord

EntryKind = Literal["submission", "report"]


class ActivityEntry(BaseModel):
    kind: EntryKind
    id: str
    timestamp: str
    title: str
    actor: str | None = None
    location: str | None = None
    checklistId: str | None = None
    reportType: str | None = None
    activityDate: str | None = None
    completedCount: int | None = None
    totalTasks: int | None = None
    detail: str | None = None
    temperatureAlerts: list[str] = Field(default_factory=list)


@dataclass(frozen=True)
class ActivityFilter:
    kind: EntryKind | None = None
    checklist_id: str | None = None
    location: str | None = None
    person: str | None = None
    report_type: str | None = None
    query: str | None = None
    date_from: date | None = None
    date_to: date | None = None


def _parse_timestamp(value: str | None) -> datetime | None:
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _parse_date(value: str | None) -> date | None:
    if not value:
        return None
    try:
        return date.fromisoformat(value[:10])
    except ValueError:
        return None


def submission_entry(submission: SubmissionRecord) -> ActivityEntry:
    return ActivityEntry(
        kind="submission",
        id=submission.id,
        timestamp=submission.timestamp,
        title=submission.checklistName,
        actor=submission.employeeName or None,
        location=submission.location or None,
        checklistId=submission.checklistId,
        activityDate=submission.completionDate or None,
        completedCount=len(submission.completedTasks),
        totalTasks=submission.totalTasks,
        detail=f"{submission.completionDate or 'N/A'} @ {submission.completionTime or 'N/A'}",
        temperatureAlerts=out_of_range_units(submission.tempLogs),
    )


def report_entry(report: ReportRecord) -> ActivityEntry:
    return ActivityEntry(
        kind="report",
        id=report.id,
        timestamp=report.timestamp,
        title=f"{report.type} report",
        actor=report.submittedBy,
        reportType=report.type,
        activityDate=report.timestamp[:10] or None,
        detail=report.content,
    )


def _matches(entry: ActivityEntry, flt: ActivityFilter) -> bool:
    if flt.kind and entry.kind != flt.kind:
        return False
    if flt.checklist_id and entry.checklistId != flt.checklist_id:
        return False
    if flt.location and (entry.location or "").lower() != flt.location.lower():
        return False
    if flt.report_type and entry.reportType != flt.report_type:
        return False
    if flt.person and flt.person.lower() not in (entry.actor or "").lower():
        return False
    if flt.query:
        haystack = " ".join(filter(None, [entry.title, entry.actor, entry.location, entry.detail])).lower()
        if flt.query.lower() not in haystack:
            return False
    if flt.date_from or flt.date_to:
        day = _parse_date(entry.activityDate)
        if day is None:
            return False
        if flt.date_from and day < flt.date_from:
            return False
        if flt.date_to and day > flt.date_to:
            return False
    return True


def build_activity_log(document: ChecklistDocument, flt: ActivityFilter | None = None) -> list[ActivityEntry]:
    """
    Merge submissions and reports into one audit trail, newest first.
    Entries without a readable timestamp go last, in document order.
    """
    flt = flt or ActivityFilter()
    entries = [submission_entry(s) for s in document.submissions]
    entries.extend(report_entry(r) for r in document.reports)
    entries = [e for e in entries if _matches(e, flt)]

    dated = [(ts, e) for e in entries if (ts := _parse_timestamp(e.timestamp)) is not None]
    undated = [e for e in entries if _parse_timestamp(e.timestamp) is None]
    dated.sort(key=lambda pair: pair[0], reverse=True)
    return [e for _, e in dated] + undated
