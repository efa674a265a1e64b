from __future__ import annotations

from typing import Any, Literal, Mapping

from pydantic import BaseModel, ConfigDict, Field

ReportType = Literal["Incident", "Maintenance", "Inventory", "Other"]


class ChecklistRecord(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str
    name: str
    tasks: list[str] = Field(default_factory=list)


class SubmissionRecord(BaseModel):
    """
    A completed checklist. Checklist name and task text are copied in at
    submission time so the record stays readable after the checklist is
    edited or deleted.
    """

    model_config = ConfigDict(extra="allow")

    id: str
    checklistId: str
    checklistName: str
    submitterId: str | None = None
    employeeName: str = ""
    location: str = ""
    completionDate: str = ""
    completionTime: str = ""
    completedTasks: list[str] = Field(default_factory=list)
    totalTasks: int = 0
    timestamp: str
    notificationEmail: str | None = None
    tempLogs: dict[str, str] | None = None


class ReportRecord(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str
    type: ReportType = "Other"
    content: str
    submittedBy: str | None = None
    uid: str | None = None
    timestamp: str


class ChecklistDocument(BaseModel):
    """
    Mirrors the stored db.json schema:
      {
        "checklists": [ {"id", "name", "tasks": [...]}, ... ],
        "submissions": [ {...}, ... ],
        "reports": [ {...}, ... ]      (optional, missing in older files)
      }
    """

    model_config = ConfigDict(extra="allow")

    checklists: list[ChecklistRecord] = Field(default_factory=list)
    submissions: list[SubmissionRecord] = Field(default_factory=list)
    reports: list[ReportRecord] = Field(default_factory=list)

    @classmethod
    def from_stored_doc(cls, doc: Mapping[str, Any]) -> "ChecklistDocument":
        return cls.model_validate(doc)

    def to_stored_doc(self) -> dict[str, Any]:
        return self.model_dump(mode="json")

    def find_checklist(self, checklist_id: str) -> ChecklistRecord | None:
        for checklist in self.checklists:
            if checklist.id == checklist_id:
                return checklist
        return None
