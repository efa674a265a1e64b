from __future__ import annotations

import pytest

from persistence import checklist_rules as rules
from persistence.checklist_rules import SubmissionDraft
from persistence.documents import ChecklistRecord
from persistence.errors import ChecklistError, ChecklistNotFoundError, SubmissionRejectedError
from persistence.seed_data import BOH_STATIONS, TEMP_LOG_TASK_PREFIX, TEMPERATURE_LOG_KEYS, initial_document


def _health_draft(**overrides) -> SubmissionDraft:
    doc = initial_document()
    health = doc.find_checklist("health")
    fields = dict(
        checklistId="health",
        employeeName="  Sam  ",
        location="Smyrna",
        completionDate="2025-06-01",
        completionTime="06:30",
        completedTasks=[t for t in health.tasks if not t.startswith(TEMP_LOG_TASK_PREFIX)],
        tempLogs={key: "35" for key in TEMPERATURE_LOG_KEYS},
    )
    fields.update(overrides)
    return SubmissionDraft(**fields)


def _build(draft: SubmissionDraft):
    return rules.build_submission(initial_document(), draft, submission_id="s1", timestamp="2025-06-01T10:30:00+00:00")


def test_seed_has_expected_shape():
    doc = initial_document()
    health = doc.find_checklist("health")
    assert len(health.tasks) == 5 + len(TEMPERATURE_LOG_KEYS)
    assert len(doc.find_checklist("boh_supervisor_audit").tasks) == sum(len(t) for *_, t in BOH_STATIONS)
    assert all(not t.startswith(TEMP_LOG_TASK_PREFIX) for t in doc.find_checklist("boh_supervisor_audit").tasks)
    assert len({c.id for c in doc.checklists}) == len(doc.checklists)


def test_health_submission_marks_temperature_tasks_complete():
    submission = _build(_health_draft())
    health = initial_document().find_checklist("health")
    assert submission.completedTasks == health.tasks
    assert submission.totalTasks == 16
    assert submission.employeeName == "Sam"
    assert submission.tempLogs == {key: "35" for key in TEMPERATURE_LOG_KEYS}


@pytest.mark.parametrize("bad", ["", "  ", "warm", "nan"])
def test_health_submission_requires_every_reading(bad):
    logs = {key: "35" for key in TEMPERATURE_LOG_KEYS}
    logs["Front_Drink_Cooler"] = bad
    with pytest.raises(SubmissionRejectedError, match="temperature fields"):
        _build(_health_draft(tempLogs=logs))


def test_non_temperature_checklist_drops_temp_logs():
    foh = initial_document().find_checklist("foh")
    draft = _health_draft(checklistId="foh", completedTasks=list(foh.tasks), tempLogs={"x": "1"})
    assert _build(draft).tempLogs is None


def test_incomplete_checklist_is_rejected():
    with pytest.raises(SubmissionRejectedError, match="complete all checklist tasks"):
        _build(_health_draft(completedTasks=[]))


def test_unknown_task_text_is_rejected():
    draft = _health_draft()
    with pytest.raises(SubmissionRejectedError, match="not on checklist"):
        _build(draft.model_copy(update={"completedTasks": draft.completedTasks + ["Feed the cat"]}))


@pytest.mark.parametrize(
    "field,value",
    [("employeeName", "   "), ("location", ""), ("completionTime", ""), ("completionDate", "")],
)
def test_required_fields(field, value):
    with pytest.raises(SubmissionRejectedError):
        _build(_health_draft(**{field: value}))


def test_bad_completion_date():
    with pytest.raises(SubmissionRejectedError, match="Invalid completion date"):
        _build(_health_draft(completionDate="06/01/2025"))


def test_unknown_checklist():
    with pytest.raises(ChecklistNotFoundError):
        _build(_health_draft(checklistId="nope"))


def test_out_of_range_units():
    logs = {key: "30" for key in TEMPERATURE_LOG_KEYS}
    logs["Kitchen_Meat_Cooler"] = "45"
    logs["Back_Fry_Freezer"] = "0"
    logs["Front_Cheesecake_Freezer"] = "3.5"
    flagged = rules.out_of_range_units(logs)
    # freezers are held to 0°F, coolers to 41°F
    assert "Kitchen_Meat_Cooler" in flagged
    assert "Front_Cheesecake_Freezer" in flagged
    assert "Kitchen_Fry_Freezer" in flagged
    assert "Back_Fry_Freezer" not in flagged
    assert "Kitchen_Waffle_Cooler" not in flagged
    assert rules.out_of_range_units(None) == []


def test_standard_limit_parsing():
    assert rules.standard_limit("41°F or below") == 41.0
    assert rules.standard_limit("0°F or below") == 0.0
    assert rules.standard_limit("N/A") is None


def test_sort_for_display_puts_unknown_lists_last_by_name():
    doc = initial_document()
    extra = [ChecklistRecord(id="zz", name="Bar close"), ChecklistRecord(id="aa", name="Alley sweep")]
    ordered = rules.sort_for_display(extra + list(reversed(doc.checklists)))
    ids = [c.id for c in ordered]
    assert ids[:3] == ["health", "foh", "restroom"]
    assert ids[-3:] == ["boh_supervisor_audit", "aa", "zz"]


def test_checklist_edit_validation():
    doc = initial_document()
    with pytest.raises(ChecklistError):
        rules.create_checklist(doc, "   ", "x")
    with pytest.raises(ChecklistError):
        rules.add_task(doc, "foh", "  ")
    with pytest.raises(ChecklistError):
        rules.delete_task(doc, "foh", 99)
    with pytest.raises(ChecklistNotFoundError):
        rules.add_task(doc, "missing", "task")
