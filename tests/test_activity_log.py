from __future__ import annotations

from datetime import date

from persistence.activity_log import ActivityFilter, build_activity_log
from persistence.documents import ChecklistDocument, ReportRecord, SubmissionRecord


def _submission(sid: str, ts: str, *, name="Dana", location="Austell", checklist="foh", day="2025-05-01", temps=None):
    return SubmissionRecord(
        id=sid,
        checklistId=checklist,
        checklistName=checklist.upper(),
        employeeName=name,
        location=location,
        completionDate=day,
        completionTime="09:00",
        completedTasks=["a", "b"],
        totalTasks=3,
        timestamp=ts,
        tempLogs=temps,
    )


def _document() -> ChecklistDocument:
    return ChecklistDocument(
        submissions=[
            _submission("s-old", "2025-05-01T08:00:00+00:00"),
            _submission("s-new", "2025-05-03T08:00:00Z", name="Eli", location="Smyrna", checklist="health", day="2025-05-03",
                        temps={"Kitchen_Meat_Cooler": "44", "Back_Fry_Freezer": "-2"}),
            _submission("s-bad-ts", "yesterday-ish"),
        ],
        reports=[
            ReportRecord(id="r1", type="Maintenance", content="Walk-in door gasket torn", submittedBy="mgr@bistro.test",
                         timestamp="2025-05-02T12:00:00.000Z"),
        ],
    )


def test_merged_log_is_newest_first_with_undated_last():
    ids = [e.id for e in build_activity_log(_document())]
    assert ids == ["s-new", "r1", "s-old", "s-bad-ts"]


def test_submission_entry_fields():
    entry = next(e for e in build_activity_log(_document()) if e.id == "s-new")
    assert entry.kind == "submission"
    assert entry.title == "HEALTH"
    assert entry.completedCount == 2 and entry.totalTasks == 3
    assert entry.detail == "2025-05-03 @ 09:00"
    assert entry.temperatureAlerts == ["Kitchen_Meat_Cooler"]


def test_filter_by_kind_and_report_type():
    reports = build_activity_log(_document(), ActivityFilter(kind="report"))
    assert [e.id for e in reports] == ["r1"]
    assert build_activity_log(_document(), ActivityFilter(report_type="Incident")) == []


def test_filter_by_location_is_case_insensitive():
    assert [e.id for e in build_activity_log(_document(), ActivityFilter(location="smyrna"))] == ["s-new"]


def test_filter_by_person_and_query():
    assert [e.id for e in build_activity_log(_document(), ActivityFilter(person="eli"))] == ["s-new"]
    assert [e.id for e in build_activity_log(_document(), ActivityFilter(query="gasket"))] == ["r1"]


def test_filter_by_checklist_and_date_range():
    flt = ActivityFilter(checklist_id="foh", date_from=date(2025, 5, 1), date_to=date(2025, 5, 1))
    assert sorted(e.id for e in build_activity_log(_document(), flt)) == ["s-bad-ts", "s-old"]

    window = ActivityFilter(date_from=date(2025, 5, 2))
    assert [e.id for e in build_activity_log(_document(), window)] == ["s-new", "r1"]


def test_empty_document():
    assert build_activity_log(ChecklistDocument()) == []
