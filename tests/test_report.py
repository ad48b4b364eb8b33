import pytest
from rich.console import Console

from quill.console import get_status_theme
from quill.events import EventType
from quill.report import Report, ReportList


def make_report(name="cmd", output="done", error=False):
    report = Report(command=name, typed=name)
    report.start_timer()
    report.complete(output, error)
    return report


def test_report_lifecycle():
    report = Report(command="cmd")
    assert report.status == "PENDING"
    assert report.duration is None

    report.start_timer()
    assert report.duration is not None
    report.complete("out")

    assert report.status == "OK"
    assert report.end_wall is not None
    assert "status=OK" in report.to_log_line()
    assert "<Report 'cmd' | OK" in str(report)


def test_report_list_indexes_and_drops_oldest():
    reports = ReportList(max_reports=2)
    for name in ("a", "b", "c"):
        reports.add_report(make_report(name))

    assert [report.command for report in reports] == ["b", "c"]
    assert [report.index for report in reports.get_reports()] == [1, 2]
    assert reports.get_latest().command == "c"


def test_report_list_publishes_changes():
    reports = ReportList()
    seen = []
    reports.events.subscribe(EventType.REPORTS_CHANGE, seen.append)

    report = Report(command="cmd")
    reports.add_report(report)
    report.complete("out")
    reports.update_report(report)

    assert [event.report for event in seen] == [report, report]


def test_report_list_clear():
    reports = ReportList()
    reports.add_report(make_report())
    reports.clear()
    assert len(reports) == 0
    assert reports.get_latest() is None


def test_report_list_rejects_bad_size():
    with pytest.raises(ValueError):
        ReportList(max_reports=0)


def test_summary_filters_rows():
    reports = ReportList()
    reports.add_report(make_report("good"))
    reports.add_report(make_report("bad", ValueError("x"), error=True))
    reports.add_report(Report(command="pending"))
    console = Console(record=True, width=160, theme=get_status_theme())

    assert reports.summary(target=console).row_count == 3
    assert reports.summary("error", target=console).row_count == 1
    assert reports.summary("success", target=console).row_count == 2

    text = console.export_text()
    assert "Command History" in text
    assert "Pending" in text
