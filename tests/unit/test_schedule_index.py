from datetime import date

from app.schemas import BusinessSettings, Job, JobStatus, ScheduleView
from app.services.schedule_index import (
    MONTH_GRID_CELLS,
    build_view,
    jobs_on_date,
    lay_out_day,
    reorder_jobs,
    start_of_week,
    view_dates,
)

MONDAY = date(2024, 6, 3)


def _job(name, day=MONDAY, status=JobStatus.SCHEDULED, minutes=45):
    return Job(
        id=name,
        organization_id="org",
        customer_name=name,
        address=f"{name} Road",
        status=status,
        scheduled_date=day,
        duration_minutes=minutes,
    )


def test_reorder_moves_named_jobs_to_front():
    jobs = [_job("A"), _job("B"), _job("C"), _job("D")]
    assert [j.id for j in reorder_jobs(jobs, ["C", "A"])] == ["C", "A", "B", "D"]


def test_reorder_ignores_unknown_and_duplicate_ids():
    jobs = [_job("A"), _job("B"), _job("C")]
    assert [j.id for j in reorder_jobs(jobs, ["X", "B", "B"])] == ["B", "A", "C"]


def test_jobs_on_date_keeps_route_order_and_filters_status():
    jobs = [
        _job("B"),
        _job("A"),
        _job("P", status=JobStatus.PENDING),
        _job("X", status=JobStatus.CANCELLED),
        _job("C", status=JobStatus.COMPLETED),
        _job("T", day=date(2024, 6, 4)),
    ]
    assert [j.id for j in jobs_on_date(jobs, MONDAY)] == ["B", "A", "C"]


def test_week_starts_on_monday():
    assert start_of_week(date(2024, 6, 9)) == MONDAY  # Sunday
    assert view_dates(ScheduleView.WEEK, date(2024, 6, 5))[0] == MONDAY
    assert len(view_dates(ScheduleView.TWO_WEEK, MONDAY)) == 14


def test_month_grid_includes_leading_days():
    cells = build_view([], ScheduleView.MONTH, date(2024, 6, 15))
    assert len(cells) == MONTH_GRID_CELLS
    # June 1st 2024 is a Saturday
    assert cells[0].date == date(2024, 5, 27)
    assert not cells[0].in_month
    assert cells[5].date == date(2024, 6, 1)
    assert cells[5].in_month


def test_view_marks_today_and_working_days():
    jobs = [_job("A"), _job("B", day=date(2024, 6, 8))]
    cells = build_view(jobs, ScheduleView.WEEK, MONDAY, today=MONDAY, working_days=[1, 2, 3, 4, 5])
    assert cells[0].is_today
    assert [j.id for j in cells[0].jobs] == ["A"]
    assert [j.id for j in cells[5].jobs] == ["B"]
    assert cells[0].is_working_day
    assert not cells[5].is_working_day  # Saturday
    assert not cells[6].is_working_day  # Sunday


def test_day_layout_adds_travel_buffer():
    settings = BusinessSettings(organization_id="org")
    slots = lay_out_day([_job("A", minutes=45), _job("B", minutes=60), _job("C", minutes=30)], settings)
    assert [(s.start_label, s.end_label) for s in slots] == [
        ("8:00", "8:45"),
        ("9:00", "10:00"),
        ("10:15", "10:45"),
    ]
    assert [s.travel_after for s in slots] == [15, 15, 0]
    assert not any(s.overruns for s in slots)


def test_day_layout_flags_overrun():
    settings = BusinessSettings(organization_id="org", schedule_start_hour=15, schedule_end_hour=17)
    slots = lay_out_day([_job("A", minutes=90), _job("B", minutes=60)], settings)
    assert not slots[0].overruns
    assert slots[1].overruns
