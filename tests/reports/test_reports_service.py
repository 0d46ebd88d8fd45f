from __future__ import annotations

from datetime import date

import pytest

from src.attendance_tracker.attendance_tracker.attendance.model import DayStatus
from src.attendance_tracker.attendance_tracker.core.enums import WindowSource
from src.attendance_tracker.attendance_tracker.core.exceptions import InvalidDate, SessionNotFound


def test_monthly_defaults_to_the_current_month(container, today):
    container.attendance_service.mark("u1", "present", day=today)

    result = container.report_service.monthly_percentage("u1")

    assert result.start == date(2024, 6, 1)
    assert result.end == date(2024, 6, 30)
    assert result.present_days == 1


def test_invalid_month_is_rejected_before_user_lookup(container):
    with pytest.raises(InvalidDate):
        container.report_service.monthly_percentage("", "2024-13")


def test_session_percentage_uses_the_selected_session(container):
    svc = container.session_service
    svc.create_session("u1", name="June", start_date="2024-06-17", end_date="2024-06-19", make_selected=True)
    svc.create_session("u1", name="Later", start_date="2024-06-20")
    container.days_repo.set_if_absent("u1", date(2024, 6, 17), DayStatus.present())
    container.days_repo.set_if_absent("u1", date(2024, 6, 18), DayStatus.absent())

    report = container.report_service.session_percentage("u1")

    assert report.window.source == WindowSource.SELECTED
    assert (report.result.present_days, report.result.total_working_days) == (1, 3)
    assert report.percentage == 33


def test_session_percentage_by_name_follows_links(container):
    container.keys.link("alexa-uid", "u1")
    container.session_service.create_session("u1", name="Week", start_date="2024-06-17")
    container.attendance_service.mark("alexa-uid", "present", day="2024-06-17")

    report = container.report_service.session_percentage("alexa-uid", "week")

    assert report.window.source == WindowSource.EXPLICIT
    assert report.window.end == date(2024, 6, 20)
    assert (report.result.present_days, report.result.total_working_days) == (1, 4)
    assert report.percentage == 25


def test_unknown_session_name_offers_available_names(container):
    container.session_service.create_session("u1", name="Week", start_date="2024-06-17")
    with pytest.raises(SessionNotFound) as exc:
        container.report_service.session_percentage("u1", "Month")
    assert exc.value.available == ["Week"]
