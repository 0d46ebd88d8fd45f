from __future__ import annotations

from datetime import date

import pytest

from src.attendance_tracker.attendance_tracker.attendance.confirmation import PENDING_ATTRIBUTE
from src.attendance_tracker.attendance_tracker.attendance.model import DayStatus
from src.attendance_tracker.attendance_tracker.common.clock import fixed_clock
from src.attendance_tracker.attendance_tracker.container import build_container
from src.attendance_tracker.attendance_tracker.core.enums import AnswerOutcome, MarkOutcome
from src.attendance_tracker.attendance_tracker.core.exceptions import InvalidDate, InvalidStatus, ValidationError


def test_mark_confirm_and_monthly_report(store):
    c = build_container(store=store, clock=fixed_clock(date(2024, 6, 3)))
    attrs: dict = {}

    first = c.attendance_service.mark("u1", "present", day="2024-06-03", attributes=attrs)
    assert first.outcome == MarkOutcome.MARKED

    change = c.attendance_service.mark("u1", "absent", day="2024-06-03", attributes=attrs)
    assert change.outcome == MarkOutcome.CONFIRMATION_REQUIRED
    assert change.existing == DayStatus.present()
    assert attrs[PENDING_ATTRIBUTE]["oldStatus"] == "present"
    assert attrs[PENDING_ATTRIBUTE]["newStatus"] == "absent"
    # nothing is written until the answer
    assert c.attendance_service.get_day("u1", "2024-06-03").status == DayStatus.present()

    answer = c.attendance_service.answer("u1", True, attrs)
    assert answer.outcome == AnswerOutcome.CHANGED
    assert answer.previous == DayStatus.present()
    assert PENDING_ATTRIBUTE not in attrs
    assert c.attendance_service.get_day("u1", "2024-06-03").status == DayStatus.absent()

    report = c.report_service.monthly_percentage("u1", "2024-06")
    # Saturday 1 June is an unmarked working day
    assert report.present_days == 0
    assert report.total_working_days == 2
    assert report.percentage == 0


def test_marking_the_same_status_twice_is_already_set(container):
    attrs: dict = {}
    container.attendance_service.mark("u1", "present", attributes=attrs)
    again = container.attendance_service.mark("u1", "PRESENT", attributes=attrs)

    assert again.outcome == MarkOutcome.ALREADY_SET
    assert attrs == {}


def test_holiday_with_another_name_is_not_a_conflict(container):
    container.attendance_service.mark("u1", "holiday", day="2024-06-17", holiday_name="Eid")
    again = container.attendance_service.mark("u1", "holiday", day="2024-06-17", holiday_name="Bakrid")

    assert again.outcome == MarkOutcome.ALREADY_SET
    assert container.attendance_service.get_day("u1", "2024-06-17").status.holiday_name == "Eid"


def test_confirmation_keeps_the_old_holiday_name(container):
    attrs: dict = {}
    svc = container.attendance_service
    svc.mark("u1", "holiday", day="2024-06-17", holiday_name="Eid", attributes=attrs)
    svc.mark("u1", "present", day="2024-06-17", attributes=attrs)
    assert attrs[PENDING_ATTRIBUTE]["oldHolidayName"] == "Eid"

    result = svc.answer("u1", True, attrs)

    assert result.outcome == AnswerOutcome.CHANGED
    assert result.previous == DayStatus.holiday("Eid")
    assert svc.get_day("u1", "2024-06-17").status == DayStatus.present()


def test_answer_no_keeps_the_old_status(container):
    attrs: dict = {}
    container.attendance_service.mark("u1", "absent", attributes=attrs)
    container.attendance_service.mark("u1", "present", attributes=attrs)

    result = container.attendance_service.answer("u1", False, attrs)

    assert result.outcome == AnswerOutcome.KEPT
    assert container.attendance_service.get_day("u1", container.clock.today()).status == DayStatus.absent()


def test_answer_without_pending_change(container):
    result = container.attendance_service.answer("u1", True, {})
    assert result.outcome == AnswerOutcome.NOTHING_TO_CONFIRM


def test_unrelated_turn_discards_pending_change(container):
    attrs: dict = {}
    container.attendance_service.mark("u1", "absent", attributes=attrs)
    container.attendance_service.mark("u1", "present", attributes=attrs)

    assert container.attendance_service.discard_pending(attrs) is True
    assert container.attendance_service.discard_pending(attrs) is False
    assert container.attendance_service.answer("u1", True, attrs).outcome == AnswerOutcome.NOTHING_TO_CONFIRM
    assert container.attendance_service.get_day("u1", container.clock.today()).status == DayStatus.absent()


def test_new_mark_replaces_an_older_prompt(container):
    attrs: dict = {}
    svc = container.attendance_service
    svc.mark("u1", "absent", day="2024-06-18", attributes=attrs)
    svc.mark("u1", "present", day="2024-06-18", attributes=attrs)

    fresh = svc.mark("u1", "present", day="2024-06-19", attributes=attrs)

    assert fresh.outcome == MarkOutcome.MARKED
    assert PENDING_ATTRIBUTE not in attrs
    assert svc.get_day("u1", "2024-06-18").status == DayStatus.absent()


def test_pending_change_of_another_user_is_dropped(container):
    attrs: dict = {}
    container.attendance_service.mark("u1", "absent", attributes=attrs)
    container.attendance_service.mark("u1", "present", attributes=attrs)

    result = container.attendance_service.answer("u2", True, attrs)

    assert result.outcome == AnswerOutcome.NOTHING_TO_CONFIRM
    assert container.attendance_service.get_day("u1", container.clock.today()).status == DayStatus.absent()
    assert container.attendance_service.get_day("u2", container.clock.today()) is None


def test_malformed_pending_attribute_means_nothing_to_confirm(container):
    attrs = {PENDING_ATTRIBUTE: {"key": "u1", "date": "yesterday"}}
    assert container.attendance_service.answer("u1", True, attrs).outcome == AnswerOutcome.NOTHING_TO_CONFIRM
    assert attrs == {}


def test_future_dates_are_refused(container, today):
    result = container.attendance_service.mark("u1", "present", day=date(2024, 6, 21))

    assert result.outcome == MarkOutcome.FUTURE_DATE
    assert container.attendance_service.get_day("u1", "2024-06-21") is None


def test_days_off_are_refused(container):
    assert container.attendance_service.mark("u1", "present", day="2024-06-16").outcome == MarkOutcome.DAY_OFF

    container.user_config_service.set_weekly_days_off("u1", [6])
    assert container.attendance_service.mark("u1", "present", day="2024-06-15").outcome == MarkOutcome.DAY_OFF
    assert container.attendance_service.get_day("u1", "2024-06-15") is None


def test_confirmation_rechecks_day_off(container):
    attrs: dict = {}
    svc = container.attendance_service
    svc.mark("u1", "absent", day="2024-06-15", attributes=attrs)
    svc.mark("u1", "present", day="2024-06-15", attributes=attrs)
    container.user_config_service.set_weekly_days_off("u1", [6])

    result = svc.answer("u1", True, attrs)

    assert result.outcome == AnswerOutcome.DAY_OFF
    assert svc.get_day("u1", "2024-06-15").status == DayStatus.absent()


def test_invalid_input_is_rejected_before_any_write(container, store):
    with pytest.raises(InvalidStatus):
        container.attendance_service.mark("u1", "late")
    with pytest.raises(InvalidDate):
        container.attendance_service.mark("u1", "present", day="2024-13-01")
    with pytest.raises(ValidationError):
        container.attendance_service.mark("u1", "holiday")
    with pytest.raises(ValidationError):
        container.attendance_service.mark("", "present")
    assert store.dump() == {}


def test_linked_account_marks_into_the_linked_key(container):
    container.keys.link("voice-uid", "web-uid")
    container.attendance_service.mark("voice-uid", "present")

    assert container.days_repo.get("web-uid", container.clock.today()).status == DayStatus.present()
    assert container.days_repo.get("voice-uid", container.clock.today()) is None
