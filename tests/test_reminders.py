"""Tests for due-today reminders."""

from datetime import date, datetime

from duetrack.domain.reminders import (
    Notifier,
    Reminder,
    ReminderKind,
    due_today,
    overdue,
    reminder_for,
)


class RecordingNotifier(Notifier):
    def __init__(self):
        self.sent = []

    def send(self, title, body):
        self.sent.append((title, body))


def test_due_today_uses_adjusted_date(make_payment):
    # Saturday 2024-06-08 is treated as due Monday 2024-06-10
    saturday = make_payment(id="a", due=date(2024, 6, 8))
    monday = make_payment(id="b", name="Rent", due=date(2024, 6, 10))
    paid = make_payment(id="c", due=date(2024, 6, 10), is_paid=True)

    assert [p.id for p in due_today([saturday, monday, paid], date(2024, 6, 10))] == ["a", "b"]
    assert due_today([saturday], date(2024, 6, 8)) == []


def test_overdue(make_payment):
    late = make_payment(id="a", due=date(2024, 6, 3))
    weekend = make_payment(id="b", due=date(2024, 6, 8))
    paid = make_payment(id="c", due=date(2024, 6, 3), is_paid=True)

    assert [p.id for p in overdue([late, weekend, paid], date(2024, 6, 10))] == ["a"]


def test_no_reminder_before_reminder_hour(make_payment):
    payments = [make_payment(due=date(2024, 3, 8))]
    assert reminder_for(payments, datetime(2024, 3, 8, 9, 0)) is None


def test_no_reminder_off_the_hour(make_payment):
    payments = [make_payment(due=date(2024, 3, 8))]
    assert reminder_for(payments, datetime(2024, 3, 8, 10, 30)) is None


def test_first_reminder_of_the_day(make_payment):
    payments = [make_payment(due=date(2024, 3, 8))]

    reminder = reminder_for(payments, datetime(2024, 3, 8, 10, 0))

    assert reminder.kind == ReminderKind.DUE_TODAY
    assert reminder.title == "Payment reminder"
    assert reminder.body == "You have 1 payment due today!"


def test_later_reminder_warns_still_unpaid(make_payment):
    payments = [
        make_payment(id="a", due=date(2024, 3, 8)),
        make_payment(id="b", name="Gas", due=date(2024, 3, 8)),
    ]

    reminder = reminder_for(payments, datetime(2024, 3, 8, 14, 0))

    assert reminder.kind == ReminderKind.STILL_UNPAID
    assert reminder.title == "Overdue warning"
    assert reminder.body == "Heads up! 2 payments due today still unpaid."


def test_custom_reminder_hour(make_payment):
    payments = [make_payment(due=date(2024, 3, 8))]

    assert reminder_for(payments, datetime(2024, 3, 8, 10, 0), reminder_hour=8).kind == (
        ReminderKind.STILL_UNPAID
    )
    assert reminder_for(payments, datetime(2024, 3, 8, 8, 0), reminder_hour=8).kind == (
        ReminderKind.DUE_TODAY
    )


def test_no_reminder_when_nothing_due(make_payment):
    payments = [make_payment(due=date(2024, 3, 8), is_paid=True)]
    assert reminder_for(payments, datetime(2024, 3, 8, 10, 0)) is None


def test_notifier_sends_title_and_body(make_payment):
    notifier = RecordingNotifier()
    reminder = Reminder(kind=ReminderKind.DUE_TODAY, payments=(make_payment(),))

    notifier.notify(reminder)

    assert notifier.sent == [("Payment reminder", "You have 1 payment due today!")]
