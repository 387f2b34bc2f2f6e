"""Due-today reminders.

Reminders are derived from weekend-adjusted due dates. Delivery happens
through a ``Notifier``; how a notification reaches the user is up to the
implementation.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Iterable, Optional

from duetrack.domain.due_dates import adjust_due_date, sort_by_due_date
from duetrack.domain.entities import Payment

DEFAULT_REMINDER_HOUR = 10


class ReminderKind(str, Enum):
    DUE_TODAY = "DUE_TODAY"
    STILL_UNPAID = "STILL_UNPAID"


@dataclass(frozen=True)
class Reminder:
    """A reminder about unpaid payments due today."""

    kind: ReminderKind
    payments: tuple[Payment, ...]

    @property
    def title(self) -> str:
        if self.kind == ReminderKind.DUE_TODAY:
            return "Payment reminder"
        return "Overdue warning"

    @property
    def body(self) -> str:
        count = len(self.payments)
        noun = "payment" if count == 1 else "payments"
        if self.kind == ReminderKind.DUE_TODAY:
            return f"You have {count} {noun} due today!"
        return f"Heads up! {count} {noun} due today still unpaid."


def due_today(payments: Iterable[Payment], today: date) -> list[Payment]:
    """Unpaid payments whose adjusted due date is ``today``."""
    return sort_by_due_date(
        p for p in payments if not p.is_paid and adjust_due_date(p.date) == today
    )


def overdue(payments: Iterable[Payment], today: date) -> list[Payment]:
    """Unpaid payments whose adjusted due date has passed."""
    return sort_by_due_date(
        p for p in payments if not p.is_paid and adjust_due_date(p.date) < today
    )


def reminder_for(
    payments: Iterable[Payment],
    now: datetime,
    reminder_hour: int = DEFAULT_REMINDER_HOUR,
) -> Optional[Reminder]:
    """Pick the reminder to send at ``now``, if any.

    Reminders fire on the hour, starting at ``reminder_hour``. The first one
    of the day announces the payments due; later ones warn that they are
    still unpaid.
    """
    if now.minute != 0 or now.hour < reminder_hour:
        return None

    pending = due_today(payments, now.date())
    if not pending:
        return None

    kind = ReminderKind.DUE_TODAY if now.hour == reminder_hour else ReminderKind.STILL_UNPAID
    return Reminder(kind=kind, payments=tuple(pending))


class Notifier(ABC):
    """Delivers reminders to the user."""

    @abstractmethod
    def send(self, title: str, body: str) -> None:
        """Deliver a single notification."""
        pass

    def notify(self, reminder: Reminder) -> None:
        self.send(reminder.title, reminder.body)
