"""Month grid for the calendar view: tasks and bills bucketed by due day."""

import calendar as _cal
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Iterable, List, Optional, Tuple, Union

from .models import Bill, Task

WEEKDAY_LABELS = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]


@dataclass
class DayCell:
    day: date
    tasks: List[Task] = field(default_factory=list)
    bills: List[Bill] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.tasks and not self.bills

    @property
    def count(self) -> int:
        return len(self.tasks) + len(self.bills)


@dataclass
class MonthGrid:
    """Sunday-first grid; blank cells are None."""

    year: int
    month: int
    cells: List[Optional[DayCell]]

    @property
    def days(self) -> List[DayCell]:
        return [c for c in self.cells if c is not None]

    @property
    def weeks(self) -> List[List[Optional[DayCell]]]:
        return [self.cells[i:i + 7] for i in range(0, len(self.cells), 7)]

    @property
    def title(self) -> str:
        return date(self.year, self.month, 1).strftime("%B %Y")


def _as_date(value: Union[date, datetime]) -> date:
    return value.date() if isinstance(value, datetime) else value


def sunday_index(day: date) -> int:
    """Weekday index with Sunday = 0."""
    return (day.weekday() + 1) % 7


def month_days(reference: Union[date, datetime]) -> List[date]:
    """Every calendar day of the month containing ``reference``."""
    ref = _as_date(reference)
    _, count = _cal.monthrange(ref.year, ref.month)
    return [date(ref.year, ref.month, d) for d in range(1, count + 1)]


def padding(first_day: date, day_count: int) -> Tuple[int, int]:
    """Leading and trailing blank cells that make whole weeks."""
    leading = sunday_index(first_day)
    trailing = (7 - (leading + day_count) % 7) % 7
    return leading, trailing


def items_for_day(
    day: date,
    tasks: Iterable[Task],
    bills: Iterable[Bill],
) -> Tuple[List[Task], List[Bill]]:
    """Tasks and bills due on ``day``, ignoring time of day."""
    day_tasks = [t for t in tasks if t.due_date and t.due_date.date() == day]
    day_bills = [b for b in bills if b.due_date.date() == day]
    return day_tasks, day_bills


def build_month(
    reference: Union[date, datetime],
    tasks: Iterable[Task],
    bills: Iterable[Bill],
) -> MonthGrid:
    """
    Bucket tasks and bills into the month grid containing ``reference``.

    Items due outside the month are not placed anywhere.
    """
    days = month_days(reference)
    tasks = list(tasks)
    bills = list(bills)

    by_day = {d: DayCell(d) for d in days}
    for t in tasks:
        if t.due_date and t.due_date.date() in by_day:
            by_day[t.due_date.date()].tasks.append(t)
    for b in bills:
        if b.due_date.date() in by_day:
            by_day[b.due_date.date()].bills.append(b)

    leading, trailing = padding(days[0], len(days))
    cells: List[Optional[DayCell]] = [None] * leading
    cells.extend(by_day[d] for d in days)
    cells.extend([None] * trailing)
    return MonthGrid(year=days[0].year, month=days[0].month, cells=cells)


def previous_month(reference: Union[date, datetime]) -> date:
    ref = _as_date(reference)
    if ref.month == 1:
        return date(ref.year - 1, 12, 1)
    return date(ref.year, ref.month - 1, 1)


def next_month(reference: Union[date, datetime]) -> date:
    ref = _as_date(reference)
    if ref.month == 12:
        return date(ref.year + 1, 1, 1)
    return date(ref.year, ref.month + 1, 1)
