"""Pure list projection (filter + sort) for the task and bill views.

No I/O: every function takes the full collection plus the active criteria
and returns a new list. Nothing is cached between calls.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Iterable, List, Literal, Optional, Tuple

from .models import Bill, Task

Direction = Literal["asc", "desc"]

PRIORITY_ORDER = {"low": 1, "medium": 2, "high": 3}


@dataclass(frozen=True)
class TaskCriteria:
    """Active filters of the task list. "all" disables a filter."""

    tab: Literal["all", "pending", "completed"] = "all"
    category: str = "all"
    priority: str = "all"
    search: str = ""
    sort_by: Literal["dueDate", "priority", "createdAt"] = "dueDate"
    direction: Direction = "asc"


@dataclass(frozen=True)
class BillCriteria:
    """Active filters of the bill list. "all" disables a filter."""

    tab: Literal["all", "pending", "paid"] = "all"
    category: str = "all"
    recurring: Literal["all", "recurring", "one-time"] = "all"
    currency: str = "all"
    search: str = ""
    sort_by: Literal["dueDate", "amount", "createdAt"] = "dueDate"
    direction: Direction = "asc"


def matches_search(query: str, *fields: Optional[str]) -> bool:
    """Case-insensitive substring match against any present field."""
    if not query:
        return True
    needle = query.lower()
    return any(f is not None and needle in f.lower() for f in fields)


def _sort(items: list, key: Callable, direction: Direction) -> list:
    return sorted(items, key=key, reverse=direction == "desc")


def _due_key(due: Optional[datetime]) -> Tuple[int, float]:
    # Undated items sort after dated ones; reversing puts them first.
    if due is None:
        return (1, 0.0)
    return (0, due.timestamp())


def filter_tasks(tasks: Iterable[Task], criteria: TaskCriteria) -> List[Task]:
    result = list(tasks)

    if criteria.tab == "pending":
        result = [t for t in result if not t.completed]
    elif criteria.tab == "completed":
        result = [t for t in result if t.completed]

    if criteria.category != "all":
        result = [t for t in result if t.category == criteria.category]

    if criteria.priority != "all":
        result = [t for t in result if t.priority == criteria.priority]

    return [t for t in result if matches_search(criteria.search, t.title, t.description)]


def sort_tasks(tasks: Iterable[Task], sort_by: str = "dueDate", direction: Direction = "asc") -> List[Task]:
    if sort_by == "dueDate":
        key = lambda t: _due_key(t.due_date)
    elif sort_by == "priority":
        key = lambda t: PRIORITY_ORDER.get(t.priority, 0)
    else:
        key = lambda t: t.created_at.timestamp()
    return _sort(list(tasks), key, direction)


def project_tasks(tasks: Iterable[Task], criteria: TaskCriteria) -> List[Task]:
    """Filter then sort tasks for display."""
    return sort_tasks(filter_tasks(tasks, criteria), criteria.sort_by, criteria.direction)


def filter_bills(bills: Iterable[Bill], criteria: BillCriteria) -> List[Bill]:
    result = list(bills)

    if criteria.tab == "pending":
        result = [b for b in result if not b.is_paid]
    elif criteria.tab == "paid":
        result = [b for b in result if b.is_paid]

    if criteria.category != "all":
        result = [b for b in result if b.category == criteria.category]

    if criteria.recurring == "recurring":
        result = [b for b in result if b.is_recurring]
    elif criteria.recurring != "all":
        result = [b for b in result if not b.is_recurring]

    if criteria.currency != "all":
        result = [b for b in result if b.currency == criteria.currency]

    return [b for b in result if matches_search(criteria.search, b.title, b.notes)]


def sort_bills(bills: Iterable[Bill], sort_by: str = "dueDate", direction: Direction = "asc") -> List[Bill]:
    if sort_by == "dueDate":
        key = lambda b: _due_key(b.due_date)
    elif sort_by == "amount":
        key = lambda b: b.amount
    else:
        key = lambda b: b.created_at.timestamp()
    return _sort(list(bills), key, direction)


def project_bills(bills: Iterable[Bill], criteria: BillCriteria) -> List[Bill]:
    """Filter then sort bills for display."""
    return sort_bills(filter_bills(bills, criteria), criteria.sort_by, criteria.direction)
