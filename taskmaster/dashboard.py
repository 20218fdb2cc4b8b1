"""Read-side dashboard aggregation. Nothing here is persisted."""

from collections import defaultdict
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Dict, Iterable, List, Optional

from . import config
from .models import Bill, Task, as_utc, utcnow


@dataclass
class Dashboard:
    tasks_count: int
    completed_tasks_count: int
    pending_tasks_count: int
    bills_count: int
    paid_bills_count: int
    pending_bills_count: int
    upcoming_tasks: List[Task]
    upcoming_bills: List[Bill]
    # Sum across currencies without conversion, as the UI has always shown it.
    total_pending_amount: float
    pending_by_currency: Dict[str, float] = field(default_factory=dict)


def upcoming_tasks(
    tasks: Iterable[Task],
    now: datetime,
    days: int = 7,
    limit: int = 5,
) -> List[Task]:
    """Open tasks due between now and now + days, soonest first."""
    until = now + timedelta(days=days)
    due = [t for t in tasks if not t.completed and t.due_date and now <= t.due_date <= until]
    return sorted(due, key=lambda t: t.due_date)[:limit]


def upcoming_bills(
    bills: Iterable[Bill],
    now: datetime,
    days: int = 30,
    limit: int = 5,
) -> List[Bill]:
    """Unpaid bills due between now and now + days, soonest first."""
    until = now + timedelta(days=days)
    due = [b for b in bills if not b.is_paid and now <= b.due_date <= until]
    return sorted(due, key=lambda b: b.due_date)[:limit]


def pending_amount(bills: Iterable[Bill]) -> float:
    return float(sum(b.amount for b in bills if not b.is_paid))


def pending_amount_by_currency(bills: Iterable[Bill]) -> Dict[str, float]:
    totals: Dict[str, float] = defaultdict(float)
    for b in bills:
        if not b.is_paid:
            totals[b.currency] += b.amount
    return dict(totals)


def summarize(
    tasks: Iterable[Task],
    bills: Iterable[Bill],
    now: Optional[datetime] = None,
) -> Dashboard:
    tasks = list(tasks)
    bills = list(bills)
    now = as_utc(now) if now else utcnow()

    completed = sum(1 for t in tasks if t.completed)
    paid = sum(1 for b in bills if b.is_paid)

    return Dashboard(
        tasks_count=len(tasks),
        completed_tasks_count=completed,
        pending_tasks_count=len(tasks) - completed,
        bills_count=len(bills),
        paid_bills_count=paid,
        pending_bills_count=len(bills) - paid,
        upcoming_tasks=upcoming_tasks(tasks, now, config.TASK_WINDOW_DAYS, config.UPCOMING_LIMIT),
        upcoming_bills=upcoming_bills(bills, now, config.BILL_WINDOW_DAYS, config.UPCOMING_LIMIT),
        total_pending_amount=pending_amount(bills),
        pending_by_currency=pending_amount_by_currency(bills),
    )
