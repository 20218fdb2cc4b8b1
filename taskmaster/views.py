"""View-models behind the task, bill and calendar pages.

Each list view keeps the collection it last fetched plus the active criteria.
The displayed projection is computed on demand from those two; nothing
derived is stored. Card and form actions call the API, report the outcome
through ``notify`` and refresh the collection.
"""

import logging
from dataclasses import replace
from datetime import date, datetime
from typing import Any, Callable, Dict, Iterable, List, Optional, Union

from . import calendar
from .client import ApiError, TaskMasterClient
from .forms import BillForm, TaskForm
from .models import Bill, Task, utcnow
from .projection import BillCriteria, TaskCriteria, project_bills, project_tasks

logger = logging.getLogger("taskmaster.views")

Notifier = Callable[[str, str], None]


def log_notification(level: str, message: str) -> None:
    """Default notifier: the toast goes to the log."""
    logger.log(logging.ERROR if level == "error" else logging.INFO, message)


def _seed(form, entity, values: Dict[str, Any]) -> Dict[str, Any]:
    # Edit forms start from the stored entity
    if entity is None:
        return values
    current = entity.model_dump(include=set(form.model_fields), by_alias=True)
    return {**current, **values}


class _ListView:
    entity = "item"

    def __init__(self, client: TaskMasterClient, notify: Optional[Notifier] = None):
        self.client = client
        self.notify = notify or log_notification

    def _fetch(self) -> list:
        raise NotImplementedError

    def refresh(self) -> bool:
        try:
            self.items_all = self._fetch()
        except ApiError as e:
            logger.error("Error fetching %ss: %s", self.entity, e)
            self.notify("error", f"Failed to load {self.entity}s")
            return False
        return True

    def _run(self, action: Callable[[], Any], success: str, failure: str) -> bool:
        try:
            action()
        except ApiError as e:
            logger.error("%s: %s", failure, e)
            self.notify("error", failure)
            return False
        self.notify("success", success)
        self.refresh()
        return True

    def set_criteria(self, **changes) -> None:
        self.criteria = replace(self.criteria, **changes)

    def toggle_sort_direction(self) -> None:
        self.set_criteria(direction="desc" if self.criteria.direction == "asc" else "asc")


class TaskListView(_ListView):
    entity = "task"

    def __init__(self, client: TaskMasterClient, tasks: Optional[Iterable[Task]] = None,
                 notify: Optional[Notifier] = None):
        super().__init__(client, notify)
        self.items_all: List[Task] = list(tasks or [])
        self.criteria = TaskCriteria()

    def _fetch(self) -> List[Task]:
        return self.client.list_tasks()

    @property
    def items(self) -> List[Task]:
        return project_tasks(self.items_all, self.criteria)

    @property
    def pending_count(self) -> int:
        return sum(1 for t in self.items_all if not t.completed)

    @property
    def completed_count(self) -> int:
        return sum(1 for t in self.items_all if t.completed)

    def toggle_completed(self, task: Task) -> bool:
        return self._run(
            lambda: self.client.update_task(task.id, {"completed": not task.completed}),
            "Task marked as incomplete" if task.completed else "Task completed!",
            "Failed to update task status",
        )

    def delete(self, task: Task) -> bool:
        return self._run(
            lambda: self.client.delete_task(task.id),
            "Task deleted successfully",
            "Failed to delete task",
        )

    def save(self, values: Dict[str, Any], task: Optional[Task] = None) -> bool:
        """
        Validate form values, then create or update. Raises ValidationError on bad input.

        When editing, fields missing from ``values`` keep the task's current value.
        """
        payload = TaskForm.model_validate(_seed(TaskForm, task, values)).to_payload()
        if task is None:
            return self._run(lambda: self.client.create_task(payload),
                             "Task created successfully", "Failed to save task")
        return self._run(lambda: self.client.update_task(task.id, payload),
                         "Task updated successfully", "Failed to save task")


class BillListView(_ListView):
    entity = "bill"

    def __init__(self, client: TaskMasterClient, bills: Optional[Iterable[Bill]] = None,
                 notify: Optional[Notifier] = None):
        super().__init__(client, notify)
        self.items_all: List[Bill] = list(bills or [])
        self.criteria = BillCriteria()

    def _fetch(self) -> List[Bill]:
        return self.client.list_bills()

    @property
    def items(self) -> List[Bill]:
        return project_bills(self.items_all, self.criteria)

    @property
    def pending_count(self) -> int:
        return sum(1 for b in self.items_all if not b.is_paid)

    @property
    def paid_count(self) -> int:
        return sum(1 for b in self.items_all if b.is_paid)

    @property
    def total_pending_amount(self) -> float:
        # Mixed currencies are summed as-is
        return float(sum(b.amount for b in self.items_all if not b.is_paid))

    @property
    def categories(self) -> List[str]:
        return sorted({b.category for b in self.items_all})

    @property
    def currencies(self) -> List[str]:
        return sorted({b.currency for b in self.items_all})

    def toggle_paid(self, bill: Bill) -> bool:
        return self._run(
            lambda: self.client.update_bill(bill.id, {"isPaid": not bill.is_paid}),
            "Bill marked as unpaid" if bill.is_paid else "Bill marked as paid!",
            "Failed to update bill status",
        )

    def delete(self, bill: Bill) -> bool:
        return self._run(
            lambda: self.client.delete_bill(bill.id),
            "Bill deleted successfully",
            "Failed to delete bill",
        )

    def save(self, values: Dict[str, Any], bill: Optional[Bill] = None) -> bool:
        """Validate form values, then create or update. Raises ValidationError on bad input."""
        payload = BillForm.model_validate(_seed(BillForm, bill, values)).to_payload()
        if bill is None:
            return self._run(lambda: self.client.create_bill(payload),
                             "Bill created successfully", "Failed to save bill")
        return self._run(lambda: self.client.update_bill(bill.id, payload),
                         "Bill updated successfully", "Failed to save bill")


class CalendarView:
    """Month navigation over tasks and bills fetched once."""

    def __init__(self, tasks: Iterable[Task], bills: Iterable[Bill],
                 current: Optional[Union[date, datetime]] = None):
        self.tasks = list(tasks)
        self.bills = list(bills)
        self.current = current or utcnow().date()

    @property
    def grid(self) -> calendar.MonthGrid:
        return calendar.build_month(self.current, self.tasks, self.bills)

    def previous(self) -> None:
        self.current = calendar.previous_month(self.current)

    def next(self) -> None:
        self.current = calendar.next_month(self.current)

    def today(self) -> None:
        self.current = utcnow().date()

    def select(self, day: date):
        """Tasks and bills shown in the day-detail dialog."""
        return calendar.items_for_day(day, self.tasks, self.bills)
