import sqlite3
from datetime import datetime
from typing import List, Dict, Any, Optional, Type, TypeVar

from pydantic import ValidationError

from . import config
from .models import Entity, Task, Bill


E = TypeVar("E", bound=Entity)


class StoreError(Exception):
    """Storage rejected the operation."""


class NotFoundError(StoreError):
    pass


def get_conn():
    conn = sqlite3.connect(config.DB_PATH)
    conn.row_factory = sqlite3.Row
    return conn

def init_db():
    conn = get_conn()
    cur = conn.cursor()
    cur.execute("""
    CREATE TABLE IF NOT EXISTS tasks (
        id TEXT PRIMARY KEY,
        title TEXT NOT NULL,
        description TEXT,
        due_date TEXT,
        priority TEXT NOT NULL DEFAULT 'medium',
        category TEXT NOT NULL DEFAULT 'personal',
        completed INTEGER NOT NULL DEFAULT 0,
        created_at TEXT NOT NULL
    )
    """)
    cur.execute("""
    CREATE TABLE IF NOT EXISTS bills (
        id TEXT PRIMARY KEY,
        title TEXT NOT NULL,
        amount REAL NOT NULL,
        currency TEXT NOT NULL DEFAULT 'INR',
        due_date TEXT NOT NULL,
        is_paid INTEGER NOT NULL DEFAULT 0,
        is_recurring INTEGER NOT NULL DEFAULT 0,
        recurring_type TEXT,
        category TEXT NOT NULL DEFAULT 'utility',
        notes TEXT,
        created_at TEXT NOT NULL
    )
    """)
    conn.commit()
    conn.close()

# ----------------------------
# Generic helpers
# ----------------------------
_ORDER_BY = {
    "tasks": "completed ASC, due_date ASC, created_at DESC",
    "bills": "is_paid ASC, due_date ASC, created_at DESC",
}

def _to_row(entity: Entity) -> Dict[str, Any]:
    row = entity.model_dump()
    for key, value in row.items():
        if isinstance(value, datetime):
            row[key] = value.isoformat()
    return row

def _insert(table: str, entity: Entity) -> None:
    row = _to_row(entity)
    cols = ", ".join(row)
    params = ", ".join(f":{c}" for c in row)
    conn = get_conn()
    try:
        conn.execute(f"INSERT INTO {table} ({cols}) VALUES ({params})", row)
        conn.commit()
    finally:
        conn.close()

def _list(table: str, model: Type[E]) -> List[E]:
    conn = get_conn()
    try:
        rows = conn.execute(f"SELECT * FROM {table} ORDER BY {_ORDER_BY[table]}").fetchall()
    finally:
        conn.close()
    return [model.model_validate(dict(r)) for r in rows]

def _get(table: str, model: Type[E], entity_id: str) -> Optional[E]:
    conn = get_conn()
    try:
        row = conn.execute(f"SELECT * FROM {table} WHERE id = ?", (entity_id,)).fetchone()
    finally:
        conn.close()
    return model.model_validate(dict(row)) if row else None

def _column_names(model: Type[Entity]) -> Dict[str, str]:
    """Map every accepted key (field name or camelCase alias) to its column."""
    names = {}
    for name, field in model.model_fields.items():
        if name in ("id", "created_at"):
            continue
        names[name] = name
        if field.alias:
            names[field.alias] = name
    return names

def _update(table: str, model: Type[E], entity_id: str, changes: Dict[str, Any]) -> E:
    columns = _column_names(model)
    unknown = [k for k in changes if k not in columns]
    if unknown:
        raise StoreError(f"Unknown or read-only fields for {table}: {', '.join(unknown)}")

    current = _get(table, model, entity_id)
    if current is None:
        raise NotFoundError(entity_id)

    patch = {columns[k]: v for k, v in changes.items()}
    try:
        updated = model.model_validate({**current.model_dump(), **patch})
    except ValidationError as e:
        raise StoreError(f"Invalid values for {table}: {e}") from e
    if not patch:
        return updated

    row = _to_row(updated)
    assignments = ", ".join(f"{c} = :{c}" for c in patch)
    values = {c: row[c] for c in patch}
    values["id"] = entity_id
    conn = get_conn()
    try:
        conn.execute(f"UPDATE {table} SET {assignments} WHERE id = :id", values)
        conn.commit()
    finally:
        conn.close()
    return updated

def _delete(table: str, entity_id: str) -> None:
    conn = get_conn()
    try:
        cur = conn.execute(f"DELETE FROM {table} WHERE id = ?", (entity_id,))
        conn.commit()
        ok = cur.rowcount > 0
    finally:
        conn.close()
    if not ok:
        raise NotFoundError(entity_id)

# ----------------------------
# Tasks
# ----------------------------
def insert_task(task: Task) -> Task:
    _insert("tasks", task)
    return task

def list_tasks() -> List[Task]:
    return _list("tasks", Task)

def get_task(task_id: str) -> Optional[Task]:
    return _get("tasks", Task, task_id)

def update_task(task_id: str, changes: Dict[str, Any]) -> Task:
    return _update("tasks", Task, task_id, changes)

def delete_task(task_id: str) -> None:
    _delete("tasks", task_id)

# ----------------------------
# Bills
# ----------------------------
def insert_bill(bill: Bill) -> Bill:
    _insert("bills", bill)
    return bill

def list_bills() -> List[Bill]:
    return _list("bills", Bill)

def get_bill(bill_id: str) -> Optional[Bill]:
    return _get("bills", Bill, bill_id)

def update_bill(bill_id: str, changes: Dict[str, Any]) -> Bill:
    return _update("bills", Bill, bill_id, changes)

def delete_bill(bill_id: str) -> None:
    _delete("bills", bill_id)
