# taskmaster/main.py
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List

from fastapi import FastAPI, Body, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from . import config
from .dashboard import Dashboard, summarize
from .db import (
    NotFoundError,
    init_db,
    insert_task, list_tasks, get_task, update_task, delete_task,
    insert_bill, list_bills, get_bill, update_bill, delete_bill,
)
from .models import Task, TaskIn, Bill, BillIn

# ----------------------------
# App bootstrap (docs toggle)
# ----------------------------
app = FastAPI(
    title="TaskMaster",
    version="0.1.0",
    docs_url="/docs" if config.DOCS_ENABLED else None,
    redoc_url=None,
    openapi_url="/openapi.json" if config.DOCS_ENABLED else None,
)

# CORS
if config.CORS_ORIGINS:
    # Credentials + explicit origins
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_methods=["GET", "POST", "PATCH", "DELETE"],
        allow_headers=["*"],
        allow_credentials=True,
    )
else:
    # No credentials when wildcard origins
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST", "PATCH", "DELETE"],
        allow_headers=["*"],
        allow_credentials=False,
    )

# Logging
logging.basicConfig(level=config.LOG_LEVEL)
logger = logging.getLogger("taskmaster")

# ----------------------------
# Lifecycle
# ----------------------------
@app.on_event("startup")
def _startup():
    init_db()
    logger.info("TaskMaster startup: DB_PATH=%s", config.DB_PATH)
    logger.info(
        "Config: DOCS=%s CORS=%s defaults=%s/%s/%s/%s",
        config.DOCS_ENABLED,
        ",".join(config.CORS_ORIGINS) or "*",
        config.DEFAULT_PRIORITY,
        config.DEFAULT_TASK_CATEGORY,
        config.DEFAULT_BILL_CATEGORY,
        config.DEFAULT_CURRENCY,
    )

# ----------------------------
# Error bodies
# ----------------------------
def error(message: str, status_code: int) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code)

def failure(message: str) -> JSONResponse:
    # Details go to the log only
    logger.exception("%s", message)
    return error(message, 500)

@app.exception_handler(RequestValidationError)
async def _invalid_payload(request: Request, exc: RequestValidationError):
    logger.warning("Rejected payload for %s %s: %s", request.method, request.url.path, exc.errors())
    return error("Invalid request payload", 500)

def dashboard_payload(d: Dashboard) -> Dict[str, Any]:
    return {
        "tasksCount": d.tasks_count,
        "completedTasksCount": d.completed_tasks_count,
        "pendingTasksCount": d.pending_tasks_count,
        "billsCount": d.bills_count,
        "paidBillsCount": d.paid_bills_count,
        "pendingBillsCount": d.pending_bills_count,
        "upcomingTasks": [t.model_dump(mode="json", by_alias=True) for t in d.upcoming_tasks],
        "upcomingBills": [b.model_dump(mode="json", by_alias=True) for b in d.upcoming_bills],
        "totalPendingAmount": d.total_pending_amount,
        "pendingByCurrency": d.pending_by_currency,
    }

# ----------------------------
# Health
# ----------------------------
@app.get("/", summary="Health (root)")
def root_health():
    payload = {
        "ok": True,
        "service": app.title,
        "time": datetime.now(timezone.utc).isoformat(),
    }
    if config.DEBUG_MODE:
        payload["db_path"] = config.DB_PATH
    return payload

@app.get("/health", summary="Health")
def health():
    # Alias for convenience
    return root_health()

# ----------------------------
# Tasks
# ----------------------------
@app.get("/tasks", response_model=List[Task], summary="List tasks")
def get_tasks():
    try:
        return list_tasks()
    except Exception:
        return failure("Failed to fetch tasks")

@app.post("/tasks", response_model=Task, status_code=201, summary="Create a task")
def create_task(data: TaskIn):
    try:
        task = Task(
            title=data.title,
            description=data.description,
            due_date=data.due_date,
            priority=data.priority or config.DEFAULT_PRIORITY,
            category=data.category or config.DEFAULT_TASK_CATEGORY,
        )
        return insert_task(task)
    except Exception:
        return failure("Failed to create task")

@app.get("/tasks/{task_id}", response_model=Task, summary="Get a task")
def read_task(task_id: str):
    try:
        task = get_task(task_id)
    except Exception:
        return failure("Failed to fetch task")
    if task is None:
        return error("Task not found", 404)
    return task

@app.patch("/tasks/{task_id}", response_model=Task, summary="Update task fields")
def patch_task(task_id: str, data: Dict[str, Any] = Body(...)):
    try:
        return update_task(task_id, data)
    except NotFoundError:
        return error("Task not found", 404)
    except Exception:
        return failure("Failed to update task")

@app.delete("/tasks/{task_id}", summary="Delete a task")
def remove_task(task_id: str):
    try:
        delete_task(task_id)
    except NotFoundError:
        return error("Task not found", 404)
    except Exception:
        return failure("Failed to delete task")
    return {"success": True}

# ----------------------------
# Bills
# ----------------------------
@app.get("/bills", response_model=List[Bill], summary="List bills")
def get_bills():
    try:
        return list_bills()
    except Exception:
        return failure("Failed to fetch bills")

@app.post("/bills", response_model=Bill, status_code=201, summary="Create a bill")
def create_bill(data: BillIn):
    try:
        bill = Bill(
            title=data.title,
            amount=data.amount,
            currency=data.currency or config.DEFAULT_CURRENCY,
            due_date=data.due_date,
            is_paid=data.is_paid or False,
            is_recurring=data.is_recurring or False,
            recurring_type=data.recurring_type,
            category=data.category or config.DEFAULT_BILL_CATEGORY,
            notes=data.notes,
        )
        return insert_bill(bill)
    except Exception:
        return failure("Failed to create bill")

@app.get("/bills/{bill_id}", response_model=Bill, summary="Get a bill")
def read_bill(bill_id: str):
    try:
        bill = get_bill(bill_id)
    except Exception:
        return failure("Failed to fetch bill")
    if bill is None:
        return error("Bill not found", 404)
    return bill

@app.patch("/bills/{bill_id}", response_model=Bill, summary="Update bill fields")
def patch_bill(bill_id: str, data: Dict[str, Any] = Body(...)):
    try:
        return update_bill(bill_id, data)
    except NotFoundError:
        return error("Bill not found", 404)
    except Exception:
        return failure("Failed to update bill")

@app.delete("/bills/{bill_id}", summary="Delete a bill")
def remove_bill(bill_id: str):
    try:
        delete_bill(bill_id)
    except NotFoundError:
        return error("Bill not found", 404)
    except Exception:
        return failure("Failed to delete bill")
    return {"success": True}

# ----------------------------
# Dashboard
# ----------------------------
@app.get("/dashboard", summary="Counts, totals and upcoming items")
def dashboard():
    try:
        d = summarize(list_tasks(), list_bills())
    except Exception:
        return failure("Failed to load dashboard")
    return dashboard_payload(d)
