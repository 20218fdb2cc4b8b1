"""HTTP endpoint tests against a temporary database."""

from datetime import datetime, timedelta, timezone
from unittest.mock import patch

import pytest

from taskmaster import config


def create_task(api, **fields):
    body = {"title": "Write report", **fields}
    resp = api.post("/tasks", json=body)
    assert resp.status_code == 201
    return resp.json()


def create_bill(api, **fields):
    body = {"title": "Rent", "amount": 25000, "dueDate": "2024-01-05T00:00:00Z", **fields}
    resp = api.post("/bills", json=body)
    assert resp.status_code == 201
    return resp.json()


class TestHealth:
    def test_root(self, api):
        data = api.get("/").json()
        assert data["ok"] is True
        assert data["service"] == "TaskMaster"
        assert "db_path" not in data

    def test_debug_exposes_db_path(self, api, monkeypatch, db_path):
        monkeypatch.setattr(config, "DEBUG_MODE", True)
        assert api.get("/health").json()["db_path"] == str(db_path)


class TestTaskEndpoints:
    def test_create_applies_defaults(self, api):
        task = create_task(api)
        assert task["priority"] == "medium"
        assert task["category"] == "personal"
        assert task["completed"] is False
        assert task["dueDate"] is None
        assert task["id"] and task["createdAt"]

    def test_create_uses_configured_defaults(self, api, monkeypatch):
        monkeypatch.setattr(config, "DEFAULT_PRIORITY", "high")
        monkeypatch.setattr(config, "DEFAULT_TASK_CATEGORY", "official")
        task = create_task(api)
        assert (task["priority"], task["category"]) == ("high", "official")

    def test_list_and_get(self, api):
        first = create_task(api, dueDate="2024-01-02T00:00:00Z")
        second = create_task(api, title="Call plumber", dueDate="2024-01-01T00:00:00Z")
        listed = api.get("/tasks").json()
        assert [t["id"] for t in listed] == [second["id"], first["id"]]
        assert api.get(f"/tasks/{first['id']}").json() == first

    def test_get_missing(self, api):
        resp = api.get("/tasks/nope")
        assert resp.status_code == 404
        assert resp.json() == {"error": "Task not found"}

    def test_patch_partial(self, api):
        task = create_task(api, description="numbers")
        resp = api.patch(f"/tasks/{task['id']}", json={"completed": True})
        assert resp.status_code == 200
        body = resp.json()
        assert body["completed"] is True
        assert body["description"] == "numbers"
        assert body["createdAt"] == task["createdAt"]

    def test_patch_missing(self, api):
        resp = api.patch("/tasks/nope", json={"completed": True})
        assert resp.status_code == 404
        assert resp.json() == {"error": "Task not found"}

    def test_patch_unknown_field_is_generic_failure(self, api):
        task = create_task(api)
        resp = api.patch(f"/tasks/{task['id']}", json={"owner": "me"})
        assert resp.status_code == 500
        assert resp.json() == {"error": "Failed to update task"}

    def test_delete(self, api):
        task = create_task(api)
        assert api.delete(f"/tasks/{task['id']}").json() == {"success": True}
        assert api.get(f"/tasks/{task['id']}").status_code == 404
        assert api.delete(f"/tasks/{task['id']}").status_code == 404

    def test_malformed_payload_is_500(self, api):
        resp = api.post("/tasks", json={"description": "no title"})
        assert resp.status_code == 500
        assert resp.json() == {"error": "Invalid request payload"}

    def test_store_failure_hides_details(self, api):
        with patch("taskmaster.main.list_tasks", side_effect=RuntimeError("disk on fire")):
            resp = api.get("/tasks")
        assert resp.status_code == 500
        assert resp.json() == {"error": "Failed to fetch tasks"}


class TestBillEndpoints:
    def test_create_applies_defaults(self, api):
        bill = create_bill(api)
        assert bill["currency"] == "INR"
        assert bill["isPaid"] is False
        assert bill["isRecurring"] is False
        assert bill["recurringType"] is None
        assert bill["category"] == "utility"
        assert bill["dueDate"].startswith("2024-01-05T00:00:00")

    def test_server_does_not_validate_amount(self, api):
        # The form schema is the only place amounts are checked
        assert create_bill(api, amount=-5)["amount"] == -5

    def test_list_unpaid_first(self, api):
        paid = create_bill(api, title="Paid", isPaid=True, dueDate="2024-01-01T00:00:00Z")
        open_ = create_bill(api, title="Open", dueDate="2024-02-01T00:00:00Z")
        assert [b["id"] for b in api.get("/bills").json()] == [open_["id"], paid["id"]]

    def test_toggle_paid(self, api):
        bill = create_bill(api)
        assert api.patch(f"/bills/{bill['id']}", json={"isPaid": True}).json()["isPaid"] is True
        assert api.get(f"/bills/{bill['id']}").json()["isPaid"] is True

    def test_get_missing(self, api):
        resp = api.get("/bills/nope")
        assert resp.status_code == 404
        assert resp.json() == {"error": "Bill not found"}

    def test_delete_missing(self, api):
        resp = api.delete("/bills/nope")
        assert resp.status_code == 404

    def test_patch_created_at_refused(self, api):
        bill = create_bill(api)
        resp = api.patch(f"/bills/{bill['id']}", json={"createdAt": "2020-01-01T00:00:00Z"})
        assert resp.status_code == 500
        assert api.get(f"/bills/{bill['id']}").json()["createdAt"] == bill["createdAt"]


class TestDashboard:
    def test_summary(self, api):
        soon = (datetime.now(timezone.utc) + timedelta(days=2)).isoformat()
        create_task(api, title="Soon", dueDate=soon)
        done = create_task(api, title="Done")
        api.patch(f"/tasks/{done['id']}", json={"completed": True})
        create_bill(api, title="Rent", amount=1000, dueDate=soon)
        create_bill(api, title="Cloud", amount=20, currency="USD", dueDate=soon)
        create_bill(api, title="Old", amount=300, isPaid=True)

        data = api.get("/dashboard").json()
        assert data["tasksCount"] == 2
        assert data["completedTasksCount"] == 1
        assert data["pendingTasksCount"] == 1
        assert data["billsCount"] == 3
        assert data["paidBillsCount"] == 1
        assert data["pendingBillsCount"] == 2
        assert [t["title"] for t in data["upcomingTasks"]] == ["Soon"]
        assert sorted(b["title"] for b in data["upcomingBills"]) == ["Cloud", "Rent"]
        assert data["totalPendingAmount"] == 1020
        assert data["pendingByCurrency"] == {"INR": 1000, "USD": 20}

    def test_failure(self, api):
        with patch("taskmaster.main.list_bills", side_effect=RuntimeError("boom")):
            resp = api.get("/dashboard")
        assert resp.status_code == 500
        assert resp.json() == {"error": "Failed to load dashboard"}
