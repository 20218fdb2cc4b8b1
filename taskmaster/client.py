"""HTTP client for the TaskMaster API.

Every call is one independent request: no retries, no de-duplication and
no cancellation. Concurrent updates to the same entity race and the last
response to land wins.
"""

import logging
from typing import Any, Dict, List, Optional

import requests
from pydantic import ValidationError

from . import config
from .models import Bill, Task

logger = logging.getLogger("taskmaster.client")


class ApiError(Exception):
    """The server answered with an error body or could not be reached."""

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.status = status


class NotFoundError(ApiError):
    pass


class TaskMasterClient:
    def __init__(self, base_url: Optional[str] = None, timeout: float = 10,
                 session: Optional[requests.Session] = None):
        self.base_url = (base_url or config.API_URL).rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def _request(self, method: str, path: str, json: Optional[Dict[str, Any]] = None) -> Any:
        url = f"{self.base_url}{path}"
        logger.debug("%s %s", method, url)
        try:
            resp = self.session.request(method, url, json=json, timeout=self.timeout)
        except requests.RequestException as e:
            raise ApiError(f"{method} {path} failed: {e}") from e

        if resp.status_code == 404:
            raise NotFoundError(self._error_message(resp), status=404)
        if not resp.ok:
            raise ApiError(self._error_message(resp), status=resp.status_code)
        try:
            return resp.json()
        except ValueError as e:
            raise ApiError(f"{method} {path} returned a non-JSON body", status=resp.status_code) from e

    @staticmethod
    def _error_message(resp: requests.Response) -> str:
        try:
            body = resp.json()
        except ValueError:
            return resp.reason or f"HTTP {resp.status_code}"
        if isinstance(body, dict) and body.get("error"):
            return body["error"]
        return resp.reason or f"HTTP {resp.status_code}"

    @staticmethod
    def _parse(model, data: Any):
        try:
            return model.model_validate(data)
        except ValidationError as e:
            logger.warning("Malformed %s in response: %s", model.__name__, e)
            raise ApiError(f"Malformed {model.__name__} in response") from e

    def _parse_list(self, model, data: Any) -> list:
        if not isinstance(data, list):
            raise ApiError(f"Expected a list of {model.__name__} in response")
        return [self._parse(model, item) for item in data]

    # ---- tasks ----

    def list_tasks(self) -> List[Task]:
        return self._parse_list(Task, self._request("GET", "/tasks"))

    def get_task(self, task_id: str) -> Task:
        return self._parse(Task, self._request("GET", f"/tasks/{task_id}"))

    def create_task(self, payload: Dict[str, Any]) -> Task:
        return self._parse(Task, self._request("POST", "/tasks", json=payload))

    def update_task(self, task_id: str, changes: Dict[str, Any]) -> Task:
        return self._parse(Task, self._request("PATCH", f"/tasks/{task_id}", json=changes))

    def delete_task(self, task_id: str) -> None:
        self._request("DELETE", f"/tasks/{task_id}")

    # ---- bills ----

    def list_bills(self) -> List[Bill]:
        return self._parse_list(Bill, self._request("GET", "/bills"))

    def get_bill(self, bill_id: str) -> Bill:
        return self._parse(Bill, self._request("GET", f"/bills/{bill_id}"))

    def create_bill(self, payload: Dict[str, Any]) -> Bill:
        return self._parse(Bill, self._request("POST", "/bills", json=payload))

    def update_bill(self, bill_id: str, changes: Dict[str, Any]) -> Bill:
        return self._parse(Bill, self._request("PATCH", f"/bills/{bill_id}", json=changes))

    def delete_bill(self, bill_id: str) -> None:
        self._request("DELETE", f"/bills/{bill_id}")

    def dashboard(self) -> Dict[str, Any]:
        return self._request("GET", "/dashboard")
