"""TaskMaster: tasks, bill payments and a calendar over a small HTTP API."""

__version__ = "0.1.0"
