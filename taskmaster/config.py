import os

from dotenv import load_dotenv

load_dotenv()

DB_PATH = (
    os.environ.get("DB_PATH")
    or os.environ.get("TASKMASTER_DB_PATH")
    or "taskmaster.sqlite3"  # fallback
)

LOG_LEVEL   = os.getenv("LOG_LEVEL", "INFO")
DEBUG_MODE  = os.getenv("TASKMASTER_DEBUG", "0") == "1"
DOCS_ENABLED = os.getenv("TASKMASTER_DOCS", "0") == "1"
CORS_ORIGINS = [o for o in os.getenv("TASKMASTER_CORS", "").split(",") if o]

# Create-time defaults (the settings page of the UI edits these)
DEFAULT_PRIORITY      = os.getenv("TASKMASTER_DEFAULT_PRIORITY", "medium")
DEFAULT_TASK_CATEGORY = os.getenv("TASKMASTER_DEFAULT_TASK_CATEGORY", "personal")
DEFAULT_BILL_CATEGORY = os.getenv("TASKMASTER_DEFAULT_BILL_CATEGORY", "utility")
DEFAULT_CURRENCY      = os.getenv("TASKMASTER_DEFAULT_CURRENCY", "INR")

# Dashboard "due soon" windows
TASK_WINDOW_DAYS = int(os.getenv("TASKMASTER_TASK_WINDOW_DAYS", "7"))
BILL_WINDOW_DAYS = int(os.getenv("TASKMASTER_BILL_WINDOW_DAYS", "30"))
UPCOMING_LIMIT   = int(os.getenv("TASKMASTER_UPCOMING_LIMIT", "5"))

API_URL = os.getenv("TASKMASTER_API_URL", "http://127.0.0.1:4051")
HOST    = os.getenv("TASKMASTER_HOST", "127.0.0.1")
PORT    = int(os.getenv("TASKMASTER_PORT", "4051"))
