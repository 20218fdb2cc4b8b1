from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel
from typing import Optional
from datetime import datetime, timezone
import uuid


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Naive timestamps are taken to be UTC; aware ones are converted to it."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class Entity(BaseModel):
    # camelCase on the wire, snake_case in Python and in the database
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    created_at: datetime = Field(default_factory=utcnow)

    @field_validator("created_at")
    @classmethod
    def _created_utc(cls, v):
        return as_utc(v)


class Task(Entity):
    title: str
    description: Optional[str] = None
    due_date: Optional[datetime] = None
    priority: str = "medium"     # low | medium | high
    category: str = "personal"   # personal | official
    completed: bool = False

    @field_validator("due_date")
    @classmethod
    def _due_utc(cls, v):
        return as_utc(v)


class Bill(Entity):
    title: str
    amount: float
    currency: str = "INR"
    due_date: datetime
    is_paid: bool = False
    is_recurring: bool = False
    recurring_type: Optional[str] = None  # daily | weekly | monthly | quarterly | yearly
    category: str = "utility"
    notes: Optional[str] = None

    @field_validator("due_date")
    @classmethod
    def _due_utc(cls, v):
        return as_utc(v)


class TaskIn(BaseModel):
    """Create payload; omitted fields get the configured defaults."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    title: str
    description: Optional[str] = None
    due_date: Optional[datetime] = None
    priority: Optional[str] = None
    category: Optional[str] = None


class BillIn(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    title: str
    amount: float
    currency: Optional[str] = None
    due_date: datetime
    is_paid: Optional[bool] = None
    is_recurring: Optional[bool] = None
    recurring_type: Optional[str] = None
    category: Optional[str] = None
    notes: Optional[str] = None
