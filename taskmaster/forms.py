"""Form schemas checked before any create or update call is sent.

The server stores whatever it is given; these models are where titles,
amounts and enumerations are actually validated.
"""

from datetime import datetime
from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


class _Form(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_payload(self) -> Dict[str, Any]:
        """JSON body for the API, camelCase keys."""
        return self.model_dump(mode="json", by_alias=True)


class TaskForm(_Form):
    title: str = Field(min_length=1)
    description: Optional[str] = None
    due_date: Optional[datetime] = None
    priority: Literal["low", "medium", "high"] = "medium"
    category: Literal["personal", "official"] = "personal"


class BillForm(_Form):
    title: str = Field(min_length=1)
    amount: float = Field(ge=0.01)
    currency: str = "INR"
    due_date: datetime
    is_paid: bool = False
    is_recurring: bool = False
    recurring_type: Optional[Literal["daily", "weekly", "monthly", "quarterly", "yearly"]] = None
    category: Literal["utility", "insurance", "medical", "subscription", "rent", "loan", "other"] = "utility"
    notes: Optional[str] = None

    @model_validator(mode="after")
    def _recurring_type_only_when_recurring(self) -> "BillForm":
        # A recurring bill always carries a period; a one-off bill never does.
        if self.is_recurring and self.recurring_type is None:
            self.recurring_type = "monthly"
        elif not self.is_recurring:
            self.recurring_type = None
        return self
