"""Strategic fact models."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field


class StrategicFact(BaseModel):
    """The live, mutable record whose history is tracked."""

    record_id: str
    fields: dict[str, Any] = Field(default_factory=dict)
    version: int = 1
    created_at: datetime | None = None
    updated_at: datetime | None = None
