"""JournalEntry data model."""

from datetime import date as date_type
from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field

Grade = Literal["A", "B", "C", "D", "F"]

GRADES: tuple[str, ...] = ("A", "B", "C", "D", "F")


class JournalEntry(BaseModel):
    """Represents a daily trading journal entry."""

    id: Optional[int] = Field(default=None, description="Database ID")
    date: date_type = Field(..., description="Journal entry date")
    premarket_plan: Optional[str] = Field(default=None, description="Premarket plan")
    postmarket_review: Optional[str] = Field(default=None, description="Postmarket review")
    market_context: Optional[str] = Field(default=None, description="Market context")
    grade: Optional[Grade] = Field(default=None, description="Letter grade for the day")
    created_at: Optional[datetime] = Field(default=None, description="Creation timestamp")
    updated_at: Optional[datetime] = Field(default=None, description="Last update timestamp")

    model_config = {"frozen": True}
