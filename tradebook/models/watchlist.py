"""WatchlistItem data model."""

from datetime import date as date_type
from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field

Bias = Literal["long", "short", "neutral"]
WatchStatus = Literal["watching", "triggered", "skipped", "missed"]

BIASES: tuple[str, ...] = ("long", "short", "neutral")


class WatchlistItem(BaseModel):
    """Represents a ticker on a given day's watchlist."""

    id: Optional[int] = Field(default=None, description="Database ID")
    date: date_type = Field(..., description="Watchlist date")
    ticker: str = Field(..., min_length=1, description="Ticker symbol")
    setup: str = Field(..., min_length=1, description="Setup description")
    key_levels: Optional[list[float]] = Field(default=None, description="Key price levels")
    bias: Bias = Field(default="neutral", description="Directional bias")
    priority: int = Field(default=3, ge=1, le=5, description="Priority from 1 to 5")
    options_flow_note: Optional[str] = Field(default=None, description="Options flow note")
    status: WatchStatus = Field(default="watching", description="Item status")
    created_at: datetime = Field(default_factory=datetime.now, description="Creation timestamp")

    model_config = {"frozen": True}
