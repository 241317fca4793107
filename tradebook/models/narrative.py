"""Narrative data model."""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field

NarrativeDirection = Literal["bull", "bear", "neutral"]
NarrativeStatus = Literal["active", "triggered", "invalidated", "expired"]
Timeframe = Literal["intraday", "swing", "multi-day"]

NARRATIVE_DIRECTIONS: tuple[str, ...] = ("bull", "bear", "neutral")
TIMEFRAMES: tuple[str, ...] = ("intraday", "swing", "multi-day")
TERMINAL_NARRATIVE_STATUSES: tuple[str, ...] = ("triggered", "invalidated", "expired")


class Narrative(BaseModel):
    """Represents a market thesis for a ticker."""

    id: Optional[int] = Field(default=None, description="Database ID")
    ticker: str = Field(..., min_length=1, description="Ticker symbol")
    narrative: str = Field(..., min_length=1, description="Free-text thesis")
    direction: NarrativeDirection = Field(default="neutral", description="Directional bias")
    timeframe: Timeframe = Field(default="intraday", description="Thesis horizon")
    key_levels: Optional[list[float]] = Field(default=None, description="Key price levels")
    invalidation: Optional[float] = Field(default=None, description="Invalidation price")
    status: NarrativeStatus = Field(default="active", description="Narrative status")
    created_at: datetime = Field(default_factory=datetime.now, description="Creation timestamp")
    updated_at: Optional[datetime] = Field(default=None, description="Last update timestamp")
    resolved_at: Optional[datetime] = Field(default=None, description="Resolution timestamp")

    model_config = {"frozen": True}
