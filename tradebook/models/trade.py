"""Trade data model."""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field

Direction = Literal["long", "short"]
Instrument = Literal["shares", "calls", "puts", "0dte-calls", "0dte-puts", "csp"]
SetupType = Literal["breakout", "fade", "momentum", "reversal", "csp", "squeeze", "other"]
TradeStatus = Literal["open", "closed"]

DIRECTIONS: tuple[str, ...] = ("long", "short")
INSTRUMENTS: tuple[str, ...] = ("shares", "calls", "puts", "0dte-calls", "0dte-puts", "csp")
SETUP_TYPES: tuple[str, ...] = ("breakout", "fade", "momentum", "reversal", "csp", "squeeze", "other")


class Trade(BaseModel):
    """Represents a journaled trade, open or closed."""

    id: Optional[int] = Field(default=None, description="Database ID")
    ticker: str = Field(..., min_length=1, description="Ticker symbol")
    direction: Direction = Field(..., description="Trade direction")
    instrument: Instrument = Field(..., description="Instrument traded")
    entry_price: float = Field(..., ge=0, description="Entry price per unit")
    exit_price: Optional[float] = Field(default=None, ge=0, description="Exit price per unit")
    size: int = Field(..., gt=0, description="Shares or contracts")
    cost_basis: float = Field(..., description="Total cost including commission")
    proceeds: Optional[float] = Field(default=None, description="Total exit proceeds")
    pnl: Optional[float] = Field(default=None, description="Realized P&L, None while open")
    pnl_pct: Optional[float] = Field(default=None, description="P&L as percent of cost basis")
    setup_type: Optional[SetupType] = Field(default="other", description="Setup tag")
    narrative_id: Optional[int] = Field(default=None, description="Linked narrative")
    watchlist_id: Optional[int] = Field(default=None, description="Linked watchlist item")
    planned_risk: Optional[float] = Field(default=None, description="Planned dollar risk")
    planned_target: Optional[float] = Field(default=None, description="Planned dollar target")
    actual_rr: Optional[float] = Field(default=None, description="Realized R multiple")
    notes: Optional[str] = Field(default=None, description="Trade notes")
    lessons: Optional[str] = Field(default=None, description="Lessons learned")
    status: TradeStatus = Field(default="open", description="Lifecycle status")
    entry_time: datetime = Field(default_factory=datetime.now, description="Entry timestamp")
    exit_time: Optional[datetime] = Field(default=None, description="Exit timestamp")
    is_paper: bool = Field(default=False, description="Paper trade flag")

    model_config = {"frozen": True}

    @property
    def is_closed(self) -> bool:
        return self.status == "closed"
