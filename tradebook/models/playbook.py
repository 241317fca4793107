"""PlaybookSetup data model."""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field


class PlaybookSetup(BaseModel):
    """A named, repeatable trading setup with its rules."""

    id: Optional[int] = Field(default=None, description="Database ID")
    name: str = Field(..., min_length=1, description="Unique setup name")
    description: Optional[str] = Field(default=None, description="What the setup is")
    entry_rules: Optional[str] = Field(default=None, description="Entry rules")
    exit_rules: Optional[str] = Field(default=None, description="Exit rules")
    risk_rules: Optional[str] = Field(default=None, description="Risk rules")
    example_tickers: Optional[str] = Field(default=None, description="Example tickers")
    status: Literal["active", "retired"] = Field(default="active", description="Setup status")
    created_at: datetime = Field(default_factory=datetime.now, description="Creation timestamp")

    model_config = {"frozen": True}
