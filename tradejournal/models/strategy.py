"""Strategy data model."""

from typing import Optional
from pydantic import BaseModel, Field


class Strategy(BaseModel):
    """Represents a named trading strategy that trades can be linked to."""

    id: Optional[str] = Field(default=None, description="Document ID")
    name: str = Field(..., min_length=1, description="Strategy name")
    description: str = Field(default="", description="Brief overview")
    rules: str = Field(default="", description="Entry and exit rules")
    risk_management: str = Field(default="", description="Risk management notes")

    model_config = {"frozen": True, "str_strip_whitespace": True}
