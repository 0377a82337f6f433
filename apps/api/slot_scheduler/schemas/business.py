from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict


class BusinessCreate(BaseModel):
    name: str
    industry: str | None = None
    timezone: str = "Australia/Melbourne"


class BusinessOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    business_id: UUID
    name: str
    industry: Optional[str] = None
    timezone: str
    created_at: Optional[datetime] = None
