from datetime import datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class ServiceCreate(BaseModel):
    name: str = Field(min_length=1)
    description: str | None = None
    duration: int = Field(ge=1, le=24 * 60)  # minutes
    price: Decimal = Field(ge=0, max_digits=10, decimal_places=2)
    is_active: bool = True


class ServiceUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    duration: Optional[int] = Field(default=None, ge=1, le=24 * 60)
    price: Optional[Decimal] = Field(default=None, ge=0, max_digits=10, decimal_places=2)
    is_active: Optional[bool] = None


class ServiceOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    service_id: UUID
    business_id: UUID
    name: str
    description: Optional[str] = None
    duration: int
    price: Decimal
    is_active: bool
    created_at: Optional[datetime] = None


class ServiceSummary(BaseModel):
    id: UUID
    name: str
    duration: int
    price: Decimal
