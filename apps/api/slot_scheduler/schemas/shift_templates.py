from datetime import datetime, time
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from slot_scheduler.models.enums import BreakType, ShiftType


class BreakIn(BaseModel):
    start_time: time
    end_time: time
    type: BreakType = BreakType.rest
    # Ignored on write; recomputed from start_time/end_time.
    duration_minutes: Optional[int] = None


class BreakOut(BaseModel):
    start_time: str  # HH:MM
    end_time: str  # HH:MM
    type: BreakType
    duration_minutes: int


class ShiftTemplateCreate(BaseModel):
    name: str = Field(min_length=1)
    start_time: time
    end_time: time
    breaks: list[BreakIn] = Field(default_factory=list)
    days_of_week: list[int] = Field(default_factory=list)
    color: str = "#000000"
    type: ShiftType = ShiftType.regular
    is_active: bool = True


class ShiftTemplateUpdate(ShiftTemplateCreate):
    pass


class ShiftTemplateOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    shift_template_id: UUID
    business_id: UUID
    name: str
    start_time: time
    end_time: time
    breaks: list[BreakOut]
    days_of_week: list[int]
    color: str
    type: ShiftType
    is_active: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ShiftTemplateSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    shift_template_id: UUID
    name: str
    start_time: time
    end_time: time
    type: ShiftType
    color: str
