from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from slot_scheduler.models.enums import ProficiencyLevel


class StaffCreate(BaseModel):
    name: str = Field(min_length=1)
    email: EmailStr | None = None
    specialization: str | None = None
    is_active: bool = True


class StaffOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    staff_id: UUID
    business_id: UUID
    name: str
    email: Optional[str] = None
    specialization: Optional[str] = None
    is_active: bool
    created_at: Optional[datetime] = None


class StaffSummary(BaseModel):
    id: UUID
    name: str


class StaffServiceAssign(BaseModel):
    proficiency_level: ProficiencyLevel = ProficiencyLevel.junior


class StaffServiceOut(BaseModel):
    staff_id: UUID
    service_id: UUID
    service_name: str
    duration: int
    proficiency_level: ProficiencyLevel
