from datetime import date, datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict

from slot_scheduler.models.enums import RosterStatus
from slot_scheduler.schemas.shift_templates import ShiftTemplateSummary
from slot_scheduler.schemas.staff import StaffSummary


class RosterAssign(BaseModel):
    staff_id: UUID
    shift_template_id: UUID
    date: date
    status: RosterStatus = RosterStatus.scheduled
    notes: Optional[str] = None


class RosterUpdate(BaseModel):
    shift_template_id: Optional[UUID] = None
    status: Optional[RosterStatus] = None
    notes: Optional[str] = None


class RosterShiftOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    roster_shift_id: UUID
    business_id: UUID
    staff_id: UUID
    shift_template_id: UUID
    date: date
    status: RosterStatus
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class RosterEntryOut(RosterShiftOut):
    staff: StaffSummary
    template: ShiftTemplateSummary
