from datetime import date, datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel

from slot_scheduler.models.enums import SlotStatus
from slot_scheduler.schemas.services import ServiceSummary
from slot_scheduler.schemas.staff import StaffSummary


class SlotGenerateRequest(BaseModel):
    start_date: date
    end_date: date
    staff_id: Optional[UUID] = None


class ManualSlotCreate(BaseModel):
    staff_id: UUID
    service_id: UUID
    start_time: datetime


class SlotOut(BaseModel):
    id: UUID
    business_id: UUID
    start_time: datetime
    end_time: datetime
    display_time: str
    status: SlotStatus
    generated_for: date
    roster_shift_id: Optional[UUID] = None
    is_manual: bool
    conflicting_slot_ids: list[UUID]
    staff: StaffSummary
    service: ServiceSummary


class GenerationWarningOut(BaseModel):
    code: str
    staff_id: Optional[UUID] = None
    date: Optional[date] = None
    detail: str


class GenerationDiagnosticsOut(BaseModel):
    pairs_processed: int
    created: int
    duplicates: int
    conflicts: int
    unavailable: int
    skipped: list[GenerationWarningOut]


class SlotGenerateResponse(BaseModel):
    slots: list[SlotOut]
    diagnostics: GenerationDiagnosticsOut
