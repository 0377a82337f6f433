from datetime import date
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from slot_scheduler.core.database import get_db
from slot_scheduler.models.enums import SlotStatus
from slot_scheduler.models.slot import Slot
from slot_scheduler.schemas.services import ServiceSummary
from slot_scheduler.schemas.slots import (
    GenerationDiagnosticsOut,
    GenerationWarningOut,
    ManualSlotCreate,
    SlotGenerateRequest,
    SlotGenerateResponse,
    SlotOut,
)
from slot_scheduler.schemas.staff import StaffSummary
from slot_scheduler.services import slot_service
from slot_scheduler.services.slot_generator import generate_slots

router = APIRouter()


def slot_out(slot: Slot) -> SlotOut:
    # Staff and service are embedded as summaries.
    return SlotOut(
        id=slot.slot_id,
        business_id=slot.business_id,
        start_time=slot.start_time,
        end_time=slot.end_time,
        display_time=f"{slot.start_time:%H:%M} - {slot.end_time:%H:%M}",
        status=slot.status,
        generated_for=slot.generated_for,
        roster_shift_id=slot.roster_shift_id,
        is_manual=slot.is_manual,
        conflicting_slot_ids=slot.conflicting_slot_ids,
        staff=StaffSummary(id=slot.staff.staff_id, name=slot.staff.name),
        service=ServiceSummary(
            id=slot.service.service_id,
            name=slot.service.name,
            duration=slot.service.duration,
            price=slot.service.price,
        ),
    )


@router.post("/{business_id}/slots/auto-generate", response_model=SlotGenerateResponse)
def auto_generate_slots(business_id: UUID, req: SlotGenerateRequest, db: Session = Depends(get_db)):
    result = generate_slots(
        db=db,
        business_id=business_id,
        date_start=req.start_date,
        date_end=req.end_date,
        staff_id=req.staff_id,
    )
    diag = result.diagnostics
    return SlotGenerateResponse(
        slots=[slot_out(s) for s in result.slots],
        diagnostics=GenerationDiagnosticsOut(
            pairs_processed=diag.pairs_processed,
            created=diag.created,
            duplicates=diag.duplicates,
            conflicts=diag.conflicts,
            unavailable=diag.unavailable,
            skipped=[
                GenerationWarningOut(code=w.code, staff_id=w.staff_id, date=w.date, detail=w.detail)
                for w in diag.skipped
            ],
        ),
    )


@router.post("/{business_id}/slots/manual", response_model=SlotOut)
def create_manual_slot(business_id: UUID, req: ManualSlotCreate, db: Session = Depends(get_db)):
    slot = slot_service.create_manual_slot(
        db=db,
        business_id=business_id,
        staff_id=req.staff_id,
        service_id=req.service_id,
        start_time=req.start_time,
    )
    return slot_out(slot)


@router.get("/{business_id}/slots", response_model=list[SlotOut])
def list_slots(
    business_id: UUID,
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    staff_id: Optional[UUID] = Query(None),
    service_id: Optional[UUID] = Query(None),
    status: Optional[SlotStatus] = Query(None),
    db: Session = Depends(get_db),
):
    slots = slot_service.query_slots(
        db,
        business_id,
        date_start=start_date,
        date_end=end_date,
        staff_id=staff_id,
        service_id=service_id,
        status=status,
    )
    return [slot_out(s) for s in slots]


@router.get("/{business_id}/slots/{slot_id}", response_model=SlotOut)
def get_slot(business_id: UUID, slot_id: UUID, db: Session = Depends(get_db)):
    return slot_out(slot_service.get_slot(db, business_id, slot_id))


@router.delete("/{business_id}/slots/{slot_id}")
def delete_slot(business_id: UUID, slot_id: UUID, db: Session = Depends(get_db)):
    slot_service.delete_slot(db, business_id, slot_id)
    return {"deleted": True, "slot_id": str(slot_id)}


# --- Status transitions ---
@router.post("/{business_id}/slots/{slot_id}/claim", response_model=SlotOut)
def claim_slot(business_id: UUID, slot_id: UUID, db: Session = Depends(get_db)):
    return slot_out(slot_service.claim_slot(db, business_id, slot_id))


@router.post("/{business_id}/slots/{slot_id}/block", response_model=SlotOut)
def block_slot(business_id: UUID, slot_id: UUID, db: Session = Depends(get_db)):
    return slot_out(slot_service.block_slot(db, business_id, slot_id))


@router.post("/{business_id}/slots/{slot_id}/release", response_model=SlotOut)
def release_slot(business_id: UUID, slot_id: UUID, db: Session = Depends(get_db)):
    return slot_out(slot_service.release_slot(db, business_id, slot_id))
