from datetime import date
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from slot_scheduler.core.database import get_db
from slot_scheduler.schemas.roster import RosterAssign, RosterEntryOut, RosterShiftOut, RosterUpdate
from slot_scheduler.schemas.shift_templates import ShiftTemplateSummary
from slot_scheduler.schemas.staff import StaffSummary
from slot_scheduler.services import roster as roster_service

router = APIRouter()


@router.get("/{business_id}/roster", response_model=list[RosterEntryOut])
def list_roster(
    business_id: UUID,
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    staff_id: Optional[UUID] = Query(None),
    db: Session = Depends(get_db),
):
    rows = roster_service.list_roster(db, business_id, start_date=start_date, end_date=end_date, staff_id=staff_id)
    return [
        RosterEntryOut(
            **RosterShiftOut.model_validate(entry).model_dump(),
            staff=StaffSummary(id=staff.staff_id, name=staff.name),
            template=ShiftTemplateSummary.model_validate(template),
        )
        for entry, staff, template in rows
    ]


@router.post("/{business_id}/roster", response_model=RosterShiftOut)
def assign_shift(business_id: UUID, payload: RosterAssign, db: Session = Depends(get_db)):
    return roster_service.assign_shift(db, business_id, payload)


@router.put("/{business_id}/roster/{roster_shift_id}", response_model=RosterShiftOut)
def update_shift(business_id: UUID, roster_shift_id: UUID, payload: RosterUpdate, db: Session = Depends(get_db)):
    return roster_service.update_shift(db, business_id, roster_shift_id, payload)


@router.delete("/{business_id}/roster/{roster_shift_id}")
def delete_shift(business_id: UUID, roster_shift_id: UUID, db: Session = Depends(get_db)):
    roster_service.delete_shift(db, business_id, roster_shift_id)
    return {"deleted": True, "roster_shift_id": str(roster_shift_id)}
