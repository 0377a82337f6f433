from __future__ import annotations

import logging
from datetime import date
from typing import Optional
from uuid import UUID

from sqlalchemy import and_, select, update
from sqlalchemy.orm import Session

from slot_scheduler.core.errors import InvalidRange, NotFound, ValidationError
from slot_scheduler.models.roster_shift import RosterShift
from slot_scheduler.models.shift_template import ShiftTemplate
from slot_scheduler.models.slot import Slot
from slot_scheduler.models.staff import Staff
from slot_scheduler.scheduling.intervals import day_of_week
from slot_scheduler.schemas.roster import RosterAssign, RosterUpdate
from slot_scheduler.services.catalog import get_business, get_staff
from slot_scheduler.services.shift_templates import get_template
from slot_scheduler.services.slot_reconcile import reconcile_day

logger = logging.getLogger(__name__)

DAY_NAMES = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]


def _check_template_for_date(template: ShiftTemplate, d: date) -> None:
    if not template.is_active:
        raise ValidationError("template_inactive", f"Shift template {template.name!r} is not active")

    days = template.days_of_week or []
    if days and day_of_week(d) not in days:
        allowed = ", ".join(DAY_NAMES[i] for i in days)
        raise ValidationError(
            "template_day_of_week",
            f"Shift template {template.name!r} applies to {allowed}; {d.isoformat()} is a {DAY_NAMES[day_of_week(d)]}",
        )


def _existing_for(db: Session, staff_id: UUID, d: date) -> Optional[RosterShift]:
    return db.execute(
        select(RosterShift).where(and_(RosterShift.staff_id == staff_id, RosterShift.date == d))
    ).scalars().first()


def assign_shift(db: Session, business_id: UUID, payload: RosterAssign) -> RosterShift:
    """Put one staff member on one template for one date; a second entry for the same day is rejected."""
    get_business(db, business_id)
    staff = get_staff(db, business_id, payload.staff_id)
    template = get_template(db, business_id, payload.shift_template_id)
    _check_template_for_date(template, payload.date)

    if _existing_for(db, staff.staff_id, payload.date):
        raise ValidationError(
            "roster_unique",
            f"{staff.name} is already rostered on {payload.date.isoformat()}; update that entry instead",
        )

    entry = RosterShift(
        business_id=business_id,
        staff_id=staff.staff_id,
        shift_template_id=template.shift_template_id,
        date=payload.date,
        status=payload.status,
        notes=payload.notes,
    )
    db.add(entry)
    db.commit()
    db.refresh(entry)
    logger.info("roster assigned staff=%s date=%s template=%s", staff.staff_id, payload.date, template.name)
    return entry


def get_roster_shift(db: Session, business_id: UUID, roster_shift_id: UUID) -> RosterShift:
    entry = db.get(RosterShift, roster_shift_id)
    if not entry or entry.business_id != business_id:
        raise NotFound("Roster shift not found")
    return entry


def update_shift(db: Session, business_id: UUID, roster_shift_id: UUID, payload: RosterUpdate) -> RosterShift:
    entry = get_roster_shift(db, business_id, roster_shift_id)

    if payload.shift_template_id is not None and payload.shift_template_id != entry.shift_template_id:
        template = get_template(db, business_id, payload.shift_template_id)
        _check_template_for_date(template, entry.date)
        entry.shift_template_id = template.shift_template_id

    if payload.status is not None:
        entry.status = payload.status
    if payload.notes is not None:
        entry.notes = payload.notes

    # Slots already cut from this entry must still fit its template and status.
    reconcile_day(db, business_id, entry.staff_id, entry.date, entry)

    db.commit()
    db.refresh(entry)
    return entry


def delete_shift(db: Session, business_id: UUID, roster_shift_id: UUID) -> None:
    entry = get_roster_shift(db, business_id, roster_shift_id)
    staff_id, d = entry.staff_id, entry.date
    reconcile_day(db, business_id, staff_id, d, None)
    db.execute(
        update(Slot)
        .where(Slot.roster_shift_id == roster_shift_id)
        .values(roster_shift_id=None)
        .execution_options(synchronize_session=False)
    )
    db.delete(entry)
    db.commit()
    logger.info("roster entry deleted staff=%s date=%s", staff_id, d)


def list_roster(
    db: Session,
    business_id: UUID,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    staff_id: Optional[UUID] = None,
) -> list[tuple[RosterShift, Staff, ShiftTemplate]]:
    if start_date is not None and end_date is not None and end_date < start_date:
        raise InvalidRange("end_date must be >= start_date")
    get_business(db, business_id)

    q = (
        select(RosterShift, Staff, ShiftTemplate)
        .join(Staff, Staff.staff_id == RosterShift.staff_id)
        .join(ShiftTemplate, ShiftTemplate.shift_template_id == RosterShift.shift_template_id)
        .where(RosterShift.business_id == business_id)
    )
    if start_date is not None:
        q = q.where(RosterShift.date >= start_date)
    if end_date is not None:
        q = q.where(RosterShift.date <= end_date)
    if staff_id is not None:
        q = q.where(RosterShift.staff_id == staff_id)

    return [tuple(r) for r in db.execute(q.order_by(RosterShift.date, Staff.name)).all()]
