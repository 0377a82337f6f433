from __future__ import annotations

import logging
from datetime import date, datetime, timedelta
from typing import Optional, Sequence
from uuid import UUID

from sqlalchemy import and_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from slot_scheduler.core.config import settings
from slot_scheduler.core.errors import (
    AlreadyBookedError,
    ConflictError,
    InvalidRange,
    InvalidTransition,
    NotFound,
    ValidationError,
)
from slot_scheduler.models.business import Business
from slot_scheduler.models.enums import UNAVAILABLE_ROSTER_STATUSES, ShiftType, SlotStatus
from slot_scheduler.models.roster_shift import RosterShift
from slot_scheduler.models.service import Service
from slot_scheduler.models.shift_template import ShiftTemplate
from slot_scheduler.models.slot import Slot
from slot_scheduler.models.staff import Staff
from slot_scheduler.models.staff_service import StaffService
from slot_scheduler.scheduling.intervals import MINUTES_PER_DAY, format_hhmm, to_minutes
from slot_scheduler.services.slot_generator import available_windows
from slot_scheduler.services.slot_reconcile import slot_misfit
from slot_scheduler.services.slot_store import SlotStore, SqlAlchemySlotStore

logger = logging.getLogger(__name__)


def _require_business(db: Session, business_id: UUID) -> Business:
    business = db.get(Business, business_id)
    if not business:
        raise NotFound("Business not found")
    return business


def _store(db: Session, store: Optional[SlotStore]) -> SlotStore:
    return store or SqlAlchemySlotStore(db)


# --- Manual creation ---
def create_manual_slot(
    db: Session,
    business_id: UUID,
    staff_id: UUID,
    service_id: UUID,
    start_time: datetime,
    store: Optional[SlotStore] = None,
    strict_conflicts: Optional[bool] = None,
) -> Slot:
    """
    Create one slot by hand. end_time is always start_time + service.duration.

    The slot must fit inside the staff member's rostered shift for that day
    and miss every break. Overlaps with other slots are flagged the same way
    generation flags them, unless strict conflicts are switched on.
    """
    _require_business(db, business_id)
    store = _store(db, store)
    strict = settings.strict_slot_conflicts if strict_conflicts is None else strict_conflicts

    staff = db.get(Staff, staff_id)
    if not staff or staff.business_id != business_id:
        raise NotFound("Staff not found")

    service = db.get(Service, service_id)
    if not service or service.business_id != business_id:
        raise NotFound("Service not found")
    if not service.is_active:
        raise ValidationError("service_inactive", f"Service {service.name!r} is not active")

    if not db.get(StaffService, (staff_id, service_id)):
        raise ValidationError("staff_not_qualified", f"{staff.name} is not assigned to {service.name!r}")

    # Wall-clock business time; any tzinfo is dropped, not converted.
    start = start_time.replace(tzinfo=None)
    if start.second or start.microsecond:
        raise ValidationError("start_time_precision", "start_time must fall on a whole minute")
    end = start + timedelta(minutes=int(service.duration))
    d = start.date()

    entry = db.execute(
        select(RosterShift).where(and_(RosterShift.staff_id == staff_id, RosterShift.date == d))
    ).scalars().first()
    if not entry:
        raise ValidationError("no_roster_shift", f"{staff.name} has no rostered shift on {d.isoformat()}")
    if entry.status in UNAVAILABLE_ROSTER_STATUSES:
        raise ValidationError("staff_unavailable", f"{staff.name} is marked {entry.status.value} on {d.isoformat()}")

    template = db.get(ShiftTemplate, entry.shift_template_id)
    if not template or not template.is_active:
        raise ValidationError("template_inactive", "The rostered shift template is not active")
    if template.type == ShiftType.leave:
        raise ValidationError("staff_unavailable", f"{staff.name} is on a leave shift on {d.isoformat()}")

    s_m = to_minutes(start)
    e_m = s_m + int(service.duration)
    t_s = to_minutes(template.start_time)
    t_e = to_minutes(template.end_time)
    if end.date() != d or s_m < t_s or e_m > t_e:
        raise ValidationError(
            "outside_shift_window",
            f"{format_hhmm(s_m)}-{format_hhmm(e_m % MINUTES_PER_DAY)} is outside the shift "
            f"{format_hhmm(t_s)}-{format_hhmm(t_e)}",
        )

    windows, _ = available_windows(template)
    if not any(w_s <= s_m and e_m <= w_e for w_s, w_e in windows):
        raise ValidationError(
            "overlaps_break",
            f"{format_hhmm(s_m)}-{format_hhmm(e_m)} overlaps a break in {template.name!r}",
        )

    if store.get_by_key(staff_id=staff_id, service_id=service_id, start_time=start):
        raise ConflictError("duplicate_slot", "A slot for this staff member, service and start time already exists")

    overlapping = store.list_overlapping(staff_id=staff_id, start=start, end=end)
    if overlapping and strict:
        raise ConflictError(
            "overlapping_slot",
            f"{len(overlapping)} existing slot(s) overlap this time",
            conflicting_slot_ids=[str(s.slot_id) for s in overlapping],
        )

    try:
        slot = store.add(
            Slot(
                business_id=business_id,
                staff_id=staff_id,
                service_id=service_id,
                roster_shift_id=entry.roster_shift_id,
                start_time=start,
                end_time=end,
                generated_for=d,
                status=SlotStatus.available,
                is_manual=True,
            )
        )
        for other in overlapping:
            store.add_conflict(slot.slot_id, other.slot_id)
        db.commit()
    except IntegrityError:
        # Another request inserted the same (staff, service, start) first.
        db.rollback()
        raise ConflictError("duplicate_slot", "A slot for this staff member, service and start time already exists")

    db.refresh(slot)
    logger.info("manual slot created slot=%s staff=%s start=%s conflicts=%d", slot.slot_id, staff_id, start, len(overlapping))
    return slot


# --- Query ---
def query_slots(
    db: Session,
    business_id: UUID,
    date_start: Optional[date] = None,
    date_end: Optional[date] = None,
    staff_id: Optional[UUID] = None,
    service_id: Optional[UUID] = None,
    status: Optional[SlotStatus] = None,
    store: Optional[SlotStore] = None,
) -> Sequence[Slot]:
    """Slots ordered by start_time, then staff_id, then slot id."""
    if date_start is not None and date_end is not None and date_end < date_start:
        raise InvalidRange("end_date must be >= start_date")

    _require_business(db, business_id)
    return _store(db, store).query(
        business_id=business_id,
        date_start=date_start,
        date_end=date_end,
        staff_id=staff_id,
        service_id=service_id,
        status=status,
    )


def get_slot(db: Session, business_id: UUID, slot_id: UUID, store: Optional[SlotStore] = None) -> Slot:
    slot = _store(db, store).get(business_id=business_id, slot_id=slot_id)
    if not slot:
        raise NotFound("Slot not found")
    return slot


# --- Status transitions ---
def claim_slot(db: Session, business_id: UUID, slot_id: UUID, store: Optional[SlotStore] = None) -> Slot:
    """
    available -> booked, for the booking flow.

    One conditional UPDATE decides the winner; under concurrent claims exactly
    one caller gets the slot and the rest get AlreadyBookedError. A slot that
    no longer fits the roster for its day is refused with ValidationError.
    """
    store = _store(db, store)
    try:
        won = store.transition(
            business_id=business_id,
            slot_id=slot_id,
            from_statuses=[SlotStatus.available],
            to_status=SlotStatus.booked,
            require_no_booked_overlap=True,
        )
        if won:
            # The roster may have changed since the slot was cut.
            reason = slot_misfit(db, store.get(business_id=business_id, slot_id=slot_id))
            if reason is not None:
                db.rollback()
                raise ValidationError(reason, "Slot no longer fits the staff member's roster for that day")
        db.commit()
    except IntegrityError:
        # Raised by the booked-overlap exclusion constraint on PostgreSQL.
        db.rollback()
        raise ConflictError("booked_overlap", "Staff member already has a booking overlapping this slot")

    slot = store.get(business_id=business_id, slot_id=slot_id)
    if not slot:
        raise NotFound("Slot not found")

    if not won:
        if slot.status != SlotStatus.available:
            logger.debug("claim lost slot=%s status=%s", slot_id, slot.status.value)
            raise AlreadyBookedError(slot_id, slot.status.value)
        raise ConflictError("booked_overlap", "Staff member already has a booking overlapping this slot")

    logger.info("slot claimed slot=%s staff=%s start=%s", slot_id, slot.staff_id, slot.start_time)
    return slot


def block_slot(db: Session, business_id: UUID, slot_id: UUID, store: Optional[SlotStore] = None) -> Slot:
    store = _store(db, store)
    changed = store.transition(
        business_id=business_id,
        slot_id=slot_id,
        from_statuses=[SlotStatus.available, SlotStatus.booked],
        to_status=SlotStatus.blocked,
    )
    db.commit()

    slot = store.get(business_id=business_id, slot_id=slot_id)
    if not slot:
        raise NotFound("Slot not found")
    if not changed:
        raise InvalidTransition(slot_id, f"Cannot block a slot that is {slot.status.value}")

    logger.info("slot blocked slot=%s", slot_id)
    return slot


def release_slot(db: Session, business_id: UUID, slot_id: UUID, store: Optional[SlotStore] = None) -> Slot:
    """Back to available (booking cancelled or block lifted). Releasing an available slot is a no-op."""
    store = _store(db, store)
    changed = store.transition(
        business_id=business_id,
        slot_id=slot_id,
        from_statuses=[SlotStatus.booked, SlotStatus.blocked],
        to_status=SlotStatus.available,
    )
    db.commit()

    slot = store.get(business_id=business_id, slot_id=slot_id)
    if not slot:
        raise NotFound("Slot not found")
    if changed:
        logger.info("slot released slot=%s", slot_id)
    return slot


def delete_slot(db: Session, business_id: UUID, slot_id: UUID, store: Optional[SlotStore] = None) -> None:
    store = _store(db, store)
    if not store.get(business_id=business_id, slot_id=slot_id):
        raise NotFound("Slot not found")

    store.delete(business_id=business_id, slot_id=slot_id)
    db.commit()
    logger.info("slot deleted slot=%s", slot_id)
