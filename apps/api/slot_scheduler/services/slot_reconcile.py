from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional
from uuid import UUID

from sqlalchemy import and_, select
from sqlalchemy.orm import Session

from slot_scheduler.models.enums import UNAVAILABLE_ROSTER_STATUSES, ShiftType, SlotStatus
from slot_scheduler.models.roster_shift import RosterShift
from slot_scheduler.models.shift_template import ShiftTemplate
from slot_scheduler.models.slot import Slot
from slot_scheduler.scheduling.intervals import MINUTES_PER_DAY, at_minutes
from slot_scheduler.services.slot_generator import available_windows
from slot_scheduler.services.slot_store import SlotStore, SqlAlchemySlotStore

logger = logging.getLogger(__name__)


@dataclass
class ReconcileResult:
    removed: List[UUID] = field(default_factory=list)
    blocked: List[UUID] = field(default_factory=list)


def roster_misfit(slot: Slot, entry: Optional[RosterShift], template: Optional[ShiftTemplate]) -> Optional[str]:
    """
    Why a slot no longer fits the roster for its day, or None if it does.

    The codes match the ones manual slot creation raises.
    """
    if entry is None:
        return "no_roster_shift"
    if entry.status in UNAVAILABLE_ROSTER_STATUSES:
        return "staff_unavailable"
    if template is None or not template.is_active:
        return "template_inactive"
    if template.type == ShiftType.leave:
        return "staff_unavailable"

    day_start = at_minutes(entry.date, 0)
    s_m = int((slot.start_time - day_start).total_seconds() // 60)
    e_m = int((slot.end_time - day_start).total_seconds() // 60)

    windows, _ = available_windows(template)
    if not any(w_s <= s_m and e_m <= w_e for w_s, w_e in windows):
        return "outside_shift_window"
    return None


def _roster_for(db: Session, staff_id: UUID, d: date) -> tuple[Optional[RosterShift], Optional[ShiftTemplate]]:
    entry = db.execute(
        select(RosterShift).where(and_(RosterShift.staff_id == staff_id, RosterShift.date == d))
    ).scalars().first()
    template = db.get(ShiftTemplate, entry.shift_template_id) if entry else None
    return entry, template


def slot_misfit(db: Session, slot: Slot) -> Optional[str]:
    entry, template = _roster_for(db, slot.staff_id, slot.generated_for)
    return roster_misfit(slot, entry, template)


def reconcile_day(
    db: Session,
    business_id: UUID,
    staff_id: UUID,
    d: date,
    entry: Optional[RosterShift],
    store: Optional[SlotStore] = None,
) -> ReconcileResult:
    """
    Bring one staff member's slots for one day back in line with `entry`
    (None when the roster entry is being deleted).

    Available slots that no longer fit are deleted; booked ones are blocked so
    they cannot be handed out again. Blocked slots are left alone. Nothing is
    committed here; the caller's roster or template change and this cleanup
    go out in one transaction.
    """
    store = store or SqlAlchemySlotStore(db)
    db.flush()

    template = db.get(ShiftTemplate, entry.shift_template_id) if entry is not None else None
    result = ReconcileResult()

    slots = store.list_overlapping(staff_id=staff_id, start=at_minutes(d, 0), end=at_minutes(d, MINUTES_PER_DAY))
    for slot in slots:
        if slot.business_id != business_id or slot.status == SlotStatus.blocked:
            continue
        reason = roster_misfit(slot, entry, template)
        if reason is None:
            continue

        slot_id = slot.slot_id
        if slot.status == SlotStatus.available:
            store.delete(business_id=business_id, slot_id=slot_id)
            result.removed.append(slot_id)
        else:
            store.transition(
                business_id=business_id,
                slot_id=slot_id,
                from_statuses=[SlotStatus.booked],
                to_status=SlotStatus.blocked,
            )
            result.blocked.append(slot_id)
            logger.warning("booked slot=%s no longer fits the roster (%s); blocked", slot_id, reason)

    if result.removed or result.blocked:
        logger.info(
            "reconciled staff=%s date=%s removed=%d blocked=%d",
            staff_id, d, len(result.removed), len(result.blocked),
        )
    return result
