from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Dict, List, Optional, Tuple
from uuid import UUID

from sqlalchemy import and_, select
from sqlalchemy.orm import Session

from slot_scheduler.core.config import settings
from slot_scheduler.core.errors import InvalidRange, NotFound
from slot_scheduler.models.business import Business
from slot_scheduler.models.enums import UNAVAILABLE_ROSTER_STATUSES, ShiftType, SlotStatus
from slot_scheduler.models.roster_shift import RosterShift
from slot_scheduler.models.service import Service
from slot_scheduler.models.shift_template import ShiftTemplate
from slot_scheduler.models.slot import Slot
from slot_scheduler.models.staff import Staff
from slot_scheduler.models.staff_service import StaffService
from slot_scheduler.scheduling.intervals import (
    MINUTES_PER_DAY,
    Interval,
    at_minutes,
    clip,
    format_hhmm,
    overlaps,
    parse_hhmm,
    subtract,
    tile,
    to_minutes,
)
from slot_scheduler.services.slot_store import SlotStore, SqlAlchemySlotStore

logger = logging.getLogger(__name__)


# ---------- result types ----------
@dataclass(frozen=True)
class GenerationWarning:
    """A (staff, date) pair, or part of one, that was skipped. Never fatal."""

    code: str
    detail: str
    staff_id: Optional[UUID] = None
    date: Optional[date] = None


@dataclass
class GenerationDiagnostics:
    pairs_processed: int = 0
    created: int = 0
    duplicates: int = 0
    conflicts: int = 0
    unavailable: int = 0
    skipped: List[GenerationWarning] = field(default_factory=list)

    def warn(self, code: str, detail: str, staff_id: Optional[UUID] = None, d: Optional[date] = None) -> None:
        logger.warning("slot generation skipped (%s) staff=%s date=%s: %s", code, staff_id, d, detail)
        self.skipped.append(GenerationWarning(code=code, detail=detail, staff_id=staff_id, date=d))


@dataclass
class GenerationResult:
    slots: List[Slot]
    diagnostics: GenerationDiagnostics


# ---------- helpers ----------
def available_windows(template: ShiftTemplate) -> Tuple[List[Interval], List[str]]:
    """
    The template's working window minus its breaks, in minutes of the day.

    Returns the windows and a list of problems with stored breaks. A break
    that sticks out of the window is clipped to it, a break entirely outside
    is ignored; both are reported so the caller can surface them.
    """
    window = (to_minutes(template.start_time), to_minutes(template.end_time))
    problems: List[str] = []
    cuts: List[Interval] = []

    for b in template.breaks or []:
        try:
            b_s = to_minutes(parse_hhmm(b["start_time"]))
            b_e = to_minutes(parse_hhmm(b["end_time"]))
        except (KeyError, TypeError, ValueError):
            problems.append(f"unreadable break {b!r}")
            continue

        label = f"{format_hhmm(b_s)}-{format_hhmm(b_e)}"
        if b_e <= b_s:
            problems.append(f"break {label} ends before it starts")
            continue

        clipped = clip((b_s, b_e), window)
        if clipped is None:
            problems.append(f"break {label} is outside the shift window")
            continue
        if clipped != (b_s, b_e):
            problems.append(f"break {label} straddles the shift window, clipped")
        cuts.append(clipped)

    return subtract(window, cuts), problems


def _qualified_services(db: Session, business_id: UUID, staff_ids: List[UUID]) -> Dict[UUID, List[Service]]:
    rows = db.execute(
        select(StaffService.staff_id, Service)
        .join(Service, Service.service_id == StaffService.service_id)
        .where(
            and_(
                StaffService.staff_id.in_(staff_ids),
                Service.business_id == business_id,
                Service.is_active == True,  # noqa: E712
            )
        )
        .order_by(Service.name, Service.service_id)
    ).all()

    out: Dict[UUID, List[Service]] = {}
    for staff_id, service in rows:
        out.setdefault(staff_id, []).append(service)
    return out


# ---------- core ----------
def generate_slots(
    db: Session,
    business_id: UUID,
    date_start: date,
    date_end: date,
    staff_id: Optional[UUID] = None,
    store: Optional[SlotStore] = None,
) -> GenerationResult:
    """
    Build bookable slots from the roster for every date in [date_start, date_end].

    For each roster entry: take the template window minus breaks, then tile
    each remaining window with back-to-back slots of every service the staff
    member is qualified for. Slots that already exist for the same
    (staff, service, start) are skipped, so re-running is safe. A new slot
    overlapping any existing slot of the same staff member is still created;
    both sides record the other in conflicting_slot_ids.
    """
    if date_end < date_start:
        raise InvalidRange("end_date must be >= start_date")

    days = (date_end - date_start).days + 1
    if days > settings.max_generation_days:
        raise InvalidRange(f"Date range of {days} days exceeds the limit of {settings.max_generation_days}")

    if not db.get(Business, business_id):
        raise NotFound("Business not found")

    if staff_id is not None:
        staff = db.get(Staff, staff_id)
        if not staff or staff.business_id != business_id:
            raise NotFound("Staff not found")

    store = store or SqlAlchemySlotStore(db)
    diag = GenerationDiagnostics()
    created: List[Slot] = []

    logger.info("generating slots business=%s range=%s..%s staff=%s", business_id, date_start, date_end, staff_id)

    roster_q = (
        select(RosterShift, Staff)
        .join(Staff, Staff.staff_id == RosterShift.staff_id)
        .where(
            and_(
                RosterShift.business_id == business_id,
                RosterShift.date >= date_start,
                RosterShift.date <= date_end,
            )
        )
        .order_by(RosterShift.date, RosterShift.staff_id)
    )
    if staff_id is not None:
        roster_q = roster_q.where(RosterShift.staff_id == staff_id)

    roster = db.execute(roster_q).all()
    if not roster:
        logger.info("no roster entries in range; nothing to generate")
        db.commit()
        return GenerationResult(slots=created, diagnostics=diag)

    template_ids = {r.shift_template_id for r, _ in roster}
    templates = {
        t.shift_template_id: t
        for t in db.execute(
            select(ShiftTemplate).where(ShiftTemplate.shift_template_id.in_(template_ids))
        ).scalars()
    }
    services_by_staff = _qualified_services(db, business_id, list({r.staff_id for r, _ in roster}))

    # ---------- main loop ----------
    for entry, staff in roster:
        diag.pairs_processed += 1
        d = entry.date

        if entry.status in UNAVAILABLE_ROSTER_STATUSES:
            diag.unavailable += 1
            logger.debug("staff=%s date=%s is %s; no slots", staff.staff_id, d, entry.status.value)
            continue

        if not staff.is_active:
            diag.warn("staff_inactive", f"{staff.name} is inactive", staff.staff_id, d)
            continue

        template = templates.get(entry.shift_template_id)
        if template is None or template.business_id != business_id:
            diag.warn("template_missing", "Roster entry references an unknown shift template", staff.staff_id, d)
            continue
        if not template.is_active:
            diag.warn("template_inactive", f"Shift template {template.name!r} is inactive", staff.staff_id, d)
            continue
        if template.type == ShiftType.leave:
            diag.warn("leave_template", f"Shift template {template.name!r} is a leave shift", staff.staff_id, d)
            continue

        services = services_by_staff.get(staff.staff_id, [])
        if not services:
            diag.warn("no_qualified_services", f"{staff.name} has no active services assigned", staff.staff_id, d)
            continue

        windows, problems = available_windows(template)
        for problem in problems:
            diag.warn("break_outside_window", f"Template {template.name!r}: {problem}", staff.staff_id, d)

        day_start = at_minutes(d, 0)
        day_end = at_minutes(d, MINUTES_PER_DAY)
        existing = store.list_overlapping(staff_id=staff.staff_id, start=day_start, end=day_end)
        taken = {(s.service_id, s.start_time) for s in existing}

        logger.debug(
            "staff=%s date=%s template=%s windows=%s services=%d existing=%d",
            staff.staff_id, d, template.name,
            [f"{format_hhmm(a)}-{format_hhmm(b)}" for a, b in windows], len(services), len(existing),
        )

        for service in services:
            for window in windows:
                for s_m, e_m in tile(window, int(service.duration)):
                    start = at_minutes(d, s_m)
                    end = at_minutes(d, e_m)

                    if (service.service_id, start) in taken:
                        diag.duplicates += 1
                        continue

                    slot = store.add(
                        Slot(
                            business_id=business_id,
                            staff_id=staff.staff_id,
                            service_id=service.service_id,
                            roster_shift_id=entry.roster_shift_id,
                            start_time=start,
                            end_time=end,
                            generated_for=d,
                            status=SlotStatus.available,
                            is_manual=False,
                        )
                    )

                    for other in existing:
                        if overlaps(start, end, other.start_time, other.end_time):
                            store.add_conflict(slot.slot_id, other.slot_id)
                            diag.conflicts += 1

                    existing.append(slot)
                    taken.add((service.service_id, start))
                    created.append(slot)
                    diag.created += 1

    db.commit()

    logger.info(
        "slot generation done business=%s pairs=%d created=%d duplicates=%d conflicts=%d skipped=%d",
        business_id, diag.pairs_processed, diag.created, diag.duplicates, diag.conflicts, len(diag.skipped),
    )
    return GenerationResult(slots=created, diagnostics=diag)
