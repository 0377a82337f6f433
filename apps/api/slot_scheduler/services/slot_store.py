from __future__ import annotations

from datetime import date, datetime, time, timedelta
from typing import Iterable, Optional, Protocol, Sequence
from uuid import UUID

from sqlalchemy import and_, delete, func, or_, select, update
from sqlalchemy.orm import Session, aliased

from slot_scheduler.models.enums import SlotStatus
from slot_scheduler.models.slot import Slot
from slot_scheduler.models.slot_conflict import SlotConflict


class SlotStore(Protocol):
    """Persistence the slot generator and slot service depend on."""

    def list_overlapping(self, *, staff_id: UUID, start: datetime, end: datetime) -> list[Slot]:
        """Slots of one staff member (any status) whose interval overlaps [start, end)."""
        raise NotImplementedError

    def get_by_key(self, *, staff_id: UUID, service_id: UUID, start_time: datetime) -> Optional[Slot]:
        raise NotImplementedError

    def get(self, *, business_id: UUID, slot_id: UUID) -> Optional[Slot]:
        raise NotImplementedError

    def add(self, slot: Slot) -> Slot:
        raise NotImplementedError

    def add_conflict(self, a: UUID, b: UUID) -> None:
        """Record that two slots overlap; stored in both directions."""
        raise NotImplementedError

    def query(
        self,
        *,
        business_id: UUID,
        date_start: Optional[date] = None,
        date_end: Optional[date] = None,
        staff_id: Optional[UUID] = None,
        service_id: Optional[UUID] = None,
        status: Optional[SlotStatus] = None,
    ) -> Sequence[Slot]:
        raise NotImplementedError

    def transition(
        self,
        *,
        business_id: UUID,
        slot_id: UUID,
        from_statuses: Iterable[SlotStatus],
        to_status: SlotStatus,
        require_no_booked_overlap: bool = False,
    ) -> bool:
        """
        Atomic compare-and-set on status. Returns True only if this call
        changed the row.
        """
        raise NotImplementedError

    def delete(self, *, business_id: UUID, slot_id: UUID) -> bool:
        raise NotImplementedError


class SqlAlchemySlotStore(SlotStore):
    def __init__(self, db: Session):
        self.db = db

    def list_overlapping(self, *, staff_id, start, end):
        stmt = select(Slot).where(
            and_(
                Slot.staff_id == staff_id,
                Slot.start_time < end,
                Slot.end_time > start,
            )
        )
        return list(self.db.execute(stmt.order_by(Slot.start_time, Slot.slot_id)).scalars().all())

    def get_by_key(self, *, staff_id, service_id, start_time):
        return self.db.execute(
            select(Slot).where(
                and_(
                    Slot.staff_id == staff_id,
                    Slot.service_id == service_id,
                    Slot.start_time == start_time,
                )
            )
        ).scalars().first()

    def get(self, *, business_id, slot_id):
        slot = self.db.get(Slot, slot_id)
        if not slot or slot.business_id != business_id:
            return None
        return slot

    def add(self, slot: Slot) -> Slot:
        self.db.add(slot)
        self.db.flush()
        return slot

    def add_conflict(self, a, b):
        self.db.add(SlotConflict(slot_id=a, conflicting_slot_id=b))
        self.db.add(SlotConflict(slot_id=b, conflicting_slot_id=a))
        self.db.flush()

    def query(self, *, business_id, date_start=None, date_end=None, staff_id=None, service_id=None, status=None):
        clauses = [Slot.business_id == business_id]
        if date_start is not None:
            clauses.append(Slot.start_time >= datetime.combine(date_start, time.min))
        if date_end is not None:
            clauses.append(Slot.start_time < datetime.combine(date_end + timedelta(days=1), time.min))
        if staff_id is not None:
            clauses.append(Slot.staff_id == staff_id)
        if service_id is not None:
            clauses.append(Slot.service_id == service_id)
        if status is not None:
            clauses.append(Slot.status == status)

        return self.db.execute(
            select(Slot).where(and_(*clauses)).order_by(Slot.start_time, Slot.staff_id, Slot.slot_id)
        ).scalars().all()

    def transition(self, *, business_id, slot_id, from_statuses, to_status, require_no_booked_overlap=False):
        stmt = update(Slot).where(
            and_(
                Slot.slot_id == slot_id,
                Slot.business_id == business_id,
                Slot.status.in_(list(from_statuses)),
            )
        )

        if require_no_booked_overlap:
            other = aliased(Slot)
            booked_overlap = (
                select(other.slot_id)
                .where(
                    and_(
                        other.staff_id == Slot.staff_id,
                        other.slot_id != Slot.slot_id,
                        other.status == SlotStatus.booked,
                        other.start_time < Slot.end_time,
                        other.end_time > Slot.start_time,
                    )
                )
                .correlate(Slot)
                .exists()
            )
            stmt = stmt.where(~booked_overlap)

        result = self.db.execute(
            stmt.values(status=to_status, updated_at=func.now()).execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    def delete(self, *, business_id, slot_id):
        slot = self.get(business_id=business_id, slot_id=slot_id)
        if slot is None:
            return False

        # Both directions of every pair go with the slot.
        self.db.execute(
            delete(SlotConflict).where(
                or_(SlotConflict.slot_id == slot_id, SlotConflict.conflicting_slot_id == slot_id)
            )
        )
        self.db.delete(slot)
        self.db.flush()
        return True
