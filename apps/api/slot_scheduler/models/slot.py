import uuid
from sqlalchemy import Column, Date, DateTime, Boolean, Enum, ForeignKey, Index, UniqueConstraint, Uuid
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from slot_scheduler.core.database import Base
from slot_scheduler.models.enums import SlotStatus

# Registers the tables the relationships below point at.
from slot_scheduler.models.service import Service  # noqa: F401
from slot_scheduler.models.staff import Staff  # noqa: F401
from slot_scheduler.models.roster_shift import RosterShift  # noqa: F401
from slot_scheduler.models.slot_conflict import SlotConflict


class Slot(Base):
    __tablename__ = "slots"

    slot_id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)

    business_id = Column(Uuid(as_uuid=True), ForeignKey("businesses.business_id", ondelete="CASCADE"), nullable=False)
    staff_id = Column(Uuid(as_uuid=True), ForeignKey("staff.staff_id", ondelete="CASCADE"), nullable=False)
    service_id = Column(Uuid(as_uuid=True), ForeignKey("services.service_id", ondelete="CASCADE"), nullable=False)

    # Display-only back reference to the roster entry the slot came from.
    roster_shift_id = Column(Uuid(as_uuid=True), ForeignKey("roster_shifts.roster_shift_id", ondelete="SET NULL"), nullable=True)

    start_time = Column(DateTime, nullable=False)
    end_time = Column(DateTime, nullable=False)
    generated_for = Column(Date, nullable=False)

    status = Column(Enum(SlotStatus, name="slot_status"), nullable=False, default=SlotStatus.available)
    is_manual = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=True, onupdate=func.now())

    staff = relationship("Staff", lazy="joined")
    service = relationship("Service", lazy="joined")

    conflicts = relationship(
        SlotConflict,
        primaryjoin=lambda: Slot.slot_id == SlotConflict.slot_id,
        viewonly=True,
        lazy="selectin",
    )

    __table_args__ = (
        UniqueConstraint("staff_id", "service_id", "start_time", name="uq_slots_staff_service_start"),
        Index("ix_slots_business_start", "business_id", "start_time"),
        Index("ix_slots_staff_start", "staff_id", "start_time"),
    )

    @property
    def conflicting_slot_ids(self) -> list[uuid.UUID]:
        return sorted((c.conflicting_slot_id for c in self.conflicts), key=str)
