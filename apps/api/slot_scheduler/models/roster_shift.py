import uuid
from sqlalchemy import Column, Date, Text, DateTime, Enum, ForeignKey, UniqueConstraint, Uuid
from sqlalchemy.sql import func

from slot_scheduler.core.database import Base
from slot_scheduler.models.enums import RosterStatus


class RosterShift(Base):
    __tablename__ = "roster_shifts"

    roster_shift_id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)

    business_id = Column(Uuid(as_uuid=True), ForeignKey("businesses.business_id", ondelete="CASCADE"), nullable=False, index=True)
    staff_id = Column(Uuid(as_uuid=True), ForeignKey("staff.staff_id", ondelete="CASCADE"), nullable=False)
    shift_template_id = Column(Uuid(as_uuid=True), ForeignKey("shift_templates.shift_template_id", ondelete="RESTRICT"), nullable=False)

    date = Column(Date, nullable=False)
    status = Column(Enum(RosterStatus, name="roster_status"), nullable=False, default=RosterStatus.scheduled)
    notes = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=True, onupdate=func.now())

    __table_args__ = (
        UniqueConstraint("staff_id", "date", name="uq_roster_shifts_staff_date"),
    )
