import uuid
from sqlalchemy import Column, Text, Time, Boolean, DateTime, Enum, ForeignKey, JSON, Uuid
from sqlalchemy.sql import func

from slot_scheduler.core.database import Base
from slot_scheduler.models.enums import ShiftType

class ShiftTemplate(Base):
    __tablename__ = "shift_templates"

    shift_template_id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    business_id = Column(Uuid(as_uuid=True), ForeignKey("businesses.business_id", ondelete="CASCADE"), nullable=False, index=True)

    name = Column(Text, nullable=False)
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)

    # [{"start_time": "11:00", "end_time": "11:15", "type": "lunch", "duration_minutes": 15}, ...]
    breaks = Column(JSON, nullable=False, default=list)
    days_of_week = Column(JSON, nullable=False, default=list)  # 0=Sun ... 6=Sat

    color = Column(Text, nullable=False, default="#000000")
    type = Column(Enum(ShiftType, name="shift_type"), nullable=False, default=ShiftType.regular)
    is_active = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=True, onupdate=func.now())
