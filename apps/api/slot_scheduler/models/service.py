import uuid
from sqlalchemy import Column, String, Text, Integer, Numeric, Boolean, DateTime, ForeignKey, CheckConstraint, Uuid
from sqlalchemy.sql import func

from slot_scheduler.core.database import Base

class Service(Base):
    __tablename__ = "services"

    service_id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)

    business_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("businesses.business_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    name = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    duration = Column(Integer, nullable=False)  # minutes
    price = Column(Numeric(10, 2), nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    __table_args__ = (
        CheckConstraint("duration > 0", name="ck_services_duration_positive"),
    )
