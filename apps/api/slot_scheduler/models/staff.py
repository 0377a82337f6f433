import uuid
from sqlalchemy import Column, String, Boolean, DateTime, ForeignKey, Uuid
from sqlalchemy.sql import func

from slot_scheduler.core.database import Base

class Staff(Base):
    __tablename__ = "staff"

    staff_id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)

    business_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("businesses.business_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    name = Column(String, nullable=False)
    email = Column(String, nullable=True)
    specialization = Column(String, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
