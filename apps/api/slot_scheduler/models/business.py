import uuid
from sqlalchemy import Column, String, DateTime, Uuid
from sqlalchemy.sql import func

from slot_scheduler.core.database import Base

class Business(Base):
    __tablename__ = "businesses"

    business_id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String, nullable=False)
    industry = Column(String, nullable=True)  # salon, restaurant, venue, retail, ...
    timezone = Column(String, nullable=False, default="Australia/Melbourne")

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
