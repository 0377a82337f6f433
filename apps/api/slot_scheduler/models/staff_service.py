from sqlalchemy import Column, Enum, ForeignKey, Uuid

from slot_scheduler.core.database import Base
from slot_scheduler.models.enums import ProficiencyLevel

class StaffService(Base):
    """Which services a staff member is qualified to perform."""

    __tablename__ = "staff_services"

    staff_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("staff.staff_id", ondelete="CASCADE"),
        primary_key=True,
    )

    service_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("services.service_id", ondelete="CASCADE"),
        primary_key=True,
    )

    proficiency_level = Column(
        Enum(ProficiencyLevel, name="proficiency_level"),
        nullable=False,
        default=ProficiencyLevel.junior,
    )
