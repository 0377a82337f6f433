from sqlalchemy import Column, ForeignKey, Uuid

from slot_scheduler.core.database import Base


class SlotConflict(Base):
    """
    One direction of an overlap between two slots of the same staff member.
    Pairs are always written both ways so each slot sees its conflicts.
    """

    __tablename__ = "slot_conflicts"

    slot_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("slots.slot_id", ondelete="CASCADE"),
        primary_key=True,
    )

    conflicting_slot_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("slots.slot_id", ondelete="CASCADE"),
        primary_key=True,
    )
