from __future__ import annotations

import logging
from typing import Sequence
from uuid import UUID

from sqlalchemy import and_, select
from sqlalchemy.orm import Session

from slot_scheduler.core.errors import NotFound, ValidationError
from slot_scheduler.models.business import Business
from slot_scheduler.models.enums import ProficiencyLevel
from slot_scheduler.models.service import Service
from slot_scheduler.models.slot import Slot
from slot_scheduler.models.staff import Staff
from slot_scheduler.models.staff_service import StaffService
from slot_scheduler.schemas.business import BusinessCreate
from slot_scheduler.schemas.services import ServiceCreate, ServiceUpdate
from slot_scheduler.schemas.staff import StaffCreate

logger = logging.getLogger(__name__)


# --- Businesses ---
def create_business(db: Session, payload: BusinessCreate) -> Business:
    b = Business(name=payload.name, industry=payload.industry, timezone=payload.timezone)
    db.add(b)
    db.commit()
    db.refresh(b)
    return b


def get_business(db: Session, business_id: UUID) -> Business:
    b = db.get(Business, business_id)
    if not b:
        raise NotFound("Business not found")
    return b


# --- Staff ---
def create_staff(db: Session, business_id: UUID, payload: StaffCreate) -> Staff:
    get_business(db, business_id)
    s = Staff(
        business_id=business_id,
        name=payload.name,
        email=str(payload.email) if payload.email else None,
        specialization=payload.specialization,
        is_active=payload.is_active,
    )
    db.add(s)
    db.commit()
    db.refresh(s)
    return s


def get_staff(db: Session, business_id: UUID, staff_id: UUID) -> Staff:
    s = db.get(Staff, staff_id)
    if not s or s.business_id != business_id:
        raise NotFound("Staff not found")
    return s


def list_staff(db: Session, business_id: UUID) -> Sequence[Staff]:
    get_business(db, business_id)
    return db.execute(
        select(Staff).where(Staff.business_id == business_id).order_by(Staff.name, Staff.staff_id)
    ).scalars().all()


# --- Services ---
def create_service(db: Session, business_id: UUID, payload: ServiceCreate) -> Service:
    get_business(db, business_id)
    s = Service(
        business_id=business_id,
        name=payload.name,
        description=payload.description,
        duration=payload.duration,
        price=payload.price,
        is_active=payload.is_active,
    )
    db.add(s)
    db.commit()
    db.refresh(s)
    return s


def get_service(db: Session, business_id: UUID, service_id: UUID) -> Service:
    s = db.get(Service, service_id)
    if not s or s.business_id != business_id:
        raise NotFound("Service not found")
    return s


def list_services(db: Session, business_id: UUID, active_only: bool = False) -> Sequence[Service]:
    get_business(db, business_id)
    q = select(Service).where(Service.business_id == business_id)
    if active_only:
        q = q.where(Service.is_active == True)  # noqa: E712
    return db.execute(q.order_by(Service.name, Service.service_id)).scalars().all()


def update_service(db: Session, business_id: UUID, service_id: UUID, payload: ServiceUpdate) -> Service:
    s = get_service(db, business_id, service_id)
    changes = payload.model_dump(exclude_unset=True, exclude_none=True)

    # Existing slots were cut to the old duration; they would no longer match it.
    if "duration" in changes and changes["duration"] != s.duration:
        has_slots = db.execute(select(Slot.slot_id).where(Slot.service_id == service_id).limit(1)).first()
        if has_slots:
            raise ValidationError(
                "slot_duration",
                "Cannot change the duration of a service that has slots; delete its slots first",
            )

    for key, value in changes.items():
        setattr(s, key, value)

    db.commit()
    db.refresh(s)
    return s


# --- Staff capabilities ---
def assign_service_to_staff(
    db: Session,
    business_id: UUID,
    staff_id: UUID,
    service_id: UUID,
    proficiency_level: ProficiencyLevel = ProficiencyLevel.junior,
) -> StaffService:
    get_staff(db, business_id, staff_id)
    get_service(db, business_id, service_id)

    link = db.get(StaffService, (staff_id, service_id))
    if link:
        link.proficiency_level = proficiency_level
    else:
        link = StaffService(staff_id=staff_id, service_id=service_id, proficiency_level=proficiency_level)
        db.add(link)

    db.commit()
    db.refresh(link)
    logger.info("staff=%s qualified for service=%s (%s)", staff_id, service_id, proficiency_level.value)
    return link


def remove_service_from_staff(db: Session, business_id: UUID, staff_id: UUID, service_id: UUID) -> None:
    get_staff(db, business_id, staff_id)
    link = db.get(StaffService, (staff_id, service_id))
    if not link:
        raise NotFound("Staff is not assigned to this service")
    db.delete(link)
    db.commit()


def list_staff_services(db: Session, business_id: UUID, staff_id: UUID) -> list[dict]:
    get_staff(db, business_id, staff_id)
    rows = db.execute(
        select(StaffService, Service)
        .join(Service, Service.service_id == StaffService.service_id)
        .where(and_(StaffService.staff_id == staff_id, Service.business_id == business_id))
        .order_by(Service.name)
    ).all()

    return [
        {
            "staff_id": link.staff_id,
            "service_id": svc.service_id,
            "service_name": svc.name,
            "duration": svc.duration,
            "proficiency_level": link.proficiency_level,
        }
        for link, svc in rows
    ]
