from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from slot_scheduler.core.database import get_db
from slot_scheduler.schemas.business import BusinessCreate, BusinessOut
from slot_scheduler.schemas.services import ServiceCreate, ServiceOut, ServiceUpdate
from slot_scheduler.schemas.staff import StaffCreate, StaffOut, StaffServiceAssign, StaffServiceOut
from slot_scheduler.services import catalog

router = APIRouter()


# --- Businesses ---
@router.post("", response_model=BusinessOut)
def create_business(payload: BusinessCreate, db: Session = Depends(get_db)):
    return catalog.create_business(db, payload)


@router.get("/{business_id}", response_model=BusinessOut)
def get_business(business_id: UUID, db: Session = Depends(get_db)):
    return catalog.get_business(db, business_id)


# --- Staff ---
@router.post("/{business_id}/staff", response_model=StaffOut)
def create_staff(business_id: UUID, payload: StaffCreate, db: Session = Depends(get_db)):
    return catalog.create_staff(db, business_id, payload)


@router.get("/{business_id}/staff", response_model=list[StaffOut])
def list_staff(business_id: UUID, db: Session = Depends(get_db)):
    return catalog.list_staff(db, business_id)


# --- Services ---
@router.post("/{business_id}/services", response_model=ServiceOut)
def create_service(business_id: UUID, payload: ServiceCreate, db: Session = Depends(get_db)):
    return catalog.create_service(db, business_id, payload)


@router.get("/{business_id}/services", response_model=list[ServiceOut])
def list_services(business_id: UUID, active_only: bool = False, db: Session = Depends(get_db)):
    return catalog.list_services(db, business_id, active_only=active_only)


@router.put("/{business_id}/services/{service_id}", response_model=ServiceOut)
def update_service(business_id: UUID, service_id: UUID, payload: ServiceUpdate, db: Session = Depends(get_db)):
    return catalog.update_service(db, business_id, service_id, payload)


# --- Staff capabilities ---
@router.get("/{business_id}/staff/{staff_id}/services", response_model=list[StaffServiceOut])
def list_staff_services(business_id: UUID, staff_id: UUID, db: Session = Depends(get_db)):
    return catalog.list_staff_services(db, business_id, staff_id)


@router.put("/{business_id}/staff/{staff_id}/services/{service_id}")
def assign_service(
    business_id: UUID,
    staff_id: UUID,
    service_id: UUID,
    payload: StaffServiceAssign = StaffServiceAssign(),
    db: Session = Depends(get_db),
):
    link = catalog.assign_service_to_staff(db, business_id, staff_id, service_id, payload.proficiency_level)
    return {
        "staff_id": str(link.staff_id),
        "service_id": str(link.service_id),
        "proficiency_level": link.proficiency_level.value,
    }


@router.delete("/{business_id}/staff/{staff_id}/services/{service_id}")
def remove_service(business_id: UUID, staff_id: UUID, service_id: UUID, db: Session = Depends(get_db)):
    catalog.remove_service_from_staff(db, business_id, staff_id, service_id)
    return {"deleted": True, "staff_id": str(staff_id), "service_id": str(service_id)}
