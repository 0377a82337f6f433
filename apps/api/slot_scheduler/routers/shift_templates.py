from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from slot_scheduler.core.database import get_db
from slot_scheduler.schemas.shift_templates import ShiftTemplateCreate, ShiftTemplateOut, ShiftTemplateUpdate
from slot_scheduler.services import shift_templates as templates

router = APIRouter()


@router.get("/{business_id}/shift-templates", response_model=list[ShiftTemplateOut])
def list_shift_templates(business_id: UUID, active_only: bool = False, db: Session = Depends(get_db)):
    return templates.list_templates(db, business_id, active_only=active_only)


@router.post("/{business_id}/shift-templates", response_model=ShiftTemplateOut)
def create_shift_template(business_id: UUID, payload: ShiftTemplateCreate, db: Session = Depends(get_db)):
    return templates.create_template(db, business_id, payload)


@router.post("/{business_id}/shift-templates/defaults", response_model=list[ShiftTemplateOut])
def seed_default_shift_templates(business_id: UUID, db: Session = Depends(get_db)):
    """Starter templates for a business with none; returns [] if it already has some."""
    return templates.seed_default_templates(db, business_id)


@router.get("/{business_id}/shift-templates/{template_id}", response_model=ShiftTemplateOut)
def get_shift_template(business_id: UUID, template_id: UUID, db: Session = Depends(get_db)):
    return templates.get_template(db, business_id, template_id)


@router.put("/{business_id}/shift-templates/{template_id}", response_model=ShiftTemplateOut)
def update_shift_template(
    business_id: UUID, template_id: UUID, payload: ShiftTemplateUpdate, db: Session = Depends(get_db)
):
    return templates.update_template(db, business_id, template_id, payload)


@router.delete("/{business_id}/shift-templates/{template_id}")
def delete_shift_template(business_id: UUID, template_id: UUID, db: Session = Depends(get_db)):
    templates.delete_template(db, business_id, template_id)
    return {"message": "Template deleted successfully", "shift_template_id": str(template_id)}
