from __future__ import annotations

import logging
from typing import Sequence
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session

from slot_scheduler.core.errors import NotFound, ValidationError
from slot_scheduler.models.roster_shift import RosterShift
from slot_scheduler.models.shift_template import ShiftTemplate
from slot_scheduler.scheduling.intervals import parse_hhmm
from slot_scheduler.scheduling.shift_templates import DEFAULT_SHIFT_TEMPLATES
from slot_scheduler.schemas.shift_templates import ShiftTemplateCreate, ShiftTemplateUpdate
from slot_scheduler.services.catalog import get_business
from slot_scheduler.services.slot_reconcile import reconcile_day
from slot_scheduler.services.validators import (
    normalize_breaks,
    validate_color,
    validate_days_of_week,
    validate_time_range,
)

logger = logging.getLogger(__name__)


def _validated_fields(payload: ShiftTemplateCreate) -> dict:
    """Run every template invariant; nothing is written unless all pass."""
    start = payload.start_time.replace(second=0, microsecond=0)
    end = payload.end_time.replace(second=0, microsecond=0)
    validate_time_range(start, end)
    return {
        "name": payload.name.strip(),
        "start_time": start,
        "end_time": end,
        "breaks": normalize_breaks(start, end, payload.breaks),
        "days_of_week": validate_days_of_week(payload.days_of_week),
        "color": validate_color(payload.color),
        "type": payload.type,
        "is_active": payload.is_active,
    }


def create_template(db: Session, business_id: UUID, payload: ShiftTemplateCreate) -> ShiftTemplate:
    get_business(db, business_id)
    t = ShiftTemplate(business_id=business_id, **_validated_fields(payload))
    db.add(t)
    db.commit()
    db.refresh(t)
    logger.info("shift template created business=%s template=%s name=%r", business_id, t.shift_template_id, t.name)
    return t


def get_template(db: Session, business_id: UUID, template_id: UUID) -> ShiftTemplate:
    t = db.get(ShiftTemplate, template_id)
    if not t or t.business_id != business_id:
        raise NotFound("Template not found")
    return t


def list_templates(db: Session, business_id: UUID, active_only: bool = False) -> Sequence[ShiftTemplate]:
    get_business(db, business_id)
    q = select(ShiftTemplate).where(ShiftTemplate.business_id == business_id)
    if active_only:
        q = q.where(ShiftTemplate.is_active == True)  # noqa: E712
    return db.execute(q.order_by(ShiftTemplate.start_time, ShiftTemplate.name)).scalars().all()


def update_template(db: Session, business_id: UUID, template_id: UUID, payload: ShiftTemplateUpdate) -> ShiftTemplate:
    t = get_template(db, business_id, template_id)
    for key, value in _validated_fields(payload).items():
        setattr(t, key, value)

    entries = db.execute(
        select(RosterShift).where(RosterShift.shift_template_id == template_id)
    ).scalars().all()
    for entry in entries:
        reconcile_day(db, business_id, entry.staff_id, entry.date, entry)

    db.commit()
    db.refresh(t)
    return t


def delete_template(db: Session, business_id: UUID, template_id: UUID) -> None:
    t = get_template(db, business_id, template_id)

    in_use = db.execute(
        select(RosterShift.roster_shift_id).where(RosterShift.shift_template_id == template_id).limit(1)
    ).first()
    if in_use:
        raise ValidationError(
            "template_in_use",
            "Template is assigned on the roster; deactivate it (is_active=false) instead of deleting",
        )

    db.delete(t)
    db.commit()
    logger.info("shift template deleted business=%s template=%s", business_id, template_id)


def seed_default_templates(db: Session, business_id: UUID) -> list[ShiftTemplate]:
    """Create the starter templates for a business that has none; otherwise do nothing."""
    get_business(db, business_id)
    if db.execute(select(ShiftTemplate.shift_template_id).where(ShiftTemplate.business_id == business_id).limit(1)).first():
        return []

    created: list[ShiftTemplate] = []
    for default in DEFAULT_SHIFT_TEMPLATES:
        start = parse_hhmm(default["start_hhmm"])
        end = parse_hhmm(default["end_hhmm"])
        t = ShiftTemplate(
            business_id=business_id,
            name=default["name"],
            start_time=start,
            end_time=end,
            breaks=normalize_breaks(start, end, default["breaks"]),
            days_of_week=validate_days_of_week(default["days"]),
            color=validate_color(default["color"]),
        )
        db.add(t)
        created.append(t)

    db.commit()
    for t in created:
        db.refresh(t)
    return created
