from __future__ import annotations

import os

# The app modules build their engine and settings at import time.
os.environ["DATABASE_URL"] = "sqlite://"

from datetime import date, time
from decimal import Decimal
from typing import Optional
from uuid import UUID

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from slot_scheduler.core.database import Base, get_db
from slot_scheduler.main import app
from slot_scheduler.models.business import Business  # noqa: F401
from slot_scheduler.models.roster_shift import RosterShift
from slot_scheduler.models.service import Service
from slot_scheduler.models.shift_template import ShiftTemplate
from slot_scheduler.models.slot import Slot  # noqa: F401
from slot_scheduler.models.slot_conflict import SlotConflict  # noqa: F401
from slot_scheduler.models.staff import Staff
from slot_scheduler.models.staff_service import StaffService  # noqa: F401
from slot_scheduler.models.enums import ProficiencyLevel, RosterStatus
from slot_scheduler.schemas.business import BusinessCreate
from slot_scheduler.schemas.roster import RosterAssign
from slot_scheduler.schemas.services import ServiceCreate
from slot_scheduler.schemas.shift_templates import ShiftTemplateCreate
from slot_scheduler.schemas.staff import StaffCreate
from slot_scheduler.services import catalog, roster, shift_templates

MONDAY = date(2026, 10, 19)
TUESDAY = date(2026, 10, 20)


@pytest.fixture
def engine(tmp_path):
    eng = create_engine(
        f"sqlite:///{tmp_path / 'slots.db'}",
        connect_args={"check_same_thread": False, "timeout": 30},
    )
    Base.metadata.create_all(eng)
    yield eng
    eng.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, autocommit=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


class Seed:
    """Small builders on top of the service layer so tests read like the setup a manager does."""

    def __init__(self, db: Session):
        self.db = db

    def business(self, name: str = "Cut & Co") -> Business:
        return catalog.create_business(self.db, BusinessCreate(name=name, industry="salon"))

    def staff(self, business_id: UUID, name: str = "Alex", is_active: bool = True) -> Staff:
        return catalog.create_staff(self.db, business_id, StaffCreate(name=name, is_active=is_active))

    def service(
        self, business_id: UUID, name: str = "Haircut", duration: int = 30, is_active: bool = True
    ) -> Service:
        return catalog.create_service(
            self.db,
            business_id,
            ServiceCreate(name=name, duration=duration, price=Decimal("45.00"), is_active=is_active),
        )

    def qualify(self, business_id: UUID, staff: Staff, service: Service) -> None:
        catalog.assign_service_to_staff(
            self.db, business_id, staff.staff_id, service.service_id, ProficiencyLevel.senior
        )

    def morning(self, business_id: UUID, name: str = "Morning", **overrides) -> ShiftTemplate:
        fields = {
            "name": name,
            "start_time": time(9, 0),
            "end_time": time(13, 0),
            "breaks": [{"start_time": "11:00", "end_time": "11:15", "type": "lunch"}],
        }
        fields.update(overrides)
        return shift_templates.create_template(self.db, business_id, ShiftTemplateCreate(**fields))

    def roster(
        self,
        business_id: UUID,
        staff: Staff,
        template: ShiftTemplate,
        d: date = MONDAY,
        status: RosterStatus = RosterStatus.scheduled,
    ) -> RosterShift:
        return roster.assign_shift(
            self.db,
            business_id,
            RosterAssign(staff_id=staff.staff_id, shift_template_id=template.shift_template_id, date=d, status=status),
        )

    def salon(self, services: Optional[list[tuple[str, int]]] = None, d: date = MONDAY) -> dict:
        """One business, one staff member on the Morning shift, qualified for the given services."""
        b = self.business()
        s = self.staff(b.business_id)
        made = []
        for name, duration in services or [("Haircut", 30)]:
            svc = self.service(b.business_id, name=name, duration=duration)
            self.qualify(b.business_id, s, svc)
            made.append(svc)
        t = self.morning(b.business_id)
        entry = self.roster(b.business_id, s, t, d)
        return {"business": b, "staff": s, "services": made, "template": t, "roster": entry}


@pytest.fixture
def seed(db):
    return Seed(db)
