from decimal import Decimal
from uuid import uuid4

import pytest

from conftest import MONDAY
from slot_scheduler.core.errors import NotFound, ValidationError
from slot_scheduler.models.enums import ProficiencyLevel
from slot_scheduler.schemas.services import ServiceUpdate
from slot_scheduler.services import catalog
from slot_scheduler.services.slot_generator import generate_slots


def test_business_lookup(db, seed):
    b = seed.business()
    assert catalog.get_business(db, b.business_id).name == "Cut & Co"
    with pytest.raises(NotFound):
        catalog.get_business(db, uuid4())


def test_staff_and_services_are_scoped_to_the_business(db, seed):
    b = seed.business()
    other = seed.business("Other")
    s = seed.staff(b.business_id, name="Zoe")
    seed.staff(b.business_id, name="Amy")
    svc = seed.service(b.business_id)

    assert [x.name for x in catalog.list_staff(db, b.business_id)] == ["Amy", "Zoe"]
    assert catalog.list_staff(db, other.business_id) == []
    with pytest.raises(NotFound):
        catalog.get_staff(db, other.business_id, s.staff_id)
    with pytest.raises(NotFound):
        catalog.get_service(db, other.business_id, svc.service_id)


def test_capabilities(db, seed):
    b = seed.business()
    s = seed.staff(b.business_id)
    cut = seed.service(b.business_id, name="Haircut")
    colour = seed.service(b.business_id, name="Colour", duration=60)

    catalog.assign_service_to_staff(db, b.business_id, s.staff_id, cut.service_id)
    catalog.assign_service_to_staff(db, b.business_id, s.staff_id, colour.service_id, ProficiencyLevel.trainee)
    # Re-assigning only changes the level.
    catalog.assign_service_to_staff(db, b.business_id, s.staff_id, colour.service_id, ProficiencyLevel.expert)

    rows = catalog.list_staff_services(db, b.business_id, s.staff_id)
    assert [(r["service_name"], r["proficiency_level"]) for r in rows] == [
        ("Colour", ProficiencyLevel.expert),
        ("Haircut", ProficiencyLevel.junior),
    ]

    catalog.remove_service_from_staff(db, b.business_id, s.staff_id, cut.service_id)
    assert [r["service_name"] for r in catalog.list_staff_services(db, b.business_id, s.staff_id)] == ["Colour"]
    with pytest.raises(NotFound):
        catalog.remove_service_from_staff(db, b.business_id, s.staff_id, cut.service_id)


def test_update_service(db, seed):
    b = seed.business()
    svc = seed.service(b.business_id)

    updated = catalog.update_service(
        db, b.business_id, svc.service_id, ServiceUpdate(price=Decimal("50.00"), duration=40)
    )
    assert updated.price == Decimal("50.00")
    assert updated.duration == 40
    assert updated.name == "Haircut"


def test_duration_is_frozen_once_slots_exist(db, seed):
    ctx = seed.salon()
    b, svc = ctx["business"], ctx["services"][0]
    generate_slots(db, b.business_id, MONDAY, MONDAY)

    with pytest.raises(ValidationError) as exc:
        catalog.update_service(db, b.business_id, svc.service_id, ServiceUpdate(duration=45))
    assert exc.value.invariant == "slot_duration"

    # Other fields can still change.
    renamed = catalog.update_service(db, b.business_id, svc.service_id, ServiceUpdate(name="Cut", duration=30))
    assert renamed.name == "Cut"


def test_null_duration_in_update_leaves_a_frozen_duration_alone(db, seed):
    ctx = seed.salon()
    b, svc = ctx["business"], ctx["services"][0]
    generate_slots(db, b.business_id, MONDAY, MONDAY)

    renamed = catalog.update_service(db, b.business_id, svc.service_id, ServiceUpdate(name="Cut", duration=None))
    assert renamed.name == "Cut"
    assert renamed.duration == 30
