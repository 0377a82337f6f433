from concurrent.futures import ThreadPoolExecutor
from datetime import datetime
from uuid import uuid4

import pytest

from conftest import MONDAY, TUESDAY
from slot_scheduler.core.errors import (
    AlreadyBookedError,
    ConflictError,
    InvalidRange,
    InvalidTransition,
    NotFound,
)
from slot_scheduler.models.enums import SlotStatus
from slot_scheduler.models.slot import Slot
from slot_scheduler.services import slot_service
from slot_scheduler.services.slot_generator import generate_slots


@pytest.fixture
def generated(db, seed):
    """Two staff on Monday, one on Tuesday, all doing 30 minute haircuts."""
    ctx = seed.salon()
    b, t, svc = ctx["business"], ctx["template"], ctx["services"][0]
    sam = seed.staff(b.business_id, name="Sam")
    seed.qualify(b.business_id, sam, svc)
    seed.roster(b.business_id, sam, t, MONDAY)
    seed.roster(b.business_id, ctx["staff"], t, TUESDAY)
    generate_slots(db, b.business_id, MONDAY, TUESDAY)
    ctx["sam"] = sam
    return ctx


def _first_available(db, business_id):
    return slot_service.query_slots(db, business_id, status=SlotStatus.available)[0]


def test_query_is_ordered_by_start_then_staff(db, generated):
    slots = slot_service.query_slots(db, generated["business"].business_id)
    assert len(slots) == 21
    keys = [(s.start_time, s.staff_id.hex, s.slot_id.hex) for s in slots]
    assert keys == sorted(keys)


def test_query_filters(db, generated):
    b = generated["business"]

    monday = slot_service.query_slots(db, b.business_id, date_start=MONDAY, date_end=MONDAY)
    assert len(monday) == 14
    assert {s.generated_for for s in monday} == {MONDAY}

    tuesday = slot_service.query_slots(db, b.business_id, date_start=TUESDAY)
    assert len(tuesday) == 7

    sams = slot_service.query_slots(db, b.business_id, staff_id=generated["sam"].staff_id)
    assert len(sams) == 7

    svc = generated["services"][0]
    assert len(slot_service.query_slots(db, b.business_id, service_id=svc.service_id)) == 21
    assert slot_service.query_slots(db, b.business_id, service_id=uuid4()) == []

    with pytest.raises(InvalidRange):
        slot_service.query_slots(db, b.business_id, date_start=TUESDAY, date_end=MONDAY)
    with pytest.raises(NotFound):
        slot_service.query_slots(db, uuid4())


def test_claim_then_second_claim_fails(db, generated):
    b = generated["business"]
    slot = _first_available(db, b.business_id)

    claimed = slot_service.claim_slot(db, b.business_id, slot.slot_id)
    assert claimed.status == SlotStatus.booked

    with pytest.raises(AlreadyBookedError) as exc:
        slot_service.claim_slot(db, b.business_id, slot.slot_id)
    assert exc.value.slot_id == slot.slot_id

    booked = slot_service.query_slots(db, b.business_id, status=SlotStatus.booked)
    assert [s.slot_id for s in booked] == [slot.slot_id]


def test_claim_unknown_slot_is_not_found(db, generated):
    with pytest.raises(NotFound):
        slot_service.claim_slot(db, generated["business"].business_id, uuid4())


def test_claim_refused_when_staff_already_booked_at_that_time(db, seed):
    ctx = seed.salon(services=[("Colour", 60), ("Haircut", 30)])
    b = ctx["business"]
    generate_slots(db, b.business_id, MONDAY, MONDAY)
    colour, haircut = ctx["services"]

    nine = datetime(2026, 10, 19, 9, 0)
    colour_nine = next(
        s for s in slot_service.query_slots(db, b.business_id, service_id=colour.service_id) if s.start_time == nine
    )
    haircut_nine = next(
        s for s in slot_service.query_slots(db, b.business_id, service_id=haircut.service_id) if s.start_time == nine
    )

    slot_service.claim_slot(db, b.business_id, colour_nine.slot_id)
    with pytest.raises(ConflictError) as exc:
        slot_service.claim_slot(db, b.business_id, haircut_nine.slot_id)
    assert exc.value.invariant == "booked_overlap"
    assert slot_service.get_slot(db, b.business_id, haircut_nine.slot_id).status == SlotStatus.available


def test_block_and_release(db, generated):
    b = generated["business"]
    slot = _first_available(db, b.business_id)

    blocked = slot_service.block_slot(db, b.business_id, slot.slot_id)
    assert blocked.status == SlotStatus.blocked

    with pytest.raises(InvalidTransition):
        slot_service.block_slot(db, b.business_id, slot.slot_id)
    with pytest.raises(AlreadyBookedError):
        slot_service.claim_slot(db, b.business_id, slot.slot_id)

    released = slot_service.release_slot(db, b.business_id, slot.slot_id)
    assert released.status == SlotStatus.available

    # Releasing an available slot changes nothing.
    again = slot_service.release_slot(db, b.business_id, slot.slot_id)
    assert again.status == SlotStatus.available


def test_booked_slot_can_be_released(db, generated):
    b = generated["business"]
    slot = _first_available(db, b.business_id)
    slot_service.claim_slot(db, b.business_id, slot.slot_id)

    released = slot_service.release_slot(db, b.business_id, slot.slot_id)
    assert released.status == SlotStatus.available


def test_delete_removes_conflict_references(db, seed):
    ctx = seed.salon(services=[("Colour", 60), ("Haircut", 30)])
    b = ctx["business"]
    generate_slots(db, b.business_id, MONDAY, MONDAY)

    colour = ctx["services"][0]
    colour_nine = slot_service.query_slots(db, b.business_id, service_id=colour.service_id)[0]
    slot_id = colour_nine.slot_id
    partners = list(colour_nine.conflicting_slot_ids)
    assert len(partners) == 2

    slot_service.delete_slot(db, b.business_id, slot_id)

    with pytest.raises(NotFound):
        slot_service.get_slot(db, b.business_id, slot_id)
    for partner_id in partners:
        assert slot_service.get_slot(db, b.business_id, partner_id).conflicting_slot_ids == []
    with pytest.raises(NotFound):
        slot_service.delete_slot(db, b.business_id, slot_id)


def test_slot_of_another_business_is_not_found(db, seed, generated):
    other = seed.business("Other")
    slot = _first_available(db, generated["business"].business_id)
    with pytest.raises(NotFound):
        slot_service.get_slot(db, other.business_id, slot.slot_id)
    with pytest.raises(NotFound):
        slot_service.claim_slot(db, other.business_id, slot.slot_id)


def test_concurrent_claims_have_exactly_one_winner(db, session_factory, generated):
    business_id = generated["business"].business_id
    slot_id = _first_available(db, business_id).slot_id
    db.rollback()

    def attempt(_):
        session = session_factory()
        try:
            slot_service.claim_slot(session, business_id, slot_id)
            return "won"
        except AlreadyBookedError:
            return "lost"
        finally:
            session.close()

    with ThreadPoolExecutor(max_workers=8) as pool:
        outcomes = list(pool.map(attempt, range(8)))

    assert outcomes.count("won") == 1
    assert outcomes.count("lost") == 7

    check = session_factory()
    try:
        assert check.get(Slot, slot_id).status == SlotStatus.booked
    finally:
        check.close()
