from datetime import time

import pytest

from conftest import MONDAY
from slot_scheduler.core.errors import ValidationError
from slot_scheduler.models.enums import RosterStatus, SlotStatus
from slot_scheduler.schemas.roster import RosterUpdate
from slot_scheduler.schemas.shift_templates import ShiftTemplateUpdate
from slot_scheduler.services import roster, shift_templates, slot_service
from slot_scheduler.services.slot_generator import generate_slots


@pytest.fixture
def morning(db, seed):
    """Seven Monday haircuts from the Morning shift, the 09:00 one already booked."""
    ctx = seed.salon()
    b = ctx["business"]
    result = generate_slots(db, b.business_id, MONDAY, MONDAY)
    ctx["booked_id"] = result.slots[0].slot_id
    slot_service.claim_slot(db, b.business_id, ctx["booked_id"])
    return ctx


def _slots(db, ctx):
    return slot_service.query_slots(db, ctx["business"].business_id)


@pytest.mark.parametrize("status", [RosterStatus.sick, RosterStatus.leave, RosterStatus.absent])
def test_unavailable_status_removes_open_slots_and_blocks_bookings(db, morning, status):
    b = morning["business"]
    roster.update_shift(db, b.business_id, morning["roster"].roster_shift_id, RosterUpdate(status=status))

    remaining = _slots(db, morning)
    assert [(s.slot_id, s.status) for s in remaining] == [(morning["booked_id"], SlotStatus.blocked)]


def test_notes_only_update_keeps_every_slot(db, morning):
    b = morning["business"]
    roster.update_shift(db, b.business_id, morning["roster"].roster_shift_id, RosterUpdate(notes="running late"))

    slots = _slots(db, morning)
    assert len(slots) == 7
    assert [s.status for s in slots].count(SlotStatus.booked) == 1


def test_new_break_removes_the_slots_inside_it(db, morning):
    b, t = morning["business"], morning["template"]
    shift_templates.update_template(
        db,
        b.business_id,
        t.shift_template_id,
        ShiftTemplateUpdate(
            name="Morning",
            start_time=time(9, 0),
            end_time=time(13, 0),
            breaks=[{"start_time": "09:00", "end_time": "10:00", "type": "rest"}],
        ),
    )

    slots = _slots(db, morning)
    by_time = {f"{s.start_time:%H:%M}": s.status for s in slots}
    assert by_time == {
        "09:00": SlotStatus.blocked,
        "10:00": SlotStatus.available,
        "10:30": SlotStatus.available,
        "11:15": SlotStatus.available,
        "11:45": SlotStatus.available,
        "12:15": SlotStatus.available,
    }


def test_swapping_the_template_removes_slots_outside_the_new_window(db, seed, morning):
    b = morning["business"]
    evening = seed.morning(b.business_id, name="Evening", start_time=time(13, 0), end_time=time(17, 0), breaks=[])

    roster.update_shift(
        db, b.business_id, morning["roster"].roster_shift_id, RosterUpdate(shift_template_id=evening.shift_template_id)
    )

    remaining = _slots(db, morning)
    assert [(s.slot_id, s.status) for s in remaining] == [(morning["booked_id"], SlotStatus.blocked)]


def test_deleting_the_roster_entry_removes_its_slots(db, morning):
    b = morning["business"]
    roster.delete_shift(db, b.business_id, morning["roster"].roster_shift_id)

    remaining = _slots(db, morning)
    assert len(remaining) == 1
    assert remaining[0].status == SlotStatus.blocked
    assert remaining[0].roster_shift_id is None


def test_claim_refuses_a_slot_the_roster_no_longer_covers(db, seed):
    ctx = seed.salon()
    b = ctx["business"]
    slot = generate_slots(db, b.business_id, MONDAY, MONDAY).slots[0]
    slot_id = slot.slot_id

    # Changed behind the service layer, so no cleanup ran.
    ctx["roster"].status = RosterStatus.sick
    db.commit()

    with pytest.raises(ValidationError) as exc:
        slot_service.claim_slot(db, b.business_id, slot_id)
    assert exc.value.invariant == "staff_unavailable"
    assert slot_service.get_slot(db, b.business_id, slot_id).status == SlotStatus.available
