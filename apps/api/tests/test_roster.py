from datetime import date
from uuid import uuid4

import pytest

from conftest import MONDAY, TUESDAY
from slot_scheduler.core.errors import InvalidRange, NotFound, ValidationError
from slot_scheduler.models.enums import RosterStatus
from slot_scheduler.schemas.roster import RosterUpdate
from slot_scheduler.services import roster


def test_one_roster_entry_per_staff_per_day(db, seed):
    ctx = seed.salon()
    b, s = ctx["business"], ctx["staff"]
    other = seed.morning(b.business_id, name="Late")

    with pytest.raises(ValidationError) as exc:
        seed.roster(b.business_id, s, other, MONDAY)
    assert exc.value.invariant == "roster_unique"

    # A different day is fine.
    seed.roster(b.business_id, s, other, TUESDAY)


def test_template_must_apply_to_the_weekday(db, seed):
    b = seed.business()
    s = seed.staff(b.business_id)
    weekend = seed.morning(b.business_id, name="Weekend", days_of_week=[0, 6])

    with pytest.raises(ValidationError) as exc:
        seed.roster(b.business_id, s, weekend, MONDAY)
    assert exc.value.invariant == "template_day_of_week"

    entry = seed.roster(b.business_id, s, weekend, date(2026, 10, 24))
    assert entry.status == RosterStatus.scheduled


def test_inactive_template_cannot_be_assigned(db, seed):
    b = seed.business()
    s = seed.staff(b.business_id)
    t = seed.morning(b.business_id, is_active=False)

    with pytest.raises(ValidationError) as exc:
        seed.roster(b.business_id, s, t)
    assert exc.value.invariant == "template_inactive"


def test_assign_unknown_staff_is_not_found(db, seed):
    b = seed.business()
    t = seed.morning(b.business_id)
    ghost = seed.staff(seed.business("Elsewhere").business_id)

    with pytest.raises(NotFound):
        seed.roster(b.business_id, ghost, t)


def test_update_and_delete_entry(db, seed):
    ctx = seed.salon()
    b, entry = ctx["business"], ctx["roster"]
    late = seed.morning(b.business_id, name="Late")

    updated = roster.update_shift(
        db,
        b.business_id,
        entry.roster_shift_id,
        RosterUpdate(shift_template_id=late.shift_template_id, status=RosterStatus.sick, notes="flu"),
    )
    assert updated.shift_template_id == late.shift_template_id
    assert updated.status == RosterStatus.sick
    assert updated.notes == "flu"

    roster.delete_shift(db, b.business_id, entry.roster_shift_id)
    with pytest.raises(NotFound):
        roster.get_roster_shift(db, b.business_id, entry.roster_shift_id)
    with pytest.raises(NotFound):
        roster.delete_shift(db, b.business_id, uuid4())


def test_list_roster_joins_staff_and_template(db, seed):
    b = seed.business()
    t = seed.morning(b.business_id)
    zoe = seed.staff(b.business_id, name="Zoe")
    amy = seed.staff(b.business_id, name="Amy")
    seed.roster(b.business_id, zoe, t, MONDAY)
    seed.roster(b.business_id, amy, t, MONDAY)
    seed.roster(b.business_id, zoe, t, TUESDAY)

    rows = roster.list_roster(db, b.business_id, start_date=MONDAY, end_date=TUESDAY)
    assert [(e.date, s.name) for e, s, _ in rows] == [(MONDAY, "Amy"), (MONDAY, "Zoe"), (TUESDAY, "Zoe")]
    assert all(tpl.name == "Morning" for _, _, tpl in rows)

    only_zoe = roster.list_roster(db, b.business_id, staff_id=zoe.staff_id)
    assert len(only_zoe) == 2

    with pytest.raises(InvalidRange):
        roster.list_roster(db, b.business_id, start_date=TUESDAY, end_date=MONDAY)
