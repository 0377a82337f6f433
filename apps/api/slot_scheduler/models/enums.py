import enum


class ShiftType(str, enum.Enum):
    regular = "regular"
    overtime = "overtime"
    holiday = "holiday"
    leave = "leave"


class BreakType(str, enum.Enum):
    lunch = "lunch"
    coffee = "coffee"
    rest = "rest"


class RosterStatus(str, enum.Enum):
    scheduled = "scheduled"
    working = "working"
    completed = "completed"
    leave = "leave"
    sick = "sick"
    absent = "absent"


# Roster entries in these states produce no bookable time.
UNAVAILABLE_ROSTER_STATUSES = frozenset({RosterStatus.leave, RosterStatus.sick, RosterStatus.absent})


class SlotStatus(str, enum.Enum):
    available = "available"
    booked = "booked"
    blocked = "blocked"


class ProficiencyLevel(str, enum.Enum):
    trainee = "trainee"
    junior = "junior"
    senior = "senior"
    expert = "expert"
