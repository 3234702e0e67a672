"""
Booking-window policy for tours.

Tours run Tuesday through Saturday, 9:00 AM to 4:00 PM local time, on a
30-minute grid. A slot reserves 30 minutes, so the last start is 3:30 PM.
All values here are naive datetimes in ``settings.LOCAL_TIMEZONE``.
"""
from datetime import date, datetime, time, timedelta
from zoneinfo import ZoneInfo

from salon_recruit.config import settings

SLOT_MINUTES = 30
OPENING_TIME = time(9, 0)
LAST_START_TIME = time(15, 30)
# Monday=0 ... Sunday=6
TOUR_WEEKDAYS = {1, 2, 3, 4, 5}

REASON_WEEKDAY = "Tours are only Tue-Sat"
REASON_HOURS = "Tours must be between 9:00 AM and 4:00 PM (last start 3:30 PM)"
REASON_GRID = "Tours must be scheduled on 30-minute slots (:00 or :30)"


def local_zone() -> ZoneInfo:
    return ZoneInfo(settings.LOCAL_TIMEZONE)


def to_local(value: datetime) -> datetime:
    """Convert *value* into naive local wall-clock time.

    Aware datetimes are shifted into the local zone; naive ones are taken to
    already be local.
    """
    if value.tzinfo is None:
        return value
    return value.astimezone(local_zone()).replace(tzinfo=None)


def validate_slot(starts_at: datetime) -> str | None:
    """Return the reason *starts_at* cannot be booked, or None if it can."""
    local = to_local(starts_at)

    if local.weekday() not in TOUR_WEEKDAYS:
        return REASON_WEEKDAY

    if local.hour < OPENING_TIME.hour or local.hour > LAST_START_TIME.hour:
        return REASON_HOURS
    if local.hour == LAST_START_TIME.hour and local.minute > LAST_START_TIME.minute:
        return REASON_HOURS

    if local.minute not in (0, 30) or local.second or local.microsecond:
        return REASON_GRID

    return None


def day_bounds(day: date) -> tuple[datetime, datetime]:
    """First and last instant of a local calendar day, millisecond precision."""
    start = datetime.combine(day, time(0, 0, 0))
    end = datetime.combine(day, time(23, 59, 59, 999000))
    return start, end


def slots_for_day(day: date) -> list[datetime]:
    if day.weekday() not in TOUR_WEEKDAYS:
        return []

    slots = []
    current = datetime.combine(day, OPENING_TIME)
    last = datetime.combine(day, LAST_START_TIME)
    while current <= last:
        slots.append(current)
        current += timedelta(minutes=SLOT_MINUTES)
    return slots
