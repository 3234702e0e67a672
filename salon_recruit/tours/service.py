"""
Tour scheduling: slot validation, double-booking prevention and the status
lifecycle with its effects on the student record.
"""
from collections.abc import Awaitable, Callable
from datetime import date, datetime, timezone

import structlog
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from salon_recruit.exceptions import ConflictError, InvalidSlotError, NotFoundError
from salon_recruit.students.models import Student
from salon_recruit.students.service import get_student_by_id
from salon_recruit.tours.models import TourStatus, TourVisit
from salon_recruit.tours.schemas import TourUpdate
from salon_recruit.tours.slots import day_bounds, slots_for_day, to_local, validate_slot

logger = structlog.get_logger()

SLOT_TAKEN = "That tour time is already booked"

SideEffect = Callable[[AsyncSession, TourVisit], Awaitable[None]]


async def mark_visit_completed(db: AsyncSession, tour: TourVisit) -> None:
    """Flag the student as having completed a visit.

    The first completion time wins; repeated completions leave it untouched.
    """
    student = await db.get(Student, tour.student_id)
    if student is None:
        raise NotFoundError("Student")
    student.visit_completed = True
    if student.visit_completed_at is None:
        student.visit_completed_at = datetime.now(timezone.utc)


# (old status, resolved status) -> side effects run in the same transaction.
# Any pair resolving to COMPLETED marks the visit, including COMPLETED -> COMPLETED.
TRANSITION_EFFECTS: dict[tuple[TourStatus, TourStatus], list[SideEffect]] = {
    (old, TourStatus.COMPLETED): [mark_visit_completed] for old in TourStatus
}


def side_effects_for(old: TourStatus, new: TourStatus) -> list[SideEffect]:
    """Writes that must commit together with a status change from *old* to *new*."""
    return TRANSITION_EFFECTS.get((old, new), [])


async def get_tour_by_id(db: AsyncSession, tour_id: int) -> TourVisit | None:
    result = await db.execute(
        select(TourVisit)
        .where(TourVisit.id == tour_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def list_tours_for_day(db: AsyncSession, day: date) -> list[TourVisit]:
    start, end = day_bounds(day)
    result = await db.execute(
        select(TourVisit)
        .where(TourVisit.starts_at >= start, TourVisit.starts_at <= end)
        .order_by(TourVisit.starts_at.asc(), TourVisit.id.asc())
    )
    return list(result.scalars().all())


async def find_clash(db: AsyncSession, starts_at: datetime, exclude_id: int | None = None) -> TourVisit | None:
    query = select(TourVisit).where(
        TourVisit.starts_at == starts_at,
        TourVisit.status != TourStatus.CANCELED,
    )
    if exclude_id is not None:
        query = query.where(TourVisit.id != exclude_id)
    result = await db.execute(query.limit(1))
    return result.scalar_one_or_none()


async def get_available_slots(db: AsyncSession, day: date) -> list[tuple[datetime, bool]]:
    taken = {
        t.starts_at
        for t in await list_tours_for_day(db, day)
        if t.status != TourStatus.CANCELED
    }
    return [(slot, slot in taken) for slot in slots_for_day(day)]


def _checked_slot(starts_at: datetime) -> datetime:
    reason = validate_slot(starts_at)
    if reason:
        raise InvalidSlotError(reason)
    return to_local(starts_at)


async def book_tour(db: AsyncSession, student_id: int, starts_at: datetime, notes: str | None = None) -> TourVisit:
    if not await get_student_by_id(db, student_id):
        raise NotFoundError("Student")

    local_start = _checked_slot(starts_at)

    if await find_clash(db, local_start):
        raise ConflictError(SLOT_TAKEN)

    tour = TourVisit(
        student_id=student_id,
        starts_at=local_start,
        status=TourStatus.SCHEDULED,
        notes=notes,
    )
    db.add(tour)
    try:
        await db.commit()
    except IntegrityError as e:
        # Lost a race with another booking for the same slot
        await db.rollback()
        raise ConflictError(SLOT_TAKEN) from e

    logger.info("tour_booked", tour_id=tour.id, student_id=student_id, starts_at=local_start.isoformat())
    return await get_tour_by_id(db, tour.id)


async def reschedule_tour(db: AsyncSession, tour_id: int, data: TourUpdate) -> TourVisit:
    """Apply a partial update and its status side effects atomically."""
    tour = await get_tour_by_id(db, tour_id)
    if not tour:
        raise NotFoundError("Tour")

    update_data = data.model_dump(exclude_unset=True)

    new_start = None
    if update_data.get("starts_at") is not None:
        new_start = _checked_slot(update_data["starts_at"])
        if await find_clash(db, new_start, exclude_id=tour_id):
            raise ConflictError(SLOT_TAKEN)

    old_status = tour.status
    new_status = update_data.get("status") or old_status

    try:
        if new_start is not None:
            tour.starts_at = new_start
        if update_data.get("status") is not None:
            tour.status = new_status
        if "notes" in update_data:
            tour.notes = update_data["notes"]

        for effect in side_effects_for(old_status, new_status):
            await effect(db, tour)

        await db.commit()
    except IntegrityError as e:
        await db.rollback()
        raise ConflictError(SLOT_TAKEN) from e
    except Exception:
        await db.rollback()
        raise

    logger.info(
        "tour_updated",
        tour_id=tour_id,
        old_status=old_status.value,
        status=new_status.value,
        starts_at=tour.starts_at.isoformat(),
    )
    return await get_tour_by_id(db, tour_id)


async def cancel_tour(db: AsyncSession, tour_id: int) -> TourVisit:
    """Cancel instead of deleting, freeing the slot and keeping history."""
    tour = await get_tour_by_id(db, tour_id)
    if not tour:
        raise NotFoundError("Tour")

    try:
        tour.status = TourStatus.CANCELED
        await db.commit()
    except Exception:
        await db.rollback()
        raise

    logger.info("tour_canceled", tour_id=tour_id)
    return await get_tour_by_id(db, tour_id)
