from datetime import datetime

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from salon_recruit.campaigns.models import Campaign
from salon_recruit.schools.models import School
from salon_recruit.students.models import Student
from salon_recruit.tours import service as tour_service
from salon_recruit.tours.models import TourStatus, TourVisit
from salon_recruit.tours.schemas import TourUpdate
from salon_recruit.tours.service import book_tour, mark_visit_completed, reschedule_tour
from tests.conftest import session_factory

TUESDAY_9AM = datetime(2025, 6, 10, 9, 0)


async def _seed_student(db: AsyncSession) -> int:
    school = School(name="Desert Vista High")
    campaign = Campaign(name="Fall Open House", is_active=True)
    db.add_all([school, campaign])
    await db.flush()
    student = Student(first_name="Maya", last_name="Lopez", phone="6025552222", school_id=school.id, campaign_id=campaign.id)
    db.add(student)
    await db.commit()
    return student.id


async def _fresh(model, pk):
    async with session_factory() as session:
        return await session.get(model, pk)


@pytest.mark.asyncio
async def test_failed_side_effect_rolls_back_status(db: AsyncSession, monkeypatch):
    student_id = await _seed_student(db)
    tour_id = (await book_tour(db, student_id, TUESDAY_9AM)).id

    async def boom(_db, _tour):
        raise RuntimeError("disk full")

    monkeypatch.setitem(
        tour_service.TRANSITION_EFFECTS,
        (TourStatus.SCHEDULED, TourStatus.COMPLETED),
        [mark_visit_completed, boom],
    )

    with pytest.raises(RuntimeError):
        await reschedule_tour(db, tour_id, TourUpdate(status=TourStatus.COMPLETED))

    tour = await _fresh(TourVisit, tour_id)
    student = await _fresh(Student, student_id)
    assert tour.status == TourStatus.SCHEDULED
    assert student.visit_completed is False
    assert student.visit_completed_at is None


@pytest.mark.asyncio
async def test_repeated_completion_keeps_first_timestamp(db: AsyncSession):
    student_id = await _seed_student(db)
    tour_id = (await book_tour(db, student_id, TUESDAY_9AM)).id

    await reschedule_tour(db, tour_id, TourUpdate(status=TourStatus.COMPLETED))
    first = (await _fresh(Student, student_id)).visit_completed_at
    assert first is not None

    await reschedule_tour(db, tour_id, TourUpdate(status=TourStatus.COMPLETED))
    student = await _fresh(Student, student_id)
    assert student.visit_completed is True
    assert student.visit_completed_at == first


@pytest.mark.asyncio
async def test_reopening_completed_tour_keeps_visit_flag(db: AsyncSession):
    student_id = await _seed_student(db)
    tour_id = (await book_tour(db, student_id, TUESDAY_9AM)).id

    await reschedule_tour(db, tour_id, TourUpdate(status=TourStatus.COMPLETED))
    await reschedule_tour(db, tour_id, TourUpdate(status=TourStatus.SCHEDULED))

    assert (await _fresh(TourVisit, tour_id)).status == TourStatus.SCHEDULED
    assert (await _fresh(Student, student_id)).visit_completed is True


def test_every_transition_into_completed_marks_visit():
    for old in TourStatus:
        assert mark_visit_completed in tour_service.side_effects_for(old, TourStatus.COMPLETED)
    assert tour_service.side_effects_for(TourStatus.SCHEDULED, TourStatus.NO_SHOW) == []


@pytest.mark.asyncio
async def test_failed_cancel_leaves_tour_scheduled(db: AsyncSession, monkeypatch):
    student_id = await _seed_student(db)
    tour_id = (await book_tour(db, student_id, TUESDAY_9AM)).id

    async def lost_connection():
        raise RuntimeError("connection lost")

    monkeypatch.setattr(db, "commit", lost_connection)

    with pytest.raises(RuntimeError):
        await tour_service.cancel_tour(db, tour_id)

    assert (await _fresh(TourVisit, tour_id)).status == TourStatus.SCHEDULED
    # Session was rolled back and is usable again
    monkeypatch.undo()
    assert (await tour_service.get_tour_by_id(db, tour_id)).status == TourStatus.SCHEDULED
