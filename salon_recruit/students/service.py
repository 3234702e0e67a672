import csv
import io
from datetime import datetime, timezone

import structlog
from sqlalchemy import delete, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from salon_recruit.campaigns.service import find_active_campaign
from salon_recruit.config import settings
from salon_recruit.exceptions import ConflictError, InvalidInputError, NotFoundError, UnavailableError
from salon_recruit.outreach.models import OutreachLog, OutreachMessage
from salon_recruit.schools.service import get_school_by_id
from salon_recruit.students.intake import CleanIntake, clean_email, clean_phone, normalize_intake
from salon_recruit.students.models import Student
from salon_recruit.students.schemas import StudentFilter, StudentSubmit, StudentUpdate
from salon_recruit.tours.models import TourVisit

logger = structlog.get_logger()

CSV_HEADER = [
    "ID",
    "First Name",
    "Last Name",
    "Email",
    "Phone",
    "Area of Interest",
    "School",
    "Campaign",
    "Consent",
    "Contacted",
    "Contacted At",
    "Visit Completed",
    "Visit Completed At",
    "Created At",
]


async def get_student_by_id(db: AsyncSession, student_id: int) -> Student | None:
    result = await db.execute(
        select(Student)
        .where(Student.id == student_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def _find_duplicate(db: AsyncSession, campaign_id: int, intake: CleanIntake) -> Student | None:
    matches = []
    if intake.email:
        matches.append(func.lower(Student.email) == intake.email.lower())
    if intake.phone:
        matches.append(Student.phone == intake.phone)

    result = await db.execute(
        select(Student).where(Student.campaign_id == campaign_id, or_(*matches)).limit(1)
    )
    return result.scalar_one_or_none()


async def submit_student(db: AsyncSession, data: StudentSubmit) -> Student:
    """Create a student from a kiosk submission, stamped with the active campaign."""
    intake = normalize_intake(data)

    school = await get_school_by_id(db, intake.school_id)
    if not school:
        raise NotFoundError("School")

    campaign = await find_active_campaign(db)
    if not campaign:
        raise UnavailableError("No active campaign")

    if settings.INTAKE_DUPLICATE_GUARD and await _find_duplicate(db, campaign.id, intake):
        raise ConflictError("This student has already been submitted for the current campaign")

    student = Student(
        first_name=intake.first_name,
        last_name=intake.last_name,
        email=intake.email,
        phone=intake.phone,
        area_of_interest=intake.area_of_interest,
        consent=intake.consent,
        contacted=False,
        visit_completed=False,
        school_id=school.id,
        campaign_id=campaign.id,
    )
    db.add(student)
    await db.commit()

    logger.info("student_submitted", student_id=student.id, campaign_id=campaign.id, school_id=school.id)
    return await get_student_by_id(db, student.id)


def _filtered(query, filters: StudentFilter):
    if filters.school_id is not None:
        query = query.where(Student.school_id == filters.school_id)
    if filters.campaign_id is not None:
        query = query.where(Student.campaign_id == filters.campaign_id)
    if filters.area_of_interest is not None:
        query = query.where(Student.area_of_interest == filters.area_of_interest)
    if filters.contacted is not None:
        query = query.where(Student.contacted.is_(filters.contacted))
    if filters.visit_completed is not None:
        query = query.where(Student.visit_completed.is_(filters.visit_completed))
    return query


async def get_students(db: AsyncSession, filters: StudentFilter) -> list[Student]:
    query = _filtered(select(Student), filters).order_by(Student.created_at.desc(), Student.id.desc())
    result = await db.execute(query)
    return list(result.scalars().all())


def _apply_flag(student: Student, flag: str, value: bool, now: datetime) -> None:
    stamp = f"{flag}_at"
    setattr(student, flag, value)
    if not value:
        setattr(student, stamp, None)
    elif getattr(student, stamp) is None:
        setattr(student, stamp, now)


async def update_student(db: AsyncSession, student_id: int, data: StudentUpdate) -> Student:
    student = await get_student_by_id(db, student_id)
    if not student:
        raise NotFoundError("Student")

    update_data = data.model_dump(exclude_unset=True)
    now = datetime.now(timezone.utc)

    for field in ("first_name", "last_name"):
        if field in update_data:
            value = (update_data[field] or "").strip()
            if not value:
                raise InvalidInputError(f"{field.replace('_', ' ').capitalize()} cannot be empty")
            setattr(student, field, value)

    if "email" in update_data:
        student.email = clean_email(update_data["email"])
    if "phone" in update_data:
        student.phone = clean_phone(update_data["phone"])
    if not student.email and not student.phone:
        raise InvalidInputError("Provide at least an email or a phone number")

    if update_data.get("school_id") is not None:
        if not await get_school_by_id(db, update_data["school_id"]):
            raise NotFoundError("School")
        student.school_id = update_data["school_id"]

    if update_data.get("area_of_interest") is not None:
        student.area_of_interest = update_data["area_of_interest"]
    if "consent" in update_data:
        student.consent = update_data["consent"]
    for flag in ("contacted", "visit_completed"):
        if update_data.get(flag) is not None:
            _apply_flag(student, flag, update_data[flag], now)

    await db.commit()
    return await get_student_by_id(db, student_id)


async def delete_student(db: AsyncSession, student_id: int) -> None:
    """Remove a student together with its tours and outreach history."""
    student = await get_student_by_id(db, student_id)
    if not student:
        raise NotFoundError("Student")

    try:
        await db.execute(delete(OutreachLog).where(OutreachLog.student_id == student_id))
        await db.execute(delete(OutreachMessage).where(OutreachMessage.student_id == student_id))
        await db.execute(delete(TourVisit).where(TourVisit.student_id == student_id))
        await db.delete(student)
        await db.commit()
    except Exception:
        await db.rollback()
        raise
    logger.info("student_deleted", student_id=student_id)


def _fmt(value) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "Yes" if value else "No"
    if isinstance(value, datetime):
        return value.isoformat()
    if hasattr(value, "value"):
        return value.value
    return str(value)


async def export_students_csv(db: AsyncSession, filters: StudentFilter) -> str:
    students = await get_students(db, filters)

    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    for s in students:
        writer.writerow(
            [
                _fmt(v)
                for v in (
                    s.id,
                    s.first_name,
                    s.last_name,
                    s.email,
                    s.phone,
                    s.area_of_interest,
                    s.school.name,
                    s.campaign.name,
                    s.consent,
                    s.contacted,
                    s.contacted_at,
                    s.visit_completed,
                    s.visit_completed_at,
                    s.created_at,
                )
            ]
        )
    return buffer.getvalue()
