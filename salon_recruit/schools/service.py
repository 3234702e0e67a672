import structlog
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from salon_recruit.exceptions import ConflictError, InvalidInputError, NotFoundError
from salon_recruit.schools.models import School
from salon_recruit.schools.schemas import SchoolCreate, SchoolUpdate
from salon_recruit.students.models import Student

logger = structlog.get_logger()


def _clean(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


async def get_schools(db: AsyncSession) -> list[School]:
    result = await db.execute(select(School).order_by(School.name.asc()))
    return list(result.scalars().all())


async def get_school_by_id(db: AsyncSession, school_id: int) -> School | None:
    result = await db.execute(select(School).where(School.id == school_id))
    return result.scalar_one_or_none()


async def _ensure_unique_name(db: AsyncSession, name: str, exclude_id: int | None = None) -> None:
    query = select(School.id).where(func.lower(School.name) == name.lower())
    if exclude_id is not None:
        query = query.where(School.id != exclude_id)
    result = await db.execute(query.limit(1))
    if result.scalar_one_or_none() is not None:
        raise ConflictError(f"School '{name}' already exists")


async def create_school(db: AsyncSession, data: SchoolCreate) -> School:
    name = _clean(data.name)
    if not name:
        raise InvalidInputError("Name is required")
    await _ensure_unique_name(db, name)

    school = School(name=name, city=_clean(data.city), state=_clean(data.state))
    db.add(school)
    await db.commit()
    await db.refresh(school)
    logger.info("school_created", school_id=school.id, name=name)
    return school


async def update_school(db: AsyncSession, school_id: int, data: SchoolUpdate) -> School:
    school = await get_school_by_id(db, school_id)
    if not school:
        raise NotFoundError("School")

    update_data = data.model_dump(exclude_unset=True)
    if "name" in update_data:
        name = _clean(update_data["name"])
        if not name:
            raise InvalidInputError("Name is required")
        await _ensure_unique_name(db, name, exclude_id=school_id)
        school.name = name
    for field in ("city", "state"):
        if field in update_data:
            setattr(school, field, _clean(update_data[field]))

    await db.commit()
    await db.refresh(school)
    return school


async def delete_school(db: AsyncSession, school_id: int) -> None:
    school = await get_school_by_id(db, school_id)
    if not school:
        raise NotFoundError("School")

    in_use = await db.execute(select(func.count()).select_from(Student).where(Student.school_id == school_id))
    if in_use.scalar_one() > 0:
        raise ConflictError("School has students and cannot be deleted")

    await db.delete(school)
    await db.commit()
    logger.info("school_deleted", school_id=school_id)
