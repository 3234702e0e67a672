from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from salon_recruit.database import get_db
from salon_recruit.dependencies import public_rate_limit, require_admin
from salon_recruit.students.models import AreaOfInterest
from salon_recruit.students.schemas import StudentFilter, StudentResponse, StudentSubmit, StudentUpdate
from salon_recruit.students.service import (
    delete_student,
    export_students_csv,
    get_student_by_id,
    get_students,
    submit_student,
    update_student,
)

router = APIRouter(prefix="/students", tags=["students"])


def student_filters(
    school_id: int | None = Query(None, alias="schoolId"),
    campaign_id: int | None = Query(None, alias="campaignId"),
    area_of_interest: AreaOfInterest | None = Query(None, alias="areaOfInterest"),
    contacted: bool | None = Query(None),
    visit_completed: bool | None = Query(None, alias="visitCompleted"),
) -> StudentFilter:
    return StudentFilter(
        school_id=school_id,
        campaign_id=campaign_id,
        area_of_interest=area_of_interest,
        contacted=contacted,
        visit_completed=visit_completed,
    )


@router.post("", response_model=StudentResponse, status_code=status.HTTP_201_CREATED)
async def submit(
    data: StudentSubmit,
    _=Depends(public_rate_limit),
    db: AsyncSession = Depends(get_db),
):
    """Public kiosk intake. The active campaign is assigned server side."""
    student = await submit_student(db, data)
    return StudentResponse.model_validate(student)


@router.get("", response_model=list[StudentResponse])
async def list_students(
    filters: StudentFilter = Depends(student_filters),
    _=Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    students = await get_students(db, filters)
    return [StudentResponse.model_validate(s) for s in students]


@router.get("/export/csv")
async def export_csv(
    filters: StudentFilter = Depends(student_filters),
    _=Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    content = await export_students_csv(db, filters)
    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="students.csv"'},
    )


@router.get("/{student_id}", response_model=StudentResponse)
async def get_student(
    student_id: int,
    _=Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    student = await get_student_by_id(db, student_id)
    if not student:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Student not found")
    return StudentResponse.model_validate(student)


@router.api_route("/{student_id}", methods=["PUT", "PATCH"], response_model=StudentResponse)
async def update(
    student_id: int,
    data: StudentUpdate,
    _=Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    student = await update_student(db, student_id, data)
    return StudentResponse.model_validate(student)


@router.delete("/{student_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete(
    student_id: int,
    _=Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    await delete_student(db, student_id)
