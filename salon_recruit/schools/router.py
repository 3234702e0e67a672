from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from salon_recruit.database import get_db
from salon_recruit.dependencies import require_admin
from salon_recruit.schools.schemas import SchoolCreate, SchoolResponse, SchoolUpdate
from salon_recruit.schools.service import create_school, delete_school, get_schools, update_school

router = APIRouter(prefix="/schools", tags=["schools"])


@router.get("", response_model=list[SchoolResponse])
async def list_schools(db: AsyncSession = Depends(get_db)):
    schools = await get_schools(db)
    return [SchoolResponse.model_validate(s) for s in schools]


@router.post("", response_model=SchoolResponse, status_code=status.HTTP_201_CREATED)
async def create(
    data: SchoolCreate,
    _=Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    school = await create_school(db, data)
    return SchoolResponse.model_validate(school)


@router.put("/{school_id}", response_model=SchoolResponse)
async def update(
    school_id: int,
    data: SchoolUpdate,
    _=Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    school = await update_school(db, school_id, data)
    return SchoolResponse.model_validate(school)


@router.delete("/{school_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete(
    school_id: int,
    _=Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    await delete_school(db, school_id)
