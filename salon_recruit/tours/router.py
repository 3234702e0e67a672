from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from salon_recruit.database import get_db
from salon_recruit.dependencies import require_admin
from salon_recruit.tours.schemas import TourCreate, TourResponse, TourSlot, TourSlotsResponse, TourUpdate
from salon_recruit.tours.service import (
    book_tour,
    cancel_tour,
    get_available_slots,
    get_tour_by_id,
    list_tours_for_day,
    reschedule_tour,
)

router = APIRouter(prefix="/tours", tags=["tours"], dependencies=[Depends(require_admin)])


@router.get("", response_model=list[TourResponse])
async def list_tours(
    day: date = Query(..., alias="date", description="Local calendar day, YYYY-MM-DD"),
    db: AsyncSession = Depends(get_db),
):
    tours = await list_tours_for_day(db, day)
    return [TourResponse.model_validate(t) for t in tours]


@router.get("/slots", response_model=TourSlotsResponse)
async def list_slots(
    day: date = Query(..., alias="date"),
    db: AsyncSession = Depends(get_db),
):
    slots = await get_available_slots(db, day)
    return TourSlotsResponse(
        date=day,
        slots=[TourSlot(starts_at=starts_at, booked=booked) for starts_at, booked in slots],
    )


@router.get("/{tour_id}", response_model=TourResponse)
async def get_tour(tour_id: int, db: AsyncSession = Depends(get_db)):
    tour = await get_tour_by_id(db, tour_id)
    if not tour:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Tour not found")
    return TourResponse.model_validate(tour)


@router.post("", response_model=TourResponse, status_code=status.HTTP_201_CREATED)
async def book(data: TourCreate, db: AsyncSession = Depends(get_db)):
    tour = await book_tour(db, data.student_id, data.starts_at, data.notes)
    return TourResponse.model_validate(tour)


@router.api_route("/{tour_id}", methods=["PUT", "PATCH"], response_model=TourResponse)
async def update(tour_id: int, data: TourUpdate, db: AsyncSession = Depends(get_db)):
    tour = await reschedule_tour(db, tour_id, data)
    return TourResponse.model_validate(tour)


@router.delete("/{tour_id}", response_model=TourResponse)
async def cancel(tour_id: int, db: AsyncSession = Depends(get_db)):
    """Tours are canceled, never hard-deleted."""
    tour = await cancel_tour(db, tour_id)
    return TourResponse.model_validate(tour)
