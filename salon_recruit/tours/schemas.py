from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field

from salon_recruit.students.schemas import StudentResponse
from salon_recruit.tours.models import TourStatus


class TourCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    student_id: int = Field(alias="studentId")
    starts_at: datetime = Field(alias="startsAt")
    notes: str | None = Field(None, max_length=2000)


class TourUpdate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    starts_at: datetime | None = Field(None, alias="startsAt")
    status: TourStatus | None = None
    notes: str | None = Field(None, max_length=2000)


class TourResponse(BaseModel):
    id: int
    student_id: int
    starts_at: datetime
    status: TourStatus
    notes: str | None
    created_at: datetime
    updated_at: datetime
    student: StudentResponse

    model_config = {"from_attributes": True}


class TourSlot(BaseModel):
    starts_at: datetime
    booked: bool


class TourSlotsResponse(BaseModel):
    date: date
    slots: list[TourSlot]
