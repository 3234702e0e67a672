from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from salon_recruit.campaigns.schemas import CampaignResponse
from salon_recruit.schools.schemas import SchoolResponse
from salon_recruit.students.models import AreaOfInterest


class StudentSubmit(BaseModel):
    """Public kiosk payload. Campaign is never accepted from the client."""

    model_config = ConfigDict(populate_by_name=True)

    first_name: str = Field("", alias="firstName", max_length=120)
    last_name: str = Field("", alias="lastName", max_length=120)
    email: str | None = Field(None, max_length=255)
    phone: str | None = Field(None, max_length=40)
    school_id: int | None = Field(None, alias="schoolId")
    area_of_interest: AreaOfInterest = Field(AreaOfInterest.COSMETOLOGY, alias="areaOfInterest")
    consent: bool | None = None


class StudentUpdate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    first_name: str | None = Field(None, alias="firstName", max_length=120)
    last_name: str | None = Field(None, alias="lastName", max_length=120)
    email: str | None = Field(None, max_length=255)
    phone: str | None = Field(None, max_length=40)
    school_id: int | None = Field(None, alias="schoolId")
    area_of_interest: AreaOfInterest | None = Field(None, alias="areaOfInterest")
    consent: bool | None = None
    contacted: bool | None = None
    visit_completed: bool | None = Field(None, alias="visitCompleted")


class StudentFilter(BaseModel):
    school_id: int | None = None
    campaign_id: int | None = None
    area_of_interest: AreaOfInterest | None = None
    contacted: bool | None = None
    visit_completed: bool | None = None


class StudentResponse(BaseModel):
    id: int
    first_name: str
    last_name: str
    email: str | None
    phone: str | None
    area_of_interest: AreaOfInterest
    consent: bool | None
    contacted: bool
    contacted_at: datetime | None
    visit_completed: bool
    visit_completed_at: datetime | None
    school_id: int
    campaign_id: int
    created_at: datetime
    school: SchoolResponse
    campaign: CampaignResponse

    model_config = {"from_attributes": True}
