from datetime import datetime

from pydantic import BaseModel, Field


class SchoolCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    city: str | None = Field(None, max_length=120)
    state: str | None = Field(None, max_length=60)


class SchoolUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=255)
    city: str | None = Field(None, max_length=120)
    state: str | None = Field(None, max_length=60)


class SchoolResponse(BaseModel):
    id: int
    name: str
    city: str | None
    state: str | None
    created_at: datetime

    model_config = {"from_attributes": True}
