from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from salon_recruit.outreach.models import OutreachStatus


class BulkSmsRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    student_ids: list[int] = Field(default_factory=list, alias="studentIds")
    message: str = ""


class BulkSmsResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    student_id: int = Field(alias="studentId")
    ok: bool
    error: str | None = None


class BulkSmsReport(BaseModel):
    ok: bool = True
    results: list[BulkSmsResult]


class OutreachHistoryEntry(BaseModel):
    message_id: int
    campaign_id: int
    message: str
    status: OutreachStatus | None
    error: str | None
    created_at: datetime
