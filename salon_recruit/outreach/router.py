from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from salon_recruit.database import get_db
from salon_recruit.dependencies import require_admin
from salon_recruit.outreach.schemas import BulkSmsReport, BulkSmsRequest, OutreachHistoryEntry
from salon_recruit.outreach.service import get_student_history, send_bulk_sms
from salon_recruit.outreach.sms import SmsSender, get_sms_sender

router = APIRouter(prefix="/outreach", tags=["outreach"], dependencies=[Depends(require_admin)])


@router.post("/sms", response_model=BulkSmsReport, response_model_exclude_none=True)
async def send_sms(
    data: BulkSmsRequest,
    sender: SmsSender | None = Depends(get_sms_sender),
    db: AsyncSession = Depends(get_db),
):
    return await send_bulk_sms(db, sender, data.student_ids, data.message)


@router.get("/students/{student_id}/history", response_model=list[OutreachHistoryEntry])
async def student_history(student_id: int, db: AsyncSession = Depends(get_db)):
    return await get_student_history(db, student_id)
