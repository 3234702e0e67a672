"""
Bulk SMS outreach.

Recipients are processed one at a time. Each recipient is its own unit of
work: a failure is recorded against that recipient and the loop moves on, so
the batch as a whole only fails on bad input or a missing provider.
"""
from datetime import datetime, timezone
from typing import NamedTuple

import structlog
from sqlalchemy import case, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from salon_recruit.exceptions import InvalidInputError, NotFoundError, UnavailableError
from salon_recruit.outreach.models import OutreachLog, OutreachMessage, OutreachStatus
from salon_recruit.outreach.phone import normalize_phone
from salon_recruit.outreach.schemas import BulkSmsReport, BulkSmsResult, OutreachHistoryEntry
from salon_recruit.outreach.sms import SmsSender
from salon_recruit.students.models import Student

logger = structlog.get_logger()

MAX_MESSAGE_LENGTH = 1000
MISSING_PHONE = "Missing/invalid phone"


class Recipient(NamedTuple):
    student_id: int
    campaign_id: int
    phone: str | None


async def _resolve_recipients(db: AsyncSession, student_ids: list[int]) -> list[Recipient]:
    """Load students in request order; unknown and repeated ids are dropped."""
    result = await db.execute(select(Student).where(Student.id.in_(set(student_ids))))
    by_id = {
        s.id: Recipient(s.id, s.campaign_id, normalize_phone(s.phone))
        for s in result.scalars().all()
    }

    recipients = []
    seen = set()
    for sid in student_ids:
        if sid in by_id and sid not in seen:
            seen.add(sid)
            recipients.append(by_id[sid])
    return recipients


async def _record_failure(db: AsyncSession, recipient: Recipient, message: str, message_id: int | None, reason: str) -> None:
    """Best effort FAILED bookkeeping; never raises."""
    try:
        if message_id is None:
            row = OutreachMessage(student_id=recipient.student_id, campaign_id=recipient.campaign_id, message=message)
            db.add(row)
            await db.flush()
            message_id = row.id
        db.add(
            OutreachLog(
                student_id=recipient.student_id,
                message_id=message_id,
                status=OutreachStatus.FAILED,
                error=reason[:1000],
            )
        )
        await db.commit()
    except Exception as e:
        await db.rollback()
        logger.warning("outreach_failure_log_failed", student_id=recipient.student_id, error=str(e))


async def _record_sent(db: AsyncSession, recipient: Recipient, message_id: int) -> None:
    """Best effort SENT bookkeeping after the provider accepted the message."""
    try:
        db.add(OutreachLog(student_id=recipient.student_id, message_id=message_id, status=OutreachStatus.SENT))
        now = datetime.now(timezone.utc)
        await db.execute(
            update(Student)
            .where(Student.id == recipient.student_id)
            .values(
                contacted=True,
                # Keep the first contact time
                contacted_at=case((Student.contacted.is_(True), Student.contacted_at), else_=now),
            )
            .execution_options(synchronize_session=False)
        )
        await db.commit()
    except Exception as e:
        await db.rollback()
        logger.warning("outreach_sent_log_failed", student_id=recipient.student_id, message_id=message_id, error=str(e))


async def _send_one(db: AsyncSession, sender: SmsSender, recipient: Recipient, message: str) -> BulkSmsResult:
    message_id = None
    try:
        row = OutreachMessage(student_id=recipient.student_id, campaign_id=recipient.campaign_id, message=message)
        db.add(row)
        await db.commit()
        message_id = row.id

        provider_id = await sender.send(recipient.phone, message)
    except Exception as e:
        await db.rollback()
        reason = str(e) or "Failed to send"
        logger.warning("outreach_sms_failed", student_id=recipient.student_id, error=reason)
        await _record_failure(db, recipient, message, message_id, reason)
        return BulkSmsResult(student_id=recipient.student_id, ok=False, error=reason)

    # Provider accepted the message; the result stays ok from here on
    await _record_sent(db, recipient, message_id)

    logger.info("outreach_sms_sent", student_id=recipient.student_id, message_id=message_id, provider_id=provider_id)
    return BulkSmsResult(student_id=recipient.student_id, ok=True)


async def send_bulk_sms(
    db: AsyncSession,
    sender: SmsSender | None,
    student_ids: list[int],
    message: str,
) -> BulkSmsReport:
    message = (message or "").strip()
    if not student_ids:
        raise InvalidInputError("studentIds required")
    if not message:
        raise InvalidInputError("message required")
    if len(message) > MAX_MESSAGE_LENGTH:
        raise InvalidInputError("message too long")
    if sender is None:
        raise UnavailableError("SMS provider not configured")

    recipients = await _resolve_recipients(db, student_ids)

    results: list[BulkSmsResult] = []
    for recipient in recipients:
        if not recipient.phone:
            results.append(BulkSmsResult(student_id=recipient.student_id, ok=False, error=MISSING_PHONE))
            continue
        results.append(await _send_one(db, sender, recipient, message))

    sent = sum(1 for r in results if r.ok)
    logger.info("outreach_bulk_complete", requested=len(student_ids), sent=sent, failed=len(results) - sent)
    return BulkSmsReport(ok=True, results=results)


async def get_student_history(db: AsyncSession, student_id: int) -> list[OutreachHistoryEntry]:
    if await db.get(Student, student_id) is None:
        raise NotFoundError("Student")

    result = await db.execute(
        select(OutreachMessage, OutreachLog)
        .outerjoin(OutreachLog, OutreachLog.message_id == OutreachMessage.id)
        .where(OutreachMessage.student_id == student_id)
        .order_by(OutreachMessage.created_at.desc(), OutreachMessage.id.desc())
    )
    return [
        OutreachHistoryEntry(
            message_id=msg.id,
            campaign_id=msg.campaign_id,
            message=msg.message,
            status=log.status if log else None,
            error=log.error if log else None,
            created_at=msg.created_at,
        )
        for msg, log in result.all()
    ]
