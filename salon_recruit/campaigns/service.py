"""
Campaign lifecycle and the single-active-campaign rule.

``activate_campaign`` and ``deactivate_campaign`` are the only code paths that
write ``Campaign.is_active``. The active campaign is never cached; readers
always query the table.
"""
import structlog
from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from salon_recruit.campaigns.models import Campaign
from salon_recruit.exceptions import ConflictError, InvalidInputError, NotFoundError
from salon_recruit.students.models import Student

logger = structlog.get_logger()


async def create_campaign(db: AsyncSession, name: str) -> Campaign:
    name = name.strip()
    if not name:
        raise InvalidInputError("Name required")

    campaign = Campaign(name=name, is_active=False)
    db.add(campaign)
    await db.commit()
    await db.refresh(campaign)
    logger.info("campaign_created", campaign_id=campaign.id, name=name)
    return campaign


async def get_campaigns(db: AsyncSession) -> list[Campaign]:
    result = await db.execute(
        select(Campaign).order_by(Campaign.created_at.desc(), Campaign.id.desc())
    )
    return list(result.scalars().all())


async def get_campaign_by_id(db: AsyncSession, campaign_id: int) -> Campaign | None:
    result = await db.execute(select(Campaign).where(Campaign.id == campaign_id))
    return result.scalar_one_or_none()


async def find_active_campaign(db: AsyncSession) -> Campaign | None:
    result = await db.execute(select(Campaign).where(Campaign.is_active.is_(True)).limit(1))
    return result.scalar_one_or_none()


async def get_active_campaign(db: AsyncSession) -> Campaign:
    campaign = await find_active_campaign(db)
    if not campaign:
        raise NotFoundError("Active campaign")
    return campaign


async def activate_campaign(db: AsyncSession, campaign_id: int) -> Campaign:
    """Make *campaign_id* the only active campaign.

    Both writes share one transaction, so a reader sees either the previous
    active campaign or the new one, never zero or two.
    """
    campaign = await get_campaign_by_id(db, campaign_id)
    if not campaign:
        raise NotFoundError("Campaign")

    try:
        await db.execute(
            update(Campaign)
            .where(Campaign.is_active.is_(True), Campaign.id != campaign_id)
            .values(is_active=False)
        )
        await db.execute(
            update(Campaign).where(Campaign.id == campaign_id).values(is_active=True)
        )
        await db.commit()
    except Exception:
        await db.rollback()
        raise

    await db.refresh(campaign)
    logger.info("campaign_activated", campaign_id=campaign_id)
    return campaign


async def deactivate_campaign(db: AsyncSession, campaign_id: int) -> Campaign:
    campaign = await get_campaign_by_id(db, campaign_id)
    if not campaign:
        raise NotFoundError("Campaign")

    await db.execute(
        update(Campaign).where(Campaign.id == campaign_id).values(is_active=False)
    )
    await db.commit()
    await db.refresh(campaign)
    logger.info("campaign_deactivated", campaign_id=campaign_id)
    return campaign


async def delete_campaign(db: AsyncSession, campaign_id: int) -> None:
    campaign = await get_campaign_by_id(db, campaign_id)
    if not campaign:
        raise NotFoundError("Campaign")

    if campaign.is_active:
        raise ConflictError("Deactivate campaign before deleting it")

    in_use = await db.execute(
        select(func.count()).select_from(Student).where(Student.campaign_id == campaign_id)
    )
    if in_use.scalar_one() > 0:
        raise ConflictError("Campaign has students and cannot be deleted")

    await db.delete(campaign)
    await db.commit()
    logger.info("campaign_deleted", campaign_id=campaign_id)
