"""Load demo data into an empty database: ``python -m salon_recruit.seed``."""
import asyncio

import structlog
from sqlalchemy import func, select

from salon_recruit.campaigns.models import Campaign
from salon_recruit.database import async_session_factory, engine
from salon_recruit.models.base import Base
from salon_recruit.outreach.models import OutreachLog, OutreachMessage  # noqa: F401
from salon_recruit.schools.models import School
from salon_recruit.students.models import AreaOfInterest, Student
from salon_recruit.tours.models import TourVisit  # noqa: F401

logger = structlog.get_logger()


async def seed() -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with async_session_factory() as db:
        existing = await db.execute(select(func.count()).select_from(School))
        if existing.scalar_one() > 0:
            logger.info("seed_skipped", reason="database already has schools")
            return

        lincoln = School(name="Lincoln High School", city="Phoenix", state="AZ")
        roosevelt = School(name="Roosevelt High School", city="Phoenix", state="AZ")
        campaign = Campaign(name="Spring 2026 Beauty Recruitment", is_active=True)
        db.add_all([lincoln, roosevelt, campaign])
        await db.flush()

        db.add_all(
            [
                Student(
                    first_name="Emily",
                    last_name="Garcia",
                    email="emily@example.com",
                    phone="6025551111",
                    area_of_interest=AreaOfInterest.COSMETOLOGY,
                    school_id=lincoln.id,
                    campaign_id=campaign.id,
                ),
                Student(
                    first_name="Sofia",
                    last_name="Martinez",
                    email="sofia@example.com",
                    phone="6025552222",
                    area_of_interest=AreaOfInterest.NAIL_TECHNICIAN,
                    school_id=roosevelt.id,
                    campaign_id=campaign.id,
                ),
            ]
        )
        await db.commit()
        logger.info("seed_complete", schools=2, campaigns=1, students=2)


async def _run() -> None:
    try:
        await seed()
    finally:
        await engine.dispose()


def main() -> None:
    asyncio.run(_run())


if __name__ == "__main__":
    main()
