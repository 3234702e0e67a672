import enum
from datetime import datetime

from sqlalchemy import Boolean, DateTime, Enum, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from salon_recruit.campaigns.models import Campaign
from salon_recruit.models.base import Base, TimestampMixin
from salon_recruit.schools.models import School


class AreaOfInterest(str, enum.Enum):
    COSMETOLOGY = "COSMETOLOGY"
    BARBER = "BARBER"
    NAIL_TECHNICIAN = "NAIL_TECHNICIAN"


class Student(TimestampMixin, Base):
    __tablename__ = "students"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    first_name: Mapped[str] = mapped_column(String(120), nullable=False)
    last_name: Mapped[str] = mapped_column(String(120), nullable=False)
    email: Mapped[str | None] = mapped_column(String(255), index=True)
    phone: Mapped[str | None] = mapped_column(String(32), index=True)
    area_of_interest: Mapped[AreaOfInterest] = mapped_column(
        Enum(AreaOfInterest, name="area_of_interest", native_enum=False, length=32),
        nullable=False,
        default=AreaOfInterest.COSMETOLOGY,
    )
    consent: Mapped[bool | None] = mapped_column(Boolean)
    contacted: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    contacted_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    visit_completed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    visit_completed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    school_id: Mapped[int] = mapped_column(Integer, ForeignKey("schools.id"), nullable=False, index=True)
    campaign_id: Mapped[int] = mapped_column(Integer, ForeignKey("campaigns.id"), nullable=False, index=True)

    school: Mapped[School] = relationship(lazy="selectin")
    campaign: Mapped[Campaign] = relationship(lazy="selectin")
