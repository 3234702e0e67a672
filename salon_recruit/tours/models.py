import enum
from datetime import datetime

from sqlalchemy import DateTime, Enum, ForeignKey, Index, Integer, Text, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from salon_recruit.models.base import Base, TimestampMixin
from salon_recruit.students.models import Student


class TourStatus(str, enum.Enum):
    SCHEDULED = "SCHEDULED"
    COMPLETED = "COMPLETED"
    CANCELED = "CANCELED"
    NO_SHOW = "NO_SHOW"


class TourVisit(TimestampMixin, Base):
    __tablename__ = "tour_visits"
    __table_args__ = (
        # One live booking per start time; canceled rows free the slot
        Index(
            "uq_tour_visits_live_slot",
            "starts_at",
            unique=True,
            sqlite_where=text("status != 'CANCELED'"),
            postgresql_where=text("status != 'CANCELED'"),
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    student_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("students.id", ondelete="CASCADE"), nullable=False, index=True
    )
    # Naive local wall-clock time (see tours.slots.to_local)
    starts_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, index=True)
    status: Mapped[TourStatus] = mapped_column(
        Enum(TourStatus, name="tour_status", native_enum=False, length=20),
        nullable=False,
        default=TourStatus.SCHEDULED,
    )
    notes: Mapped[str | None] = mapped_column(Text)

    student: Mapped[Student] = relationship(lazy="selectin")
