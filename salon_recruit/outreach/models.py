import enum

from sqlalchemy import Enum, ForeignKey, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from salon_recruit.models.base import Base, CreatedAtMixin


class OutreachStatus(str, enum.Enum):
    SENT = "SENT"
    FAILED = "FAILED"


class OutreachMessage(CreatedAtMixin, Base):
    """One row per attempted send, failed attempts included."""

    __tablename__ = "outreach_messages"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    student_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("students.id", ondelete="CASCADE"), nullable=False, index=True
    )
    campaign_id: Mapped[int] = mapped_column(Integer, ForeignKey("campaigns.id"), nullable=False, index=True)
    message: Mapped[str] = mapped_column(Text, nullable=False)


class OutreachLog(CreatedAtMixin, Base):
    __tablename__ = "outreach_logs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    student_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("students.id", ondelete="CASCADE"), nullable=False, index=True
    )
    message_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("outreach_messages.id", ondelete="CASCADE"), nullable=False, index=True
    )
    status: Mapped[OutreachStatus] = mapped_column(
        Enum(OutreachStatus, name="outreach_status", native_enum=False, length=10),
        nullable=False,
    )
    error: Mapped[str | None] = mapped_column(Text)
