"""Normalization of raw kiosk submissions before a Student row is created."""
import re
from dataclasses import dataclass

from salon_recruit.exceptions import InvalidInputError
from salon_recruit.students.models import AreaOfInterest
from salon_recruit.students.schemas import StudentSubmit

PHONE_MAX_DIGITS = 15
EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


@dataclass(frozen=True)
class CleanIntake:
    first_name: str
    last_name: str
    email: str | None
    phone: str | None
    school_id: int
    area_of_interest: AreaOfInterest
    consent: bool | None


def clean_email(raw: str | None) -> str | None:
    email = (raw or "").strip()
    if not email:
        return None
    if not EMAIL_RE.match(email):
        raise InvalidInputError("Please enter a valid email address")
    return email


def clean_phone(raw: str | None) -> str | None:
    """Keep digits only, capped at the longest dialable length.

    A leading ``+`` survives so international numbers stay dialable.
    """
    value = (raw or "").strip()
    digits = re.sub(r"\D", "", value)[:PHONE_MAX_DIGITS]
    if not digits:
        return None
    return f"+{digits}" if value.startswith("+") else digits


def normalize_intake(data: StudentSubmit) -> CleanIntake:
    first_name = data.first_name.strip()
    last_name = data.last_name.strip()
    if not first_name or not last_name or not data.school_id:
        raise InvalidInputError("First name, last name and school are required")

    email = clean_email(data.email)
    phone = clean_phone(data.phone)
    if not email and not phone:
        raise InvalidInputError("Provide at least an email or a phone number")

    return CleanIntake(
        first_name=first_name,
        last_name=last_name,
        email=email,
        phone=phone,
        school_id=data.school_id,
        area_of_interest=data.area_of_interest,
        consent=data.consent,
    )
