import pytest

from salon_recruit.exceptions import InvalidInputError
from salon_recruit.students.intake import clean_phone, normalize_intake
from salon_recruit.students.schemas import StudentSubmit


def test_clean_phone_strips_and_caps():
    assert clean_phone(" (602) 555-1111 ") == "6025551111"
    assert clean_phone("+44 20 7946 0958 1234 5678") == "+442079460958123"
    assert clean_phone("44 20 7946 0958") == "442079460958"
    assert clean_phone("+ ") is None
    assert clean_phone("n/a") is None
    assert clean_phone(None) is None


def test_normalize_intake_trims_fields():
    clean = normalize_intake(
        StudentSubmit(firstName=" Emily ", lastName=" Garcia", email="  ", phone="602.555.1111", schoolId=3)
    )
    assert clean.first_name == "Emily"
    assert clean.last_name == "Garcia"
    assert clean.email is None
    assert clean.phone == "6025551111"
    assert clean.school_id == 3


def test_normalize_intake_email_only():
    clean = normalize_intake(StudentSubmit(firstName="A", lastName="B", email="a@b.co", schoolId=1))
    assert clean.email == "a@b.co"
    assert clean.phone is None


@pytest.mark.parametrize(
    "payload",
    [
        {"firstName": "", "lastName": "B", "email": "a@b.co", "schoolId": 1},
        {"firstName": "A", "lastName": "B", "email": "a@b.co"},
        {"firstName": "A", "lastName": "B", "schoolId": 1},
        {"firstName": "A", "lastName": "B", "email": "a@b", "schoolId": 1},
    ],
)
def test_normalize_intake_rejects(payload):
    with pytest.raises(InvalidInputError):
        normalize_intake(StudentSubmit(**payload))
