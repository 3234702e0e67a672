import csv
import io

import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_submit_assigns_active_campaign(client: AsyncClient, school: dict, active_campaign: dict):
    response = await client.post(
        "/api/v1/students",
        json={
            "firstName": "  Sofia ",
            "lastName": "Martinez",
            "email": " sofia@example.com ",
            "phone": "(602) 555-2222",
            "schoolId": school["id"],
            "areaOfInterest": "NAIL_TECHNICIAN",
            "consent": True,
            "campaignId": 12345,
        },
    )
    assert response.status_code == 201
    data = response.json()
    assert data["first_name"] == "Sofia"
    assert data["email"] == "sofia@example.com"
    assert data["phone"] == "6025552222"
    assert data["area_of_interest"] == "NAIL_TECHNICIAN"
    assert data["campaign_id"] == active_campaign["id"]
    assert data["campaign"]["name"] == "Spring 2026 Beauty Recruitment"
    assert data["school"]["name"] == "Lincoln High School"
    assert data["contacted"] is False
    assert data["visit_completed"] is False


@pytest.mark.asyncio
async def test_submit_requires_contact(client: AsyncClient, school: dict, active_campaign: dict):
    response = await client.post(
        "/api/v1/students",
        json={"firstName": "No", "lastName": "Contact", "schoolId": school["id"], "phone": "---"},
    )
    assert response.status_code == 400
    assert response.json()["detail"] == "Provide at least an email or a phone number"


@pytest.mark.asyncio
async def test_submit_requires_names(client: AsyncClient, school: dict, active_campaign: dict):
    response = await client.post(
        "/api/v1/students",
        json={"firstName": "  ", "lastName": "Garcia", "schoolId": school["id"], "email": "x@example.com"},
    )
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_submit_rejects_bad_email(client: AsyncClient, school: dict, active_campaign: dict):
    response = await client.post(
        "/api/v1/students",
        json={"firstName": "A", "lastName": "B", "schoolId": school["id"], "email": "not-an-email"},
    )
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_submit_unknown_school(client: AsyncClient, active_campaign: dict):
    response = await client.post(
        "/api/v1/students",
        json={"firstName": "A", "lastName": "B", "schoolId": 999, "email": "a@example.com"},
    )
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_submit_without_active_campaign(client: AsyncClient, school: dict):
    response = await client.post(
        "/api/v1/students",
        json={"firstName": "A", "lastName": "B", "schoolId": school["id"], "email": "a@example.com"},
    )
    assert response.status_code == 503
    assert response.json()["detail"] == "No active campaign"


@pytest.mark.asyncio
async def test_duplicate_submission_rejected(client: AsyncClient, make_student, school: dict):
    await make_student(email="dup@example.com")
    response = await client.post(
        "/api/v1/students",
        json={"firstName": "Dup", "lastName": "Again", "schoolId": school["id"], "email": "DUP@example.com"},
    )
    assert response.status_code == 409

    await make_student(first_name="Phone", phone="602-555-3333")
    response = await client.post(
        "/api/v1/students",
        json={"firstName": "Phone", "lastName": "Again", "schoolId": school["id"], "phone": "6025553333"},
    )
    assert response.status_code == 409


@pytest.mark.asyncio
async def test_same_contact_allowed_in_new_campaign(
    client: AsyncClient, auth_headers: dict, make_student, school: dict
):
    await make_student(email="returning@example.com")
    new = await client.post("/api/v1/campaigns", json={"name": "Summer"}, headers=auth_headers)
    await client.post(f"/api/v1/campaigns/{new.json()['id']}/activate", headers=auth_headers)

    response = await client.post(
        "/api/v1/students",
        json={"firstName": "Emily", "lastName": "Garcia", "schoolId": school["id"], "email": "returning@example.com"},
    )
    assert response.status_code == 201
    assert response.json()["campaign_id"] == new.json()["id"]


@pytest.mark.asyncio
async def test_public_intake_rate_limited(client: AsyncClient, school: dict, active_campaign: dict, monkeypatch):
    from salon_recruit.dependencies import public_rate_limiter

    monkeypatch.setattr(public_rate_limiter, "limit", 2)
    statuses = []
    for i in range(3):
        response = await client.post(
            "/api/v1/students",
            json={"firstName": "R", "lastName": str(i), "schoolId": school["id"], "email": f"r{i}@example.com"},
        )
        statuses.append(response.status_code)
    assert statuses == [201, 201, 429]


@pytest.mark.asyncio
async def test_list_students_with_filters(client: AsyncClient, auth_headers: dict, make_student):
    first = await make_student(email="a@example.com", areaOfInterest="BARBER")
    await make_student(first_name="Other", email="b@example.com")

    response = await client.get("/api/v1/students", headers=auth_headers)
    assert response.status_code == 200
    assert len(response.json()) == 2

    response = await client.get("/api/v1/students?areaOfInterest=BARBER", headers=auth_headers)
    assert [s["id"] for s in response.json()] == [first["id"]]

    response = await client.get("/api/v1/students?contacted=true", headers=auth_headers)
    assert response.json() == []


@pytest.mark.asyncio
async def test_update_student_flags(client: AsyncClient, auth_headers: dict, student: dict):
    response = await client.put(
        f"/api/v1/students/{student['id']}",
        json={"contacted": True, "areaOfInterest": "BARBER"},
        headers=auth_headers,
    )
    assert response.status_code == 200
    data = response.json()
    assert data["contacted"] is True
    assert data["contacted_at"] is not None
    assert data["area_of_interest"] == "BARBER"

    response = await client.patch(
        f"/api/v1/students/{student['id']}", json={"contacted": False}, headers=auth_headers
    )
    assert response.json()["contacted"] is False
    assert response.json()["contacted_at"] is None


@pytest.mark.asyncio
async def test_update_cannot_remove_all_contact(client: AsyncClient, auth_headers: dict, student: dict):
    response = await client.put(
        f"/api/v1/students/{student['id']}",
        json={"email": None, "phone": ""},
        headers=auth_headers,
    )
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_get_missing_student(client: AsyncClient, auth_headers: dict):
    response = await client.get("/api/v1/students/999", headers=auth_headers)
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_delete_student_with_tour(client: AsyncClient, auth_headers: dict, student: dict):
    await client.post(
        "/api/v1/tours",
        json={"studentId": student["id"], "startsAt": "2025-06-10T09:00:00"},
        headers=auth_headers,
    )
    response = await client.delete(f"/api/v1/students/{student['id']}", headers=auth_headers)
    assert response.status_code == 204

    response = await client.get("/api/v1/tours?date=2025-06-10", headers=auth_headers)
    assert response.json() == []


@pytest.mark.asyncio
async def test_export_csv(client: AsyncClient, auth_headers: dict, make_student):
    await make_student(first_name='Ana "AJ"', last_name="Lopez, Jr.", email="ana@example.com")

    response = await client.get("/api/v1/students/export/csv", headers=auth_headers)
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    assert "students.csv" in response.headers["content-disposition"]
    assert '"Ana ""AJ"""' in response.text

    rows = list(csv.reader(io.StringIO(response.text)))
    assert rows[0][:3] == ["ID", "First Name", "Last Name"]
    assert rows[1][1] == 'Ana "AJ"'
    assert rows[1][2] == "Lopez, Jr."
    assert rows[1][6] == "Lincoln High School"
    assert rows[1][9] == "No"
