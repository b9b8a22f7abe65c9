from typing import Dict

import pytest
from httpx import AsyncClient

from conftest import create_lesson


@pytest.mark.asyncio
async def test_create_student_assigns_public_id(client: AsyncClient, student: dict) -> None:
    assert len(student["studentId"]) == 6
    assert student["studentId"].isdigit()
    assert student["defaultColor"] == "#3b82f6"
    assert student["defaultRate"] == "30.00"


@pytest.mark.asyncio
async def test_blank_optional_fields_become_null(client: AsyncClient, auth_headers: Dict[str, str]) -> None:
    response = await client.post(
        "/api/students",
        json={
            "firstName": "Grace",
            "lastName": "",
            "email": "",
            "phoneNumber": "  ",
            "defaultSubject": "Physics",
            "defaultRate": "40",
            "defaultLink": "https://meet.example.com/grace",
        },
        headers=auth_headers,
    )
    assert response.status_code == 201
    data = response.json()
    assert data["lastName"] is None
    assert data["email"] is None
    assert data["phoneNumber"] is None


@pytest.mark.asyncio
async def test_invalid_student_payload_is_rejected(client: AsyncClient, auth_headers: Dict[str, str]) -> None:
    response = await client.post(
        "/api/students",
        json={
            "firstName": "Bad",
            "defaultSubject": "Maths",
            "defaultRate": "-1",
            "defaultLink": "not a url",
            "defaultColor": "red",
        },
        headers=auth_headers,
    )
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_duplicate_email_conflicts(client: AsyncClient, auth_headers: Dict[str, str], student: dict) -> None:
    response = await client.post(
        "/api/students",
        json={
            "firstName": "Other",
            "email": "ada@example.com",
            "defaultSubject": "Maths",
            "defaultRate": "30",
            "defaultLink": "https://meet.example.com/other",
        },
        headers=auth_headers,
    )
    assert response.status_code == 409


@pytest.mark.asyncio
async def test_update_and_public_read(client: AsyncClient, auth_headers: Dict[str, str], student: dict) -> None:
    response = await client.put(
        f"/api/students/{student['id']}",
        json={"lastName": None, "defaultColor": "#00ff00"},
        headers=auth_headers,
    )
    assert response.status_code == 200
    assert response.json()["lastName"] is None

    public = await client.get(f"/api/students/{student['id']}")
    assert public.status_code == 200
    assert public.json()["defaultColor"] == "#00ff00"
    assert public.json()["firstName"] == "Ada"


@pytest.mark.asyncio
async def test_unknown_parent_is_rejected(client: AsyncClient, auth_headers: Dict[str, str], student: dict) -> None:
    response = await client.put(
        f"/api/students/{student['id']}",
        json={"parentId": "00000000-0000-0000-0000-000000000001"},
        headers=auth_headers,
    )
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_delete_student_cascades_lessons_and_notes(
    client: AsyncClient,
    auth_headers: Dict[str, str],
    student: dict,
) -> None:
    lesson = await create_lesson(client, auth_headers, student["id"])
    note = await client.post(
        f"/api/students/{student['id']}/notes",
        json={"title": "Goals", "content": "Pass the exam"},
        headers=auth_headers,
    )
    assert note.status_code == 201

    response = await client.delete(f"/api/students/{student['id']}", headers=auth_headers)
    assert response.status_code == 204

    assert (await client.get(f"/api/lessons/{lesson['id']}")).status_code == 404
    assert (await client.get(f"/api/students/{student['id']}")).status_code == 404
    # Deleting again is still a success
    assert (await client.delete(f"/api/students/{student['id']}", headers=auth_headers)).status_code == 204


@pytest.mark.asyncio
async def test_student_lessons_and_stats(client: AsyncClient, auth_headers: Dict[str, str], student: dict) -> None:
    await create_lesson(client, auth_headers, student["id"], dateTime="2020-01-07T14:00:00Z")
    await create_lesson(client, auth_headers, student["id"], dateTime="2020-01-14T14:00:00Z")
    await create_lesson(client, auth_headers, student["id"], dateTime="2099-01-14T14:00:00Z")

    lessons = await client.get(f"/api/students/{student['id']}/lessons")
    assert lessons.status_code == 200
    assert [l["dateTime"][:10] for l in lessons.json()] == ["2099-01-14", "2020-01-14", "2020-01-07"]

    stats = await client.get(f"/api/students/{student['id']}/stats", headers=auth_headers)
    assert stats.status_code == 200
    assert stats.json()["lessonCount"] == 3
    assert stats.json()["lastLessonDate"].startswith("2020-01-14T14:00:00")


@pytest.mark.asyncio
async def test_notes_crud(client: AsyncClient, auth_headers: Dict[str, str], student: dict) -> None:
    created = await client.post(
        f"/api/students/{student['id']}/notes",
        json={"title": "Goals", "content": "Pass the exam"},
        headers=auth_headers,
    )
    note_id = created.json()["id"]

    updated = await client.put(f"/api/notes/{note_id}", json={"content": "Pass with an A"}, headers=auth_headers)
    assert updated.status_code == 200
    assert updated.json()["title"] == "Goals"
    assert updated.json()["content"] == "Pass with an A"

    listed = await client.get(f"/api/students/{student['id']}/notes", headers=auth_headers)
    assert [n["id"] for n in listed.json()] == [note_id]

    assert (await client.delete(f"/api/notes/{note_id}", headers=auth_headers)).status_code == 204
    listed = await client.get(f"/api/students/{student['id']}/notes", headers=auth_headers)
    assert listed.json() == []


@pytest.mark.asyncio
async def test_parents_crud_and_unlink_on_delete(
    client: AsyncClient,
    auth_headers: Dict[str, str],
    student: dict,
) -> None:
    parent = await client.post(
        "/api/parents",
        json={"name": "Anne Byron", "email": "anne@example.com"},
        headers=auth_headers,
    )
    assert parent.status_code == 201
    parent_id = parent.json()["id"]

    linked = await client.put(f"/api/students/{student['id']}", json={"parentId": parent_id}, headers=auth_headers)
    assert linked.json()["parentId"] == parent_id

    duplicate = await client.post(
        "/api/parents",
        json={"name": "Someone", "email": "anne@example.com"},
        headers=auth_headers,
    )
    assert duplicate.status_code == 409

    assert (await client.delete(f"/api/parents/{parent_id}", headers=auth_headers)).status_code == 204
    refreshed = await client.get(f"/api/students/{student['id']}")
    assert refreshed.json()["parentId"] is None
