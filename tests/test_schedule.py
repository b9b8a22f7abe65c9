from datetime import datetime, timedelta, timezone
from typing import Dict

import pytest
from httpx import AsyncClient

from conftest import create_lesson


def iso(value: datetime) -> str:
    return value.strftime("%Y-%m-%dT%H:%M:%SZ")


@pytest.mark.asyncio
async def test_schedule_groups_lessons_around_today(
    client: AsyncClient,
    auth_headers: Dict[str, str],
    student: dict,
) -> None:
    today = datetime.now(timezone.utc).replace(hour=0, minute=0, second=0, microsecond=0)
    await create_lesson(client, auth_headers, student["id"], dateTime=iso(today - timedelta(days=30)))
    recent = await create_lesson(client, auth_headers, student["id"], dateTime=iso(today - timedelta(days=2, hours=-9)))
    upcoming = await create_lesson(client, auth_headers, student["id"], dateTime=iso(today + timedelta(days=3, hours=9)))

    response = await client.get("/api/schedule", params={"tz": "UTC"}, headers=auth_headers)
    assert response.status_code == 200
    sections = response.json()

    keys = [s["dateKey"] for s in sections]
    assert keys == sorted(keys)
    assert len(keys) == 3
    today_section = next(s for s in sections if s["isToday"])
    assert today_section["lessons"] == []
    assert sections[0]["isFirstOfMonth"] is True
    flattened = [l for s in sections for l in s["lessons"]]
    assert [l["id"] for l in flattened] == [recent["id"], upcoming["id"]]
    assert flattened[0]["studentName"] == "Ada Lovelace"
    assert flattened[0]["studentColor"] == "#3b82f6"


@pytest.mark.asyncio
async def test_schedule_unknown_timezone(client: AsyncClient, auth_headers: Dict[str, str]) -> None:
    response = await client.get("/api/schedule", params={"tz": "Mars/Olympus"}, headers=auth_headers)
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_calendar_export(client: AsyncClient, auth_headers: Dict[str, str], student: dict) -> None:
    start = (datetime.now(timezone.utc) + timedelta(days=5)).replace(minute=0, second=0, microsecond=0)
    lesson = await create_lesson(client, auth_headers, student["id"], dateTime=iso(start))

    response = await client.get("/api/calendar/ics", headers=auth_headers)
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/calendar")
    assert 'filename="lessons.ics"' in response.headers["content-disposition"]
    assert f"UID:{lesson['id']}@lessonscheduler" in response.text
    assert "SUMMARY:Maths - Ada Lovelace" in response.text
