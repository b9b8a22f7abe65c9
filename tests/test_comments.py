from typing import Dict

import pytest
from httpx import AsyncClient

from conftest import create_lesson


async def create_tag(client: AsyncClient, headers: Dict[str, str], name: str, color: str = "#ff8800") -> dict:
    response = await client.post("/api/tags", json={"name": name, "color": color}, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


@pytest.mark.asyncio
async def test_tag_names_are_unique(client: AsyncClient, auth_headers: Dict[str, str]) -> None:
    await create_tag(client, auth_headers, "homework")

    response = await client.post("/api/tags", json={"name": "homework", "color": "#000000"}, headers=auth_headers)
    assert response.status_code == 409

    bad_color = await client.post("/api/tags", json={"name": "other", "color": "orange"}, headers=auth_headers)
    assert bad_color.status_code == 422


@pytest.mark.asyncio
async def test_tags_listed_by_name_and_updated(client: AsyncClient, auth_headers: Dict[str, str]) -> None:
    zeta = await create_tag(client, auth_headers, "zeta")
    await create_tag(client, auth_headers, "alpha")

    listed = await client.get("/api/tags", headers=auth_headers)
    assert [t["name"] for t in listed.json()] == ["alpha", "zeta"]

    renamed = await client.put(f"/api/tags/{zeta['id']}", json={"name": "beta"}, headers=auth_headers)
    assert renamed.json()["name"] == "beta"
    assert renamed.json()["color"] == "#ff8800"

    assert (await client.delete(f"/api/tags/{zeta['id']}", headers=auth_headers)).status_code == 204


@pytest.mark.asyncio
async def test_comment_visibility_depends_on_login(
    client: AsyncClient,
    auth_headers: Dict[str, str],
    student: dict,
) -> None:
    lesson = await create_lesson(client, auth_headers, student["id"])
    url = f"/api/lessons/{lesson['id']}/comments"
    private = await client.post(url, json={"title": "Tutor only", "content": "Struggled"}, headers=auth_headers)
    shared = await client.post(
        url,
        json={"title": "Great work", "content": "Well done", "visibleToStudent": 1},
        headers=auth_headers,
    )
    assert private.status_code == 201
    assert private.json()["visibleToStudent"] == 0
    assert shared.json()["visibleToStudent"] == 1

    public = await client.get(url)
    assert [c["title"] for c in public.json()] == ["Great work"]

    logged_in = await client.get(url, headers=auth_headers)
    assert {c["title"] for c in logged_in.json()} == {"Tutor only", "Great work"}


@pytest.mark.asyncio
async def test_comment_tags_and_edit(client: AsyncClient, auth_headers: Dict[str, str], student: dict) -> None:
    lesson = await create_lesson(client, auth_headers, student["id"])
    homework = await create_tag(client, auth_headers, "homework")
    exam = await create_tag(client, auth_headers, "exam")

    created = await client.post(
        f"/api/lessons/{lesson['id']}/comments",
        json={"title": "Notes", "content": "Chapter 3", "tagIds": [homework["id"], exam["id"]]},
        headers=auth_headers,
    )
    assert created.status_code == 201
    comment = created.json()
    assert [t["name"] for t in comment["tags"]] == ["exam", "homework"]
    assert comment["lastEdited"] is None

    edited = await client.put(
        f"/api/comments/{comment['id']}",
        json={"content": "Chapter 4", "tagIds": [homework["id"]]},
        headers=auth_headers,
    )
    assert edited.status_code == 200
    assert edited.json()["title"] == "Notes"
    assert edited.json()["content"] == "Chapter 4"
    assert [t["name"] for t in edited.json()["tags"]] == ["homework"]
    assert edited.json()["lastEdited"] is not None

    listed = await client.get(f"/api/lessons/{lesson['id']}/comments", headers=auth_headers)
    assert [t["name"] for t in listed.json()[0]["tags"]] == ["homework"]


@pytest.mark.asyncio
async def test_comment_with_unknown_tag_or_lesson(
    client: AsyncClient,
    auth_headers: Dict[str, str],
    student: dict,
) -> None:
    lesson = await create_lesson(client, auth_headers, student["id"])
    unknown = "00000000-0000-0000-0000-000000000001"

    bad_tag = await client.post(
        f"/api/lessons/{lesson['id']}/comments",
        json={"title": "T", "content": "C", "tagIds": [unknown]},
        headers=auth_headers,
    )
    assert bad_tag.status_code == 400

    bad_lesson = await client.post(
        f"/api/lessons/{unknown}/comments",
        json={"title": "T", "content": "C"},
        headers=auth_headers,
    )
    assert bad_lesson.status_code == 404


@pytest.mark.asyncio
async def test_delete_comment(client: AsyncClient, auth_headers: Dict[str, str], student: dict) -> None:
    lesson = await create_lesson(client, auth_headers, student["id"])
    created = await client.post(
        f"/api/lessons/{lesson['id']}/comments",
        json={"title": "T", "content": "C"},
        headers=auth_headers,
    )

    assert (await client.delete(f"/api/comments/{created.json()['id']}", headers=auth_headers)).status_code == 204
    listed = await client.get(f"/api/lessons/{lesson['id']}/comments", headers=auth_headers)
    assert listed.json() == []
