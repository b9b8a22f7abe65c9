from typing import Dict

import pytest
from httpx import AsyncClient

from conftest import create_lesson


@pytest.fixture()
async def priced_lessons(client: AsyncClient, auth_headers: Dict[str, str], student: dict) -> list:
    """Three pending lessons priced 40, 25 and 25, newest first."""
    return [
        await create_lesson(client, auth_headers, student["id"], dateTime="2030-01-22T14:00:00Z", pricePerHour="40"),
        await create_lesson(client, auth_headers, student["id"], dateTime="2030-01-15T14:00:00Z", pricePerHour="25"),
        await create_lesson(client, auth_headers, student["id"], dateTime="2030-01-08T14:00:00Z", pricePerHour="25"),
    ]


@pytest.mark.asyncio
async def test_payment_lifecycle(
    client: AsyncClient,
    auth_headers: Dict[str, str],
    student: dict,
    priced_lessons: list,
) -> None:
    created = await client.post(
        "/api/payments",
        json={
            "payerType": "student",
            "payerId": student["id"],
            "amount": "65.00",
            "paymentDate": "2030-01-23T10:00:00Z",
            "notes": "Bank transfer",
            "lessonIds": [priced_lessons[0]["id"], priced_lessons[1]["id"]],
        },
        headers=auth_headers,
    )
    assert created.status_code == 201, created.text
    payment = created.json()
    assert payment["amount"] == "65.00"
    assert payment["payerType"] == "student"

    links = await client.get(f"/api/payments/{payment['id']}/lessons", headers=auth_headers)
    assert set(links.json()) == {priced_lessons[0]["id"], priced_lessons[1]["id"]}

    updated = await client.put(
        f"/api/payments/{payment['id']}",
        json={"amount": "25.00", "lessonIds": [priced_lessons[2]["id"]]},
        headers=auth_headers,
    )
    assert updated.status_code == 200
    assert updated.json()["amount"] == "25.00"
    assert updated.json()["notes"] == "Bank transfer"
    links = await client.get(f"/api/payments/{payment['id']}/lessons", headers=auth_headers)
    assert links.json() == [priced_lessons[2]["id"]]

    notes_only = await client.put(f"/api/payments/{payment['id']}", json={"notes": ""}, headers=auth_headers)
    assert notes_only.json()["notes"] is None
    links = await client.get(f"/api/payments/{payment['id']}/lessons", headers=auth_headers)
    assert links.json() == [priced_lessons[2]["id"]]

    assert (await client.delete(f"/api/payments/{payment['id']}", headers=auth_headers)).status_code == 204
    assert (await client.get(f"/api/payments/{payment['id']}", headers=auth_headers)).status_code == 404


@pytest.mark.asyncio
async def test_payments_listed_newest_first(client: AsyncClient, auth_headers: Dict[str, str], student: dict) -> None:
    for day in ("2030-01-01", "2030-03-01", "2030-02-01"):
        response = await client.post(
            "/api/payments",
            json={"payerType": "student", "payerId": student["id"], "amount": "10", "paymentDate": f"{day}T09:00:00Z"},
            headers=auth_headers,
        )
        assert response.status_code == 201

    listed = await client.get("/api/payments", headers=auth_headers)
    assert [p["paymentDate"][:10] for p in listed.json()] == ["2030-03-01", "2030-02-01", "2030-01-01"]


@pytest.mark.asyncio
async def test_payment_rejects_unknown_payer_and_foreign_lessons(
    client: AsyncClient,
    auth_headers: Dict[str, str],
    student: dict,
) -> None:
    other = await client.post(
        "/api/students",
        json={
            "firstName": "Charles",
            "defaultSubject": "Engineering",
            "defaultRate": "50",
            "defaultLink": "https://meet.example.com/charles",
        },
        headers=auth_headers,
    )
    foreign_lesson = await create_lesson(client, auth_headers, other.json()["id"])

    unknown_payer = await client.post(
        "/api/payments",
        json={
            "payerType": "parent",
            "payerId": student["id"],
            "amount": "10",
            "paymentDate": "2030-01-01T09:00:00Z",
        },
        headers=auth_headers,
    )
    assert unknown_payer.status_code == 400

    foreign = await client.post(
        "/api/payments",
        json={
            "payerType": "student",
            "payerId": student["id"],
            "amount": "10",
            "paymentDate": "2030-01-01T09:00:00Z",
            "lessonIds": [foreign_lesson["id"]],
        },
        headers=auth_headers,
    )
    assert foreign.status_code == 400


@pytest.mark.asyncio
async def test_changing_payer_rechecks_kept_links(
    client: AsyncClient,
    auth_headers: Dict[str, str],
    student: dict,
) -> None:
    other = await client.post(
        "/api/students",
        json={
            "firstName": "Charles",
            "defaultSubject": "Engineering",
            "defaultRate": "50",
            "defaultLink": "https://meet.example.com/charles",
        },
        headers=auth_headers,
    )
    own_lesson = await create_lesson(client, auth_headers, student["id"])
    created = await client.post(
        "/api/payments",
        json={
            "payerType": "student",
            "payerId": student["id"],
            "amount": "30",
            "paymentDate": "2030-01-09T09:00:00Z",
            "lessonIds": [own_lesson["id"]],
        },
        headers=auth_headers,
    )
    payment_id = created.json()["id"]

    moved = await client.put(f"/api/payments/{payment_id}", json={"payerId": other.json()["id"]}, headers=auth_headers)
    assert moved.status_code == 400

    unchanged = await client.get(f"/api/payments/{payment_id}", headers=auth_headers)
    assert unchanged.json()["payerId"] == student["id"]
    links = await client.get(f"/api/payments/{payment_id}/lessons", headers=auth_headers)
    assert links.json() == [own_lesson["id"]]

    relinked = await client.put(
        f"/api/payments/{payment_id}",
        json={"payerId": other.json()["id"], "lessonIds": []},
        headers=auth_headers,
    )
    assert relinked.status_code == 200
    assert relinked.json()["payerId"] == other.json()["id"]
    links = await client.get(f"/api/payments/{payment_id}/lessons", headers=auth_headers)
    assert links.json() == []


@pytest.mark.asyncio
async def test_candidates_for_parent(client: AsyncClient, auth_headers: Dict[str, str], student: dict) -> None:
    parent = await client.post("/api/parents", json={"name": "Anne Byron"}, headers=auth_headers)
    parent_id = parent.json()["id"]
    await client.put(f"/api/students/{student['id']}", json={"parentId": parent_id}, headers=auth_headers)
    pending = await create_lesson(client, auth_headers, student["id"], dateTime="2030-01-08T14:00:00Z")
    paid = await create_lesson(
        client, auth_headers, student["id"], dateTime="2030-01-15T14:00:00Z", paymentStatus="paid"
    )

    response = await client.get(
        "/api/payments/candidates",
        params={"payerType": "parent", "payerId": parent_id},
        headers=auth_headers,
    )
    assert response.status_code == 200
    assert [l["id"] for l in response.json()] == [pending["id"]]

    with_paid = await client.get(
        "/api/payments/candidates",
        params={"payerType": "parent", "payerId": parent_id, "includePaid": "true"},
        headers=auth_headers,
    )
    assert {l["id"] for l in with_paid.json()} == {pending["id"], paid["id"]}


@pytest.mark.asyncio
async def test_auto_select_is_greedy(
    client: AsyncClient,
    auth_headers: Dict[str, str],
    student: dict,
    priced_lessons: list,
) -> None:
    response = await client.post(
        "/api/payments/auto-select",
        json={"payerType": "student", "payerId": student["id"], "amount": "50"},
        headers=auth_headers,
    )
    assert response.status_code == 200
    assert response.json() == {"lessonIds": [priced_lessons[0]["id"]], "total": "40.00", "exact": False}

    exact = await client.post(
        "/api/payments/auto-select",
        json={"payerType": "student", "payerId": student["id"], "amount": "65"},
        headers=auth_headers,
    )
    assert exact.json()["lessonIds"] == [priced_lessons[0]["id"], priced_lessons[1]["id"]]
    assert exact.json()["exact"] is True


@pytest.mark.asyncio
async def test_auto_select_rejects_non_positive_amount(
    client: AsyncClient,
    auth_headers: Dict[str, str],
    student: dict,
) -> None:
    response = await client.post(
        "/api/payments/auto-select",
        json={"payerType": "student", "payerId": student["id"], "amount": "0"},
        headers=auth_headers,
    )
    assert response.status_code == 400
