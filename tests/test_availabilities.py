import pytest
from httpx import AsyncClient

from conftest import _banner, _p


async def _create(client: AsyncClient, **fields) -> dict:
    body = {"userId": "1", "date": "2024-01-04", "start": "08:00", "end": "16:00", **fields}
    resp = await client.post("/availabilities", json=body)
    assert resp.status_code == 201, resp.text
    return resp.json()


@pytest.mark.asyncio
async def test_create_list_delete(client: AsyncClient) -> None:
    _banner("availability create/list/delete")
    created = await _create(client, notes="po 16 nie mogę")
    assert created["notes"] == "po 16 nie mogę"

    resp = await client.get("/availabilities", params={"userId": "1", "withNames": "true"})
    rows = resp.json()
    _p(f"rows: {rows}")
    assert len(rows) == 1
    assert rows[0]["userName"] == "Anna Nowak"

    resp = await client.get("/availabilities", params={"userId": "1"})
    assert "userName" not in resp.json()[0]

    resp = await client.delete(f"/availabilities/{created['id']}")
    assert resp.status_code == 200
    resp = await client.delete(f"/availabilities/{created['id']}")
    assert resp.status_code == 404


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "start,end",
    [
        ("16:00", "08:00"),
        ("08:00", "08:00"),
        ("2024-01-04T16:00:00+01:00", "2024-01-04T08:00:00+01:00"),
    ],
)
async def test_rejects_bad_range(client: AsyncClient, start: str, end: str) -> None:
    resp = await client.post(
        "/availabilities",
        json={"userId": "1", "date": "2024-01-04", "start": start, "end": end},
    )
    assert resp.status_code == 400


@pytest.mark.asyncio
async def test_one_record_per_user_and_day(client: AsyncClient) -> None:
    first = await _create(client)
    resp = await client.post(
        "/availabilities",
        json={"userId": "1", "date": "2024-01-04", "start": "17:00", "end": "20:00"},
    )
    assert resp.status_code == 409

    # other users and other days are fine
    await _create(client, userId="2")
    second = await _create(client, date="2024-01-05")

    resp = await client.patch(f"/availabilities/{second['id']}", json={"date": "2024-01-04"})
    assert resp.status_code == 409

    resp = await client.patch(f"/availabilities/{first['id']}", json={"end": "12:00"})
    assert resp.status_code == 200
    assert resp.json()["end"] == "12:00"


@pytest.mark.asyncio
async def test_unknown_user(client: AsyncClient) -> None:
    resp = await client.post(
        "/availabilities",
        json={"userId": "404", "date": "2024-01-04", "start": "08:00", "end": "16:00"},
    )
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_date_range_filter(client: AsyncClient) -> None:
    await _create(client, date="2024-01-04")
    await _create(client, date="2024-01-06")
    await _create(client, date="2024-01-09")

    resp = await client.get(
        "/availabilities",
        params={"from": "2024-01-05T00:00:00.000Z", "to": "2024-01-09"},
    )
    assert [a["date"] for a in resp.json()] == ["2024-01-06", "2024-01-09"]
