from datetime import datetime
from zoneinfo import ZoneInfo

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from worktime.api import create_app
from worktime.config import Settings
from worktime.database import InMemoryDatabase
from worktime.models import Company, CompanyLocation, Snapshot, User

WARSAW = ZoneInfo("Europe/Warsaw")

# Wednesday
NOW = datetime(2024, 1, 3, 9, 45, tzinfo=WARSAW)


def _p(msg: str) -> None:
    # pytest captures stdout unless you run with -s
    print(msg, flush=True)


def _banner(name: str) -> None:
    _p("\n" + "=" * 88)
    _p(f"test: {name}")
    _p("=" * 88)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        TIMEZONE="Europe/Warsaw",
        LOG_LEVEL="WARNING",
        MIN_HOURLY_RATE=27.7,
        DEFAULT_MONTHLY_GOAL_HOURS=160,
        SEED_DEMO_DATA=False,
        REQUIRE_GEOFENCE_ON_CLOCK_IN=False,
        ALLOW_OVERNIGHT_SHIFTS=False,
    )


@pytest.fixture
def database() -> InMemoryDatabase:
    return InMemoryDatabase(
        Snapshot(
            users=[
                User(id="1", username="anna", password="secret", name="Anna Nowak",
                     hourly_rate=30.0, positions=["kelner"]),
                User(id="2", username="tomek", name="Tomek Kowalski",
                     hourly_rate=28.0, positions=["barista"]),
                User(id="3", username="ola", name="Ola Wiśniewska",
                     hourly_rate=32.0, positions=["kelner", "barista"]),
                User(id="9", username="szef", name="Szef", is_employer=True),
            ],
            company=Company(
                name="Restauracja Centralna",
                location=CompanyLocation(
                    latitude=52.2297,
                    longitude=21.0122,
                    radius=100,
                    address="ul. Marszałkowska 1, Warszawa",
                    name="Restauracja Centralna",
                ),
            ),
        )
    )


@pytest.fixture
def app(database, settings):
    app = create_app(database=database, settings=settings)
    app.state.now_fn = lambda: NOW
    return app


@pytest_asyncio.fixture
async def client(app):
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as async_client:
        yield async_client


async def create_shift(client: AsyncClient, **fields) -> dict:
    body = {"date": "2024-01-03", "start": "10:00", "end": "18:00", **fields}
    resp = await client.post("/shifts", json=body)
    assert resp.status_code == 201, resp.text
    return resp.json()
