from datetime import datetime

import structlog
from fastapi import APIRouter, FastAPI

from worktime.config import Settings, get_settings
from worktime.database import Database, JsonFileDatabase
from worktime.errors import register_exception_handlers
from worktime.logging import setup_logging
from worktime.routers import (
    availabilities,
    company,
    dashboard,
    shifts,
    swaps,
    timesheets,
    users,
)
from worktime.seed import seed_if_empty

log = structlog.get_logger(__name__)

router = APIRouter()


@router.get("/health")
async def health_check() -> dict[str, bool]:
    return {"ok": True}


def create_app(
    database: Database | None = None, settings: Settings | None = None
) -> FastAPI:
    settings = settings or get_settings()
    setup_logging(settings.LOG_LEVEL)

    if database is None:
        database = JsonFileDatabase(settings.DB_PATH)
        database.initialize(settings.default_company())

    # the company record is fixed for the lifetime of the process
    with database.transaction() as snapshot:
        if snapshot.company is None:
            snapshot.company = settings.default_company()
        company_record = snapshot.company

    app = FastAPI(title=settings.APP_NAME)
    app.state.database = database
    app.state.settings = settings
    app.state.company = company_record
    app.state.now_fn = lambda: datetime.now(settings.tz)

    if settings.SEED_DEMO_DATA:
        seed_if_empty(database, app.state.now_fn())

    register_exception_handlers(app)
    app.include_router(router)
    app.include_router(company.router)
    app.include_router(users.router)
    app.include_router(dashboard.router)
    app.include_router(shifts.router)
    app.include_router(timesheets.router)
    app.include_router(availabilities.router)
    app.include_router(swaps.router)

    log.info("app_created", company=company_record.name)
    return app
