from datetime import datetime

from fastapi import APIRouter, Depends, Query

from worktime.config import Settings
from worktime.database import Database
from worktime.models import Company, Timesheet
from worktime.routers import deps
from worktime.schemas import ClockInRequest, ClockOutRequest
from worktime.services import timesheets as service

router = APIRouter(prefix="/timesheets", tags=["timesheets"])


@router.get("")
async def list_timesheets(
    user_id: str | None = Query(default=None, alias="userId"),
    date_from: str | None = Query(default=None, alias="from"),
    date_to: str | None = Query(default=None, alias="to"),
    db: Database = Depends(deps.get_db),
    settings: Settings = Depends(deps.get_settings),
) -> list[Timesheet]:
    return service.list_timesheets(
        db,
        settings=settings,
        user_id=user_id,
        date_from=deps.parse_datetime_param(date_from, "from", settings),
        date_to=deps.parse_datetime_param(date_to, "to", settings, end_of_day=True),
    )


@router.post("/clock-in")
async def clock_in(
    payload: ClockInRequest,
    db: Database = Depends(deps.get_db),
    settings: Settings = Depends(deps.get_settings),
    company: Company = Depends(deps.get_company),
    now: datetime = Depends(deps.get_now),
) -> Timesheet:
    return service.clock_in(db, payload, settings=settings, company=company, now=now)


@router.post("/clock-out")
async def clock_out(
    payload: ClockOutRequest,
    db: Database = Depends(deps.get_db),
    settings: Settings = Depends(deps.get_settings),
    now: datetime = Depends(deps.get_now),
) -> Timesheet:
    return service.clock_out(db, payload, settings=settings, now=now)


@router.get("/active/{user_id}")
async def active_timesheet(user_id: str, db: Database = Depends(deps.get_db)) -> dict:
    entry = service.active_timesheet(db, user_id)
    return {
        "active": entry is not None,
        "timesheet": entry.model_dump(mode="json", by_alias=True) if entry else None,
    }
