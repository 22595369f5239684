from datetime import datetime

from fastapi import APIRouter, Depends, Query

from worktime.config import Settings
from worktime.database import Database
from worktime.models import Availability
from worktime.routers import deps
from worktime.schemas import AvailabilityCreate, AvailabilityUpdate
from worktime.services import availabilities as service

router = APIRouter(prefix="/availabilities", tags=["availabilities"])


@router.get("")
async def list_availabilities(
    user_id: str | None = Query(default=None, alias="userId"),
    date_from: str | None = Query(default=None, alias="from"),
    date_to: str | None = Query(default=None, alias="to"),
    with_names: bool = Query(default=False, alias="withNames"),
    db: Database = Depends(deps.get_db),
) -> list[dict]:
    return service.list_availabilities(
        db,
        user_id=user_id,
        date_from=deps.parse_date_param(date_from, "from"),
        date_to=deps.parse_date_param(date_to, "to"),
        with_names=with_names,
    )


@router.post("", status_code=201)
async def create_availability(
    payload: AvailabilityCreate,
    db: Database = Depends(deps.get_db),
    settings: Settings = Depends(deps.get_settings),
    now: datetime = Depends(deps.get_now),
) -> Availability:
    return service.create_availability(db, payload, settings=settings, now=now)


@router.patch("/{availability_id}")
async def update_availability(
    availability_id: str,
    payload: AvailabilityUpdate,
    db: Database = Depends(deps.get_db),
    settings: Settings = Depends(deps.get_settings),
    now: datetime = Depends(deps.get_now),
) -> Availability:
    return service.update_availability(
        db, availability_id, payload, settings=settings, now=now
    )


@router.delete("/{availability_id}")
async def delete_availability(
    availability_id: str, db: Database = Depends(deps.get_db)
) -> dict:
    service.delete_availability(db, availability_id)
    return {"ok": True}
