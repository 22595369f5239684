from datetime import datetime

from fastapi import APIRouter, Depends, Query

from worktime.config import Settings
from worktime.database import Database
from worktime.models import Shift
from worktime.routers import deps
from worktime.schemas import AssignRequest, ShiftCreate, ShiftUpdate
from worktime.services import shifts as service

router = APIRouter(prefix="/shifts", tags=["shifts"])


@router.get("")
async def list_shifts(
    date_from: str | None = Query(default=None, alias="from"),
    date_to: str | None = Query(default=None, alias="to"),
    user_id: str | None = Query(default=None, alias="userId"),
    role: str | None = None,
    unassigned: bool = False,
    group_by: str | None = Query(default=None, alias="groupBy"),
    summary: bool = False,
    db: Database = Depends(deps.get_db),
    settings: Settings = Depends(deps.get_settings),
):
    return service.list_shifts(
        db,
        settings=settings,
        date_from=deps.parse_date_param(date_from, "from"),
        date_to=deps.parse_date_param(date_to, "to"),
        user_id=user_id,
        role=role,
        unassigned=unassigned,
        group_by_day=group_by == "day",
        summary=summary,
    )


@router.post("", status_code=201)
async def create_shift(
    payload: ShiftCreate,
    db: Database = Depends(deps.get_db),
    settings: Settings = Depends(deps.get_settings),
    now: datetime = Depends(deps.get_now),
) -> Shift:
    return service.create_shift(db, payload, settings=settings, now=now)


@router.patch("/{shift_id}")
async def update_shift(
    shift_id: str,
    payload: ShiftUpdate,
    db: Database = Depends(deps.get_db),
    settings: Settings = Depends(deps.get_settings),
    now: datetime = Depends(deps.get_now),
) -> Shift:
    return service.update_shift(db, shift_id, payload, settings=settings, now=now)


@router.delete("/{shift_id}")
async def delete_shift(shift_id: str, db: Database = Depends(deps.get_db)) -> dict:
    service.delete_shift(db, shift_id)
    return {"ok": True}


@router.post("/{shift_id}/assign")
async def assign_shift(
    shift_id: str,
    payload: AssignRequest | None = None,
    db: Database = Depends(deps.get_db),
    now: datetime = Depends(deps.get_now),
) -> Shift:
    user_id = payload.user_id if payload else None
    return service.assign_shift(db, shift_id, user_id, now=now)
