from datetime import datetime

from fastapi import APIRouter, Depends, Query

from worktime.config import Settings
from worktime.database import Database
from worktime.routers import deps
from worktime.schemas import LoginRequest, RegisterRequest, UserUpdate
from worktime.services import users as service

router = APIRouter(tags=["users"])


@router.post("/login")
async def login(
    payload: LoginRequest,
    db: Database = Depends(deps.get_db),
    settings: Settings = Depends(deps.get_settings),
    now: datetime = Depends(deps.get_now),
) -> dict:
    return service.login(db, payload, settings=settings, now=now).public()


@router.post("/register", status_code=201)
async def register(
    payload: RegisterRequest,
    db: Database = Depends(deps.get_db),
    settings: Settings = Depends(deps.get_settings),
    now: datetime = Depends(deps.get_now),
) -> dict:
    return service.register(db, payload, settings=settings, now=now).public()


@router.get("/users")
async def list_users(db: Database = Depends(deps.get_db)) -> list[dict]:
    return [u.public() for u in service.list_users(db)]


@router.get("/users/filter")
async def filter_users(
    date: str | None = None,
    position_ids: str | None = Query(default=None, alias="positionIds"),
    include_unavailable: bool = Query(default=False, alias="includeUnavailable"),
    db: Database = Depends(deps.get_db),
) -> list[dict]:
    positions = [p.strip() for p in position_ids.split(",") if p.strip()] if position_ids else None
    return service.filter_users(
        db,
        day=deps.parse_date_param(date, "date"),
        position_ids=positions,
        include_unavailable=include_unavailable,
    )


@router.get("/users/{user_id}")
async def get_user(user_id: str, db: Database = Depends(deps.get_db)) -> dict:
    return service.get_user(db, user_id).public()


@router.patch("/users/{user_id}")
async def update_user(
    user_id: str,
    payload: UserUpdate,
    db: Database = Depends(deps.get_db),
    settings: Settings = Depends(deps.get_settings),
) -> dict:
    return service.update_user(db, user_id, payload, settings=settings).public()


@router.delete("/users/{user_id}")
async def delete_user(user_id: str, db: Database = Depends(deps.get_db)) -> dict:
    service.delete_user(db, user_id)
    return {"ok": True}
