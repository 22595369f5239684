from datetime import datetime

from fastapi import APIRouter, Depends, Query

from worktime.database import Database
from worktime.models import SwapStatus
from worktime.routers import deps
from worktime.schemas import SwapAction, SwapCreate
from worktime.services import swaps as service
from worktime.services.swaps import SwapListMode

router = APIRouter(prefix="/swaps", tags=["swaps"])


@router.get("")
async def list_swaps(
    user_id: str | None = Query(default=None, alias="userId"),
    mode: SwapListMode = SwapListMode.INVOLVED,
    status: SwapStatus | None = None,
    db: Database = Depends(deps.get_db),
) -> list[dict]:
    return service.list_swaps(db, user_id=user_id, mode=mode, status=status)


@router.post("", status_code=201)
async def create_swap(
    payload: SwapCreate,
    db: Database = Depends(deps.get_db),
    now: datetime = Depends(deps.get_now),
) -> dict:
    return service.create_swap(db, payload, now=now)


@router.post("/{swap_id}/accept")
async def accept_swap(
    swap_id: str,
    payload: SwapAction | None = None,
    db: Database = Depends(deps.get_db),
    now: datetime = Depends(deps.get_now),
) -> dict:
    actor = payload.actor_user_id if payload else None
    return service.accept_swap(db, swap_id, actor, now=now)


@router.post("/{swap_id}/reject")
async def reject_swap(
    swap_id: str,
    payload: SwapAction | None = None,
    db: Database = Depends(deps.get_db),
    now: datetime = Depends(deps.get_now),
) -> dict:
    actor = payload.actor_user_id if payload else None
    return service.reject_swap(db, swap_id, actor, now=now)


@router.post("/{swap_id}/cancel")
async def cancel_swap(
    swap_id: str,
    payload: SwapAction | None = None,
    db: Database = Depends(deps.get_db),
    now: datetime = Depends(deps.get_now),
) -> dict:
    actor = payload.actor_user_id if payload else None
    return service.cancel_swap(db, swap_id, actor, now=now)
