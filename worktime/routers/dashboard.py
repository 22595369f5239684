from datetime import datetime

from fastapi import APIRouter, Depends

from worktime.config import Settings
from worktime.database import Database
from worktime.errors import ValidationFailed
from worktime.routers import deps
from worktime.services import dashboard as service

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("/{user_id}")
async def dashboard(
    user_id: str,
    db: Database = Depends(deps.get_db),
    settings: Settings = Depends(deps.get_settings),
    now: datetime = Depends(deps.get_now),
) -> dict:
    return service.build_dashboard(db, user_id, settings=settings, now=now)


@router.get("/{user_id}/earnings")
async def earnings(
    user_id: str,
    month: str | None = None,
    db: Database = Depends(deps.get_db),
    settings: Settings = Depends(deps.get_settings),
    now: datetime = Depends(deps.get_now),
) -> dict:
    if month:
        try:
            year, month_number = (int(part) for part in month.split("-"))
            # month_bounds needs the following January to exist
            if not (1 <= year <= 9998 and 1 <= month_number <= 12):
                raise ValueError(month)
        except ValueError as exc:
            raise ValidationFailed("Miesiąc musi mieć format RRRR-MM") from exc
    else:
        local_now = now.astimezone(settings.tz)
        year, month_number = local_now.year, local_now.month
    return service.build_earnings(db, user_id, year, month_number, settings=settings)
