"""
Shift swaps.

A swap starts ``pending`` and ends in exactly one of ``accepted``,
``rejected`` or ``cancelled``. A swap without a target is offered on the
open market and may be accepted by anyone but its author.
"""

from datetime import datetime
from enum import StrEnum

import structlog

from worktime.database import Database
from worktime.errors import Conflict, Forbidden, NotFound, ValidationFailed
from worktime.models import Snapshot, Swap, SwapStatus, next_id
from worktime.schemas import SwapCreate
from worktime.services.shifts import SHIFT_NOT_FOUND, USER_NOT_FOUND

log = structlog.get_logger(__name__)

SWAP_NOT_FOUND = "Nie znaleziono prośby o zamianę"


class SwapListMode(StrEnum):
    MARKET = "market"
    MINE = "mine"
    INVOLVED = "involved"


def swap_view(swap: Swap, snapshot: Snapshot) -> dict:
    """Swap with the shift details and the names of both parties embedded."""
    row = swap.model_dump(mode="json", by_alias=True)
    shift = snapshot.find_shift(swap.shift_id)
    row["shift"] = (
        {
            "date": shift.date.isoformat(),
            "start": shift.start,
            "end": shift.end,
            "role": shift.role,
            "location": shift.location,
        }
        if shift
        else None
    )
    requester = snapshot.find_user(swap.requester_id)
    target = snapshot.find_user(swap.target_user_id) if swap.target_user_id else None
    row["requesterName"] = requester.name if requester else None
    row["targetName"] = target.name if target else None
    return row


def create_swap(db: Database, payload: SwapCreate, *, now: datetime) -> dict:
    target_user_id = payload.target_user_id or None
    if target_user_id == payload.requester_id:
        raise ValidationFailed("Nie można wysłać prośby o zamianę do samego siebie")

    with db.transaction() as snapshot:
        if snapshot.find_shift(payload.shift_id) is None:
            raise NotFound(SHIFT_NOT_FOUND)
        if snapshot.find_user(payload.requester_id) is None:
            raise NotFound(USER_NOT_FOUND)
        if target_user_id is not None and snapshot.find_user(target_user_id) is None:
            raise NotFound(USER_NOT_FOUND)
        for existing in snapshot.swaps:
            if (
                existing.shift_id == payload.shift_id
                and existing.requester_id == payload.requester_id
                and existing.status == SwapStatus.PENDING
            ):
                raise Conflict("Prośba o zamianę tej zmiany już istnieje")

        swap = Swap(
            id=next_id(snapshot.swaps),
            shift_id=payload.shift_id,
            requester_id=payload.requester_id,
            target_user_id=target_user_id,
            status=SwapStatus.PENDING,
            created_at=now,
            updated_at=now,
        )
        snapshot.swaps.append(swap)
        view = swap_view(swap, snapshot)

    log.info(
        "swap_created",
        swap_id=swap.id,
        shift_id=swap.shift_id,
        open_market=target_user_id is None,
    )
    return view


def _pending_swap(snapshot: Snapshot, swap_id: str) -> Swap:
    swap = snapshot.find_swap(swap_id)
    if swap is None:
        raise NotFound(SWAP_NOT_FOUND)
    if swap.status.terminal:
        raise Conflict("Prośba o zamianę została już rozpatrzona")
    return swap


def accept_swap(
    db: Database, swap_id: str, actor_user_id: str | None, *, now: datetime
) -> dict:
    """
    Accept a pending swap on behalf of ``actor_user_id``.

    If the shift is still held by the requester it goes to the target
    (give-away); otherwise it goes to the requester (take-request).
    """
    if not actor_user_id:
        raise ValidationFailed("Wymagane pole actorUserId")

    with db.transaction() as snapshot:
        swap = _pending_swap(snapshot, swap_id)
        shift = snapshot.find_shift(swap.shift_id)
        if shift is None:
            raise NotFound(SHIFT_NOT_FOUND)

        if swap.target_user_id is None:
            if actor_user_id == swap.requester_id:
                raise Forbidden("Nie można przyjąć własnej oferty zamiany")
            swap.target_user_id = actor_user_id
        elif actor_user_id not in (swap.target_user_id, swap.requester_id):
            raise Forbidden("Brak uprawnień do przyjęcia tej zamiany")

        swap.status = SwapStatus.ACCEPTED
        swap.updated_at = now
        if shift.assigned_user_id == swap.requester_id:
            shift.assigned_user_id = swap.target_user_id
        else:
            shift.assigned_user_id = swap.requester_id
        shift.updated_at = now
        view = swap_view(swap, snapshot)

    log.info(
        "swap_accepted",
        swap_id=swap_id,
        shift_id=swap.shift_id,
        actor_user_id=actor_user_id,
        assigned_user_id=shift.assigned_user_id,
    )
    return view


def _close_swap(
    db: Database,
    swap_id: str,
    status: SwapStatus,
    actor_user_id: str | None,
    *,
    now: datetime,
) -> dict:
    # TODO: restrict reject/cancel to the swap's parties once product decides who may do it
    with db.transaction() as snapshot:
        swap = _pending_swap(snapshot, swap_id)
        swap.status = status
        swap.updated_at = now
        view = swap_view(swap, snapshot)

    log.info(f"swap_{status}", swap_id=swap_id, actor_user_id=actor_user_id)
    return view


def reject_swap(
    db: Database, swap_id: str, actor_user_id: str | None = None, *, now: datetime
) -> dict:
    return _close_swap(db, swap_id, SwapStatus.REJECTED, actor_user_id, now=now)


def cancel_swap(
    db: Database, swap_id: str, actor_user_id: str | None = None, *, now: datetime
) -> dict:
    return _close_swap(db, swap_id, SwapStatus.CANCELLED, actor_user_id, now=now)


def list_swaps(
    db: Database,
    *,
    user_id: str | None = None,
    mode: SwapListMode = SwapListMode.INVOLVED,
    status: SwapStatus | None = None,
) -> list[dict]:
    snapshot = db.load()
    swaps = snapshot.swaps

    if user_id is not None:
        if mode == SwapListMode.MARKET:
            swaps = [
                s
                for s in swaps
                if s.status == SwapStatus.PENDING
                and s.requester_id != user_id
                and s.target_user_id in (None, user_id)
            ]
        elif mode == SwapListMode.MINE:
            swaps = [s for s in swaps if s.requester_id == user_id]
        else:
            swaps = [
                s
                for s in swaps
                if s.requester_id == user_id or s.target_user_id == user_id
            ]
    elif mode == SwapListMode.MARKET:
        swaps = [
            s
            for s in swaps
            if s.status == SwapStatus.PENDING and s.target_user_id is None
        ]

    if status is not None:
        swaps = [s for s in swaps if s.status == status]
    return [swap_view(s, snapshot) for s in swaps]
