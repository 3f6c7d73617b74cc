from __future__ import annotations

from fastapi import APIRouter, Body, Depends, Request
from sqlalchemy.orm import Session

from app.database import get_db
from app.schemas.publication_lock import LockOut, LockRequest
from app.services import publication_locks
from app.services.authz import Caller, get_caller

router = APIRouter(tags=["publication-locks"])


@router.post("/publications/{publication_id}/lock")
def lock_publication(
    publication_id: int,
    req: Request,
    payload: LockRequest | None = Body(default=None),
    caller: Caller = Depends(get_caller),
    db: Session = Depends(get_db),
):
    force = bool(payload and payload.force)
    lock = publication_locks.acquire(
        db,
        caller.user,
        caller.workspace_id,
        publication_id,
        force=force,
        ip=req.client.host if req.client else None,
        user_agent=req.headers.get("user-agent"),
    )
    return {"success": True, "lock": LockOut(**publication_locks.lock_info(lock))}


@router.post("/publications/{publication_id}/unlock")
def unlock_publication(publication_id: int, caller: Caller = Depends(get_caller), db: Session = Depends(get_db)):
    released = publication_locks.release(db, caller.user, caller.workspace_id, publication_id)
    return {"success": True, "released": released}


@router.get("/publications/{publication_id}/lock")
def get_publication_lock(publication_id: int, caller: Caller = Depends(get_caller), db: Session = Depends(get_db)):
    lock = publication_locks.current_lock(db, caller.workspace_id, publication_id)
    return {"lock": LockOut(**publication_locks.lock_info(lock)) if lock else None}


@router.get("/publication-locks")
def list_publication_locks(caller: Caller = Depends(get_caller), db: Session = Depends(get_db)):
    locks = publication_locks.active_locks(db, caller.workspace_id)
    return {"locks": [LockOut(**publication_locks.lock_info(lock)) for lock in locks]}
