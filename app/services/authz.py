from dataclasses import dataclass

from fastapi import Depends, HTTPException, Request
from sqlalchemy.orm import Session as DbSession

from app.database import get_db
from app.models.session import Session
from app.models.user import User
from app.services.sessions import COOKIE_NAME, hash_session_token
from app.services.timezones import as_utc
from app.services.tokens import utcnow


@dataclass
class Caller:
    user: User
    workspace_id: int


def get_current_user(req: Request, db: DbSession = Depends(get_db)) -> User:
    raw = req.cookies.get(COOKIE_NAME)
    if not raw:
        raise HTTPException(status_code=401, detail="Not authenticated")

    sh = hash_session_token(raw)
    sess = db.query(Session).filter(Session.session_token == sh, Session.revoked_at == None).first()  # noqa: E711
    if not sess or as_utc(sess.expires_at) < utcnow():
        raise HTTPException(status_code=401, detail="Session expired")

    user = db.query(User).filter(User.id == sess.user_id).first()
    if not user or not user.is_active:
        raise HTTPException(status_code=401, detail="User not found")
    return user


def get_caller(user: User = Depends(get_current_user)) -> Caller:
    if user.current_workspace_id is None:
        raise HTTPException(status_code=403, detail="No workspace selected")
    return Caller(user=user, workspace_id=user.current_workspace_id)
