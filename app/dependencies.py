from fastapi import Cookie, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import Optional
from app.auth import get_user_id_from_session
from app.database import get_db

SESSION_COOKIE = "session_id"


def get_current_user_id(
    session_id: Optional[str] = Cookie(None, alias=SESSION_COOKIE),
    db: Session = Depends(get_db)
) -> int:
    """
    Require a live session.

    Missing, unknown and expired tokens all get the same 401.
    """
    user_id = get_user_id_from_session(db, session_id)
    if user_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="unauthorized"
        )
    return user_id
