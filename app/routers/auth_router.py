import logging
from fastapi import APIRouter, Body, Depends, HTTPException, status, Response, Cookie
from sqlalchemy.orm import Session
from typing import Optional
from app.database import get_db
from app.schemas import LoginRequest, EmailResponse, DemoLoginResponse, OkResponse
from app.auth import authenticate, create_session, delete_session, normalize_email
from app.dependencies import SESSION_COOKIE, get_current_user_id
from app.store import ClientStore, get_store
from app.config import Settings, get_settings

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])


@router.post("/auth/login", response_model=EmailResponse)
async def login(
    response: Response,
    request: Optional[LoginRequest] = Body(None),
    db: Session = Depends(get_db),
    store: ClientStore = Depends(get_store),
    settings: Settings = Depends(get_settings)
):
    """
    Authenticate user and create session.

    Security notes:
    - Generic error message prevents email enumeration
    - Constant-time password verification prevents timing attacks
    - No indication whether email or password was wrong
    """
    if request is None or not request.email or not request.password:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="email and password required"
        )

    user = authenticate(store, request.email, request.password)
    if user is None:
        logger.info("Failed login for %s", normalize_email(request.email))
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="invalid credentials"
        )

    session_id = create_session(db, user.id)
    _set_session_cookie(response, session_id, settings)

    return EmailResponse(email=user.email)


@router.post("/auth/logout", response_model=OkResponse)
async def logout(
    response: Response,
    session_id: Optional[str] = Cookie(None, alias=SESSION_COOKIE),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings)
):
    """
    Invalidate session and clear cookie.

    Returns success even if session doesn't exist (idempotent).
    """
    if session_id:
        delete_session(db, session_id)

    _clear_session_cookie(response, settings)

    return OkResponse()


@router.get("/me", response_model=EmailResponse)
async def me(
    user_id: int = Depends(get_current_user_id),
    store: ClientStore = Depends(get_store)
):
    """
    Email of the signed-in user.

    A session whose user row is gone counts as unauthenticated.
    """
    user = store.get_user_by_id(user_id)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="unauthorized"
        )
    return EmailResponse(email=user.email)


@router.post("/auth/demo", response_model=DemoLoginResponse)
async def demo_login(
    response: Response,
    db: Session = Depends(get_db),
    store: ClientStore = Depends(get_store),
    settings: Settings = Depends(get_settings)
):
    """
    Sign in as the configured admin without a password.

    With demo_mode off the route answers exactly like an unknown path.
    """
    if not settings.demo_mode:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not Found")

    user = store.find_user_by_email(normalize_email(settings.admin_email))
    if user is None:
        logger.error("Demo login requested but admin %s is missing", settings.admin_email)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="admin not found"
        )

    session_id = create_session(db, user.id)
    _set_session_cookie(response, session_id, settings)

    return DemoLoginResponse(email=user.email)


def _set_session_cookie(response: Response, session_id: str, settings: Settings):
    """
    Set session cookie with security flags.

    The cookie only contains the session token (opaque).
    All user data stays server-side.
    """
    response.set_cookie(
        key=SESSION_COOKIE,
        value=session_id,
        httponly=True,
        secure=settings.cookie_secure,
        samesite=settings.cookie_samesite,
        max_age=settings.session_expire_hours * 3600,
        path="/"
    )


def _clear_session_cookie(response: Response, settings: Settings):
    """
    Clear session cookie by setting it with max_age=0.
    """
    response.set_cookie(
        key=SESSION_COOKIE,
        value="",
        httponly=True,
        secure=settings.cookie_secure,
        samesite=settings.cookie_samesite,
        max_age=0,
        path="/"
    )
