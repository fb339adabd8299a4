from fastapi import APIRouter, Depends, Request, Response, status
from sqlalchemy.orm import Session
import logging

from ..database import get_db
from ..auth import (
    AuthContext, SessionContext, attach_user, authenticate_user, check_auth_rate_limit,
    clear_session_cookie, create_session, create_user, destroy_session, get_current_user,
    get_session_context, reset_auth_rate_limit, set_session_cookie
)
from ..exceptions import LegalAssistantError
from ..models.schemas import LogoutResponse, UserLogin, UserRegister, UserResponse
from ..services.audit_logger import AuditAction, get_client_ip, record_audit_event

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["Authentication"])

def _client_key(request: Request) -> str:
    return get_client_ip(request) or "unknown"

@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def register_user(
    user_data: UserRegister,
    request: Request,
    response: Response,
    session: SessionContext = Depends(get_session_context),
    db: Session = Depends(get_db)
):
    """Register a new user and sign them in."""
    rate_limit_key = f"register_{_client_key(request)}"
    check_auth_rate_limit(rate_limit_key)

    user = create_user(
        db=db,
        email=user_data.email,
        password=user_data.password,
        first_name=user_data.first_name,
        last_name=user_data.last_name
    )

    if session.sid:
        destroy_session(db, session.sid)
    set_session_cookie(response, create_session(db, user.id))

    reset_auth_rate_limit(rate_limit_key)

    record_audit_event(db, user.id, user.email, AuditAction.REGISTER, request)
    logger.info(f"User registered: {user.email}")
    return user

@router.post("/login", response_model=UserResponse)
async def login_user(
    credentials: UserLogin,
    request: Request,
    response: Response,
    session: SessionContext = Depends(get_session_context),
    db: Session = Depends(get_db)
):
    """Authenticate user and bind the session to them."""
    rate_limit_key = f"login_{_client_key(request)}_{credentials.email.lower()}"
    check_auth_rate_limit(rate_limit_key)

    user = authenticate_user(db=db, email=credentials.email, password=credentials.password)

    # New session id on every login
    if session.sid:
        destroy_session(db, session.sid)
    set_session_cookie(response, create_session(db, user.id))

    reset_auth_rate_limit(rate_limit_key)

    record_audit_event(db, user.id, user.email, AuditAction.LOGIN, request)
    logger.info(f"User logged in: {user.email}")
    return user

@router.post("/logout", response_model=LogoutResponse)
async def logout_user(
    request: Request,
    response: Response,
    auth: AuthContext = Depends(attach_user),
    db: Session = Depends(get_db)
):
    """Destroy the session and clear the cookie."""
    if auth.user is not None:
        record_audit_event(db, auth.user.id, auth.user.email, AuditAction.LOGOUT, request)

    if auth.session.sid:
        try:
            destroy_session(db, auth.session.sid)
        except Exception as e:
            logger.error(f"Logout error: {str(e)}")
            raise LegalAssistantError("Logout failed") from e

    clear_session_cookie(response)
    return LogoutResponse(success=True)

@router.get("/user", response_model=UserResponse)
async def get_current_user_info(
    current_user = Depends(get_current_user)
):
    """Get current user information."""
    return current_user
