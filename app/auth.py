from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from functools import lru_cache
from typing import Optional
import secrets
from jose import JWTError, jwt
from passlib.context import CryptContext
from fastapi import Depends, Request, Response
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
import logging

from .config import settings
from .database import get_db
from .exceptions import AuthenticationError, AuthorizationError, ConflictError, RateLimitError, ValidationError
from .models.database import User, UserRole, UserSession, utcnow

logger = logging.getLogger(__name__)

# Password hashing
pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.bcrypt_rounds
)

INVALID_CREDENTIALS_MESSAGE = "Invalid email or password"
MIN_PASSWORD_LENGTH = 6

def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash."""
    return pwd_context.verify(plain_password, hashed_password)

def get_password_hash(password: str) -> str:
    """Generate password hash."""
    return pwd_context.hash(password)

@lru_cache(maxsize=1)
def _dummy_hash() -> str:
    return get_password_hash(secrets.token_urlsafe(16))

# ---------------------------------------------------------------------------
# Credential store
# ---------------------------------------------------------------------------

def get_user_by_email(db: Session, email: str) -> Optional[User]:
    """Get a user by email, case-insensitively."""
    return db.query(User).filter(func.lower(User.email) == email.strip().lower()).first()

def get_user_by_id(db: Session, user_id: str) -> Optional[User]:
    """Get a user by id."""
    return db.query(User).filter(User.id == user_id).first()

def get_users(db: Session) -> list[User]:
    """Get all users, newest first."""
    return db.query(User).order_by(User.created_at.desc()).all()

def create_user(
    db: Session,
    email: str,
    password: str,
    first_name: Optional[str] = None,
    last_name: Optional[str] = None,
    role: UserRole = UserRole.USER
) -> User:
    """Create a new user. Raises ConflictError if the email is taken."""
    if not email or not email.strip():
        raise ValidationError(details=[{"field": "email", "message": "Email is required"}])
    if len(password or "") < MIN_PASSWORD_LENGTH:
        raise ValidationError(
            details=[{"field": "password", "message": f"Password must be at least {MIN_PASSWORD_LENGTH} characters"}]
        )

    if get_user_by_email(db, email):
        raise ConflictError("Email already registered")

    try:
        user = User(
            email=email.strip().lower(),
            password_hash=get_password_hash(password),
            first_name=first_name or None,
            last_name=last_name or None,
            role=role
        )

        db.add(user)
        db.commit()
        db.refresh(user)

        logger.info(f"Created user: {user.email}")
        return user

    except IntegrityError as e:
        # Lost a race with a concurrent registration for the same email
        logger.warning(f"Duplicate registration for {email}: {str(e)}")
        db.rollback()
        raise ConflictError("Email already registered") from e

    except Exception as e:
        logger.error(f"Error creating user {email}: {str(e)}")
        db.rollback()
        raise

def authenticate_user(db: Session, email: str, password: str) -> User:
    """Authenticate a user with email and password.

    Unknown email and wrong password raise the same AuthenticationError so the
    response does not reveal which accounts exist. A dummy hash is verified for
    unknown emails to keep timing similar.
    """
    user = get_user_by_email(db, email)

    if not user or not user.password_hash:
        verify_password(password, _dummy_hash())
        raise AuthenticationError(INVALID_CREDENTIALS_MESSAGE)

    if not verify_password(password, user.password_hash):
        raise AuthenticationError(INVALID_CREDENTIALS_MESSAGE)

    return user

def update_user_role(db: Session, user_id: str, role: UserRole) -> Optional[User]:
    """Change a user's role. Returns None if the user does not exist."""
    try:
        user = get_user_by_id(db, user_id)
        if not user:
            return None

        user.role = role
        db.commit()
        db.refresh(user)

        logger.info(f"Updated role for user {user.email}: {role.value}")
        return user

    except Exception as e:
        logger.error(f"Error updating role for user {user_id}: {str(e)}")
        db.rollback()
        raise

# ---------------------------------------------------------------------------
# Session manager
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class SessionContext:
    """Identity carried by the request's session cookie."""

    sid: Optional[str] = None
    user_id: Optional[str] = None

    @property
    def is_authenticated(self) -> bool:
        return self.user_id is not None

@dataclass(frozen=True)
class AuthContext:
    session: SessionContext
    user: Optional[User] = None

def _session_ttl() -> timedelta:
    return timedelta(days=settings.session_max_age_days)

def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value

def encode_session_token(sid: str) -> str:
    """Sign a session id for the cookie."""
    return jwt.encode({"sid": sid}, settings.session_secret, algorithm=settings.session_algorithm)

def decode_session_token(token: str) -> Optional[str]:
    """Return the session id from a signed cookie value, or None if tampered."""
    try:
        payload = jwt.decode(token, settings.session_secret, algorithms=[settings.session_algorithm])
    except JWTError as e:
        logger.warning(f"Session cookie verification failed: {str(e)}")
        return None
    sid = payload.get("sid")
    return sid if isinstance(sid, str) else None

def create_session(db: Session, user_id: str) -> str:
    """Persist a new session bound to user_id and return its id."""
    sid = secrets.token_urlsafe(32)
    db.add(UserSession(sid=sid, user_id=user_id, expires_at=utcnow() + _session_ttl()))
    db.commit()
    return sid

def destroy_session(db: Session, sid: str) -> None:
    """Delete a session from the store."""
    try:
        db.query(UserSession).filter(UserSession.sid == sid).delete()
        db.commit()
    except Exception:
        db.rollback()
        raise

def load_session(db: Session, sid: str) -> Optional[UserSession]:
    """Fetch a live session and push its expiry forward; expired ones are removed."""
    stored = db.query(UserSession).filter(UserSession.sid == sid).first()
    if stored is None:
        return None

    now = utcnow()
    if _as_utc(stored.expires_at) <= now:
        destroy_session(db, sid)
        return None

    stored.expires_at = now + _session_ttl()
    db.commit()
    return stored

def set_session_cookie(response: Response, sid: str) -> None:
    response.set_cookie(
        key=settings.session_cookie_name,
        value=encode_session_token(sid),
        max_age=int(_session_ttl().total_seconds()),
        httponly=True,
        secure=settings.is_production,
        samesite="none" if settings.is_cross_origin else "lax",
        path="/"
    )

def clear_session_cookie(response: Response) -> None:
    response.delete_cookie(
        key=settings.session_cookie_name,
        httponly=True,
        secure=settings.is_production,
        samesite="none" if settings.is_cross_origin else "lax",
        path="/"
    )

# ---------------------------------------------------------------------------
# Authorization gate
# ---------------------------------------------------------------------------

async def get_session_context(request: Request, db: Session = Depends(get_db)) -> SessionContext:
    """Resolve the session cookie into an explicit SessionContext."""
    token = request.cookies.get(settings.session_cookie_name)
    if not token:
        return SessionContext()

    sid = decode_session_token(token)
    if sid is None:
        return SessionContext()

    stored = load_session(db, sid)
    if stored is None:
        return SessionContext()

    return SessionContext(sid=stored.sid, user_id=stored.user_id)

async def require_authenticated(
    session: SessionContext = Depends(get_session_context)
) -> SessionContext:
    """Fail with 401 unless the session is bound to a user."""
    if not session.is_authenticated:
        raise AuthenticationError("Unauthorized")
    return session

async def attach_user(
    session: SessionContext = Depends(get_session_context),
    db: Session = Depends(get_db)
) -> AuthContext:
    """Load the session's user, if any, without requiring one.

    A session pointing at a user that no longer exists is destroyed.
    """
    if not session.is_authenticated:
        return AuthContext(session=session)

    user = get_user_by_id(db, session.user_id)
    if user is None:
        logger.warning(f"Session {session.sid[:8]}... references missing user {session.user_id}")
        destroy_session(db, session.sid)
        return AuthContext(session=SessionContext())

    return AuthContext(session=session, user=user)

async def get_current_user(
    session: SessionContext = Depends(require_authenticated),
    auth: AuthContext = Depends(attach_user)
) -> User:
    """Get the current authenticated user."""
    if auth.user is None:
        raise AuthenticationError("User not found")
    return auth.user

async def require_admin(
    current_user: User = Depends(get_current_user)
) -> User:
    """Get the current user and verify admin privileges."""
    if current_user.role is not UserRole.ADMIN:
        raise AuthorizationError("Admin access required")
    return current_user

# ---------------------------------------------------------------------------
# Rate limiting for authentication attempts
# ---------------------------------------------------------------------------

from collections import defaultdict
import time

class RateLimiter:
    """Simple rate limiter for authentication attempts."""

    def __init__(self, max_attempts: int = 5, window_seconds: int = 300):
        self.max_attempts = max_attempts
        self.window_seconds = window_seconds
        self.attempts = defaultdict(list)

    def is_allowed(self, identifier: str) -> bool:
        """Check if an identifier is within rate limits."""
        now = time.time()
        self._prune(now)

        attempts = self.attempts[identifier]
        if len(attempts) >= self.max_attempts:
            return False

        attempts.append(now)
        return True

    def _prune(self, now: float):
        """Drop expired attempts, and identifiers left with none."""
        for identifier in list(self.attempts):
            recent = [
                attempt_time for attempt_time in self.attempts[identifier]
                if now - attempt_time < self.window_seconds
            ]
            if recent:
                self.attempts[identifier] = recent
            else:
                del self.attempts[identifier]

    def reset(self, identifier: str):
        """Reset rate limit for an identifier."""
        if identifier in self.attempts:
            del self.attempts[identifier]

    def clear(self):
        self.attempts.clear()

# Global rate limiter instance
auth_rate_limiter = RateLimiter(
    max_attempts=settings.auth_rate_limit_attempts,
    window_seconds=settings.auth_rate_limit_window_seconds
)

def check_auth_rate_limit(identifier: str) -> None:
    """Raise RateLimitError if authentication attempts exceed the limit."""
    if not auth_rate_limiter.is_allowed(identifier):
        logger.warning(f"Rate limit exceeded for {identifier}")
        raise RateLimitError()

def reset_auth_rate_limit(identifier: str):
    """Reset authentication rate limit for an identifier."""
    auth_rate_limiter.reset(identifier)
