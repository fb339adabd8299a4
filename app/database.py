from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool
from typing import Generator
import logging
from .config import settings

logger = logging.getLogger(__name__)

_is_sqlite = settings.database_url.startswith("sqlite")

# Create SQLAlchemy engine
engine = create_engine(
    settings.database_url,
    poolclass=StaticPool if _is_sqlite else None,
    connect_args={"check_same_thread": False} if _is_sqlite else {},
    pool_pre_ping=not _is_sqlite,
    echo=settings.debug
)

# Create SessionLocal class
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Create Base class
from .models.database import Base

def create_tables():
    """Create all database tables."""
    try:
        Base.metadata.create_all(bind=engine)
        logger.info("Database tables created successfully")
    except Exception as e:
        logger.error(f"Error creating database tables: {str(e)}")
        raise

def get_db() -> Generator[Session, None, None]:
    """Dependency to get database session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

def init_db():
    """Initialize database and bootstrap the configured admin account."""
    try:
        create_tables()

        if not (settings.admin_email and settings.admin_password):
            return

        from .models.database import UserRole
        from .auth import create_user, get_user_by_email

        db = SessionLocal()
        try:
            admin_user = get_user_by_email(db, settings.admin_email)
            if not admin_user:
                admin_user = create_user(
                    db,
                    email=settings.admin_email,
                    password=settings.admin_password,
                    first_name="Admin",
                    role=UserRole.ADMIN
                )
                logger.info(f"Default admin user created: {admin_user.email}")
            elif admin_user.role is not UserRole.ADMIN:
                admin_user.role = UserRole.ADMIN
                db.commit()
                logger.info(f"Promoted configured admin user: {admin_user.email}")

        finally:
            db.close()

    except Exception as e:
        logger.error(f"Error initializing database: {str(e)}")
        raise
