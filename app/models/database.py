from sqlalchemy import (
    Column, Integer, String, Text, DateTime, ForeignKey, JSON, CheckConstraint, Enum as SAEnum
)
from sqlalchemy.orm import declarative_base, relationship
from datetime import datetime, timezone
from enum import Enum
import uuid

Base = declarative_base()

def utcnow() -> datetime:
    return datetime.now(timezone.utc)

def new_id() -> str:
    return str(uuid.uuid4())

class UserRole(str, Enum):
    USER = "user"
    ADMIN = "admin"

class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=new_id)
    email = Column(String(255), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    first_name = Column(String(100))
    last_name = Column(String(100))
    role = Column(
        SAEnum(UserRole, native_enum=False, length=20, values_callable=lambda roles: [r.value for r in roles]),
        nullable=False,
        default=UserRole.USER,
    )
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

class UserSession(Base):
    __tablename__ = "sessions"

    sid = Column(String(64), primary_key=True)
    user_id = Column(String(36), index=True)
    expires_at = Column(DateTime(timezone=True), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

class Translation(Base):
    __tablename__ = "translations"
    __table_args__ = (
        CheckConstraint("source_language <> target_language", name="ck_translation_languages_differ"),
    )

    id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(String(36), index=True, nullable=False)
    source_language = Column(String(2), nullable=False)
    target_language = Column(String(2), nullable=False)
    source_text = Column(Text, nullable=False)
    translated_text = Column(Text, nullable=False)
    document_type = Column(String(50), nullable=False)
    purpose = Column(String(20), nullable=False)
    tone = Column(String(20), nullable=False)
    jurisdiction = Column(String(20), nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    # Version rows are removed explicitly by the storage layer before the parent
    versions = relationship(
        "TranslationVersion",
        order_by="TranslationVersion.position",
        back_populates="translation",
    )

class TranslationVersion(Base):
    __tablename__ = "translation_versions"

    id = Column(String(36), primary_key=True, default=new_id)
    translation_id = Column(String(36), ForeignKey("translations.id"), index=True, nullable=False)
    position = Column(Integer, nullable=False)
    translated_text = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    translation = relationship("Translation", back_populates="versions")

class Memorandum(Base):
    __tablename__ = "memorandums"

    id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(String(36), index=True, nullable=False)
    type = Column(String(50), nullable=False)
    language = Column(String(2), nullable=False)
    court_name = Column(String(255), nullable=False)
    case_number = Column(String(100), nullable=False)
    case_facts = Column(Text, nullable=False)
    legal_requests = Column(Text, nullable=False)
    defense_points = Column(Text)
    strength = Column(String(20), nullable=False)
    generated_content = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    versions = relationship(
        "MemorandumVersion",
        order_by="MemorandumVersion.position",
        back_populates="memorandum",
    )

class MemorandumVersion(Base):
    __tablename__ = "memorandum_versions"

    id = Column(String(36), primary_key=True, default=new_id)
    memorandum_id = Column(String(36), ForeignKey("memorandums.id"), index=True, nullable=False)
    position = Column(Integer, nullable=False)
    content = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    memorandum = relationship("Memorandum", back_populates="versions")

class AuditLog(Base):
    __tablename__ = "audit_logs"

    id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(String(36), index=True)
    user_email = Column(String(255))
    action = Column(String(50), index=True, nullable=False)
    details = Column(JSON)
    ip_address = Column(String(64))
    user_agent = Column(Text)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False, index=True)

class SiteSettings(Base):
    __tablename__ = "site_settings"

    id = Column(String(20), primary_key=True, default="default")
    logo_url = Column(Text)
    app_title = Column(String(255))
    app_subtitle = Column(String(255))
    footer_text = Column(Text)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)
