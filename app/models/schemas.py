from pydantic import BaseModel, EmailStr, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel
from typing import Optional, List, Dict, Any
from datetime import datetime, timezone
from enum import Enum

from .database import UserRole

class Language(str, Enum):
    ARABIC = "ar"
    ENGLISH = "en"

class DocumentType(str, Enum):
    LEGAL_MEMORANDUM = "legal_memorandum"
    CONTRACT = "contract"
    STATEMENT_OF_CLAIM = "statement_of_claim"
    COURT_JUDGMENT = "court_judgment"
    LEGAL_CORRESPONDENCE = "legal_correspondence"

class DocumentPurpose(str, Enum):
    COURT = "court"
    INTERNAL = "internal"
    CLIENT = "client"

class WritingTone(str, Enum):
    FORMAL = "formal"
    PROFESSIONAL = "professional"
    CONCISE = "concise"

class Jurisdiction(str, Enum):
    QATAR = "qatar"
    GCC = "gcc"
    NEUTRAL = "neutral"

class MemorandumType(str, Enum):
    DEFENSE_MEMORANDUM = "defense_memorandum"
    RESPONSE_MEMORANDUM = "response_memorandum"
    REPLY_MEMORANDUM = "reply_memorandum"
    STATEMENT_OF_CLAIM = "statement_of_claim"
    APPEAL_MEMORANDUM = "appeal_memorandum"
    LEGAL_MOTION = "legal_motion"

class MemorandumStrength(str, Enum):
    STRONG = "strong"
    NEUTRAL = "neutral"
    DEFENSIVE = "defensive"

class ApiModel(BaseModel):
    """Base for every wire model: snake_case in Python, camelCase on the wire."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True
        use_enum_values = True

# User Schemas
class UserRegister(ApiModel):
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=128)
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: Optional[str] = Field(default=None, max_length=100)

class UserLogin(ApiModel):
    email: EmailStr
    password: str = Field(..., min_length=1, max_length=128)

class UserResponse(ApiModel):
    id: str
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    role: UserRole
    created_at: datetime
    updated_at: datetime

class UserRoleUpdate(ApiModel):
    role: UserRole

class LogoutResponse(ApiModel):
    success: bool = True

# Translation Schemas
class TranslateRequest(ApiModel):
    source_text: str = Field(..., min_length=1)
    source_language: Language
    target_language: Language
    document_type: DocumentType
    purpose: DocumentPurpose
    tone: WritingTone
    jurisdiction: Jurisdiction
    deterministic: bool = False

    @field_validator("source_text")
    @classmethod
    def source_text_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Source text is required")
        return value

    @model_validator(mode="after")
    def languages_differ(self):
        if self.source_language == self.target_language:
            raise ValueError("Source and target languages must differ")
        return self

class TranslationVersionCreate(ApiModel):
    translated_text: str = Field(..., min_length=1)

class TranslationVersionResponse(ApiModel):
    id: str
    translated_text: str
    created_at: datetime

class TranslationResponse(ApiModel):
    id: str
    user_id: str
    source_language: Language
    target_language: Language
    source_text: str
    translated_text: str
    document_type: str
    purpose: str
    tone: str
    jurisdiction: str
    created_at: datetime
    versions: List[TranslationVersionResponse] = []

# Memorandum Schemas
class MemorandumGenerateRequest(ApiModel):
    type: MemorandumType
    language: Language
    court_name: str = Field(..., min_length=1, max_length=255)
    case_number: str = Field(..., min_length=1, max_length=100)
    case_facts: str = Field(..., min_length=1)
    legal_requests: str = Field(..., min_length=1)
    defense_points: Optional[str] = None
    strength: MemorandumStrength
    deterministic: bool = False

class MemorandumVersionCreate(ApiModel):
    content: str = Field(..., min_length=1)

class MemorandumVersionResponse(ApiModel):
    id: str
    content: str
    created_at: datetime

class MemorandumResponse(ApiModel):
    id: str
    user_id: str
    type: str
    language: Language
    court_name: str
    case_number: str
    case_facts: str
    legal_requests: str
    defense_points: Optional[str] = None
    strength: str
    generated_content: str
    created_at: datetime
    versions: List[MemorandumVersionResponse] = []

# Dashboard Schema
class StatsResponse(ApiModel):
    total_translations: int
    total_memorandums: int
    recent_translations: List[TranslationResponse]
    recent_memorandums: List[MemorandumResponse]

# Site Settings Schemas
class SiteSettingsUpdate(ApiModel):
    logo_url: Optional[str] = Field(default=None, max_length=2048)
    app_title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    app_subtitle: Optional[str] = Field(default=None, max_length=255)
    footer_text: Optional[str] = Field(default=None, max_length=2000)

    @field_validator("app_title")
    @classmethod
    def app_title_not_cleared(cls, value: Optional[str]) -> str:
        # Omitting the field keeps the current title; null or blank is rejected
        if value is None or not value.strip():
            raise ValueError("App title cannot be empty")
        return value

class SiteSettingsResponse(ApiModel):
    id: str = "default"
    logo_url: Optional[str] = None
    app_title: Optional[str] = None
    app_subtitle: Optional[str] = None
    footer_text: Optional[str] = None
    updated_at: Optional[datetime] = None

# Audit Schema
class AuditLogResponse(ApiModel):
    id: str
    user_id: Optional[str] = None
    user_email: Optional[str] = None
    action: str
    details: Optional[Dict[str, Any]] = None
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    created_at: datetime

# Error Schemas
class ErrorResponse(ApiModel):
    error: str
    status_code: int
    details: Optional[List[Dict[str, Any]]] = None
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

# Health Check Schema
class HealthCheck(ApiModel):
    status: str
    timestamp: datetime
    version: str
    services: Dict[str, str]
