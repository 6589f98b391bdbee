"""
Pydantic Schemas - Request/Response Validation

All API request and response schemas in one file for simplicity.
Fields are snake_case in Python and camelCase on the wire.
"""

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_serializer, field_validator
from pydantic.alias_generators import to_camel
from typing import Generic, List, Optional, TypeVar
from datetime import datetime
from enum import Enum

from placement_portal.services.lifecycle import ApplicationStatus, normalize_status
from placement_portal.utils.dates import as_aware_utc


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    @field_serializer("*", mode="wrap", when_used="json")
    def serialize_utc(self, value, handler):
        # Timestamps are kept as naive UTC; the wire always carries the offset
        if isinstance(value, datetime):
            value = as_aware_utc(value)
        return handler(value)


# ============================================================
# ENUMS
# ============================================================

class UserRole(str, Enum):
    admin = "admin"
    faculty = "faculty"
    recruiter = "recruiter"
    student = "student"


class PostingType(str, Enum):
    full_time = "full-time"
    part_time = "part-time"
    internship = "internship"


class PostingStatus(str, Enum):
    open = "Open"
    closed = "Closed"


class VerificationStatus(str, Enum):
    pending = "pending"
    verified = "verified"
    rejected = "rejected"


def _lower(value):
    return value.strip().lower() if isinstance(value, str) else value


def _capitalized(value):
    return value.strip().capitalize() if isinstance(value, str) else value


# ============================================================
# USER SCHEMAS
# ============================================================

class StudentProfile(CamelModel):
    gpa: float
    grad_year: int
    department_id: Optional[int] = None
    program: Optional[str] = None
    has_accepted_offer: bool = False


class User(CamelModel):
    id: int
    username: str
    email: str
    role: UserRole
    name: str
    student_profile: Optional[StudentProfile] = None
    created_at: Optional[datetime] = None


class RegisterRequest(CamelModel):
    name: str = Field(..., min_length=1, max_length=200)
    email: EmailStr
    password: str = Field(..., min_length=8)
    role: UserRole
    username: Optional[str] = Field(None, min_length=3, max_length=100)

    @field_validator("role", mode="before")
    @classmethod
    def normalize_role(cls, value):
        return _lower(value)


class LoginRequest(CamelModel):
    username: str
    password: str


class LoginResponse(CamelModel):
    data: User
    access_token: str
    token_type: str = "bearer"


class ProfileUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    email: Optional[EmailStr] = None


class StudentProfileUpdate(CamelModel):
    gpa: float = Field(..., ge=0, le=10)
    grad_year: int = Field(..., ge=1900, le=2200)
    department_id: Optional[int] = None
    program: Optional[str] = None


class ChangePasswordRequest(CamelModel):
    old_password: str
    new_password: str = Field(..., min_length=8)
    confirm_new_password: Optional[str] = None


class RoleUpdate(CamelModel):
    role_id: UserRole

    @field_validator("role_id", mode="before")
    @classmethod
    def normalize_role(cls, value):
        return _lower(value)


# ============================================================
# POSTING SCHEMAS
# ============================================================

class EligibilityRules(CamelModel):
    min_gpa: float = Field(0.0, ge=0)
    grad_year: List[int] = Field(..., min_length=1)


class Posting(CamelModel):
    id: int
    title: str
    description: str = ""
    type: PostingType
    recruiter_id: int
    deadline: datetime
    status: PostingStatus
    eligibility: EligibilityRules
    requires_verification: bool = False
    required_skills: List[int] = []
    company: str = ""
    location: str = ""
    salary: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class PostingCreate(CamelModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: str = ""
    type: PostingType = PostingType.full_time
    deadline: datetime
    status: PostingStatus = PostingStatus.open
    eligibility: EligibilityRules
    requires_verification: bool = False
    required_skills: List[int] = []
    company: str = Field("", max_length=200)
    location: str = Field("", max_length=200)
    salary: Optional[str] = None
    recruiter_id: Optional[int] = None

    @field_validator("type", mode="before")
    @classmethod
    def normalize_type(cls, value):
        return _lower(value)

    @field_validator("status", mode="before")
    @classmethod
    def normalize_status(cls, value):
        return _capitalized(value)


class PostingUpdate(CamelModel):
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    type: Optional[PostingType] = None
    deadline: Optional[datetime] = None
    status: Optional[PostingStatus] = None
    eligibility: Optional[EligibilityRules] = None
    requires_verification: Optional[bool] = None
    required_skills: Optional[List[int]] = None
    company: Optional[str] = Field(None, max_length=200)
    location: Optional[str] = Field(None, max_length=200)
    salary: Optional[str] = None

    @field_validator("type", mode="before")
    @classmethod
    def normalize_type(cls, value):
        return _lower(value)

    @field_validator("status", mode="before")
    @classmethod
    def normalize_status(cls, value):
        return _capitalized(value)


class EligibilityResponse(CamelModel):
    allowed: bool
    reason: str


# ============================================================
# APPLICATION SCHEMAS
# ============================================================

class StatusHistoryEntry(CamelModel):
    status: ApplicationStatus
    date: datetime


class Application(CamelModel):
    id: int
    posting_id: int
    student_id: int
    status: ApplicationStatus
    cover_letter: Optional[str] = None
    status_history: List[StatusHistoryEntry] = []
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("status", mode="before")
    @classmethod
    def coerce_status(cls, value):
        return normalize_status(value)


class ApplicationCreate(CamelModel):
    posting_id: int
    cover_letter: Optional[str] = None


class ApplicationStatusUpdate(CamelModel):
    status: ApplicationStatus

    @field_validator("status", mode="before")
    @classmethod
    def coerce_status(cls, value):
        return normalize_status(value)


# ============================================================
# VERIFICATION DOCUMENT SCHEMAS
# ============================================================

class VerificationDoc(CamelModel):
    id: str
    user_id: int
    type: str
    document_name: str
    url: str
    status: VerificationStatus = VerificationStatus.pending
    remarks: Optional[str] = None
    updated_at: Optional[datetime] = None


class VerificationDocCreate(CamelModel):
    type: str = Field(..., min_length=1, max_length=50)
    document_name: str = Field(..., min_length=1, max_length=255)
    url: str = Field(..., min_length=1)


class VerificationStatusUpdate(CamelModel):
    status: VerificationStatus
    remarks: Optional[str] = None

    @field_validator("status", mode="before")
    @classmethod
    def normalize_status(cls, value):
        return _lower(value)


# ============================================================
# REFERENCE DATA SCHEMAS
# ============================================================

class Department(CamelModel):
    id: int
    name: str


class Skill(CamelModel):
    id: int
    name: str


class NamedCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=200)


# ============================================================
# ANALYTICS SCHEMAS
# ============================================================

class FunnelEntry(CamelModel):
    stage: ApplicationStatus
    count: int


class SkillDemandEntry(CamelModel):
    skill_id: int
    skill: str
    count: int


class VelocityEntry(CamelModel):
    stage: str
    days: float


# ============================================================
# DASHBOARD SCHEMAS
# ============================================================

class FacultyDashboard(CamelModel):
    faculty_id: int
    pending_documents: int
    verified_documents: int
    rejected_documents: int
    students: int


class RecruiterDashboard(CamelModel):
    recruiter_id: int
    active_postings: int
    total_postings: int
    applications_received: int
    applications_by_status: List[FunnelEntry] = []


class StudentProgress(CamelModel):
    pending: int
    under_review: int
    offers: int


class StudentDashboard(CamelModel):
    student_id: int
    applications: int
    accepted_offers: int
    has_accepted_offer: bool
    progress: StudentProgress


# ============================================================
# GENERIC SCHEMAS
# ============================================================

T = TypeVar("T")


class Pagination(CamelModel):
    page: int
    limit: int
    total: int
    total_pages: int


class DataResponse(CamelModel, Generic[T]):
    data: T
    message: Optional[str] = None


class ListResponse(CamelModel, Generic[T]):
    data: List[T]
    pagination: Pagination


class MessageResponse(CamelModel):
    message: str
