"""Pydantic request/response schemas for the Directory API.

These are separate from Protean commands (anti-corruption pattern).
The API layer is the external contract; commands are internal domain concepts.
"""

from __future__ import annotations

from datetime import date

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Businesses
# ---------------------------------------------------------------------------
class AddressSchema(BaseModel):
    street: str
    city: str
    state: str
    zip_code: str
    country: str | None = None


class LocationSchema(BaseModel):
    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)


class FeaturesSchema(BaseModel):
    accessibility: list[str] = Field(default_factory=list)
    identity: list[str] = Field(default_factory=list)
    neurodiversity: list[str] = Field(default_factory=list)


class RegisterBusinessRequest(BaseModel):
    name: str = Field(min_length=2, max_length=200)
    description: str = Field(min_length=10, max_length=2000)
    category: str
    address: AddressSchema
    location: LocationSchema
    added_by: str
    phone: str | None = None
    website: str | None = None
    email: str | None = None
    hours: dict | None = None
    images: list[str] | None = None
    features: FeaturesSchema | None = None


class ModerateBusinessRequest(BaseModel):
    moderator_id: str
    status: str  # "Approved", "Rejected", "Flagged" or "Pending"


class SaveBusinessRequest(BaseModel):
    user_id: str


class BusinessView(BaseModel):
    business_id: str
    name: str
    description: str
    category: str
    address: AddressSchema
    location: LocationSchema
    phone: str | None = None
    website: str | None = None
    email: str | None = None
    images: list[str]
    features: FeaturesSchema
    safety_score: int
    average_rating: float
    total_reviews: int
    verified: bool
    status: str
    view_count: int
    save_count: int
    report_count: int = 0


class ReportBusinessRequest(BaseModel):
    user_id: str
    reason: str = Field(max_length=500)


class BusinessListResponse(BaseModel):
    data: list[BusinessView]
    total: int
    limit: int
    offset: int


class SafetyScoreResponse(BaseModel):
    business_id: str
    safety_score: int
    average_rating: float
    total_reviews: int


# ---------------------------------------------------------------------------
# Reviews
# ---------------------------------------------------------------------------
class SafetyRatingSchema(BaseModel):
    overall: int | None = Field(default=None, ge=1, le=5)
    accessibility: int | None = Field(default=None, ge=1, le=5)
    inclusivity: int | None = Field(default=None, ge=1, le=5)
    staff: int | None = Field(default=None, ge=1, le=5)


class SubmitReviewRequest(BaseModel):
    business_id: str
    user_id: str
    rating: int = Field(ge=1, le=5)
    title: str = Field(min_length=5, max_length=200)
    content: str = Field(min_length=20, max_length=5000)
    visit_date: date
    safety_rating: SafetyRatingSchema | None = None
    photos: list[str] | None = Field(default=None, max_length=10)
    identity_context: list[str] | None = None
    accessibility_context: list[str] | None = None


class EditReviewRequest(BaseModel):
    user_id: str
    rating: int | None = Field(default=None, ge=1, le=5)
    title: str | None = Field(default=None, min_length=5, max_length=200)
    content: str | None = Field(default=None, min_length=20, max_length=5000)
    safety_rating: SafetyRatingSchema | None = None


class ModerateReviewRequest(BaseModel):
    moderator_id: str
    action: str  # "Approve", "Reject" or "Flag"
    reason: str | None = None


class VerifyReviewRequest(BaseModel):
    proof_type: str  # "Photo", "Receipt" or "CheckIn"
    photos: list[str] | None = None


class VoteOnReviewRequest(BaseModel):
    user_id: str
    vote_type: str  # "Helpful" or "NotHelpful"


class ReportReviewRequest(BaseModel):
    user_id: str
    reason: str = Field(max_length=500)


class RespondToReviewRequest(BaseModel):
    responded_by: str
    text: str = Field(min_length=1)


class RemoveReviewRequest(BaseModel):
    removed_by: str
    reason: str | None = None


class ReviewListResponse(BaseModel):
    data: list[dict]
    total: int
    limit: int
    offset: int


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------
class RegisterUserRequest(BaseModel):
    name: str = Field(min_length=2, max_length=100)
    email: str
    pronouns: str | None = Field(default=None, max_length=50)
    bio: str | None = Field(default=None, max_length=500)
    identities: list[str] | None = None
    accessibility_needs: list[str] | None = None
    city: str | None = None
    state: str | None = None
    country: str | None = None


class UpdatePreferencesRequest(BaseModel):
    notifications: dict[str, bool] | None = None
    privacy: dict[str, bool] | None = None


# ---------------------------------------------------------------------------
# Notifications
# ---------------------------------------------------------------------------
class MarkNotificationRequest(BaseModel):
    user_id: str
    read: bool = True


class NotificationListResponse(BaseModel):
    data: list[dict]
    unread_count: int
    total: int
    limit: int
    offset: int


class MarkAllReadResponse(BaseModel):
    updated: int


# ---------------------------------------------------------------------------
# Common
# ---------------------------------------------------------------------------
class BusinessIdResponse(BaseModel):
    business_id: str


class ReviewIdResponse(BaseModel):
    review_id: str


class UserIdResponse(BaseModel):
    user_id: str


class StatusResponse(BaseModel):
    status: str = "ok"
