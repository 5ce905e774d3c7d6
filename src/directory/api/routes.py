"""FastAPI routes for the Directory bounded context.

Each write route translates a Pydantic schema (external contract) into a
Protean command; read routes load aggregates straight from their
repositories.
"""

import json

from fastapi import APIRouter, Query
from protean.utils.globals import current_domain

from directory.api.schemas import (
    BusinessIdResponse,
    BusinessListResponse,
    BusinessView,
    EditReviewRequest,
    MarkAllReadResponse,
    MarkNotificationRequest,
    ModerateBusinessRequest,
    ModerateReviewRequest,
    NotificationListResponse,
    RegisterBusinessRequest,
    RegisterUserRequest,
    RemoveReviewRequest,
    ReportBusinessRequest,
    ReportReviewRequest,
    RespondToReviewRequest,
    ReviewIdResponse,
    ReviewListResponse,
    SafetyScoreResponse,
    SaveBusinessRequest,
    StatusResponse,
    SubmitReviewRequest,
    UpdatePreferencesRequest,
    UserIdResponse,
    VerifyReviewRequest,
    VoteOnReviewRequest,
)
from directory.business.business import Business
from directory.business.engagement import RecordBusinessView, SaveBusiness, UnsaveBusiness
from directory.business.moderation import ModerateBusiness
from directory.business.queries import find_businesses
from directory.business.registration import RegisterBusiness
from directory.business.reporting import ReportBusiness
from directory.business.safety_score import RecalculateSafetyScore
from directory.notification.inbox import MarkAllNotificationsRead, MarkNotification
from directory.notification.queries import find_notifications, unread_count
from directory.review.editing import EditReview
from directory.review.moderation import ModerateReview
from directory.review.queries import find_reviews
from directory.review.removal import RemoveReview
from directory.review.reporting import ReportReview
from directory.review.response import RespondToReview
from directory.review.review import Review
from directory.review.submission import SubmitReview
from directory.review.verification import VerifyReview
from directory.review.voting import VoteOnReview
from directory.user.registration import RegisterUser, UpdatePreferences
from directory.user.user import User

business_router = APIRouter(prefix="/businesses", tags=["businesses"])
review_router = APIRouter(prefix="/reviews", tags=["reviews"])
user_router = APIRouter(prefix="/users", tags=["users"])
notification_router = APIRouter(prefix="/notifications", tags=["notifications"])


def _dumps(value):
    return json.dumps(value) if value else None


# --- Business endpoints ---


@business_router.post("", status_code=201, response_model=BusinessIdResponse)
async def register_business(body: RegisterBusinessRequest) -> BusinessIdResponse:
    features = body.features
    command = RegisterBusiness(
        name=body.name,
        description=body.description,
        category=body.category,
        street=body.address.street,
        city=body.address.city,
        state=body.address.state,
        zip_code=body.address.zip_code,
        country=body.address.country,
        latitude=body.location.latitude,
        longitude=body.location.longitude,
        added_by=body.added_by,
        phone=body.phone,
        website=body.website,
        email=body.email,
        hours=_dumps(body.hours),
        images=_dumps(body.images),
        accessibility_features=_dumps(features.accessibility) if features else None,
        identity_features=_dumps(features.identity) if features else None,
        neurodiversity_features=_dumps(features.neurodiversity) if features else None,
    )
    business_id = current_domain.process(command, asynchronous=False)
    return BusinessIdResponse(business_id=business_id)


@business_router.get("", response_model=BusinessListResponse)
async def search_businesses(
    query: str | None = None,
    category: str | None = None,
    features: str | None = Query(default=None, description="Comma-separated feature tags"),
    min_safety_score: int | None = Query(default=None, ge=0, le=100),
    city: str | None = None,
    status: str | None = None,
    limit: int = Query(default=10, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
) -> BusinessListResponse:
    """Search the directory, safest listings first."""
    businesses = find_businesses(
        query=query,
        category=category,
        features=features.split(",") if features else None,
        min_safety_score=min_safety_score,
        city=city,
        status=status,
    )
    page = businesses[offset : offset + limit]
    return BusinessListResponse(
        data=[BusinessView(**business.to_dict_summary()) for business in page],
        total=len(businesses),
        limit=limit,
        offset=offset,
    )


@business_router.get("/{business_id}", response_model=BusinessView)
async def get_business(business_id: str) -> BusinessView:
    business = current_domain.repository_for(Business).get(business_id)
    return BusinessView(**business.to_dict_summary())


@business_router.put("/{business_id}/moderate", response_model=StatusResponse)
async def moderate_business(business_id: str, body: ModerateBusinessRequest) -> StatusResponse:
    command = ModerateBusiness(
        business_id=business_id,
        moderator_id=body.moderator_id,
        status=body.status,
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@business_router.post("/{business_id}/views", response_model=StatusResponse)
async def record_business_view(business_id: str) -> StatusResponse:
    current_domain.process(RecordBusinessView(business_id=business_id), asynchronous=False)
    return StatusResponse()


@business_router.post("/{business_id}/saves", status_code=201, response_model=StatusResponse)
async def save_business(business_id: str, body: SaveBusinessRequest) -> StatusResponse:
    current_domain.process(SaveBusiness(business_id=business_id, user_id=body.user_id), asynchronous=False)
    return StatusResponse()


@business_router.delete("/{business_id}/saves/{user_id}", response_model=StatusResponse)
async def unsave_business(business_id: str, user_id: str) -> StatusResponse:
    current_domain.process(UnsaveBusiness(business_id=business_id, user_id=user_id), asynchronous=False)
    return StatusResponse()


@business_router.post("/{business_id}/reports", status_code=201, response_model=StatusResponse)
async def report_business(business_id: str, body: ReportBusinessRequest) -> StatusResponse:
    command = ReportBusiness(business_id=business_id, user_id=body.user_id, reason=body.reason)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@business_router.post("/{business_id}/safety-score", response_model=SafetyScoreResponse)
async def recalculate_safety_score(business_id: str) -> SafetyScoreResponse:
    """Rebuild the business's derived safety fields from its reviews."""
    current_domain.process(RecalculateSafetyScore(business_id=business_id), asynchronous=False)
    business = current_domain.repository_for(Business).get(business_id)
    return SafetyScoreResponse(
        business_id=str(business.id),
        safety_score=business.safety_score,
        average_rating=business.average_rating,
        total_reviews=business.total_reviews,
    )


# --- Review endpoints ---


@review_router.post("", status_code=201, response_model=ReviewIdResponse)
async def submit_review(body: SubmitReviewRequest) -> ReviewIdResponse:
    command = SubmitReview(
        business_id=body.business_id,
        user_id=body.user_id,
        rating=body.rating,
        title=body.title,
        content=body.content,
        visit_date=body.visit_date.isoformat(),
        safety_rating=(
            json.dumps(body.safety_rating.model_dump(exclude_none=True)) if body.safety_rating else None
        ),
        photos=_dumps(body.photos),
        identity_context=_dumps(body.identity_context),
        accessibility_context=_dumps(body.accessibility_context),
    )
    review_id = current_domain.process(command, asynchronous=False)
    return ReviewIdResponse(review_id=review_id)


@review_router.get("", response_model=ReviewListResponse)
async def list_reviews(
    business_id: str | None = None,
    user_id: str | None = None,
    min_rating: int | None = Query(default=None, ge=1, le=5),
    limit: int = Query(default=10, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
) -> ReviewListResponse:
    """List live reviews, newest first."""
    reviews = find_reviews(business_id=business_id, user_id=user_id, min_rating=min_rating)
    page = reviews[offset : offset + limit]
    return ReviewListResponse(
        data=[review.to_dict_view() for review in page],
        total=len(reviews),
        limit=limit,
        offset=offset,
    )


@review_router.get("/{review_id}")
async def get_review(review_id: str) -> dict:
    return current_domain.repository_for(Review).get(review_id).to_dict_view()


@review_router.put("/{review_id}", response_model=StatusResponse)
async def edit_review(review_id: str, body: EditReviewRequest) -> StatusResponse:
    command = EditReview(
        review_id=review_id,
        user_id=body.user_id,
        rating=body.rating,
        title=body.title,
        content=body.content,
        safety_rating=(
            json.dumps(body.safety_rating.model_dump(exclude_none=True)) if body.safety_rating else None
        ),
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@review_router.put("/{review_id}/moderate", response_model=StatusResponse)
async def moderate_review(review_id: str, body: ModerateReviewRequest) -> StatusResponse:
    command = ModerateReview(
        review_id=review_id,
        moderator_id=body.moderator_id,
        action=body.action,
        reason=body.reason,
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@review_router.put("/{review_id}/verify", response_model=StatusResponse)
async def verify_review(review_id: str, body: VerifyReviewRequest) -> StatusResponse:
    command = VerifyReview(
        review_id=review_id,
        proof_type=body.proof_type,
        photos=_dumps(body.photos),
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@review_router.post("/{review_id}/votes", status_code=201, response_model=StatusResponse)
async def vote_on_review(review_id: str, body: VoteOnReviewRequest) -> StatusResponse:
    command = VoteOnReview(review_id=review_id, user_id=body.user_id, vote_type=body.vote_type)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@review_router.post("/{review_id}/reports", status_code=201, response_model=StatusResponse)
async def report_review(review_id: str, body: ReportReviewRequest) -> StatusResponse:
    command = ReportReview(review_id=review_id, user_id=body.user_id, reason=body.reason)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@review_router.post("/{review_id}/response", status_code=201, response_model=StatusResponse)
async def respond_to_review(review_id: str, body: RespondToReviewRequest) -> StatusResponse:
    command = RespondToReview(review_id=review_id, responded_by=body.responded_by, text=body.text)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@review_router.delete("/{review_id}", response_model=StatusResponse)
async def remove_review(review_id: str, body: RemoveReviewRequest) -> StatusResponse:
    command = RemoveReview(review_id=review_id, removed_by=body.removed_by, reason=body.reason)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


# --- User endpoints ---


@user_router.post("", status_code=201, response_model=UserIdResponse)
async def register_user(body: RegisterUserRequest) -> UserIdResponse:
    command = RegisterUser(
        name=body.name,
        email=body.email,
        pronouns=body.pronouns,
        bio=body.bio,
        identities=_dumps(body.identities),
        accessibility_needs=_dumps(body.accessibility_needs),
        city=body.city,
        state=body.state,
        country=body.country,
    )
    user_id = current_domain.process(command, asynchronous=False)
    return UserIdResponse(user_id=user_id)


@user_router.get("/{user_id}")
async def get_user(user_id: str) -> dict:
    return current_domain.repository_for(User).get(user_id).to_public_dict()


@user_router.put("/{user_id}/preferences", response_model=StatusResponse)
async def update_preferences(user_id: str, body: UpdatePreferencesRequest) -> StatusResponse:
    command = UpdatePreferences(
        user_id=user_id,
        notifications=_dumps(body.notifications),
        privacy=_dumps(body.privacy),
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@user_router.get("/{user_id}/notifications", response_model=NotificationListResponse)
async def list_notifications(
    user_id: str,
    filter_by: str = Query(default="all", alias="filter", pattern="^(all|unread|safety|community)$"),
    limit: int = Query(default=20, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
) -> NotificationListResponse:
    notifications = find_notifications(user_id, filter_by=filter_by)
    page = notifications[offset : offset + limit]
    return NotificationListResponse(
        data=[notification.to_dict_view() for notification in page],
        unread_count=unread_count(user_id),
        total=len(notifications),
        limit=limit,
        offset=offset,
    )


@user_router.put("/{user_id}/notifications/read", response_model=MarkAllReadResponse)
async def mark_all_notifications_read(user_id: str) -> MarkAllReadResponse:
    updated = current_domain.process(MarkAllNotificationsRead(user_id=user_id), asynchronous=False)
    return MarkAllReadResponse(updated=updated)


# --- Notification endpoints ---


@notification_router.put("/{notification_id}", response_model=StatusResponse)
async def mark_notification(notification_id: str, body: MarkNotificationRequest) -> StatusResponse:
    command = MarkNotification(notification_id=notification_id, user_id=body.user_id, read=body.read)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()
