"""Directory domain API package."""

from directory.api.routes import business_router, notification_router, review_router, user_router

__all__ = ["business_router", "notification_router", "review_router", "user_router"]
