"""Safe Space Finder HTTP API.

Every request runs inside the Directory domain context with commands
processed synchronously. With the default (sync) event processing, a review
change has already re-scored its business by the time the response is sent.
Under the ``production`` overlay the Engine in ``server.py`` does that work.

Usage:
    uvicorn src.app:app --host 0.0.0.0 --port 8000 --reload
"""

import time
from uuid import uuid4

from directory.api import business_router, notification_router, review_router, user_router
from directory.domain import directory
from directory.utils.logging import add_context, clear_context, get_logger
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from protean.integrations.fastapi import register_exception_handlers

directory.init()

logger = get_logger(__name__)

app = FastAPI(
    title="Safe Space Finder API",
    description="Inclusive, accessible businesses and their community safety scores",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)


@app.middleware("http")
async def directory_context(request: Request, call_next):
    """Run the request in the domain context and tag its log lines."""
    request_id = request.headers.get("x-request-id") or uuid4().hex
    add_context(request_id=request_id, path=request.url.path, method=request.method)
    started = time.perf_counter()
    try:
        with directory.domain_context():
            response = await call_next(request)
        response.headers["x-request-id"] = request_id
        logger.debug(
            "http.request",
            status=response.status_code,
            duration_ms=round((time.perf_counter() - started) * 1000, 1),
        )
        return response
    finally:
        clear_context()


app.include_router(business_router)
app.include_router(review_router)
app.include_router(user_router)
app.include_router(notification_router)


@app.get("/health")
async def health():
    return {
        "status": "ok",
        "domain": directory.name,
        "event_processing": directory.config.get("event_processing"),
    }
