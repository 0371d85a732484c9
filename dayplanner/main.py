"""Main FastAPI application for the day planner backend."""
from fastapi import FastAPI, Request

from dayplanner.api.routes.schedule import router as schedule_router
from dayplanner.core.config import settings
from dayplanner.core.logging import configure_logging
from dayplanner.core.middleware import RequestIDMiddleware
from dayplanner.observability.client import init_opik
from dayplanner.observability.tracing import trace

configure_logging(log_level=settings.log_level)

app = FastAPI(title=settings.app_name, version="0.1.0")
app.add_middleware(RequestIDMiddleware)
app.include_router(schedule_router)


@app.on_event("startup")
async def startup_observability() -> None:
    """Initialize observability backends after the event loop starts."""
    init_opik()


@app.get("/health", tags=["health"], summary="Readiness check")
async def health_check(request: Request) -> dict[str, str]:
    """Return a simple status payload so automation can check the API is up."""
    with trace("http.health_check", metadata={"route": "/health"}, request_id=request.state.request_id):
        return {"status": "ok"}
