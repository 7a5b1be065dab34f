"""Main FastAPI application for the Planwise backend."""
from fastapi import FastAPI, Request

from planwise.api.errors import register_exception_handlers
from planwise.api.routes.auth import router as auth_router
from planwise.api.routes.plan import router as plan_router
from planwise.api.routes.projects import router as projects_router
from planwise.api.routes.tasks import router as tasks_router
from planwise.core.config import settings
from planwise.core.logging import configure_logging
from planwise.core.middleware import RequestIDMiddleware
from planwise.observability.client import init_opik
from planwise.observability.tracing import trace

configure_logging(log_level=settings.log_level)

app = FastAPI(title=settings.app_name, version="0.1.0")
app.add_middleware(RequestIDMiddleware)
register_exception_handlers(app)
app.include_router(auth_router)
app.include_router(projects_router)
app.include_router(tasks_router)
app.include_router(plan_router)


@app.on_event("startup")
async def startup_observability() -> None:
    """Initialize observability backends after the event loop starts."""
    init_opik()


@app.get("/health", tags=["health"], summary="Readiness probe")
async def health_check(request: Request) -> dict[str, str]:
    """Return a simple status payload so automation can probe the API."""
    with trace("http.health_check", metadata={"route": "/health"}, request_id=request.state.request_id):
        return {"status": "ok"}
