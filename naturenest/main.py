from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from naturenest.core.config import get_settings
from naturenest.core.errors import NatureNestError
from naturenest.core import throttle
from naturenest.db import crud_catalog
from naturenest.db import session as db_session
from naturenest.observability.correlation import (
    CORRELATION_ID_HEADER,
    generate_correlation_id,
    reset_correlation_id,
    set_correlation_id,
)
from naturenest.observability.logging import get_logger
from naturenest.services.reservations import ReservationService
from naturenest.tasks.stats import StatsTaskQueue
from naturenest.api.routers import (
    auth as auth_router,
    users as users_router,
    categories as categories_router,
    amenities as amenities_router,
    properties as properties_router,
    reservations as reservations_router,
    health as health_router,
)

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    await db_session.init_models()
    if settings.SEED_CATALOG:
        async with db_session.AsyncSessionLocal() as db:
            added_categories = await crud_catalog.sync_categories(db)
            added_amenities = await crud_catalog.sync_amenities(db)
        logger.info(
            "catalog synced",
            extra={
                "extra_fields": {
                    "categories_added": added_categories,
                    "amenities_added": added_amenities,
                }
            },
        )
    yield
    await app.state.stats_queue.drain()


def create_app() -> FastAPI:
    settings = get_settings()

    app = FastAPI(
        title=settings.PROJECT_NAME,
        lifespan=lifespan,
    )

    stats_queue = StatsTaskQueue(session_factory=db_session.AsyncSessionLocal)
    app.state.stats_queue = stats_queue
    app.state.reservation_service = ReservationService(stats_queue)

    # ---------------------------
    # Throttling (per client address)
    # ---------------------------
    app.state.limiter = throttle.limiter
    app.add_exception_handler(RateLimitExceeded, throttle.rate_limit_exceeded_handler)
    app.add_middleware(SlowAPIMiddleware)

    # ---------------------------
    # CORS
    # ---------------------------
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.BACKEND_CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "HEAD", "PUT", "PATCH", "POST", "DELETE"],
        allow_headers=["*"],
    )

    # ---------------------------
    # Correlation ID
    # ---------------------------
    @app.middleware("http")
    async def correlation_id_middleware(request: Request, call_next) -> Response:
        cid = request.headers.get(CORRELATION_ID_HEADER) or generate_correlation_id()
        token = set_correlation_id(cid)
        try:
            response = await call_next(request)
            response.headers[CORRELATION_ID_HEADER] = cid
            return response
        finally:
            reset_correlation_id(token)

    # ---------------------------
    # Domain errors -> HTTP
    # ---------------------------
    @app.exception_handler(NatureNestError)
    async def naturenest_error_handler(request: Request, exc: NatureNestError):
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    # ---------------------------
    # Routers
    # ---------------------------
    prefix = settings.API_PREFIX
    app.include_router(health_router.router, prefix=f"{prefix}/health", tags=["health"])
    app.include_router(auth_router.router, prefix=f"{prefix}/auth", tags=["auth"])
    app.include_router(users_router.router, prefix=f"{prefix}/users", tags=["users"])
    app.include_router(categories_router.router, prefix=f"{prefix}/categories", tags=["categories"])
    app.include_router(amenities_router.router, prefix=f"{prefix}/amenities", tags=["amenities"])
    app.include_router(properties_router.router, prefix=f"{prefix}/properties", tags=["properties"])
    app.include_router(
        reservations_router.router, prefix=f"{prefix}/reservations", tags=["reservations"]
    )

    return app


app = create_app()

# ---------------------------
# Run
# ---------------------------
if __name__ == "__main__":
    uvicorn.run("naturenest.main:app", host="0.0.0.0", port=8000, reload=True)
