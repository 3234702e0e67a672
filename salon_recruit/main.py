from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from salon_recruit.auth.router import router as auth_router
from salon_recruit.campaigns.router import router as campaigns_router
from salon_recruit.config import settings
from salon_recruit.database import engine
from salon_recruit.exceptions import SalonRecruitError, salon_recruit_error_handler
from salon_recruit.middleware.error_handler import ErrorHandlerMiddleware
from salon_recruit.middleware.logging import RequestLoggingMiddleware
from salon_recruit.outreach.router import router as outreach_router
from salon_recruit.schools.router import router as schools_router
from salon_recruit.students.router import router as students_router
from salon_recruit.tours.router import router as tours_router

structlog.configure(
    processors=[
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.dev.ConsoleRenderer(),
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    logger_factory=structlog.PrintLoggerFactory(),
)

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(
        "startup",
        sms_configured=settings.sms_configured,
        admin_pin_set=bool(settings.ADMIN_PIN),
        timezone=settings.LOCAL_TIMEZONE,
    )
    yield
    await engine.dispose()


def create_app() -> FastAPI:
    app = FastAPI(
        title="Salon Recruit",
        version="0.1.0",
        docs_url="/docs",
        lifespan=lifespan,
    )

    cors_origins = [o.strip() for o in settings.CORS_ORIGINS.split(",") if o.strip()]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(ErrorHandlerMiddleware)

    app.add_exception_handler(SalonRecruitError, salon_recruit_error_handler)

    app.include_router(auth_router, prefix="/api/v1")
    app.include_router(schools_router, prefix="/api/v1")
    app.include_router(campaigns_router, prefix="/api/v1")
    app.include_router(students_router, prefix="/api/v1")
    app.include_router(tours_router, prefix="/api/v1")
    app.include_router(outreach_router, prefix="/api/v1")

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    return app


app = create_app()
