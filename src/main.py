import structlog
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from scalar_fastapi import get_scalar_api_reference
from starlette.exceptions import HTTPException

from src.config.settings import settings
from src.core.observability import init_observability
from src.domains.exercises.router import router as exercises_router
from src.domains.health.router import router as health_router
from src.domains.imports.router import router as imports_router
from src.domains.workouts.router import router as workouts_router

logger = structlog.get_logger(__name__)


async def seed_exercises_if_empty():
    """Seed exercises if none exist in the database."""
    from src.config.database import AsyncSessionLocal
    from src.domains.exercises.service import ExerciseService

    async with AsyncSessionLocal() as session:
        count = await ExerciseService(session).count_exercises()

        if count == 0:
            logger.info("seeding_exercises", reason="no exercises found in database")
            from src.scripts.seed_exercises import seed_exercises
            seeded_count = await seed_exercises(session, clear_existing=False)
            logger.info("exercises_seeded", count=seeded_count)
        else:
            logger.info("exercises_seed_skipped", existing_count=count)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan events."""
    # Startup
    logger.info("app_starting", app_name=settings.APP_NAME, environment=settings.APP_ENV)

    try:
        from src.config.database import init_db
        await init_db()
        logger.info("database_initialized")
    except Exception as e:
        logger.error("database_init_failed", error=str(e), type=type(e).__name__)
        # Re-raise in production to prevent unhealthy startup
        if settings.is_production:
            raise

    if settings.SEED_EXERCISES:
        try:
            await seed_exercises_if_empty()
        except Exception as e:
            logger.warning("exercise_seed_failed", error=str(e), type=type(e).__name__)

    yield
    # Shutdown
    logger.info("app_shutting_down", app_name=settings.APP_NAME)


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Render errors as {"error": message}; structured details pass through unchanged."""
    content = exc.detail if isinstance(exc.detail, dict) else {"error": exc.detail}
    return JSONResponse(status_code=exc.status_code, content=content, headers=exc.headers)


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    # Initialize observability (GlitchTip/Sentry)
    init_observability()

    app = FastAPI(
        title=settings.APP_NAME,
        description="Workout Tracker API",
        version=settings.APP_VERSION,
        docs_url="/docs" if settings.DEBUG else None,
        redoc_url="/redoc" if settings.DEBUG else None,
        lifespan=lifespan,
        redirect_slashes=False,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "X-Request-Id"],
    )

    app.add_exception_handler(HTTPException, http_exception_handler)

    # Include routers
    app.include_router(exercises_router, prefix=f"{settings.API_PREFIX}/exercises", tags=["Exercises"])
    app.include_router(workouts_router, prefix=f"{settings.API_PREFIX}/workouts", tags=["Workouts"])
    app.include_router(health_router, prefix=f"{settings.API_PREFIX}/health", tags=["Health"])
    app.include_router(imports_router, prefix=f"{settings.API_PREFIX}/import", tags=["Import"])

    # Health check endpoint
    @app.get(f"{settings.API_PREFIX}/health")
    async def health_check() -> dict[str, str]:
        return {
            "status": "healthy",
            "app": settings.APP_NAME,
            "version": settings.APP_VERSION,
            "environment": settings.APP_ENV,
        }

    # Scalar API Reference
    @app.get("/reference", include_in_schema=False)
    async def scalar_html():
        return get_scalar_api_reference(
            openapi_url=app.openapi_url,
            title=f"{settings.APP_NAME} - API Reference",
        )

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "src.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
    )
