from contextlib import asynccontextmanager
from typing import Optional
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from app.core.config import Settings, settings as default_settings
from app.core.database import Database
from app.core.exceptions import AppError
from app.api.routes import activities, analytics, attendance, auth, boards, cards, lists, tasks
from app.services.user_service import user_service
import logging

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None, database: Optional[Database] = None) -> FastAPI:
    """Build the application around one settings object and one database."""
    settings = settings or default_settings
    database = database or Database(settings.DATABASE_URL)

    # Configure logging
    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Starting up...")
        database.create_all()
        db = database.session()
        try:
            user_service.seed_ceo(db, settings)
        finally:
            db.close()
        logger.info("✅ Application started")
        yield
        logger.info("Shutting down...")
        database.dispose()
        logger.info("✅ Application stopped")

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        description="Employee management: attendance, tasks, boards and analytics",
        lifespan=lifespan
    )
    app.state.settings = settings
    app.state.database = database

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        message = errors[0].get("msg", "Invalid request") if errors else "Invalid request"
        return JSONResponse(status_code=400, content={"detail": message, "errors": jsonable_errors(errors)})

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        detail = str(exc) if settings.is_development else "Internal server error"
        return JSONResponse(status_code=500, content={"detail": detail})

    # Include routers
    app.include_router(auth.router, prefix="/api")
    app.include_router(attendance.router, prefix="/api")
    app.include_router(tasks.router, prefix="/api")
    app.include_router(boards.router, prefix="/api")
    app.include_router(lists.router, prefix="/api")
    app.include_router(cards.router, prefix="/api")
    app.include_router(activities.router, prefix="/api")
    app.include_router(analytics.router, prefix="/api")

    @app.get("/")
    async def root():
        """Root endpoint."""
        return {
            "message": f"{settings.APP_NAME} API",
            "version": settings.APP_VERSION,
            "docs": "/docs"
        }

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {
            "status": "healthy",
            "version": settings.APP_VERSION
        }

    return app


def jsonable_errors(errors):
    return [
        {"loc": list(error.get("loc", ())), "msg": error.get("msg", ""), "type": error.get("type", "")}
        for error in errors
    ]


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)
