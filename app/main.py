# app/main.py
from fastapi import FastAPI

from app.api.errors import register_exception_handlers
from app.api.routes import health, standups, users
from app.core.config import get_settings
from app.core.logging_config import configure_logging
from app.db.session import init_db_for_startup


def create_app() -> FastAPI:
    """
    Application factory for the StandupBot service.
    """
    settings = get_settings()
    configure_logging(settings.LOG_LEVEL)

    app = FastAPI(
        title=settings.APP_NAME,
        description=(
            "Backend API for StandupBot: team members submit one standup per day\n"
            "(task, progress, blocker, next task), update it during the day, and\n"
            "leads review team submissions and blocker status."
        ),
        version="0.1.0",
    )

    register_exception_handlers(app)

    # Routers
    app.include_router(health.router)
    app.include_router(standups.router)
    app.include_router(users.router)

    @app.on_event("startup")
    async def on_startup() -> None:  # pragma: no cover
        await init_db_for_startup()

    return app


app = create_app()
