from fastapi import FastAPI

from gitwrap.api.routes.stats import router
from gitwrap.core.middleware import StatsRateLimitMiddleware
from gitwrap.core.observability import configure_logging
from gitwrap.core.observability import init_sentry
from gitwrap.settings import Settings


def create_app() -> FastAPI:
    """Build the application with settings read at call time."""

    settings = Settings()
    configure_logging(settings)
    init_sentry(settings)

    application = FastAPI(title="gitwrap")
    application.add_middleware(
        StatsRateLimitMiddleware,
        requests_per_window=settings.rate_limit_per_minute,
        window_seconds=settings.rate_limit_window_seconds,
    )
    application.include_router(router)
    return application


app = create_app()
