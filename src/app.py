"""Restrooms FastAPI application.

Serves the review/vote API over the aggregation store. Commands are processed
synchronously inside the Restrooms domain context.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000 --reload

Environment:
    RESTROOMS_STORE_URL   memory:// (default) or redis://host:6379/0
    RESTROOMS_KEY_PREFIX  key namespace, "bathroom" by default
"""

# ---------------------------------------------------------------------------
# Logging and domain initialization
# ---------------------------------------------------------------------------
# Both are set up at module level so uvicorn workers share them.
from restrooms.utils.logging import add_context, clear_context, configure_logging

configure_logging()

from fastapi import FastAPI, Request  # noqa: E402
from fastapi.middleware.cors import CORSMiddleware  # noqa: E402
from protean.integrations.fastapi import register_exception_handlers  # noqa: E402
from restrooms.api.errors import register_storage_error_handler  # noqa: E402
from restrooms.api.routes import api_router  # noqa: E402
from restrooms.domain import logger, restrooms  # noqa: E402
from restrooms.store.registry import get_store  # noqa: E402

restrooms.init()

# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="Restrooms API",
    description="Crowd-sourced restroom reviews, worst first",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def domain_context_middleware(request: Request, call_next):
    """Push the Restrooms domain context and tag log lines with the request."""
    add_context(method=request.method, path=request.url.path)
    try:
        if request.url.path.startswith("/api"):
            with restrooms.domain_context():
                return await call_next(request)
        return await call_next(request)
    finally:
        clear_context()


app.include_router(api_router)
register_exception_handlers(app)
register_storage_error_handler(app)


logger.info("Restrooms API ready", store=type(get_store()).__name__)
