"""HTTP mapping for store failures.

Protean's own exceptions are mapped by
``protean.integrations.fastapi.register_exception_handlers``; the store is
ours, so its error needs a handler of its own.
"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from restrooms.store.base import StorageError
from restrooms.utils.logging import get_logger

logger = get_logger(__name__)


async def storage_error_handler(request: Request, exc: StorageError) -> JSONResponse:
    logger.error("Store unavailable", path=request.url.path, operation=exc.operation, key=exc.key, reason=exc.reason)
    return JSONResponse(
        status_code=503,
        content={"status": "error", "message": "Storage is temporarily unavailable, please retry"},
    )


def register_storage_error_handler(app: FastAPI) -> None:
    app.add_exception_handler(StorageError, storage_error_handler)
