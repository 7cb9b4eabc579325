"""Turns CmsException into the JSON error body the admin UI reads.

The body is ``{"error": <code>, "message": ..., "details": {...}}``. Log
records carry the content type and record id from the route, so a 404 on
``/api/content/recipe/42`` can be found by either.
"""

import logging
from fastapi import Request
from fastapi.responses import JSONResponse
from ..exceptions import CmsException

logger = logging.getLogger(__name__)


async def cms_exception_handler(request: Request, exc: CmsException) -> JSONResponse:
    """Log the failure, then answer with ``exc.status_code`` and ``exc.to_dict()``.

    Missing entries and bad input are logged at WARNING, storage failures at ERROR.
    """
    log = logger.error if exc.status_code >= 500 else logger.warning
    log(
        "%s %s -> %s: %s",
        request.method, request.url.path, exc.error_code.value, exc.message,
        extra={
            "error_code": exc.error_code.value,
            "status_code": exc.status_code,
            "content_type": request.path_params.get("content_type"),
            "record_id": request.path_params.get("record_id"),
            "details": exc.details,
        },
    )

    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())
