from __future__ import annotations

import contextvars
import logging
import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response


request_id_var: contextvars.ContextVar[str] = contextvars.ContextVar("request_id", default="")

log = logging.getLogger("bucketview.http")


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Tags each proxied call with an id and logs one access line for it.

    The id is echoed back in ``x-request-id`` so a failed upload or listing shown
    in the UI can be matched to the server log.
    """

    async def dispatch(self, request: Request, call_next):
        rid = request.headers.get("x-request-id") or uuid.uuid4().hex
        token = request_id_var.set(rid)
        t0 = time.perf_counter()
        try:
            response: Response = await call_next(request)
            ms = int((time.perf_counter() - t0) * 1000)
            log.info("request_id=%s %s %s status=%s ms=%s", rid, request.method, request.url.path, response.status_code, ms)
        finally:
            request_id_var.reset(token)
        response.headers["x-request-id"] = rid
        return response
