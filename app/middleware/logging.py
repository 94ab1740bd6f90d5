import time
import logging
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger("access")

HDR_REQUEST_ID = "X-Request-Id"

class AccessLogMiddleware(BaseHTTPMiddleware):
    """One access-log line per request, with the acting user once auth has run"""

    async def dispatch(self, request: Request, call_next):
        start_time = time.perf_counter()
        response = await call_next(request)
        process_time = time.perf_counter() - start_time

        actor = getattr(request.state, "current_actor", None)
        logger.info(
            f"{request.method} {request.url.path} - "
            f"Status: {response.status_code} - "
            f"Actor: {f'{actor.actor_id}/{actor.role.value}' if actor else '-'} - "
            f"Client: {request.client.host if request.client else 'unknown'} - "
            f"Request-Id: {request.headers.get(HDR_REQUEST_ID, '-')} - "
            f"Time: {process_time:.4f}s"
        )

        response.headers["X-Process-Time"] = f"{process_time:.4f}"
        return response
