from fastapi import Request
import logging
import time

logger = logging.getLogger(__name__)


async def request_body_middleware(request: Request, call_next):
    """
    Read the raw request body once and keep it on ``request.state.body``.

    Handlers decode the body from there; an empty body is stored as None.
    Also logs every request with its status and duration.
    """
    body = await request.body()
    request.state.body = body or None

    started = time.perf_counter()
    response = await call_next(request)
    elapsed_ms = (time.perf_counter() - started) * 1000
    logger.info(
        f"{request.method} {request.url.path} -> {response.status_code} ({elapsed_ms:.1f} ms)")
    return response
