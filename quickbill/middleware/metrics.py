import time

from loguru import logger
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from quickbill.core.config import settings
from quickbill.core.metrics import HTTP_REQUESTS_TOTAL, HTTP_REQUEST_DURATION_SECONDS


def _route_template(request: Request) -> str:
    # "/orders/{order_id}" instead of one label per order id
    route = request.scope.get("route")
    return getattr(route, "path", None) or request.url.path


class MetricsMiddleware(BaseHTTPMiddleware):
    """Counts every request and records its latency, labelled by route template."""

    async def dispatch(self, request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        elapsed = time.perf_counter() - started

        path = _route_template(request)
        try:
            HTTP_REQUESTS_TOTAL.labels(
                service=settings.SERVICE_NAME,
                method=request.method,
                path=path,
                status_code=str(response.status_code),
            ).inc()
            HTTP_REQUEST_DURATION_SECONDS.labels(
                service=settings.SERVICE_NAME,
                method=request.method,
                path=path,
            ).observe(elapsed)
        except ValueError:
            logger.exception("Could not record HTTP metrics for path='{path}'", path=path)

        return response
