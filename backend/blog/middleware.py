from collections import Counter
from threading import Lock
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

SECURITY_HEADERS = {
    "Content-Security-Policy": (
        "default-src 'self';base-uri 'self';font-src 'self' https: data:;"
        "form-action 'self';frame-ancestors 'self';img-src 'self' data:;"
        "object-src 'none';script-src 'self';style-src 'self' https: 'unsafe-inline'"
    ),
    "Cross-Origin-Opener-Policy": "same-origin",
    "Cross-Origin-Resource-Policy": "same-origin",
    "Referrer-Policy": "no-referrer",
    "Strict-Transport-Security": "max-age=15552000; includeSubDomains",
    "X-Content-Type-Options": "nosniff",
    "X-DNS-Prefetch-Control": "off",
    "X-Frame-Options": "SAMEORIGIN",
    "X-Permitted-Cross-Domain-Policies": "none",
    "X-XSS-Protection": "0",
}

class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        for name, value in SECURITY_HEADERS.items():
            response.headers.setdefault(name, value)
        return response

class RequestMetrics:
    """In-process request counters keyed by method, route and status."""

    def __init__(self):
        self._lock = Lock()
        self._counts = Counter()

    def observe(self, method: str, path: str, status: int):
        with self._lock:
            self._counts[(method, path, status)] += 1

    def snapshot(self) -> dict:
        with self._lock:
            items = sorted(self._counts.items())
        return {
            "total": sum(n for _, n in items),
            "requests": [
                {"method": m, "path": p, "status": s, "count": n}
                for (m, p, s), n in items
            ],
        }

    def reset(self):
        with self._lock:
            self._counts.clear()

UNMATCHED_ROUTE = "<unmatched>"

class RequestCounterMiddleware(BaseHTTPMiddleware):
    def __init__(self, app, metrics: RequestMetrics):
        super().__init__(app)
        self.metrics = metrics

    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        # label by route template so /post/1 and /post/2 share a counter
        route = request.scope.get("route")
        path = getattr(route, "path", None) or UNMATCHED_ROUTE
        self.metrics.observe(request.method, path, response.status_code)
        return response
