"""Response hardening headers.

Learn: Responses here carry access tokens, profile data and balances, so
every one of them is marked uncacheable and unframeable. The refresh
cookie is already Secure; HSTS keeps browsers from ever trying plain
HTTP once they have seen the API over TLS.
"""

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

HARDENING_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "strict-origin-when-cross-origin",
    "Cache-Control": "no-store",
}
HSTS_VALUE = "max-age=31536000; includeSubDomains"


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Stamp HARDENING_HEADERS on every response, plus HSTS over https."""

    async def dispatch(self, request: Request, call_next) -> Response:
        response: Response = await call_next(request)
        response.headers.update(HARDENING_HEADERS)
        # Browsers ignore HSTS received over plain http.
        if request.url.scheme == "https":
            response.headers["Strict-Transport-Security"] = HSTS_VALUE
        return response
