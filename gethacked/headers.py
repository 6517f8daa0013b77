"""Security headers added to every response, and a WSGI middleware applying them."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import Any

CONTENT_SECURITY_POLICY = (
    "default-src 'none'; script-src 'self'; style-src 'self'; img-src 'self' data:; "
    "font-src 'self'; connect-src 'self'; form-action 'self'; base-uri 'self'; "
    "frame-ancestors 'none'"
)


def security_headers() -> list[tuple[str, str]]:
    """The headers set on every response, in the order they are applied."""
    return [
        ("Content-Security-Policy", CONTENT_SECURITY_POLICY),
        ("X-Content-Type-Options", "nosniff"),
        ("X-Frame-Options", "DENY"),
        ("Referrer-Policy", "strict-origin-when-cross-origin"),
        ("X-Permitted-Cross-Domain-Policies", "none"),
        ("Strict-Transport-Security", "max-age=63072000; includeSubDomains"),
    ]


class SecurityHeadersMiddleware:
    """WSGI middleware that sets the security headers, replacing any the app set."""

    def __init__(self, app: Callable[..., Iterable[bytes]]) -> None:
        self.app = app
        self._headers = security_headers()
        self._names = {name.lower() for name, _ in self._headers}

    def __call__(
        self, environ: dict[str, Any], start_response: Callable[..., Any]
    ) -> Iterable[bytes]:
        def _start(status: str, headers: list[tuple[str, str]], exc_info: Any = None):
            merged = [h for h in headers if h[0].lower() not in self._names]
            merged.extend(self._headers)
            if exc_info is None:
                return start_response(status, merged)
            return start_response(status, merged, exc_info)

        return self.app(environ, _start)