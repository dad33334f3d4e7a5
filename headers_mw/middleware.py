"""Custom header injection and CORS responder.

Based on the behaviour of https://github.com/unrolled/secure, restricted to
custom request/response headers and CORS.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Optional

from .options import ORIGIN_ANY, ORIGIN_LIST_OR_NULL, HeaderOptions, join_values

LOGGER = logging.getLogger("headers_mw")

ALLOW_CREDENTIALS = "Access-Control-Allow-Credentials"
ALLOW_HEADERS = "Access-Control-Allow-Headers"
ALLOW_METHODS = "Access-Control-Allow-Methods"
ALLOW_ORIGIN = "Access-Control-Allow-Origin"
EXPOSE_HEADERS = "Access-Control-Expose-Headers"
MAX_AGE = "Access-Control-Max-Age"
REQUEST_METHOD = "Access-Control-Request-Method"
REQUEST_HEADERS = "Access-Control-Request-Headers"

NextHandler = Callable[[Any, Any], Any]


class InvalidOriginConfiguration(ValueError):
    """Raised when the allow-origin setting is neither "origin-list-or-null" nor "*"."""

    def __init__(self, value: str) -> None:
        super().__init__(f"invalid Access-Control-Allow-Origin setting: {value}")
        self.value = value


@dataclass(frozen=True)
class RequestContext:
    """State captured from one request, before any header mutation."""

    origin: str = ""


def resolve_allow_origin(allow_origin: str, origin: str) -> str:
    if allow_origin == ORIGIN_LIST_OR_NULL:
        return origin or "null"
    if allow_origin == ORIGIN_ANY:
        return ORIGIN_ANY
    raise InvalidOriginConfiguration(allow_origin)


def apply_headers(headers, mapping: Mapping[str, str]) -> None:
    """Set each configured header, or remove it when its value is empty."""

    for name, value in mapping.items():
        if value == "":
            headers.remove(name)
        else:
            headers.set(name, value)


def is_preflight(request) -> bool:
    headers = request.headers
    return bool(
        headers.get(REQUEST_METHOD)
        and headers.get(REQUEST_HEADERS)
        and headers.get("Origin")
        and request.method == "OPTIONS"
    )


class HeaderMiddleware:
    """Answers CORS preflights and rewrites request/response headers.

    Instances hold nothing but the frozen options, so one instance can serve
    concurrent requests. The request's ``Origin`` travels in the
    :class:`RequestContext` returned by :meth:`handle`.
    """

    def __init__(self, options: HeaderOptions) -> None:
        self.options = options

    def handle(self, request, response, call_next: Optional[NextHandler] = None) -> RequestContext:
        context = RequestContext(origin=request.headers.get("Origin") or "")

        if is_preflight(request):
            self._preflight(response.headers, context)
            return context

        self.modify_request_headers(request)
        if call_next is not None:
            call_next(response, request)
        return context

    def _preflight(self, headers, context: RequestContext) -> None:
        opt = self.options
        if opt.access_control_allow_credentials:
            headers.add(ALLOW_CREDENTIALS, "true")

        allow_headers = join_values(opt.access_control_allow_headers)
        if allow_headers:
            headers.add(ALLOW_HEADERS, allow_headers)

        allow_methods = join_values(opt.access_control_allow_methods)
        if allow_methods:
            headers.add(ALLOW_METHODS, allow_methods)

        try:
            allow_origin = resolve_allow_origin(opt.access_control_allow_origin, context.origin)
        except InvalidOriginConfiguration as exc:
            LOGGER.debug("Preflight error with Access-Control-Allow-Origin: %s", exc)
            allow_origin = ""
        if allow_origin:
            headers.add(ALLOW_ORIGIN, allow_origin)

        headers.add(MAX_AGE, str(opt.access_control_max_age))

    def modify_request_headers(self, request) -> None:
        apply_headers(request.headers, self.options.custom_request_headers)

    def modify_response_headers(self, response, context: RequestContext) -> None:
        """Apply custom response headers and CORS headers to ``response``.

        Raises :class:`InvalidOriginConfiguration`; the caller decides whether
        the response can still be sent.
        """

        opt = self.options
        apply_headers(response.headers, opt.custom_response_headers)

        allow_origin = resolve_allow_origin(opt.access_control_allow_origin, context.origin)
        if allow_origin:
            response.headers.set(ALLOW_ORIGIN, allow_origin)

        if opt.access_control_allow_credentials:
            response.headers.set(ALLOW_CREDENTIALS, "true")

        expose_headers = join_values(opt.access_control_expose_headers)
        if expose_headers:
            response.headers.set(EXPOSE_HEADERS, expose_headers)


def new_header_from_options(options: Optional[HeaderOptions]) -> Optional[HeaderMiddleware]:
    """Return a middleware, or ``None`` when there is nothing to do.

    ``None`` tells the chain builder to leave this stage out entirely.
    """

    if options is None or not (options.has_custom_headers_defined() or options.has_cors_headers_defined()):
        return None
    return HeaderMiddleware(options)


__all__ = [
    "HeaderMiddleware",
    "InvalidOriginConfiguration",
    "RequestContext",
    "apply_headers",
    "is_preflight",
    "new_header_from_options",
    "resolve_allow_origin",
]
