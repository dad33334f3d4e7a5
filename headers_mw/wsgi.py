"""WSGI adapter for :class:`headers_mw.middleware.HeaderMiddleware`.

Wraps any WSGI callable (typically a Flask ``app.wsgi_app``). Preflights are
answered here; other requests get their headers rewritten, run through the
wrapped app, and have the response headers rewritten on the way out.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from werkzeug.datastructures import EnvironHeaders, Headers

from .middleware import HeaderMiddleware, InvalidOriginConfiguration, new_header_from_options
from .options import HeaderOptions

LOGGER = logging.getLogger("headers_mw.wsgi")

_UNPREFIXED = {"CONTENT_TYPE", "CONTENT_LENGTH"}


def _environ_key(name: str) -> str:
    key = name.upper().replace("-", "_")
    if key in _UNPREFIXED:
        return key
    return f"HTTP_{key}"


class EnvironRequestHeaders(EnvironHeaders):
    """Mutable view over the request headers stored in a WSGI environ."""

    def set(self, key: str, value: str) -> None:  # type: ignore[override]
        self.environ[_environ_key(key)] = str(value)

    def remove(self, key: str) -> None:  # type: ignore[override]
        self.environ.pop(_environ_key(key), None)


class WSGIRequest:
    def __init__(self, environ: Dict[str, Any]) -> None:
        self.environ = environ
        self.method = environ.get("REQUEST_METHOD") or "GET"
        self.headers = EnvironRequestHeaders(environ)


@dataclass
class WSGIResponse:
    status: str = "200 OK"
    headers: Headers = field(default_factory=Headers)
    body: Optional[List[bytes]] = None
    exc_info: Any = None


def _run_app(app: Callable, environ: Dict[str, Any], response: WSGIResponse) -> None:
    """Run ``app`` and buffer its status, headers and body into ``response``.

    Streamed bodies are fully consumed before anything is sent downstream.
    """

    body: List[bytes] = []

    def _capture_start(status, headers, exc_info=None):
        response.status = status
        response.headers = Headers(list(headers))
        response.exc_info = exc_info
        return body.append

    app_iter = app(environ, _capture_start)
    try:
        for chunk in app_iter:
            body.append(chunk)
    finally:
        if hasattr(app_iter, "close"):
            app_iter.close()
    response.body = body


def _bad_gateway(start_response):
    payload = b"Bad Gateway"
    start_response(
        "502 Bad Gateway",
        [
            ("Content-Type", "text/plain; charset=utf-8"),
            ("Content-Length", str(len(payload))),
        ],
    )
    return [payload]


class HeadersWSGIMiddleware:
    def __init__(self, app, middleware: HeaderMiddleware):
        self.app = app
        self.middleware = middleware

    def __call__(self, environ, start_response):
        request = WSGIRequest(environ)
        response = WSGIResponse()

        def _dispatch(resp: WSGIResponse, req: WSGIRequest) -> None:
            _run_app(self.app, req.environ, resp)

        context = self.middleware.handle(request, response, _dispatch)

        if response.body is None:
            # Preflight answered by the middleware; status is left as is.
            response.headers.set("Content-Length", "0")
            start_response(response.status, response.headers.to_wsgi_list())
            return [b""]

        try:
            self.middleware.modify_response_headers(response, context)
        except InvalidOriginConfiguration as exc:
            if exc.value or self.middleware.options.has_cors_headers_defined():
                LOGGER.error("Response header modification failed for %s: %s", environ.get("PATH_INFO", ""), exc)
                return _bad_gateway(start_response)
            # No origin mode configured: custom headers only.
            LOGGER.debug("Skipping Access-Control-Allow-Origin: %s", exc)

        start_response(response.status, response.headers.to_wsgi_list(), response.exc_info)
        return response.body


def wrap_wsgi(app, options: Optional[HeaderOptions]):
    """Wrap ``app`` when ``options`` configure anything, else return it untouched."""

    middleware = new_header_from_options(options)
    if middleware is None:
        LOGGER.debug("No custom or CORS headers configured; headers middleware not installed")
        return app
    return HeadersWSGIMiddleware(app, middleware)


def init_app(flask_app, options: Optional[HeaderOptions] = None):
    """Install the headers middleware on a Flask app's ``wsgi_app``."""

    if options is None:
        from .settings import settings

        options = settings.to_options()
    flask_app.wsgi_app = wrap_wsgi(flask_app.wsgi_app, options)
    return flask_app


__all__ = [
    "EnvironRequestHeaders",
    "HeadersWSGIMiddleware",
    "WSGIRequest",
    "WSGIResponse",
    "init_app",
    "wrap_wsgi",
]
