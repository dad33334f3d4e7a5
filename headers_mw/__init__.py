"""Custom header injection and CORS middleware for WSGI apps."""

from .middleware import (
    HeaderMiddleware,
    InvalidOriginConfiguration,
    RequestContext,
    apply_headers,
    new_header_from_options,
    resolve_allow_origin,
)
from .options import HeaderOptions
from .wsgi import HeadersWSGIMiddleware, init_app, wrap_wsgi

__all__ = [
    "HeaderMiddleware",
    "HeaderOptions",
    "HeadersWSGIMiddleware",
    "InvalidOriginConfiguration",
    "RequestContext",
    "apply_headers",
    "init_app",
    "new_header_from_options",
    "resolve_allow_origin",
    "wrap_wsgi",
]
