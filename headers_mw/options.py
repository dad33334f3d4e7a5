"""Immutable configuration for the headers middleware."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Iterable, Mapping, Optional, Tuple

ORIGIN_LIST_OR_NULL = "origin-list-or-null"
ORIGIN_ANY = "*"


def _freeze_mapping(value: Optional[Mapping[str, Any]]) -> Mapping[str, str]:
    if not value:
        return MappingProxyType({})
    return MappingProxyType({str(k): "" if v is None else str(v) for k, v in value.items()})


def _to_tuple(value: Any) -> Tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        value = value.split(",")
    return tuple(str(item).strip() for item in value if str(item).strip())


@dataclass(frozen=True)
class HeaderOptions:
    """Which custom headers and CORS headers the middleware emits.

    ``custom_request_headers`` / ``custom_response_headers`` map a header name
    to its value; an empty value removes the header instead of setting it.
    ``access_control_allow_origin`` is either ``"origin-list-or-null"`` or
    ``"*"`` (https://www.w3.org/TR/cors/#access-control-allow-origin-response-header).
    Any other value is only rejected when a request needs it.
    """

    custom_request_headers: Mapping[str, str] = field(default_factory=dict)
    custom_response_headers: Mapping[str, str] = field(default_factory=dict)
    access_control_allow_credentials: bool = False
    access_control_allow_headers: Tuple[str, ...] = ()
    access_control_allow_methods: Tuple[str, ...] = ()
    access_control_allow_origin: str = ""
    access_control_expose_headers: Tuple[str, ...] = ()
    access_control_max_age: int = 0

    def __post_init__(self) -> None:
        object.__setattr__(self, "custom_request_headers", _freeze_mapping(self.custom_request_headers))
        object.__setattr__(self, "custom_response_headers", _freeze_mapping(self.custom_response_headers))
        object.__setattr__(self, "access_control_allow_headers", _to_tuple(self.access_control_allow_headers))
        object.__setattr__(self, "access_control_allow_methods", _to_tuple(self.access_control_allow_methods))
        object.__setattr__(self, "access_control_expose_headers", _to_tuple(self.access_control_expose_headers))
        object.__setattr__(self, "access_control_allow_origin", (self.access_control_allow_origin or "").strip())
        object.__setattr__(self, "access_control_max_age", int(self.access_control_max_age or 0))

    def has_custom_headers_defined(self) -> bool:
        return bool(self.custom_request_headers or self.custom_response_headers)

    def has_cors_headers_defined(self) -> bool:
        return bool(
            self.access_control_allow_credentials
            or self.access_control_allow_headers
            or self.access_control_allow_methods
            or self.access_control_allow_origin
            or self.access_control_expose_headers
            or self.access_control_max_age
        )

    @classmethod
    def from_mapping(cls, data: Optional[Mapping[str, Any]]) -> "HeaderOptions":
        """Build options from a plain mapping such as a Flask config section.

        Unknown keys are ignored. List fields accept either a sequence or a
        comma separated string.
        """

        data = dict(data or {})
        return cls(
            custom_request_headers=data.get("custom_request_headers") or {},
            custom_response_headers=data.get("custom_response_headers") or {},
            access_control_allow_credentials=bool(data.get("access_control_allow_credentials", False)),
            access_control_allow_headers=_to_tuple(data.get("access_control_allow_headers")),
            access_control_allow_methods=_to_tuple(data.get("access_control_allow_methods")),
            access_control_allow_origin=str(data.get("access_control_allow_origin") or ""),
            access_control_expose_headers=_to_tuple(data.get("access_control_expose_headers")),
            access_control_max_age=int(data.get("access_control_max_age") or 0),
        )


def join_values(values: Iterable[str]) -> str:
    """Serialise a multi-value header list (comma, no spaces)."""

    return ",".join(values)


__all__ = ["HeaderOptions", "ORIGIN_ANY", "ORIGIN_LIST_OR_NULL", "join_values"]
