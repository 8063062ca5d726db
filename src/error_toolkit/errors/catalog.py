"""
Named constructors for common HTTP error statuses.

Each factory returns an AppError preloaded with the status code, a
machine-readable code and the standard reason phrase as default message:

    >>> raise not_found("User not found", {"user_id": 42})
    >>> raise too_many_requests()
"""

from collections.abc import Callable
from typing import Any, Optional

from error_toolkit.errors.exceptions import AppError

# factory name -> (status_code, code, default_message); None means the
# caller must supply a message
ERROR_CATALOG: dict[str, tuple[int, str, Optional[str]]] = {
    # 4xx Client Errors
    "bad_request": (400, "BAD_REQUEST", None),
    "unauthorized": (401, "UNAUTHORIZED", "Unauthorized"),
    "payment_required": (402, "PAYMENT_REQUIRED", "Payment Required"),
    "forbidden": (403, "FORBIDDEN", "Forbidden"),
    "not_found": (404, "NOT_FOUND", "Not Found"),
    "method_not_allowed": (405, "METHOD_NOT_ALLOWED", "Method Not Allowed"),
    "not_acceptable": (406, "NOT_ACCEPTABLE", "Not Acceptable"),
    "proxy_auth_required": (407, "PROXY_AUTH_REQUIRED", "Proxy Authentication Required"),
    "request_timeout": (408, "REQUEST_TIMEOUT", "Request Timeout"),
    "conflict": (409, "CONFLICT", None),
    "gone": (410, "GONE", "Gone"),
    "length_required": (411, "LENGTH_REQUIRED", "Length Required"),
    "precondition_failed": (412, "PRECONDITION_FAILED", "Precondition Failed"),
    "payload_too_large": (413, "PAYLOAD_TOO_LARGE", "Payload Too Large"),
    "uri_too_long": (414, "URI_TOO_LONG", "URI Too Long"),
    "unsupported_media_type": (415, "UNSUPPORTED_MEDIA_TYPE", "Unsupported Media Type"),
    "range_not_satisfiable": (416, "RANGE_NOT_SATISFIABLE", "Range Not Satisfiable"),
    "expectation_failed": (417, "EXPECTATION_FAILED", "Expectation Failed"),
    "im_a_teapot": (418, "IM_A_TEAPOT", "I'm a Teapot"),
    "misdirected_request": (421, "MISDIRECTED_REQUEST", "Misdirected Request"),
    "unprocessable_entity": (422, "UNPROCESSABLE_ENTITY", "Unprocessable Entity"),
    "validation_error": (422, "VALIDATION_ERROR", None),
    "locked": (423, "LOCKED", "Locked"),
    "failed_dependency": (424, "FAILED_DEPENDENCY", "Failed Dependency"),
    "too_early": (425, "TOO_EARLY", "Too Early"),
    "upgrade_required": (426, "UPGRADE_REQUIRED", "Upgrade Required"),
    "precondition_required": (428, "PRECONDITION_REQUIRED", "Precondition Required"),
    "too_many_requests": (429, "TOO_MANY_REQUESTS", "Too Many Requests"),
    "request_header_fields_too_large": (
        431,
        "REQUEST_HEADER_FIELDS_TOO_LARGE",
        "Request Header Fields Too Large",
    ),
    "unavailable_for_legal_reasons": (
        451,
        "UNAVAILABLE_FOR_LEGAL_REASONS",
        "Unavailable For Legal Reasons",
    ),
    # 5xx Server Errors
    "internal_server_error": (500, "INTERNAL_SERVER_ERROR", "Internal Server Error"),
    "not_implemented": (501, "NOT_IMPLEMENTED", "Not Implemented"),
    "bad_gateway": (502, "BAD_GATEWAY", "Bad Gateway"),
    "service_unavailable": (503, "SERVICE_UNAVAILABLE", "Service Unavailable"),
    "gateway_timeout": (504, "GATEWAY_TIMEOUT", "Gateway Timeout"),
    "http_version_not_supported": (505, "HTTP_VERSION_NOT_SUPPORTED", "HTTP Version Not Supported"),
    "variant_also_negotiates": (506, "VARIANT_ALSO_NEGOTIATES", "Variant Also Negotiates"),
    "insufficient_storage": (507, "INSUFFICIENT_STORAGE", "Insufficient Storage"),
    "loop_detected": (508, "LOOP_DETECTED", "Loop Detected"),
    "bandwidth_limit_exceeded": (509, "BANDWIDTH_LIMIT_EXCEEDED", "Bandwidth Limit Exceeded"),
    "not_extended": (510, "NOT_EXTENDED", "Not Extended"),
    "network_authentication_required": (
        511,
        "NETWORK_AUTHENTICATION_REQUIRED",
        "Network Authentication Required",
    ),
    "network_connect_timeout": (599, "NETWORK_CONNECT_TIMEOUT", "Network Connect Timeout"),
}

ErrorFactory = Callable[..., AppError]


def _make_factory(name: str) -> ErrorFactory:
    status_code, code, default_message = ERROR_CATALOG[name]

    if default_message is None:

        def factory(message: str, context: Optional[dict[str, Any]] = None) -> AppError:
            return AppError(message, status_code, code, context)

    else:

        def factory(
            message: str = default_message, context: Optional[dict[str, Any]] = None
        ) -> AppError:
            return AppError(message, status_code, code, context)

    factory.__name__ = name
    factory.__qualname__ = name
    factory.__doc__ = f"AppError with status {status_code} and code {code}."
    return factory


bad_request = _make_factory("bad_request")
unauthorized = _make_factory("unauthorized")
payment_required = _make_factory("payment_required")
forbidden = _make_factory("forbidden")
not_found = _make_factory("not_found")
method_not_allowed = _make_factory("method_not_allowed")
not_acceptable = _make_factory("not_acceptable")
proxy_auth_required = _make_factory("proxy_auth_required")
request_timeout = _make_factory("request_timeout")
conflict = _make_factory("conflict")
gone = _make_factory("gone")
length_required = _make_factory("length_required")
precondition_failed = _make_factory("precondition_failed")
payload_too_large = _make_factory("payload_too_large")
uri_too_long = _make_factory("uri_too_long")
unsupported_media_type = _make_factory("unsupported_media_type")
range_not_satisfiable = _make_factory("range_not_satisfiable")
expectation_failed = _make_factory("expectation_failed")
im_a_teapot = _make_factory("im_a_teapot")
misdirected_request = _make_factory("misdirected_request")
unprocessable_entity = _make_factory("unprocessable_entity")
validation_error = _make_factory("validation_error")
locked = _make_factory("locked")
failed_dependency = _make_factory("failed_dependency")
too_early = _make_factory("too_early")
upgrade_required = _make_factory("upgrade_required")
precondition_required = _make_factory("precondition_required")
too_many_requests = _make_factory("too_many_requests")
request_header_fields_too_large = _make_factory("request_header_fields_too_large")
unavailable_for_legal_reasons = _make_factory("unavailable_for_legal_reasons")
internal_server_error = _make_factory("internal_server_error")
not_implemented = _make_factory("not_implemented")
bad_gateway = _make_factory("bad_gateway")
service_unavailable = _make_factory("service_unavailable")
gateway_timeout = _make_factory("gateway_timeout")
http_version_not_supported = _make_factory("http_version_not_supported")
variant_also_negotiates = _make_factory("variant_also_negotiates")
insufficient_storage = _make_factory("insufficient_storage")
loop_detected = _make_factory("loop_detected")
bandwidth_limit_exceeded = _make_factory("bandwidth_limit_exceeded")
not_extended = _make_factory("not_extended")
network_authentication_required = _make_factory("network_authentication_required")
network_connect_timeout = _make_factory("network_connect_timeout")

# First entry wins for statuses shared by several factories (422)
_BY_STATUS: dict[int, str] = {}
for _name, (_status, _code, _default) in ERROR_CATALOG.items():
    _BY_STATUS.setdefault(_status, _name)


def create_from_status(
    status_code: int,
    message: Optional[str] = None,
    context: Optional[dict[str, Any]] = None,
) -> AppError:
    """
    Build an AppError for ``status_code`` using the catalog entry.

    Unknown statuses produce an AppError without a code. A missing message
    falls back to the catalog default, then to "Error <status>".
    """
    name = _BY_STATUS.get(status_code)
    if name is None:
        return AppError(message or f"Error {status_code}", status_code, None, context)
    _, code, default_message = ERROR_CATALOG[name]
    return AppError(message or default_message or f"Error {status_code}", status_code, code, context)
