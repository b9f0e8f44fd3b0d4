from .correlation import RequestContextLogFilter, RequestContextMiddleware, get_request_id

__all__ = [
    "RequestContextLogFilter",
    "RequestContextMiddleware",
    "get_request_id",
]
