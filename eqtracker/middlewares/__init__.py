from __future__ import annotations

from .request_context import RequestContextMiddleware, principal_ctx_var, request_id_ctx_var

__all__ = [
    "RequestContextMiddleware",
    "principal_ctx_var",
    "request_id_ctx_var",
]
