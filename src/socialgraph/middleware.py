"""
Middleware for request context and logging
"""

import json
import re
from collections.abc import Callable
from typing import Any

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from .logging import clear_request_context, get_logger, set_request_context

logger = get_logger(__name__)

SENSITIVE_KEYS = {
    "password",
    "token",
    "api_key",
    "secret",
    "auth",
    "authorization",
    "access_token",
    "key",
    "session",
    "cookie",
    "credentials",
}

_OPERATION_PATTERN = re.compile(r"\bquery\s+(\w+)")


def sanitize_query_params(params: dict[str, Any]) -> dict[str, Any]:
    """Redact sensitive parameters and raw GraphQL payloads before logging."""
    sanitized = {}
    for key, value in params.items():
        lowered = key.lower()
        if any(sensitive in lowered for sensitive in SENSITIVE_KEYS):
            sanitized[key] = "[REDACTED]"
        elif lowered in ("query", "variables", "extensions"):
            sanitized[key] = "[REDACTED]"
        else:
            sanitized[key] = value
    return sanitized


def operation_name_from_document(query: Any) -> str | None:
    if not isinstance(query, str) or not query:
        return None
    if "__schema" in query or "IntrospectionQuery" in query:
        return "__introspection"
    match = _OPERATION_PATTERN.search(query)
    return match.group(1) if match else "unnamed_operation"


async def extract_graphql_operation_name(request: Request) -> str | None:
    """Best-effort operation name for GET and POST /graphql requests."""
    if request.url.path != "/graphql":
        return None

    if request.method == "GET":
        params = request.query_params
        op = params.get("operationName")
        if op:
            return op
        return operation_name_from_document(params.get("query"))

    if request.method == "POST":
        try:
            body = await request.body()
            if not body:
                return None
            data = json.loads(body)
        except (json.JSONDecodeError, UnicodeDecodeError):
            return None
        if not isinstance(data, dict):
            return None
        op = data.get("operationName")
        if isinstance(op, str) and op:
            return op
        return operation_name_from_document(data.get("query"))

    return None


class LoggingContextMiddleware(BaseHTTPMiddleware):
    """Middleware to set logging context for each request."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        graphql_operation = await extract_graphql_operation_name(request)
        request_id = set_request_context(
            request_id=request.headers.get("x-request-id"), operation=graphql_operation
        )

        try:
            sanitized_params = None
            if request.query_params:
                sanitized_params = sanitize_query_params(dict(request.query_params))

            logger.info(
                "Request started",
                method=request.method,
                path=request.url.path,
                query_params=sanitized_params,
                remote_addr=request.client.host if request.client else None,
            )

            response = await call_next(request)
            response.headers["x-request-id"] = request_id

            logger.info(
                "Request completed",
                status_code=response.status_code,
                method=request.method,
                path=request.url.path,
            )
            return response

        except Exception as e:
            logger.error(
                "Request failed",
                method=request.method,
                path=request.url.path,
                error=str(e),
            )
            raise

        finally:
            clear_request_context()
