"""Request/response logging middleware."""

import json
import logging
import time
from typing import Any, Callable, Dict

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from eatrite.core.request_id import generate_request_id, set_request_id

logger = logging.getLogger(__name__)

# Compared against key names lowercased with "_" and "-" removed
SENSITIVE_KEYS = frozenset(
    [
        "apikey", "xapikey", "openaiapikey",
        "password", "secret", "clientsecret",
        "token", "accesstoken", "refreshtoken", "idtoken",
        "auth", "authorization",
    ]
)
IMAGE_KEYS = ("image", "imagebase64")


def mask_sensitive_data(data: Any) -> Any:
    """Recursively mask credentials and base64 image payloads."""
    if isinstance(data, dict):
        masked = {}
        for key, value in data.items():
            key_lower = str(key).lower()
            if key_lower.replace("_", "").replace("-", "") in SENSITIVE_KEYS:
                if isinstance(value, str) and len(value) > 8:
                    masked[key] = f"{value[:8]}..."
                else:
                    masked[key] = "***"
            elif key_lower in IMAGE_KEYS and isinstance(value, str):
                masked[key] = f"<{len(value)} chars>"
            else:
                masked[key] = mask_sensitive_data(value)
        return masked
    elif isinstance(data, list):
        return [mask_sensitive_data(item) for item in data]
    return data


async def get_request_params(request: Request) -> Dict[str, Any]:
    """
    Extract request parameters from query/path/JSON body for logging.

    Multipart bodies are not read here; routes log their own form fields.
    """
    params: Dict[str, Any] = {}

    if request.query_params:
        params["query"] = dict(request.query_params)

    if request.path_params:
        params["path"] = dict(request.path_params)

    content_type = request.headers.get("content-type", "").lower()
    if "application/json" in content_type:
        # Starlette caches the body, so the route can still read it
        body = await request.body()
        if body:
            try:
                params["body"] = json.loads(body)
            except json.JSONDecodeError:
                params["body"] = body.decode("utf-8", errors="ignore")[:500]
    elif "multipart/form-data" in content_type:
        params["form"] = {"type": "multipart/form-data", "note": "Form data logged by route handler"}

    return params


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Middleware for logging requests and responses with timing."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """Process request and log details."""
        request_id = request.headers.get("X-Request-ID") or generate_request_id()
        set_request_id(request_id)
        request.state.request_id = request_id

        start_time = time.time()
        method = request.method
        path = request.url.path

        params = mask_sensitive_data(await get_request_params(request))

        logger.info(
            f"API Request: {method} {path}",
            extra={
                "request_id": request_id,
                "method": method,
                "path": path,
                "params": params,
                "client_ip": request.client.host if request.client else None,
                "user_agent": request.headers.get("user-agent", "Unknown"),
            },
        )

        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(
                f"API Error: {method} {path} - {str(e)}",
                extra={
                    "request_id": request_id,
                    "method": method,
                    "path": path,
                    "process_time_ms": round((time.time() - start_time) * 1000, 2),
                },
                exc_info=True,
            )
            raise

        logger.info(
            f"API Response: {method} {path} - {response.status_code}",
            extra={
                "request_id": request_id,
                "method": method,
                "path": path,
                "status_code": response.status_code,
                "process_time_ms": round((time.time() - start_time) * 1000, 2),
            },
        )

        response.headers["X-Request-ID"] = request_id
        return response
