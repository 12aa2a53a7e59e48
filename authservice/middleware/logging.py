"""
Request logging middleware for the auth service.
Assigns a request ID, times each request and writes one access log line.
Request bodies are never logged: they carry passwords and tokens.
"""

import json
import logging
import time
import uuid
from typing import Any, Callable, Dict, List, Optional

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp


logger = logging.getLogger("authservice.access")

REQUEST_ID_HEADER = "X-Request-ID"


class LoggingMiddleware(BaseHTTPMiddleware):
    """
    Structured request/response logging middleware.
    """

    def __init__(
        self,
        app: ASGIApp,
        exclude_paths: Optional[List[str]] = None
    ):
        """
        Initialize logging middleware.

        Args:
            app: FastAPI/Starlette application
            exclude_paths: Path prefixes that get a request ID but no log line
        """
        super().__init__(app)
        self.exclude_paths = exclude_paths or []

    def should_log_path(self, path: str) -> bool:
        return not any(path.startswith(excluded) for excluded in self.exclude_paths)

    def get_request_id(self, request: Request) -> str:
        """Reuse a caller-supplied request ID when it looks sane."""
        incoming = request.headers.get(REQUEST_ID_HEADER)
        if incoming and len(incoming) <= 64 and incoming.replace("-", "").isalnum():
            return incoming
        return str(uuid.uuid4())

    def create_log_entry(
        self,
        request: Request,
        response: Optional[Response],
        duration_ms: float,
        error: Optional[Exception] = None
    ) -> Dict[str, Any]:
        forwarded_for = request.headers.get("X-Forwarded-For")
        if forwarded_for:
            client_ip = forwarded_for.split(",")[0].strip()
        else:
            client_ip = request.client.host if request.client else "unknown"

        log_entry = {
            "request_id": getattr(request.state, "request_id", "unknown"),
            "method": request.method,
            "path": request.url.path,
            "client_ip": client_ip,
            "user_agent": request.headers.get("user-agent", "unknown"),
            "duration_ms": round(duration_ms, 2),
        }
        if response is not None:
            log_entry["status_code"] = response.status_code
        if error is not None:
            log_entry["error"] = type(error).__name__
        return log_entry

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = self.get_request_id(request)
        request.state.request_id = request_id

        if not self.should_log_path(request.url.path):
            response = await call_next(request)
            response.headers[REQUEST_ID_HEADER] = request_id
            return response

        start_time = time.perf_counter()
        response = None
        error = None

        try:
            response = await call_next(request)
            response.headers[REQUEST_ID_HEADER] = request_id
            return response
        except Exception as e:
            error = e
            raise
        finally:
            duration_ms = (time.perf_counter() - start_time) * 1000
            log_entry = self.create_log_entry(request, response, duration_ms, error)

            if error or (response is not None and response.status_code >= 500):
                logger.error(json.dumps(log_entry))
            elif response is not None and response.status_code >= 400:
                logger.warning(json.dumps(log_entry))
            else:
                logger.info(json.dumps(log_entry))
