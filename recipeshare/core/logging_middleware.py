import logging
import json
import time
import random
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

# Structured events go to their own logger and are not propagated to the root
structured_logger = logging.getLogger("api.structured_log")
structured_logger.propagate = False


class StructuredLoggingMiddleware(BaseHTTPMiddleware):
    """
    Emits one JSON wide event per request, tail sampled:

    1. Always log errors (status >= 500)
    2. Always log slow requests (> 500ms)
    3. Otherwise keep a random 5% sample
    """

    SLOW_THRESHOLD_MS = 500
    SAMPLE_RATE = 0.05

    async def dispatch(self, request: Request, call_next):
        start_time = time.perf_counter()

        response = None
        error_details = None
        status_code = 500  # Stays 500 if the app raises

        try:
            response = await call_next(request)
            status_code = response.status_code
        except Exception as e:
            error_details = str(e)
            raise
        finally:
            duration_ms = (time.perf_counter() - start_time) * 1000

            if status_code >= 500:
                should_log = True
            elif duration_ms > self.SLOW_THRESHOLD_MS:
                should_log = True
            else:
                should_log = random.random() < self.SAMPLE_RATE

            if should_log:
                # Set by the authentication gate when the request carried a valid token
                principal = getattr(request.state, "principal", None)

                log_payload = {
                    "timestamp": time.time(),
                    "method": request.method,
                    "path": request.url.path,
                    "status_code": status_code,
                    "duration_ms": round(duration_ms, 2),
                    "client_ip": request.client.host if request.client else None,
                    "origin": request.headers.get("origin"),
                    "user_agent": request.headers.get("user-agent"),
                    "query_params": dict(request.query_params),
                    "error": error_details,
                    "user_id": str(principal.id) if principal else None,
                    "user_handle": principal.handle if principal else None,
                }

                structured_logger.info(json.dumps(log_payload))

        return response
