"""
Logging setup: JSON lines on the console plus a per-request access log
"""
import json
import logging
import logging.config
import time
import uuid
from datetime import datetime, timezone
from typing import Any, Dict

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from gym_backend.config import settings

request_logger = logging.getLogger("gym_backend.request")


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        if isinstance(record.msg, dict):
            data: Dict[str, Any] = dict(record.msg)
        else:
            data = {"message": record.getMessage()}

        data.setdefault("level", record.levelname)
        data.setdefault("logger", record.name)

        if not data.get("time_local"):
            now = datetime.now(timezone.utc).astimezone()
            data["time_local"] = now.strftime("%Y-%m-%d %H:%M:%S")

        if record.exc_info:
            data["exc_info"] = self.formatException(record.exc_info)

        return json.dumps(data, ensure_ascii=False, default=str)


def build_logging_config(log_level: str = "INFO") -> dict:
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "json": {
                "()": "gym_backend.logging_config.JsonFormatter",
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "json",
            },
        },
        "root": {
            "handlers": ["console"],
            "level": log_level,
        },
        "loggers": {
            "gym_backend": {
                "handlers": ["console"],
                "level": log_level,
                "propagate": False,
            },
            "gym_backend.request": {
                "handlers": ["console"],
                "level": log_level,
                "propagate": False,
            },
            "uvicorn.access": {
                "handlers": ["console"],
                "level": "WARNING",
                "propagate": False,
            },
        },
    }


def configure_logging(log_level: str = None) -> None:
    logging.config.dictConfig(build_logging_config(log_level or settings.LOG_LEVEL))


class RequestLogMiddleware(BaseHTTPMiddleware):
    """One structured access-log record per request"""

    async def dispatch(self, request: Request, call_next):
        start_time = time.time()
        request_id = request.headers.get("X-Request-ID", str(uuid.uuid4()))
        request.state.request_id = request_id

        try:
            response = await call_next(request)
        except Exception:
            # the error handler answers 500 outside this middleware
            self._log(request, 500, start_time, request_id)
            raise

        self._log(request, response.status_code, start_time, request_id)
        response.headers["X-Request-ID"] = request_id
        return response

    @staticmethod
    def _log(request: Request, status_code: int, start_time: float, request_id: str) -> None:
        forwarded_for = request.headers.get("X-Forwarded-For")
        remote_addr = request.client.host if request.client else "-"

        request_logger.info({
            "remote_addr": remote_addr,
            "real_ip": forwarded_for.split(",")[0].strip() if forwarded_for else remote_addr,
            "request": f"{request.method} {request.url.path}",
            "status": str(status_code),
            "request_time": f"{time.time() - start_time:.3f}",
            "request_id": request_id,
            "gym_id": request.headers.get("X-Gym-Id", "-"),
            "http_user_agent": request.headers.get("User-Agent", "-"),
        })
