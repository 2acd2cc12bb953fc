# mentor/config/logging.py
import json
import logging
import os
import time
from logging.config import dictConfig

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_JSON = os.getenv("LOG_JSON", "0") in ("1", "true", "True")

# per-request chatter from the HTTP and search clients
QUIET_LOGGERS = ("httpx", "httpcore", "primp", "ddgs")


class JsonFormatter(logging.Formatter):
    """One JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "ts": int(time.time() * 1000),
            "level": record.levelname,
            "name": record.name,
            "msg": record.getMessage(),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


def configure_logging(level: str = LOG_LEVEL, as_json: bool = LOG_JSON) -> None:
    """
    Configure root logging. Call once at app start.
    Uses JSON if LOG_JSON=1, otherwise pretty console.
    """
    if as_json:
        formatter = {"()": "mentor.config.logging.JsonFormatter"}
    else:
        formatter = {
            "format": "[%(asctime)s] %(levelname)s %(name)s: %(message)s",
            "datefmt": "%H:%M:%S",
        }

    dictConfig({
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {"default": formatter},
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "default",
                "level": level,
            }
        },
        "root": {"level": level, "handlers": ["console"]},
        "loggers": {name: {"level": "WARNING"} for name in QUIET_LOGGERS},
    })

