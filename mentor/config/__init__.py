from .settings import Settings, get_settings
from .logging import JsonFormatter, configure_logging

__all__ = ["Settings", "get_settings", "configure_logging", "JsonFormatter"]
