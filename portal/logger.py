"""
Logging setup for the recruitment portal.

Views that act for a signed-in user log through get_logger(), which tags
each line with the user and the portal area.
"""

import logging
import sys
from typing import Optional

SIMPLE_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
# One JSON object per line for log aggregators
JSON_FORMAT = '{"time": "%(asctime)s", "level": "%(levelname)s", "name": "%(name)s", "message": "%(message)s"}'


class PortalLogger(logging.LoggerAdapter):
    """Prefixes messages with [user:<id>] and [<area>] when known."""

    def process(self, msg, kwargs):
        parts = []
        if self.extra.get("user_id"):
            parts.append(f"[user:{str(self.extra['user_id'])[:8]}]")
        if self.extra.get("area"):
            parts.append(f"[{self.extra['area']}]")
        return (f"{' '.join(parts)} {msg}" if parts else msg), kwargs


def setup_logging(level: str = "INFO", format: str = "simple") -> None:
    """Send all portal logging to stdout at `level`, as plain lines or JSON."""
    log_level = getattr(logging, level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(log_level)
    if format == "json":
        handler.setFormatter(logging.Formatter(JSON_FORMAT))
    else:
        handler.setFormatter(logging.Formatter(SIMPLE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))

    root_logger.addHandler(handler)
    root_logger.setLevel(log_level)


def get_logger(name: str, user_id: Optional[str] = None, area: Optional[str] = None) -> PortalLogger:
    return PortalLogger(logging.getLogger(name), {"user_id": user_id, "area": area})
