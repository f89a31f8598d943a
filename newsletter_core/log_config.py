"""
Log Configuration - Settings for logging behavior
"""

import logging
import os
from dataclasses import dataclass


LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
ROOT_LOGGER = "newsletter_core"


@dataclass
class LogConfig:
    """Configuration for logging"""

    log_level: str = "INFO"
    log_to_console: bool = True

    @classmethod
    def from_env(cls) -> 'LogConfig':
        """Create config from environment variables"""
        level = os.getenv("NEWSLETTER_LOG_LEVEL", "INFO")
        if os.getenv("NEWSLETTER_DEBUG", "false").lower() == "true":
            level = "DEBUG"
        return cls(
            log_level=level,
            log_to_console=os.getenv("NEWSLETTER_LOG_CONSOLE", "true").lower() == "true",
        )

    @property
    def level(self) -> int:
        return getattr(logging, self.log_level.upper(), logging.INFO)


def setup_logging(log_config: LogConfig = None) -> logging.Logger:
    """Configure the package logger.

    Safe to call repeatedly; the console handler is installed only once.
    """
    if log_config is None:
        log_config = LogConfig.from_env()

    lg = logging.getLogger(ROOT_LOGGER)
    lg.setLevel(log_config.level)

    handlers = [h for h in lg.handlers if getattr(h, "_newsletter_core", False)]
    if log_config.log_to_console and not handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._newsletter_core = True
        lg.addHandler(handler)
        handlers = [handler]
    for h in handlers:
        h.setLevel(log_config.level)
    return lg
