"""
Service Logger Setup

Configures stdlib logging for a microservice from LoggingConfig.

Usage:
    from core.logger import setup_service_logger

    logger = setup_service_logger("crowdfund_service")
"""

import logging
import sys
from typing import Optional

from core.config import LoggingConfig

_configured_services = set()


def setup_service_logger(
    service_name: str,
    level: Optional[str] = None,
    config: Optional[LoggingConfig] = None,
) -> logging.Logger:
    """
    Configure and return the logger for a service.

    Handlers are attached to the ``microservices`` and service loggers once per
    service name, so calling this again (e.g. on reload) does not duplicate output.

    Args:
        service_name: Name of the service, used as the logger name
        level: Optional level override (e.g. "DEBUG")
        config: Logging configuration (defaults to environment)

    Returns:
        Logger for the service
    """
    config = config or LoggingConfig.from_env()
    log_level = getattr(logging, (level or config.log_level).upper(), logging.INFO)

    logger = logging.getLogger(service_name)
    logger.setLevel(log_level)

    if service_name in _configured_services:
        return logger

    formatter = logging.Formatter(config.log_format)
    handlers = []

    if config.enable_console:
        console = logging.StreamHandler(sys.stdout)
        console.setFormatter(formatter)
        handlers.append(console)

    if config.log_file:
        file_handler = logging.FileHandler(config.log_file)
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    # Module loggers live under microservices.<service>.*
    package_logger = logging.getLogger(f"microservices.{service_name}")
    package_logger.setLevel(log_level)

    for target in (logger, package_logger):
        for handler in handlers:
            target.addHandler(handler)
        target.propagate = False

    _configured_services.add(service_name)
    return logger
