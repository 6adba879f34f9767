#!/usr/bin/env python3
"""
Core Module for Microservices Architecture

Shared components used by the crowdfund microservice.

COMPONENTS:
    - config/: Environment-driven configuration (service, infra, logging)
    - logger.py: Service logger setup
    - postgres_client.py: asyncpg pool wrapper for durable storage

USAGE:
    from core.config import get_settings
    from core.logger import setup_service_logger

    settings = get_settings()
    logger = setup_service_logger(settings.service.service_name)
"""

__version__ = "2.0.0"
