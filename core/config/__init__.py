#!/usr/bin/env python3
"""Modular configuration system for the crowdfund service

Configuration hierarchy:
- service_config: Service identity, port and storage backend
- infra_config: Infrastructure services (PostgreSQL)
- logging_config: Logging configuration
"""
import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

from .logging_config import LoggingConfig
from .infra_config import InfraConfig
from .service_config import ServiceConfig

# Load environment file based on ENV
env = os.getenv("ENV") or os.getenv("ENVIRONMENT", "development")
env_files = {
    "development": "deployment/environments/dev.env",
    "dev": "deployment/environments/dev.env",
    "testing": "deployment/environments/test.env",
    "test": "deployment/environments/test.env",
    "staging": "deployment/environments/staging.env",
    "production": "deployment/environments/production.env",
}
env_file = env_files.get(env, "deployment/environments/dev.env")
load_dotenv(env_file, override=False)


@dataclass
class CrowdfundSettings:
    """Aggregated settings for the crowdfund service"""
    service: ServiceConfig = field(default_factory=ServiceConfig)
    infra: InfraConfig = field(default_factory=InfraConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_env(cls) -> 'CrowdfundSettings':
        return cls(
            service=ServiceConfig.from_env(),
            infra=InfraConfig.from_env(),
            logging=LoggingConfig.from_env(),
        )


# Create global settings instance
settings = CrowdfundSettings.from_env()


def get_settings() -> CrowdfundSettings:
    """Get global settings instance"""
    return settings


def reload_settings() -> CrowdfundSettings:
    """Reload settings from environment"""
    global settings
    settings = CrowdfundSettings.from_env()
    return settings


__all__ = [
    # Main config
    'CrowdfundSettings',
    'get_settings',
    'reload_settings',
    'settings',
    # Sub-configs
    'LoggingConfig',
    'InfraConfig',
    'ServiceConfig',
]
