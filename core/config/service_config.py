#!/usr/bin/env python3
"""Service configuration for the crowdfund service

Identity, port and storage backend selection.
"""
import os
from dataclasses import dataclass


def _bool(val: str) -> bool:
    return val.lower() == "true"


def _int(val: str, default: int) -> int:
    try:
        return int(val) if val else default
    except ValueError:
        return default


STORAGE_BACKENDS = ("memory", "postgres")


@dataclass
class ServiceConfig:
    """Crowdfund service settings"""

    service_name: str = "crowdfund_service"
    service_port: int = 8260
    debug: bool = False

    # ===========================================
    # Storage
    # ===========================================
    # memory | postgres
    storage_backend: str = "memory"

    # Campaign id regeneration attempts on collision
    id_max_attempts: int = 5

    def __post_init__(self):
        if self.storage_backend not in STORAGE_BACKENDS:
            raise ValueError(
                f"Unknown storage backend '{self.storage_backend}', "
                f"expected one of {', '.join(STORAGE_BACKENDS)}"
            )
        if self.id_max_attempts < 1:
            raise ValueError("id_max_attempts must be at least 1")

    @classmethod
    def from_env(cls) -> 'ServiceConfig':
        """Load service configuration from environment variables"""
        return cls(
            service_name=os.getenv("SERVICE_NAME", "crowdfund_service"),
            service_port=_int(os.getenv("SERVICE_PORT", ""), 8260),
            debug=_bool(os.getenv("DEBUG", "false")),
            storage_backend=os.getenv("STORAGE_BACKEND", "memory").lower(),
            id_max_attempts=_int(os.getenv("ID_MAX_ATTEMPTS", ""), 5),
        )
