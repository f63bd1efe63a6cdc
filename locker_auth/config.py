"""
Vault Configuration - Validated settings for the auth vault.

Reads settings from environment variables:
    LOCKER_BACKEND = memory | file | redis
    LOCKER_DATA_DIR = <directory for the file backend>
    LOCKER_REDIS_URL = <redis url for the redis backend>
    LOCKER_KDF_ITERATIONS = <int, at least 100000>
    LOCKER_ASSERTION_KEY = <PEM public key; enables signature verification>
    LOCKER_ASSERTION_AUDIENCE = <expected audience>

Security Note:
    The session lifetime is fixed (7 days) and not configurable here.
"""
import os
import logging
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from locker_auth.crypto.cipher import KDF_ITERATIONS, MIN_KDF_ITERATIONS

logger = logging.getLogger("locker.auth")

BACKENDS = ("memory", "file", "redis")


class VaultConfig(BaseModel):
    """Validated vault configuration."""

    backend: str = Field(default="file")
    data_dir: str = Field(default="~/.locker")
    redis_url: str = Field(default="redis://localhost:6379/0")
    users_collection: str = Field(default="auth_users", min_length=1)
    session_key: str = Field(default="auth_session", min_length=1)
    kdf_iterations: int = Field(default=KDF_ITERATIONS, ge=MIN_KDF_ITERATIONS)
    assertion_key: Optional[str] = None
    assertion_algorithms: list[str] = Field(default_factory=lambda: ["RS256"])
    assertion_audience: Optional[str] = None

    @field_validator("backend")
    @classmethod
    def validate_backend(cls, v: str) -> str:
        """Validate storage backend is supported."""
        v = v.lower()
        if v not in BACKENDS:
            raise ValueError(f"Unsupported storage backend: {v}")
        return v

    @property
    def verify_assertion_signature(self) -> bool:
        return self.assertion_key is not None

    @classmethod
    def from_env(cls) -> "VaultConfig":
        """Create VaultConfig by loading values from environment.

        Returns:
            Populated VaultConfig instance.
        """
        values = {}
        env_map = {
            "backend": "LOCKER_BACKEND",
            "data_dir": "LOCKER_DATA_DIR",
            "redis_url": "LOCKER_REDIS_URL",
            "kdf_iterations": "LOCKER_KDF_ITERATIONS",
            "assertion_key": "LOCKER_ASSERTION_KEY",
            "assertion_audience": "LOCKER_ASSERTION_AUDIENCE",
        }
        for field_name, env_name in env_map.items():
            raw = os.environ.get(env_name)
            if raw is not None:
                values[field_name] = raw

        config = cls(**values)
        logger.debug(
            "Vault config: backend=%s kdf_iterations=%d signature_verification=%s",
            config.backend, config.kdf_iterations, config.verify_assertion_signature,
        )
        return config
