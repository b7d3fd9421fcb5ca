"""
Server configuration loaded from the environment

Module: core.config
Date: 2026-10-19
Version: 0.1.0

CHANGELOG:
[2026-10-19 v0.1.0] Initial implementation
  - ServerConfig dataclass
  - Base64-encoded secrets from environment
  - Dev mode toggle (clears the store on startup)

ARCHITECTURE:
ServerConfig is built once by the entry point and handed to the
HTTP transport. Secrets stay as raw bytes and are never logged.
"""

import base64
import binascii
import os
from dataclasses import dataclass
from typing import Mapping, Optional

from .constants import (
    DEFAULT_BCRYPT_ROUNDS,
    DEFAULT_DB_PATH,
    DEFAULT_HTTP_HOST,
    DEFAULT_HTTP_PORT,
    DEFAULT_STATIC_DIR,
    JWT_MIN_SECRET_LENGTH,
)


class ConfigError(Exception):
    """Configuration is missing or invalid"""
    pass


@dataclass
class ServerConfig:
    """Chirpy server configuration"""
    jwt_secret: bytes
    polka_key: bytes
    host: str = DEFAULT_HTTP_HOST
    port: int = DEFAULT_HTTP_PORT
    db_path: str = DEFAULT_DB_PATH
    static_dir: str = DEFAULT_STATIC_DIR
    dev_mode: bool = False
    bcrypt_rounds: int = DEFAULT_BCRYPT_ROUNDS

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ServerConfig":
        """
        Build configuration from environment variables

        Args:
            environ: Mapping to read from (defaults to os.environ)

        Returns:
            ServerConfig

        Raises:
            ConfigError: If a required secret is missing or not base64
        """
        env = os.environ if environ is None else environ

        jwt_secret = _decode_key(env, "JWT_SECRET")
        if len(jwt_secret) < JWT_MIN_SECRET_LENGTH:
            raise ConfigError(
                f"JWT_SECRET must decode to at least {JWT_MIN_SECRET_LENGTH} bytes"
            )

        port_str = env.get("CHIRPY_PORT", str(DEFAULT_HTTP_PORT))
        try:
            port = int(port_str)
        except ValueError:
            raise ConfigError(f"CHIRPY_PORT is not an integer: {port_str!r}")

        return cls(
            jwt_secret=jwt_secret,
            polka_key=_decode_key(env, "POLKA_KEY"),
            host=env.get("CHIRPY_HOST", DEFAULT_HTTP_HOST),
            port=port,
            db_path=env.get("CHIRPY_DB_PATH", DEFAULT_DB_PATH),
            static_dir=env.get("CHIRPY_STATIC_DIR", DEFAULT_STATIC_DIR),
        )


def _decode_key(env: Mapping[str, str], name: str) -> bytes:
    """Decode a required base64 key from the environment"""
    value = env.get(name, "")
    if not value:
        raise ConfigError(f"expected key {name} was left empty")
    try:
        return base64.b64decode(value, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ConfigError(f"{name} is not valid base64: {e}")
