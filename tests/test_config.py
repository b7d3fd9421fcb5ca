"""
Configuration Tests

Module: tests.test_config
Date: 2026-10-19
Version: 0.1.0
"""

import base64
import unittest

from chirpy.core.config import ConfigError, ServerConfig
from chirpy.core.constants import (
    DEFAULT_DB_PATH,
    DEFAULT_HTTP_PORT,
    get_default_config,
)

SECRET = b"test-secret-key-at-least-32-characters-long!!!!"


def b64(raw: bytes) -> str:
    return base64.b64encode(raw).decode()


class TestServerConfig(unittest.TestCase):
    """Test suite for ServerConfig.from_env"""

    def test_from_env_defaults(self):
        """Test required secrets plus defaults"""
        config = ServerConfig.from_env({
            "JWT_SECRET": b64(SECRET),
            "POLKA_KEY": b64(b"polka"),
        })

        self.assertEqual(config.jwt_secret, SECRET)
        self.assertEqual(config.polka_key, b"polka")
        self.assertEqual(config.port, DEFAULT_HTTP_PORT)
        self.assertEqual(config.db_path, DEFAULT_DB_PATH)
        self.assertFalse(config.dev_mode)

    def test_from_env_overrides(self):
        """Test optional variables override defaults"""
        config = ServerConfig.from_env({
            "JWT_SECRET": b64(SECRET),
            "POLKA_KEY": b64(b"polka"),
            "CHIRPY_HOST": "127.0.0.1",
            "CHIRPY_PORT": "9090",
            "CHIRPY_DB_PATH": "/tmp/chirpy.json",
        })

        self.assertEqual(config.host, "127.0.0.1")
        self.assertEqual(config.port, 9090)
        self.assertEqual(config.db_path, "/tmp/chirpy.json")

    def test_missing_secret(self):
        """Test missing keys are reported"""
        with self.assertRaises(ConfigError):
            ServerConfig.from_env({"POLKA_KEY": b64(b"polka")})
        with self.assertRaises(ConfigError):
            ServerConfig.from_env({"JWT_SECRET": b64(SECRET)})

    def test_secret_not_base64(self):
        """Test non-base64 secrets are rejected"""
        with self.assertRaises(ConfigError):
            ServerConfig.from_env({"JWT_SECRET": "***", "POLKA_KEY": b64(b"polka")})

    def test_secret_too_short(self):
        """Test a short JWT secret is rejected"""
        with self.assertRaises(ConfigError):
            ServerConfig.from_env({"JWT_SECRET": b64(b"short"), "POLKA_KEY": b64(b"p")})

    def test_bad_port(self):
        """Test a non-integer port"""
        with self.assertRaises(ConfigError):
            ServerConfig.from_env({
                "JWT_SECRET": b64(SECRET),
                "POLKA_KEY": b64(b"polka"),
                "CHIRPY_PORT": "http",
            })

    def test_default_config_structure(self):
        """Test default configuration sections"""
        config = get_default_config()
        for section in ("server", "http", "store", "tokens", "chirps", "logging"):
            self.assertIn(section, config)
        self.assertEqual(config["chirps"]["max_length"], 140)


if __name__ == "__main__":
    unittest.main(verbosity=2)
