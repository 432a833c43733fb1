# src/med_reminder/broker/redis_manager.py
# -*- coding: utf-8 -*-

"""
Manages the Redis connection used by the optional notification log.

Reads connection details from config/redis_config.yaml and the password
from utils.settings.
"""

import logging
import threading
from typing import Any, Dict, Optional

from redis import Redis
from redis.exceptions import (
    RedisError,
    ConnectionError as RedisConnectionError,
    AuthenticationError as RedisAuthenticationError,
)

from med_reminder.exceptions import ConfigurationError
from med_reminder.utils.config_loader import ConfigLoader
from med_reminder.utils.settings import REDIS_PASSWORD, REDIS_CONFIG_PATH

logger = logging.getLogger(__name__)


class RedisConfigurationError(ConfigurationError):
    """Error related to RedisManager configuration or connection setup."""

    pass


class RedisManager:
    """
    Owns a single Redis client built from 'config/redis_config.yaml'.
    Exposes only the operations the notification log needs.
    """

    def __init__(self, config_path: str = REDIS_CONFIG_PATH):
        self.redis: Optional[Redis] = None
        self.config = self._load_config(config_path)
        self._connect()

    def _load_config(self, config_path: str) -> Dict[str, Any]:
        """Loads the 'redis' section from the given YAML file."""
        try:
            loader = ConfigLoader(config_path)
        except FileNotFoundError as e:
            logger.critical(f"Redis configuration file not found at: {config_path}")
            raise RedisConfigurationError(
                f"Redis config file not found: {config_path}"
            ) from e
        except ValueError as e:
            raise RedisConfigurationError(f"Failed to load Redis config: {e}") from e

        redis_config = loader.config.get("redis")
        if not redis_config or not isinstance(redis_config, dict):
            raise RedisConfigurationError(
                f"Invalid or missing 'redis' section in config file: {config_path}"
            )
        logger.info(f"Loaded Redis configuration from {config_path}.")
        return redis_config

    def _connect(self) -> None:
        host = self.config.get("host", "localhost")
        port = self.config.get("port", 6379)
        db = self.config.get("db", 0)
        decode_responses = self.config.get("decode_responses", True)
        redis_url = self.config.get("url")

        # Password comes from the environment, not the YAML file
        password = REDIS_PASSWORD

        logger.debug(
            f"Redis connection params: URL={redis_url}, Host={host}, Port={port}, DB={db}, Password={'***' if password else 'None'}"
        )

        try:
            if redis_url:
                self.redis = Redis.from_url(
                    redis_url, password=password, decode_responses=decode_responses
                )
            else:
                self.redis = Redis(
                    host=host,
                    port=int(port),
                    db=int(db),
                    password=password,
                    decode_responses=decode_responses,
                )
            self.redis.ping()
            logger.info(f"Redis connection successful (Host: {host}, Port: {port}, DB: {db}).")
        except (RedisConnectionError, RedisAuthenticationError) as e:
            logger.critical(f"Failed to connect to Redis: {e}")
            raise RedisConfigurationError(f"Failed to connect to Redis: {e}") from e
        except (ValueError, TypeError) as e:
            raise RedisConfigurationError(f"Invalid Redis config value: {e}") from e
        except RedisError as e:
            raise RedisConfigurationError(
                f"Unexpected error initializing Redis: {e}"
            ) from e


_redis_manager_instance: Optional[RedisManager] = None
_redis_manager_lock = threading.Lock()


def get_redis_manager(config_path: str = REDIS_CONFIG_PATH) -> RedisManager:
    """Returns the process-wide RedisManager, creating it on first use."""
    global _redis_manager_instance
    if _redis_manager_instance is None:
        with _redis_manager_lock:
            if _redis_manager_instance is None:
                _redis_manager_instance = RedisManager(config_path=config_path)
    return _redis_manager_instance
