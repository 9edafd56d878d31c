import logging
import os

import yaml

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "/etc/web-operator/config.yaml"
DEFAULT_WORKER_LIMIT = 1
DEFAULT_POSTING_ENABLED = False
DEFAULT_IMAGE = "nginx:latest"
DEFAULT_CONTENT_MOUNT_PATH = "/app"
DEFAULT_CONTENT_FILE_NAME = "index.html"
DEFAULT_RETRY_BACKOFF_BASE = 5
DEFAULT_RETRY_BACKOFF_MAX = 300
DEFAULT_RESYNC_INTERVAL = 60


class OperatorConfig:
    def __init__(self):
        self.config_path = os.environ.get("WEB_OPERATOR_CONFIG_PATH", DEFAULT_CONFIG_PATH)
        self._config = self._load_config()

        def get_bool(value):
            return str(value).lower() in ("true", "1", "t")

        self.worker_limit = self._get_value(
            "WEB_OPERATOR_WORKER_LIMIT",
            "workerLimit",
            DEFAULT_WORKER_LIMIT,
            caster=int,
        )
        self.posting_enabled = self._get_value(
            "WEB_OPERATOR_POSTING_ENABLED",
            "postingEnabled",
            DEFAULT_POSTING_ENABLED,
            caster=get_bool,
        )
        self.default_image = self._get_value(
            "WEB_OPERATOR_DEFAULT_IMAGE",
            "defaultImage",
            DEFAULT_IMAGE,
        )
        self.content_mount_path = self._get_value(
            "WEB_OPERATOR_CONTENT_MOUNT_PATH",
            "contentMountPath",
            DEFAULT_CONTENT_MOUNT_PATH,
        )
        self.content_file_name = self._get_value(
            "WEB_OPERATOR_CONTENT_FILE_NAME",
            "contentFileName",
            DEFAULT_CONTENT_FILE_NAME,
        )
        self.retry_backoff_base = self._get_value(
            "WEB_OPERATOR_RETRY_BACKOFF_BASE",
            "retryBackoffBase",
            DEFAULT_RETRY_BACKOFF_BASE,
            caster=float,
        )
        self.retry_backoff_max = self._get_value(
            "WEB_OPERATOR_RETRY_BACKOFF_MAX",
            "retryBackoffMax",
            DEFAULT_RETRY_BACKOFF_MAX,
            caster=float,
        )
        self.resync_interval = self._get_value(
            "WEB_OPERATOR_RESYNC_INTERVAL",
            "resyncInterval",
            DEFAULT_RESYNC_INTERVAL,
            caster=float,
        )

    def _get_value(self, env_key, yaml_key, default, caster=None):
        val = os.environ.get(env_key, self._config.get(yaml_key, default))
        if caster:
            return caster(val)
        return val

    def _load_config(self):
        try:
            with open(self.config_path, "r") as f:
                config_data = yaml.safe_load(f)
                logger.info(f"Loaded operator configuration from {self.config_path}")
                return config_data if config_data else {}
        except FileNotFoundError:
            logger.info(
                f"Operator config file not found at {self.config_path}, using default values."
            )
            return {}
        except (OSError, yaml.YAMLError) as e:
            logger.error(f"Error loading operator configuration from {self.config_path}: {e}")
            return {}

    def retry_delay(self, retry: int) -> float:
        """Exponential delay before the next attempt of a failed reconciliation."""
        return min(self.retry_backoff_base * (2 ** retry), self.retry_backoff_max)


# Global config instance to be used across the operator
config = OperatorConfig()
