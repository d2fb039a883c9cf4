"""Runtime configuration resolved once from the process environment."""
import os
from dataclasses import dataclass, replace
from typing import List, Mapping, Optional

from .settings import AppSettings
from ..utils.exceptions import ConfigError
from ..utils.logger import get_logger

logger = get_logger()

PLACEHOLDER_VALUES = {
    "your_gemini_api_key_here",
    "your_sheet_id_here",
    "changeme",
}

REQUIRED_VARS = {
    "development": [
        "GEMINI_API_KEY",
        "EXCEL_SHEET_ID",
        "EXCEL_SHEET_NAME",
        "GOOGLE_CLIENT_EMAIL",
        "GOOGLE_PRIVATE_KEY",
    ],
    "production": [
        "GEMINI_API_KEY",
        "EXCEL_SHEET_ID",
        "EXCEL_SHEET_NAME",
        "GOOGLE_CLIENT_EMAIL",
        "GOOGLE_PRIVATE_KEY",
        "XLSDB_PROD_URL",
    ],
}

# Config attribute backing each required variable
_VAR_TO_FIELD = {
    "GEMINI_API_KEY": "gemini_api_key",
    "EXCEL_SHEET_ID": "sheet_id",
    "EXCEL_SHEET_NAME": "sheet_name",
    "GOOGLE_CLIENT_EMAIL": "client_email",
    "GOOGLE_PRIVATE_KEY": "private_key",
    "XLSDB_PROD_URL": "xlsdb_prod_url",
}


@dataclass
class Config:
    """System configuration."""
    gemini_api_key: Optional[str] = None
    sheet_id: Optional[str] = None
    sheet_name: Optional[str] = None
    client_email: Optional[str] = None
    private_key: Optional[str] = None
    xlsdb_prod_url: Optional[str] = None
    service_account_path: Optional[str] = None
    environment: str = "development"
    # Optional overrides of the YAML settings
    host: Optional[str] = None
    port: Optional[int] = None
    duplicate_window_seconds: Optional[int] = None
    persist_failure_policy: Optional[str] = None
    store_backend: Optional[str] = None

    @property
    def is_production(self) -> bool:
        return self.environment == "production"


class ConfigManager:
    """Loads and validates configuration from environment variables."""

    def __init__(self, environ: Optional[Mapping[str, str]] = None):
        self.environ = os.environ if environ is None else environ

    def load_config(self) -> Config:
        """Build a Config from the environment."""
        env = self.environ
        environment = (env.get("APP_ENV") or env.get("NODE_ENV") or "development").lower()

        try:
            return Config(
                gemini_api_key=self._get(env, "GEMINI_API_KEY"),
                sheet_id=self._get(env, "EXCEL_SHEET_ID"),
                sheet_name=self._get(env, "EXCEL_SHEET_NAME"),
                client_email=self._get(env, "GOOGLE_CLIENT_EMAIL"),
                private_key=self._unescape_key(self._get(env, "GOOGLE_PRIVATE_KEY")),
                xlsdb_prod_url=self._get(env, "XLSDB_PROD_URL"),
                service_account_path=self._get(env, "GOOGLE_SERVICE_ACCOUNT_FILE"),
                environment=environment,
                host=self._get(env, "HOST"),
                port=self._get_int(env, "PORT"),
                duplicate_window_seconds=self._get_int(env, "DUPLICATE_WINDOW_SECONDS"),
                persist_failure_policy=self._get(env, "PERSIST_FAILURE_POLICY"),
                store_backend=self._get(env, "STORE_BACKEND")
            )
        except ValueError as e:
            raise ConfigError(f"Invalid environment configuration: {e}")

    def validate_config(self, config: Config) -> List[str]:
        """Return the names of required variables that are missing."""
        required = REQUIRED_VARS["production" if config.is_production else "development"]
        return [name for name in required if not getattr(config, _VAR_TO_FIELD[name])]

    def require_valid(self, config: Config) -> Config:
        """Validate config; raise ConfigError in strict (production) mode."""
        logger.info(f"Validating environment variables for: {config.environment}")
        missing = self.validate_config(config)

        if not missing:
            logger.info("All required environment variables are present")
            return config

        message = f"Missing required environment variables: {', '.join(missing)}"
        if config.is_production:
            raise ConfigError(message, missing=missing)

        logger.warning(message)
        logger.warning("App may not function correctly without these variables")
        return config

    @staticmethod
    def apply_overrides(config: Config, settings: AppSettings) -> AppSettings:
        """Overlay environment overrides onto the YAML settings."""
        overrides = {}
        if config.host:
            overrides["server_host"] = config.host
        if config.port is not None:
            overrides["server_port"] = config.port
        if config.duplicate_window_seconds is not None:
            overrides["duplicate_window_seconds"] = config.duplicate_window_seconds
        if config.persist_failure_policy:
            overrides["persist_failure_policy"] = config.persist_failure_policy.lower()
        if config.store_backend:
            overrides["store_backend"] = config.store_backend.lower()

        if not overrides:
            return settings

        merged = replace(settings, **overrides)
        try:
            merged.validate()
        except ValueError as e:
            raise ConfigError(f"Invalid configuration override: {e}")
        return merged

    @staticmethod
    def _get(env: Mapping[str, str], name: str) -> Optional[str]:
        value = env.get(name)
        if value is None:
            return None
        value = value.strip()
        if not value or value.lower() in PLACEHOLDER_VALUES:
            return None
        return value

    @classmethod
    def _get_int(cls, env: Mapping[str, str], name: str) -> Optional[int]:
        value = cls._get(env, name)
        if value is None:
            return None
        try:
            return int(value)
        except ValueError:
            raise ValueError(f"{name} must be an integer, got {value!r}")

    @staticmethod
    def _unescape_key(private_key: Optional[str]) -> Optional[str]:
        """Private keys pasted into env files usually carry literal \\n sequences."""
        if private_key is None:
            return None
        return private_key.replace("\\n", "\n")
