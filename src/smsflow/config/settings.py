"""Application settings loader from YAML configuration."""
import os
import yaml
from pathlib import Path
from typing import Optional
from dataclasses import dataclass

DEFAULT_SETTINGS_PATH = Path(__file__).parent / "defaults.yaml"

PERSIST_FAILURE_POLICIES = ("report", "acknowledge")
STORE_BACKENDS = ("xlsdb", "sheets")


@dataclass
class AppSettings:
    """Application-wide settings loaded from a settings YAML file."""

    # App info
    app_name: str
    app_version: str

    # Logging
    log_level: str
    log_dir: str
    log_max_file_size_mb: int
    log_backup_count: int

    # LLM
    llm_model_name: str
    llm_temperature: float
    llm_timeout_seconds: int

    # Processing
    confidence_threshold: float
    duplicate_window_seconds: int
    persist_failure_policy: str

    # Store
    store_backend: str
    store_dev_url: str
    store_prod_url: str
    store_request_timeout_seconds: int

    # Server
    server_host: str
    server_port: int

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> "AppSettings":
        """Load settings from YAML file."""
        if config_path is None:
            env_path = os.getenv("SMSFLOW_SETTINGS")
            config_path = Path(env_path) if env_path else DEFAULT_SETTINGS_PATH

        if not config_path.exists():
            raise FileNotFoundError(f"Settings file not found: {config_path}")

        with open(config_path, "r", encoding="utf-8") as f:
            config = yaml.safe_load(f)

        settings = cls(
            app_name=config["app"]["name"],
            app_version=str(config["app"]["version"]),
            log_level=config["logging"]["level"],
            log_dir=config["logging"]["dir"],
            log_max_file_size_mb=config["logging"]["max_file_size_mb"],
            log_backup_count=config["logging"]["backup_count"],
            llm_model_name=config["llm"]["model_name"],
            llm_temperature=float(config["llm"]["temperature"]),
            llm_timeout_seconds=config["llm"]["timeout_seconds"],
            confidence_threshold=float(config["processing"]["confidence_threshold"]),
            duplicate_window_seconds=config["processing"]["duplicate_window_seconds"],
            persist_failure_policy=config["processing"]["persist_failure_policy"],
            store_backend=config["store"]["backend"],
            store_dev_url=config["store"]["dev_url"],
            store_prod_url=config["store"]["prod_url"],
            store_request_timeout_seconds=config["store"]["request_timeout_seconds"],
            server_host=config["server"]["host"],
            server_port=int(config["server"]["port"])
        )
        settings.validate()
        return settings

    def validate(self) -> None:
        """Reject settings values the pipeline cannot run with."""
        if self.persist_failure_policy not in PERSIST_FAILURE_POLICIES:
            raise ValueError(
                f"persist_failure_policy must be one of {PERSIST_FAILURE_POLICIES}, "
                f"got {self.persist_failure_policy!r}"
            )
        if self.store_backend not in STORE_BACKENDS:
            raise ValueError(
                f"store backend must be one of {STORE_BACKENDS}, got {self.store_backend!r}"
            )
        if self.duplicate_window_seconds < 0:
            raise ValueError("duplicate_window_seconds must not be negative")
        if not 0 <= self.confidence_threshold <= 1:
            raise ValueError("confidence_threshold must be between 0 and 1")


# Global settings instance
_settings: AppSettings = None


def get_settings() -> AppSettings:
    """Get or create global settings instance."""
    global _settings
    if _settings is None:
        _settings = AppSettings.load()
    return _settings
