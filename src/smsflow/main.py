"""Main service entry point."""
import argparse
import json
import sys
from typing import Optional, Tuple

from dotenv import load_dotenv

from .config.manager import Config, ConfigManager
from .config.settings import AppSettings
from .gemini.classifier import TransactionClassifier
from .orchestrator.processor import IngestionOrchestrator
from .server.app import create_app
from .store import build_store
from .transactions.dedup import DuplicateGuard
from .utils.exceptions import ConfigError
from .utils.logger import configure_logging, get_logger

logger = get_logger()


def _load_and_validate_config() -> Tuple[Config, AppSettings]:
    """Load settings and environment config; ConfigError is fatal here only."""
    load_dotenv()
    settings = AppSettings.load()
    configure_logging(
        settings.log_level,
        settings.log_dir,
        settings.log_max_file_size_mb,
        settings.log_backup_count
    )

    config_manager = ConfigManager()
    try:
        config = config_manager.require_valid(config_manager.load_config())
        settings = config_manager.apply_overrides(config, settings)
    except ConfigError as e:
        get_logger().critical(f"Invalid configuration: {e}")
        sys.exit(1)

    return config, settings


def build_classifier(config: Config, settings: AppSettings) -> TransactionClassifier:
    return TransactionClassifier.from_api_key(
        config.gemini_api_key,
        model_name=settings.llm_model_name,
        temperature=settings.llm_temperature,
        timeout_seconds=settings.llm_timeout_seconds
    )


def build_orchestrator(config: Config, settings: AppSettings, store=None) -> IngestionOrchestrator:
    """Wire the pipeline components from configuration."""
    store = store or build_store(config, settings)
    return IngestionOrchestrator(
        classifier=build_classifier(config, settings),
        duplicate_guard=DuplicateGuard(store, window_seconds=settings.duplicate_window_seconds),
        store=store,
        confidence_threshold=settings.confidence_threshold
    )


def serve_command() -> None:
    """Start the ingestion HTTP server."""
    config, settings = _load_and_validate_config()
    store = build_store(config, settings)
    orchestrator = build_orchestrator(config, settings, store)
    app = create_app(orchestrator, store, settings.persist_failure_policy)

    log = get_logger()
    log.info(
        f"{settings.app_name} {settings.app_version} starting on "
        f"{settings.server_host}:{settings.server_port} "
        f"(store: {settings.store_backend}, duplicate window: {settings.duplicate_window_seconds}s, "
        f"persist failure policy: {settings.persist_failure_policy})"
    )
    app.run(host=settings.server_host, port=settings.server_port, threaded=True)


def classify_command(text: str, sender: Optional[str]) -> None:
    """Classify one message and print the extracted transaction."""
    config, settings = _load_and_validate_config()
    classifier = build_classifier(config, settings)
    transaction = classifier.classify(text, sender or "Unknown")
    print(json.dumps(transaction.to_dict(), indent=2, ensure_ascii=False))


def check_config_command() -> int:
    """Print which required variables are present; non-zero when strict mode would refuse to start."""
    load_dotenv()
    config_manager = ConfigManager()
    try:
        config = config_manager.load_config()
    except ConfigError as e:
        print(f"✗ {e}")
        return 1

    missing = config_manager.validate_config(config)
    print(f"Environment: {config.environment}")
    if missing:
        print(f"✗ Missing: {', '.join(missing)}")
        return 1 if config.is_production else 0

    print("✓ All required environment variables are present")
    return 0


def main():
    """Main entry point for SMSFlow."""
    parser = argparse.ArgumentParser(description="SMSFlow bank SMS transaction ingestion service")
    subparsers = parser.add_subparsers(dest="command")

    subparsers.add_parser("serve", help="Run the ingestion HTTP server (default)")

    classify_parser = subparsers.add_parser("classify", help="Classify a single SMS and print the result")
    classify_parser.add_argument("text", help="SMS text")
    classify_parser.add_argument("--sender", help="Sender identifier")

    subparsers.add_parser("check-config", help="Validate environment configuration")

    args = parser.parse_args()

    if args.command == "classify":
        classify_command(args.text, args.sender)
        return

    if args.command == "check-config":
        sys.exit(check_config_command())

    try:
        serve_command()
    except KeyboardInterrupt:
        logger.info("Received keyboard interrupt")
    except Exception as e:
        logger.critical(f"Fatal error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
