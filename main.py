"""Web Server Entry Point.

Thin wrapper that loads configuration, sets up logging and serves the
earthquake map with uvicorn.
"""

import logging
import os
import sys

import uvicorn

from quakemap.api import create_app
from quakemap.core.config import Config, validate_config
from quakemap.shell.config_loader import load_config, load_config_from_env


logger = logging.getLogger(__name__)


def _get_config() -> Config:
    """Load configuration from file or environment."""
    config_path = os.environ.get("CONFIG_PATH")

    if config_path:
        return load_config(config_path)
    elif os.path.exists("config/config.yaml"):
        return load_config()
    else:
        # Simple env-based config
        return load_config_from_env()


def _configure_logging(level_name: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level_name.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def main() -> int:
    _configure_logging(os.environ.get("LOG_LEVEL", "INFO"))

    config = _get_config()
    logging.getLogger().setLevel(getattr(logging, config.log_level, logging.INFO))

    result = validate_config(config)
    for warning in result.warnings:
        logger.warning("Config %s: %s", warning.field, warning.message)
    if not result.valid:
        for error in result.critical_errors:
            logger.error("Config %s: %s", error.field, error.message)
        return 1

    app = create_app(config)
    uvicorn.run(app, host=config.host, port=config.port, log_config=None)
    return 0


if __name__ == "__main__":
    sys.exit(main())
