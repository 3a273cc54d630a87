"""circulardeps CLI – command-line interface built with Typer and Rich.

- :data:`app` – The main Typer application
- :class:`CircularDepsConfig` – Configuration model
- :func:`setup_logging` – Logging infrastructure
- :class:`CLIError` – Structured error handling
"""

from circulardeps.cli.app import app
from circulardeps.cli.config import CircularDepsConfig, load_config
from circulardeps.cli.errors import CLIError, ConfigError, error_handler
from circulardeps.cli.logging_setup import setup_logging

__all__ = [
    "CLIError",
    "CircularDepsConfig",
    "ConfigError",
    "app",
    "error_handler",
    "load_config",
    "setup_logging",
]
