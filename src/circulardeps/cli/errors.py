"""circulardeps CLI error handling.

Exit codes:
    0 - Success (cycles reported as warnings still count as success)
    1 - General error, or cycles found with ``--fail-on-error``
    2 - Configuration or manifest error
"""

from __future__ import annotations

import sys
from contextlib import contextmanager
from typing import Generator

from rich.console import Console
from rich.panel import Panel

# ---------------------------------------------------------------------------
# Exit codes
# ---------------------------------------------------------------------------

EXIT_SUCCESS = 0
EXIT_GENERAL_ERROR = 1
EXIT_CONFIG_ERROR = 2

# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class CLIError(Exception):
    """Base exception for CLI errors.

    Parameters
    ----------
    message:
        Human-readable error description.
    exit_code:
        Process exit code (default :data:`EXIT_GENERAL_ERROR`).
    """

    def __init__(self, message: str, exit_code: int = EXIT_GENERAL_ERROR) -> None:
        super().__init__(message)
        self.message = message
        self.exit_code = exit_code


class ConfigError(CLIError):
    """Raised when configuration or the module manifest cannot be loaded."""

    def __init__(self, message: str) -> None:
        super().__init__(message, exit_code=EXIT_CONFIG_ERROR)


# ---------------------------------------------------------------------------
# Error handler context manager
# ---------------------------------------------------------------------------

_stderr = Console(stderr=True)


@contextmanager
def error_handler(console: Console | None = None) -> Generator[None, None, None]:
    """Context manager that catches exceptions and prints a Rich error panel.

    Raises
    ------
    SystemExit
        Always raised when an exception is caught, with the appropriate
        exit code.
    """
    out = console or _stderr
    try:
        yield
    except CLIError as exc:
        out.print(
            Panel(
                exc.message,
                title="[red]Error[/red]",
                border_style="red",
            )
        )
        sys.exit(exc.exit_code)
    except KeyboardInterrupt:
        out.print("\n[yellow]Interrupted.[/yellow]")
        sys.exit(130)
    except Exception as exc:
        out.print(
            Panel(
                str(exc),
                title="[red]Unexpected Error[/red]",
                border_style="red",
            )
        )
        sys.exit(EXIT_GENERAL_ERROR)
