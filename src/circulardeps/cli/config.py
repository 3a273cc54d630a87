"""circulardeps CLI configuration management.

Loads configuration from TOML files with environment variable overrides
(``CIRCULARDEPS_`` prefix).  Uses :mod:`tomllib` on Python 3.11+.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, ValidationError

from circulardeps.cli.errors import ConfigError

# ---------------------------------------------------------------------------
# Default paths
# ---------------------------------------------------------------------------

DEFAULT_CONFIG_DIR = ".circulardeps"
DEFAULT_CONFIG_FILE = "config.toml"
ENV_PREFIX = "CIRCULARDEPS_"

# ---------------------------------------------------------------------------
# Configuration model
# ---------------------------------------------------------------------------


class CircularDepsConfig(BaseModel):
    """Application configuration with sensible defaults.

    All fields can be overridden via environment variables with the
    ``CIRCULARDEPS_`` prefix.  For example ``CIRCULARDEPS_FAIL_ON_ERROR=true``.
    """

    project_dir: Path = Field(default_factory=Path.cwd)
    exclude: Optional[str] = None
    include: Optional[str] = None
    allow_async_cycles: bool = False
    fail_on_error: bool = False
    cwd: Optional[Path] = None
    log_level: str = "INFO"
    log_file: Optional[Path] = None

    model_config = {"extra": "ignore"}

    @property
    def report_cwd(self) -> Path:
        """Directory reported paths are relative to (defaults to the project)."""
        return self.cwd or self.project_dir


# ---------------------------------------------------------------------------
# Loader helpers
# ---------------------------------------------------------------------------


def _apply_env_overrides(data: dict) -> dict:
    """Apply CIRCULARDEPS_ environment variable overrides to *data*."""
    field_names = set(CircularDepsConfig.model_fields.keys())
    for key, value in os.environ.items():
        if key.startswith(ENV_PREFIX):
            field = key[len(ENV_PREFIX):].lower()
            if field in field_names:
                data[field] = value
    return data


def load_config(
    config_path: Path | None = None, project_dir: Path | None = None
) -> CircularDepsConfig:
    """Load configuration from a TOML file with env-var overrides.

    Parameters
    ----------
    config_path:
        Explicit path to a TOML file.  When *None*, looks for
        ``<project_dir>/.circulardeps/config.toml``.
    project_dir:
        Project root directory.  Defaults to :func:`Path.cwd`.

    Raises
    ------
    ConfigError
        If an explicit *config_path* does not exist, the TOML is invalid,
        or a value fails validation.
    """
    project = project_dir or Path.cwd()
    path = config_path or (project / DEFAULT_CONFIG_DIR / DEFAULT_CONFIG_FILE)

    if config_path is not None and not path.exists():
        raise ConfigError(f"Config file not found: {path}")

    data: dict = {}
    if path.exists():
        try:
            with open(path, "rb") as fh:
                data = tomllib.load(fh)
        except tomllib.TOMLDecodeError as exc:
            raise ConfigError(f"Invalid TOML in {path}: {exc}") from exc

    # Flatten nested TOML sections if present
    flat: dict = {}
    for k, v in data.items():
        if isinstance(v, dict):
            flat.update(v)
        else:
            flat[k] = v

    flat.setdefault("project_dir", str(project))

    flat = _apply_env_overrides(flat)
    try:
        return CircularDepsConfig(**flat)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc


def default_config_toml() -> str:
    """Return default configuration as a TOML string."""
    return """\
# circulardeps configuration

[detection]
# exclude = "node_modules"
# include = "src/"
allow_async_cycles = false
fail_on_error = false

[logging]
log_level = "INFO"
"""
