"""
NoteKeep configuration.

Two sources, both under <project root>/config:

    .env                          secrets (SESSION_SECRET), read by Settings
    settings/application.yaml     name, version, server, CORS, API prefix
    settings/logging.yaml         level, format, handlers
    settings/security.yaml        session cookie/token, bcrypt cost

The project root is the nearest directory holding a ``.project_root``
marker. YAML is validated against the strict schemas in config_schema,
so a typo in a key fails at startup with the file name in the message.
"""

from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel
from pydantic import ValidationError as SchemaError
from pydantic_settings import BaseSettings, SettingsConfigDict

from notekeep.backend.core.config_schema import (
    ApplicationSchema,
    LoggingSchema,
    SecuritySchema,
)

PROJECT_MARKER = ".project_root"
SETTINGS_DIR = Path("config") / "settings"
ENV_FILE = Path("config") / ".env"


def find_project_root() -> Path:
    """
    Locate the directory that holds the project marker.

    The working directory and its parents are tried first, then the
    directories above this package.

    Raises:
        RuntimeError: If no marker is found
    """
    here = Path(__file__).resolve().parent
    for start in (Path.cwd(), here):
        for candidate in (start, *start.parents):
            if (candidate / PROJECT_MARKER).exists():
                return candidate
    raise RuntimeError(f"Project root not found. Ensure {PROJECT_MARKER} file exists.")


def validate_project_root() -> Path:
    """find_project_root() for entry scripts: exits instead of raising."""
    try:
        return find_project_root()
    except RuntimeError as e:
        raise SystemExit(f"Error: {e}") from e


def load_yaml_config(filename: str) -> dict[str, Any]:
    """
    Read one file from config/settings/.

    Returns:
        The parsed mapping; an empty file gives {}

    Raises:
        FileNotFoundError: If the file does not exist
    """
    path = find_project_root() / SETTINGS_DIR / filename
    if not path.is_file():
        raise FileNotFoundError(f"Configuration file not found: {path}")
    return yaml.safe_load(path.read_text(encoding="utf-8")) or {}


class Settings(BaseSettings):
    """Secrets. Read from the environment, then from config/.env."""

    session_secret: str

    model_config = SettingsConfigDict(
        case_sensitive=False,
        env_file_encoding="utf-8",
        extra="ignore",
    )


class AppConfig:
    """
    Typed view over the YAML settings.

    All files are read and validated when the instance is built.

    Raises:
        ValueError: If a file does not match its schema
    """

    sources: dict[str, tuple[str, type[BaseModel]]] = {
        "application": ("application.yaml", ApplicationSchema),
        "logging": ("logging.yaml", LoggingSchema),
        "security": ("security.yaml", SecuritySchema),
    }

    def __init__(self) -> None:
        self._sections = {
            section: self._validate(filename, schema)
            for section, (filename, schema) in self.sources.items()
        }

    @staticmethod
    def _validate(filename: str, schema: type[BaseModel]) -> BaseModel:
        try:
            return schema.model_validate(load_yaml_config(filename))
        except SchemaError as e:
            raise ValueError(f"Invalid configuration in {filename}:\n{e}") from e

    @property
    def application(self) -> ApplicationSchema:
        return self._sections["application"]

    @property
    def logging(self) -> LoggingSchema:
        return self._sections["logging"]

    @property
    def security(self) -> SecuritySchema:
        return self._sections["security"]


@lru_cache
def get_settings() -> Settings:
    """Secrets, loaded once."""
    return Settings(_env_file=str(find_project_root() / ENV_FILE))


@lru_cache
def get_app_config() -> AppConfig:
    """YAML settings, loaded once."""
    return AppConfig()


def get_server_base_url() -> str:
    """http://host:port of the configured API server."""
    server = get_app_config().application.server
    return f"http://{server.host}:{server.port}"
