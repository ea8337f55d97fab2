"""
Schemas for the files in config/settings/.

One top-level model per file (ApplicationSchema, LoggingSchema,
SecuritySchema). Unknown keys are rejected, so a misspelt setting
fails loudly at startup.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class _StrictBase(BaseModel):
    model_config = ConfigDict(extra="forbid")


# application.yaml


class ServerSchema(_StrictBase):
    host: str
    port: int = Field(ge=1, le=65535)


class CorsSchema(_StrictBase):
    origins: list[str] = Field(description="Browser origins allowed to send the session cookie")


class ApplicationSchema(_StrictBase):
    name: str
    version: str
    description: str
    environment: Literal["development", "test", "production"]
    debug: bool
    api_prefix: str = Field(pattern=r"^/")
    docs_enabled: bool
    server: ServerSchema
    cors: CorsSchema


# logging.yaml


class ConsoleHandlerSchema(_StrictBase):
    enabled: bool


class FileHandlerSchema(_StrictBase):
    enabled: bool
    path: str = Field(description="JSON lines file, relative to the project root")
    max_bytes: int = Field(gt=0)
    backup_count: int = Field(ge=0)


class HandlersSchema(_StrictBase):
    console: ConsoleHandlerSchema
    file: FileHandlerSchema


class LoggingSchema(_StrictBase):
    level: LogLevel
    format: Literal["json", "console"]
    handlers: HandlersSchema


# security.yaml


class SessionSchema(_StrictBase):
    """Session cookie and the signed token inside it."""

    cookie_name: str
    ttl_hours: int = Field(gt=0, description="Lifetime fixed at login; not extended by use")
    secure_cookie: bool
    same_site: Literal["lax", "strict", "none"]
    algorithm: Literal["HS256", "HS384", "HS512"]
    audience: str


class PasswordSchema(_StrictBase):
    """bcrypt cost factor and the minimum password length."""

    bcrypt_rounds: int = Field(ge=4, le=31)
    min_length: int = Field(ge=1)


class SecuritySchema(_StrictBase):
    session: SessionSchema
    passwords: PasswordSchema
