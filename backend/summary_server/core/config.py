import base64
import json
import logging
from typing import Any, Dict, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

VALID_LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


class InvalidServerConfig(ValueError):
    """Raised when per-session configuration cannot be parsed or validated."""

    def __init__(self, message: str, errors: Optional[list] = None):
        super().__init__(message)
        self.errors = errors or []


class ServerConfig(BaseModel):
    """
    Per-session configuration of the MCP server.

    Supplied once when a session starts and applied to every call in it.
    includeGitHistory and debug are only ever described to the assistant
    inside the instruction text; no server logic branches on them.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    output_directory: Optional[str] = Field(
        None,
        alias="outputDirectory",
        description="Directory path for saving codebase_summary.md. Defaults to workspace root.",
    )
    include_git_history: bool = Field(
        True,
        alias="includeGitHistory",
        description="Whether to analyze git history for recent changes. Defaults to true.",
    )
    debug: bool = Field(False, description="Enable debug logging")


class Settings(BaseSettings):
    """
    Process-wide settings managed by Pydantic.
    Reads configuration from environment variables and .env files.
    """
    PROJECT_NAME: str = "System Summary Instructions"
    API_V1_STR: str = "/api"

    # Reported to MCP clients in serverInfo
    SERVER_NAME: str = "System Summary Instructions"
    SERVER_VERSION: str = "1.0.0"

    HOST: str = "0.0.0.0"
    PORT: int = 8081

    # Public URL for the legacy SSE endpoint event (e.g. https://xyz.ngrok-free.app)
    PUBLIC_URL: Optional[str] = None

    LOG_LEVEL: str = "INFO"

    # Seconds between SSE keep-alive comments
    SSE_KEEPALIVE_SECONDS: float = 15.0

    # Streamable HTTP sessions: idle ones expire, the oldest is evicted past the cap
    MAX_SESSIONS: int = 1000
    SESSION_IDLE_TTL_SECONDS: float = 3600.0

    # Defaults for ServerConfig when a session does not supply its own
    OUTPUT_DIRECTORY: Optional[str] = None
    INCLUDE_GIT_HISTORY: bool = True
    DEBUG: bool = False

    @field_validator("LOG_LEVEL")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in VALID_LOG_LEVELS:
            raise ValueError(f"LOG_LEVEL must be one of {', '.join(VALID_LOG_LEVELS)}, got: {v}")
        return level

    def default_server_config(self) -> ServerConfig:
        return ServerConfig(
            output_directory=self.OUTPUT_DIRECTORY,
            include_git_history=self.INCLUDE_GIT_HISTORY,
            debug=self.DEBUG,
        )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore"
    )


def _decode_config_param(value: str) -> Dict[str, Any]:
    # Hosts send either standard or url-safe base64, often unpadded; an
    # unescaped "+" in the query string arrives as a space
    normalized = value.replace(" ", "+").replace("-", "+").replace("_", "/")
    normalized += "=" * (-len(normalized) % 4)
    try:
        decoded = json.loads(base64.b64decode(normalized, validate=True).decode("utf-8"))
    except ValueError as e:
        raise InvalidServerConfig(f"Could not decode 'config' parameter: {e}") from e
    if not isinstance(decoded, dict):
        raise InvalidServerConfig("'config' parameter must encode a JSON object")
    return decoded


def _to_aliases(values: Dict[str, Any]) -> Dict[str, Any]:
    # snake_case keys are accepted too; the camelCase spelling wins if both are given
    normalized = dict(values)
    for name, field in ServerConfig.model_fields.items():
        key = field.alias or name
        if key != name and name in normalized:
            value = normalized.pop(name)
            normalized.setdefault(key, value)
    return normalized


def resolve_server_config(
    query_params: Mapping[str, str],
    defaults: Optional[ServerConfig] = None,
) -> ServerConfig:
    """
    Layer session configuration from URL query parameters over the defaults.

    Accepts flat parameters (?outputDirectory=./docs&debug=true) and a
    base64-encoded JSON object in ?config=. Flat parameters win over the
    encoded object.

    Raises:
        InvalidServerConfig: If the encoded object is malformed or a value
            fails validation.
    """
    base = defaults if defaults is not None else settings.default_server_config()
    merged: Dict[str, Any] = base.model_dump(by_alias=True)

    if "config" in query_params:
        merged.update(_to_aliases(_decode_config_param(query_params["config"])))

    for name, field in ServerConfig.model_fields.items():
        key = field.alias or name
        if key in query_params:
            merged[key] = query_params[key]

    try:
        return ServerConfig.model_validate(merged)
    except ValidationError as e:
        logger.warning("Rejected session configuration: %s", e.errors())
        raise InvalidServerConfig(
            "Invalid server configuration",
            errors=e.errors(include_url=False, include_context=False),
        ) from e


settings = Settings()
