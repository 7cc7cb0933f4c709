"""
Configuration management using Pydantic Settings
"""
from functools import lru_cache
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from postboard.core.exceptions import ConfigurationError

# config.py is at: postboard/core/config.py -> project root is two levels up
_current_file = Path(__file__).resolve()
PROJECT_ROOT = _current_file.parent.parent.parent
ENV_FILE = PROJECT_ROOT / ".env"
if ENV_FILE.exists():
    load_dotenv(ENV_FILE, override=True)


BACKEND_GRAPHQL = "graphql"
BACKEND_MEMORY = "memory"


class Settings(BaseSettings):
    """Application settings"""

    # Application
    app_name: str = "Postboard"
    app_env: str = Field(default="development", description="Application environment")
    log_level: str = Field(default="INFO", description="Logging level")
    api_host: str = Field(default="0.0.0.0", description="API host")
    api_port: int = Field(default=8000, ge=1, le=65535, description="API port")
    allowed_origins: str = Field(
        default="http://localhost:8000",
        description="Allowed CORS origins (comma-separated)"
    )

    # Logging
    log_uvicorn_access: bool = Field(default=False, description="Enable Uvicorn access logging")
    log_module_levels: Optional[str] = Field(
        default=None,
        description='Module-specific log levels (JSON string, e.g., {"postboard.services": "DEBUG"})'
    )
    log_format: str = Field(
        default="json",
        description="Log format: 'json' for structured logging, 'text' for plain text"
    )
    log_file_enabled: bool = Field(default=False, description="Enable file logging")
    log_file_path: str = Field(
        default="logs/postboard.log",
        description="Path to log file (relative to project root)"
    )
    log_file_rotation: str = Field(
        default="midnight",
        description="Log file rotation: 'midnight' or 'W0'..'W6' (weekly)"
    )
    log_file_retention: int = Field(default=14, ge=1, description="Number of rotated log files to keep")
    log_sensitive_data: bool = Field(
        default=False,
        description="Enable logging of sensitive data (tokens, api keys) - NOT RECOMMENDED"
    )

    # Post service
    post_service_backend: str = Field(
        default=BACKEND_MEMORY,
        description="Post service backend: 'graphql' (hosted) or 'memory' (in-process)"
    )
    graphql_endpoint: Optional[str] = Field(default=None, description="Hosted GraphQL API URL")
    graphql_api_key: Optional[str] = Field(default=None, description="API key used for public reads")
    graphql_timeout_seconds: float = Field(default=10.0, gt=0, description="GraphQL request timeout")
    graphql_page_size: int = Field(default=100, ge=1, le=1000, description="listPosts page size")

    # Identity provider (hosted OAuth2 / OIDC)
    auth_domain: Optional[str] = Field(default=None, description="Hosted auth domain, e.g. https://x.auth.region.amazoncognito.com")
    auth_client_id: Optional[str] = Field(default=None, description="OAuth2 client id")
    auth_client_secret: Optional[str] = Field(default=None, description="OAuth2 client secret (confidential clients)")
    auth_redirect_uri: str = Field(
        default="http://localhost:8000/auth/callback",
        description="Redirect URI registered with the hosted UI"
    )
    auth_scopes: str = Field(default="openid profile", description="Scopes requested from the hosted UI")
    auth_timeout_seconds: float = Field(default=10.0, gt=0, description="Identity provider request timeout")

    # Session cookies
    session_cookie_secure: bool = Field(default=False, description="Mark session cookies as Secure")
    session_max_age_seconds: int = Field(default=60 * 60, ge=60, description="Session cookie lifetime")

    @field_validator("post_service_backend")
    @classmethod
    def validate_backend(cls, v: str) -> str:
        """Normalize and check backend name"""
        v = v.strip().lower()
        if v not in (BACKEND_GRAPHQL, BACKEND_MEMORY):
            raise ValueError(f"post_service_backend must be '{BACKEND_GRAPHQL}' or '{BACKEND_MEMORY}'")
        return v

    @property
    def uses_hosted_backend(self) -> bool:
        return self.post_service_backend == BACKEND_GRAPHQL

    @property
    def allowed_origins_list(self) -> List[str]:
        """Parse CORS origins from comma-separated string"""
        return [origin.strip() for origin in self.allowed_origins.split(",") if origin.strip()]

    def require_hosted_settings(self) -> None:
        """Raise ConfigurationError if the hosted backend is selected but not configured"""
        if not self.uses_hosted_backend:
            return
        missing = [
            name for name in ("graphql_endpoint", "graphql_api_key", "auth_domain", "auth_client_id")
            if not getattr(self, name)
        ]
        if missing:
            raise ConfigurationError(
                f"Hosted backend selected but not configured: {', '.join(missing)}"
            )

    model_config = SettingsConfigDict(
        env_file=str(ENV_FILE) if ENV_FILE.exists() else None,
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        env_ignore_empty=True
    )


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()
