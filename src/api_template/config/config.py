import ipaddress
import os
from pathlib import Path
from typing import List, Literal, Optional, Union

import yaml
from pydantic import BaseModel, Field, field_validator

from api_template.config.constants import PROJECT_ROOT


# =============================================================================
#   LogConfig
# =============================================================================
class LogConfig(BaseModel):
    """Logging configuration."""

    log_level: str
    file_log_level: str
    file_log_dir: str
    file_log_max_files: int
    file_log_file_size_mb: int

    @field_validator("log_level", "file_log_level")
    def check_log_level(cls, v: str) -> str:
        valid = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in valid:
            raise ValueError(f"Unrecognized log level: {v}")
        return v.upper()

    @property
    def resolved_log_dir(self) -> Path:
        """Return absolute path to the log directory, creating it if needed."""
        p = Path(self.file_log_dir)
        if not p.is_absolute():
            p = (PROJECT_ROOT / p).resolve()
        p.mkdir(parents=True, exist_ok=True)
        return p


# =============================================================================
#   ServerConfig
# =============================================================================
class ServerConfig(BaseModel):
    """HTTP server configuration."""

    host: str
    port: int = Field(gt=0, le=65535)
    https_redirect: bool = False

    @field_validator("host")
    def check_host(cls, v: str) -> str:
        try:
            ipaddress.ip_address(v)
        except ValueError as exc:
            raise ValueError("host must be a valid IP address") from exc
        return v


# =============================================================================
#   JwtConfig
# =============================================================================
class JwtConfig(BaseModel):
    """JWT bearer validation settings. The secret itself lives in the environment."""

    issuer: str
    audience: str
    secret_key_env_var: str = "JWT_SECRET_KEY"
    algorithm: str = "HS256"
    validate_issuer: bool = True
    validate_audience: bool = True
    validate_lifetime: bool = True
    # 0 removes the grace period on token expiry
    clock_skew_seconds: int = Field(default=0, ge=0)
    access_token_minutes: int = Field(default=60, gt=0)

    @field_validator("issuer", "audience", "secret_key_env_var")
    def check_not_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("JWT issuer, audience and secret variable name cannot be empty")
        return v

    @property
    def secret_key(self) -> Optional[str]:
        """Signing secret read from the configured environment variable."""
        return os.environ.get(self.secret_key_env_var) or None


# =============================================================================
#   DatabaseConfig
# =============================================================================
class DatabaseConfig(BaseModel):
    """Database connection-pool configuration (non-sensitive parts)."""

    connection_string_secret_name: str
    pool_min_size: int = Field(default=1, ge=1)
    pool_max_size: int = Field(default=5, ge=1)

    @property
    def connection_string(self) -> Optional[str]:
        """Connection string read from the environment variable named by the secret name."""
        return os.environ.get(self.connection_string_secret_name) or None


# =============================================================================
#   CorsConfig
# =============================================================================
class CorsConfig(BaseModel):
    """CORS policy. Defaults allow any origin, header and method."""

    # Label for logs only; a single policy is applied to every route.
    policy_name: str = "allow_all"
    allow_origins: List[str] = ["*"]
    allow_methods: List[str] = ["*"]
    allow_headers: List[str] = ["*"]


# =============================================================================
#   SwaggerConfig
# =============================================================================
class SwaggerConfig(BaseModel):
    """OpenAPI document and Swagger UI settings."""

    # Swagger is always on in development; this forces it on elsewhere.
    enabled: bool = False
    title: str = "API Template"
    description: str = "Versioned REST API."


# =============================================================================
#   ErrorsConfig
# =============================================================================
class ErrorsConfig(BaseModel):
    """Error envelope behaviour."""

    expose_exception_messages: bool = True


# =============================================================================
#   Config  (root)
# =============================================================================
class Config(BaseModel):
    """Root application configuration loaded from config.yml."""

    environment: Literal["development", "staging", "production"] = "development"
    server: ServerConfig
    logging: LogConfig
    jwt: JwtConfig
    database: DatabaseConfig
    cors: CorsConfig = CorsConfig()
    swagger: SwaggerConfig = SwaggerConfig()
    errors: ErrorsConfig = ErrorsConfig()

    @property
    def is_development(self) -> bool:
        return self.environment == "development"

    @classmethod
    def load_from_file(cls, file_path: Union[str, Path]) -> "Config":
        """Load and validate configuration from a YAML file.

        Args:
            file_path: Path to config.yml.

        Returns:
            Validated Config instance.
        """
        file_path = Path(file_path)

        if not file_path.exists() or not file_path.is_file():
            raise FileNotFoundError(f"Config file not found: {file_path}")

        with open(file_path, "r") as fh:
            raw = yaml.safe_load(fh)

        return cls(**raw)
