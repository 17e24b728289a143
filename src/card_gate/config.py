"""
CardGate Configuration
======================

This module handles configuration loading for the validation service.

Configuration Sources (in order of precedence):
    1. Environment variables (highest priority)
    2. config.yaml file
    3. Default values (lowest priority)

Environment Variable Mapping:
    CARDGATE_MIN_DIMENSION          -> thresholds.min_dimension
    CARDGATE_MAX_ANALYSIS_SIZE      -> thresholds.max_analysis_size
    CARDGATE_VARIANCE_FLOOR         -> thresholds.variance_floor
    CARDGATE_SHARPNESS_FLOOR        -> thresholds.sharpness_floor
    CARDGATE_CENTER_VARIANCE_FLOOR  -> thresholds.center_variance_floor
    CARDGATE_MAX_PAYLOAD_BYTES      -> server.max_payload_bytes
    CARDGATE_VALIDATION_TIMEOUT     -> server.validation_timeout_seconds
    CARDGATE_PORT                   -> server.port
    CARDGATE_LOG_LEVEL              -> logging.level
    PORT                            -> server.port (Cloud Run)

Example:
    from card_gate.config import settings

    print(settings.service.name)
    print(settings.thresholds.sharpness_floor)
"""

import os
import logging
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field

from card_gate.models.thresholds import ValidationThresholds


logger = logging.getLogger(__name__)


# =============================================================================
# Configuration Models
# =============================================================================

class ServiceConfig(BaseModel):
    """Service identification configuration."""

    name: str = Field(default="card-gate", description="Service name")
    version: str = Field(default="v0.1.0", description="Service version")


class ServerConfig(BaseModel):
    """HTTP server configuration."""

    host: str = Field(default="0.0.0.0", description="Bind host")
    port: int = Field(default=8002, ge=1, le=65535, description="Bind port")
    max_payload_bytes: int = Field(
        default=10 * 1024 * 1024,
        ge=1024,
        description="Largest accepted decoded image payload",
    )
    validation_timeout_seconds: float = Field(
        default=10.0,
        gt=0,
        description="Upper bound on decode + analysis time per request",
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(default="INFO", description="Log level")
    format: str = Field(default="json", description="Log format: json or text")


class Settings(BaseModel):
    """
    Main settings class for CardGate.

    Loads configuration from YAML file and environment variables.
    Environment variables take precedence over file values.
    """

    service: ServiceConfig = Field(default_factory=ServiceConfig)
    thresholds: ValidationThresholds = Field(default_factory=ValidationThresholds)
    server: ServerConfig = Field(default_factory=ServerConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


# =============================================================================
# Configuration Loading
# =============================================================================

def load_config(config_path: Optional[str] = None) -> Settings:
    """
    Load configuration from YAML file and environment variables.

    Priority (highest to lowest):
        1. Environment variables
        2. YAML config file
        3. Default values

    Args:
        config_path: Path to config.yaml. If None, searches common locations.

    Returns:
        Settings: Loaded configuration
    """
    # Find config file
    if config_path is None:
        if env_path := os.environ.get("CARDGATE_CONFIG"):
            config_path = env_path
        else:
            search_paths = [
                Path("config.yaml"),
                Path("config.yml"),
                Path("/app/config.yaml"),
                Path(__file__).parent.parent.parent / "config.yaml",
            ]
            for path in search_paths:
                if path.exists():
                    config_path = str(path)
                    break

    # Load from YAML if exists
    config_data = {}
    if config_path and Path(config_path).exists():
        logger.info(f"Loading config from: {config_path}")
        with open(config_path, "r") as f:
            config_data = yaml.safe_load(f) or {}
    else:
        logger.warning("No config file found, using defaults and environment variables")

    # Apply environment variable overrides
    _apply_env_overrides(config_data)

    # Build settings object
    settings = Settings.model_validate(config_data)

    return settings


def _apply_env_overrides(config_data: dict) -> None:
    """Apply environment variable overrides to config data."""

    # Threshold overrides
    if env_min := os.environ.get("CARDGATE_MIN_DIMENSION"):
        config_data.setdefault("thresholds", {})["min_dimension"] = int(env_min)
    if env_size := os.environ.get("CARDGATE_MAX_ANALYSIS_SIZE"):
        config_data.setdefault("thresholds", {})["max_analysis_size"] = int(env_size)
    if env_var := os.environ.get("CARDGATE_VARIANCE_FLOOR"):
        config_data.setdefault("thresholds", {})["variance_floor"] = float(env_var)
    if env_sharp := os.environ.get("CARDGATE_SHARPNESS_FLOOR"):
        config_data.setdefault("thresholds", {})["sharpness_floor"] = float(env_sharp)
    if env_center := os.environ.get("CARDGATE_CENTER_VARIANCE_FLOOR"):
        config_data.setdefault("thresholds", {})["center_variance_floor"] = float(env_center)

    # Request limits
    if env_payload := os.environ.get("CARDGATE_MAX_PAYLOAD_BYTES"):
        config_data.setdefault("server", {})["max_payload_bytes"] = int(env_payload)
    if env_timeout := os.environ.get("CARDGATE_VALIDATION_TIMEOUT"):
        config_data.setdefault("server", {})["validation_timeout_seconds"] = float(env_timeout)

    # Server settings (Cloud Run uses PORT env var)
    if env_port := os.environ.get("PORT"):
        config_data.setdefault("server", {})["port"] = int(env_port)
    elif env_port := os.environ.get("CARDGATE_PORT"):
        config_data.setdefault("server", {})["port"] = int(env_port)

    # Logging settings
    if env_log := os.environ.get("CARDGATE_LOG_LEVEL"):
        config_data.setdefault("logging", {})["level"] = env_log


def setup_logging(settings: Settings) -> None:
    """Configure logging based on settings."""
    log_level = getattr(logging, settings.logging.level.upper(), logging.INFO)

    if settings.logging.format == "json":
        log_format = '{"time": "%(asctime)s", "level": "%(levelname)s", "module": "%(name)s", "message": "%(message)s"}'
    else:
        log_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    logging.basicConfig(
        level=log_level,
        format=log_format,
        datefmt="%Y-%m-%dT%H:%M:%S",
    )


# =============================================================================
# Global Settings Instance
# =============================================================================

# Global settings instance - loaded on import
settings = load_config()
setup_logging(settings)
