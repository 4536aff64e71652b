"""
Registry configuration management.

This module handles loading and accessing configuration from multiple sources
with a clear priority order:

    1. Environment variables (highest priority) - for containerized deployments
    2. Config file (config/server.ini) - for static deployments
    3. Built-in defaults (lowest priority) - sensible fallbacks

Configuration is loaded once at module import time and cached. The
RegistryConfig dataclass provides typed access to all settings.

Usage:
    from star_registry.config import config

    print(config.server.port)
    print(config.registry.challenge_window_seconds)

Environment Variable Mapping:
    STAR_HOST                      -> server.host
    STAR_PORT                      -> server.port
    STAR_CORS_ORIGINS              -> security.cors_origins
    STAR_DOCS_ENABLED              -> security.docs_enabled
    STAR_LOG_LEVEL                 -> logging.level
    STAR_LOG_FORMAT                -> logging.format
    STAR_CHALLENGE_WINDOW_SECONDS  -> registry.challenge_window_seconds
"""

import configparser
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal

# =============================================================================
# PATH CONFIGURATION
# =============================================================================

# Project root directory (contains src/, config/)
PROJECT_ROOT = Path(__file__).parent.parent.parent

CONFIG_DIR = PROJECT_ROOT / "config"
CONFIG_FILE = CONFIG_DIR / "server.ini"
CONFIG_EXAMPLE = CONFIG_DIR / "server.example.ini"

# Challenges older than this are rejected (seconds).
DEFAULT_CHALLENGE_WINDOW_SECONDS = 300


# =============================================================================
# CONFIGURATION DATACLASSES
# =============================================================================


@dataclass
class ServerSettings:
    """Network server configuration."""

    host: str = "127.0.0.1"
    port: int = 8000


@dataclass
class SecuritySettings:
    """HTTP-facing security configuration."""

    cors_origins: list[str] = field(default_factory=lambda: ["*"])
    docs_enabled: bool = True


@dataclass
class LoggingSettings:
    """Logging configuration."""

    level: str = "INFO"
    format: Literal["simple", "detailed", "json"] = "detailed"


@dataclass
class RegistrySettings:
    """Ownership challenge settings."""

    challenge_window_seconds: int = DEFAULT_CHALLENGE_WINDOW_SECONDS


@dataclass
class RegistryConfig:
    """
    Complete registry configuration.

    Aggregates all settings sections. Access via the module-level `config`
    singleton.
    """

    server: ServerSettings = field(default_factory=ServerSettings)
    security: SecuritySettings = field(default_factory=SecuritySettings)
    logging: LoggingSettings = field(default_factory=LoggingSettings)
    registry: RegistrySettings = field(default_factory=RegistrySettings)


# =============================================================================
# CONFIGURATION LOADING
# =============================================================================


def _parse_bool(value: str) -> bool:
    """Parse a string value to boolean."""
    return value.lower() in ("true", "yes", "1", "on", "enabled")


def _parse_list(value: str) -> list[str]:
    """Parse a comma-separated string to list, stripping whitespace."""
    if not value or value.strip() == "":
        return []
    return [item.strip() for item in value.split(",") if item.strip()]


def _load_from_ini(parser: configparser.ConfigParser, cfg: RegistryConfig) -> None:
    """Load configuration from parsed INI file into RegistryConfig."""
    if parser.has_section("server"):
        if parser.has_option("server", "host"):
            cfg.server.host = parser.get("server", "host")
        if parser.has_option("server", "port"):
            cfg.server.port = parser.getint("server", "port")

    if parser.has_section("security"):
        if parser.has_option("security", "cors_origins"):
            cfg.security.cors_origins = _parse_list(parser.get("security", "cors_origins"))
        if parser.has_option("security", "docs_enabled"):
            cfg.security.docs_enabled = _parse_bool(parser.get("security", "docs_enabled"))

    if parser.has_section("logging"):
        if parser.has_option("logging", "level"):
            cfg.logging.level = parser.get("logging", "level").upper()
        if parser.has_option("logging", "format"):
            val = parser.get("logging", "format").lower()
            if val in ("simple", "detailed", "json"):
                cfg.logging.format = val  # type: ignore[assignment]

    if parser.has_section("registry"):
        if parser.has_option("registry", "challenge_window_seconds"):
            cfg.registry.challenge_window_seconds = parser.getint(
                "registry", "challenge_window_seconds"
            )


def _apply_env_overrides(cfg: RegistryConfig) -> None:
    """Apply environment variable overrides to configuration."""
    if env_host := os.getenv("STAR_HOST"):
        cfg.server.host = env_host
    if env_port := os.getenv("STAR_PORT"):
        cfg.server.port = int(env_port)

    if env_cors := os.getenv("STAR_CORS_ORIGINS"):
        cfg.security.cors_origins = _parse_list(env_cors)
    if env_docs := os.getenv("STAR_DOCS_ENABLED"):
        cfg.security.docs_enabled = _parse_bool(env_docs)

    if env_log := os.getenv("STAR_LOG_LEVEL"):
        cfg.logging.level = env_log.upper()
    if env_format := os.getenv("STAR_LOG_FORMAT"):
        if env_format.lower() in ("simple", "detailed", "json"):
            cfg.logging.format = env_format.lower()  # type: ignore[assignment]

    if env_window := os.getenv("STAR_CHALLENGE_WINDOW_SECONDS"):
        cfg.registry.challenge_window_seconds = int(env_window)


def load_config() -> RegistryConfig:
    """
    Load configuration from all sources with proper priority.

    Priority (highest wins):
        1. Environment variables
        2. config/server.ini
        3. config/server.example.ini (fallback for development)
        4. Built-in defaults

    Returns:
        RegistryConfig: Fully populated configuration object.
    """
    cfg = RegistryConfig()

    config_file = None
    if CONFIG_FILE.exists():
        config_file = CONFIG_FILE
    elif CONFIG_EXAMPLE.exists():
        config_file = CONFIG_EXAMPLE

    if config_file:
        parser = configparser.ConfigParser()
        parser.read(config_file)
        _load_from_ini(parser, cfg)

    _apply_env_overrides(cfg)

    return cfg


def reload_config() -> "RegistryConfig":
    """
    Reload configuration from disk and environment.

    This updates the module-level `config` singleton. A running server keeps
    the registry it was started with.

    Returns:
        RegistryConfig: The newly loaded configuration.
    """
    global config
    config = load_config()
    return config


# =============================================================================
# MODULE-LEVEL SINGLETON
# =============================================================================

config = load_config()


# =============================================================================
# UTILITY FUNCTIONS
# =============================================================================


def get_config_status() -> dict:
    """
    Get configuration status for diagnostics.

    Returns a dictionary with configuration source information, used by the
    ``config`` CLI command.
    """
    return {
        "config_file_exists": CONFIG_FILE.exists(),
        "config_file_path": str(CONFIG_FILE),
        "using_example": not CONFIG_FILE.exists() and CONFIG_EXAMPLE.exists(),
        "cors_origins_count": len(config.security.cors_origins),
        "docs_enabled": config.security.docs_enabled,
        "challenge_window_seconds": config.registry.challenge_window_seconds,
    }


def print_config_summary() -> None:
    """Print a summary of current configuration to stdout."""
    status = get_config_status()
    print("\n" + "=" * 60)
    print("STAR REGISTRY CONFIGURATION")
    print("=" * 60)
    print(f"Config file: {status['config_file_path']}")
    print(f"File exists: {status['config_file_exists']}")
    if status["using_example"]:
        print("NOTE: Using example config (copy to server.ini to customise)")
    print("-" * 60)
    print(f"Server:           {config.server.host}:{config.server.port}")
    print(f"CORS origins:     {config.security.cors_origins}")
    print(f"Docs enabled:     {config.security.docs_enabled}")
    print(f"Log level:        {config.logging.level} ({config.logging.format})")
    print(f"Challenge window: {config.registry.challenge_window_seconds}s")
    print("=" * 60 + "\n")
