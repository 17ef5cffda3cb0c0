"""
Bridge configuration management.

This module handles loading and accessing bridge configuration from multiple
sources with a clear priority order:

    1. Environment variables (highest priority) - for containerized deployments
    2. Config file (config/bridge.ini) - for static deployments
    3. Built-in defaults (lowest priority) - sensible fallbacks

Configuration is loaded once at module import time and cached. The BridgeConfig
dataclass provides typed access to all settings. Components never read the
module-level ``config`` themselves; the CLI and the server build them from the
relevant settings section and pass them in explicitly.

Usage:
    from rcon_bridge.config import config

    print(config.rcon.host)
    print(config.pipeline.dry_run)

Environment Variable Mapping:
    BRIDGE_HOST          -> server.host
    BRIDGE_PORT          -> server.port
    RCON_HOST            -> rcon.host
    RCON_PORT            -> rcon.port
    RCON_PASSWORD        -> rcon.password
    RCON_TIMEOUT         -> rcon.timeout_seconds
    BRIDGE_CATALOG_PATH  -> catalog.path
    DEFAULT_PLAYER       -> players.default_player
    PLAYER_<DEVICE>      -> players.device_users[<device>]
    BRIDGE_OLLAMA_URL    -> nlp.ollama_base_url
    BRIDGE_OLLAMA_MODEL  -> nlp.model
    BRIDGE_DRY_RUN       -> pipeline.dry_run
    BRIDGE_LOG_LEVEL     -> logging.level
"""

import configparser
import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal

# =============================================================================
# PATH CONFIGURATION
# =============================================================================

# Project root directory (contains src/, config/)
PROJECT_ROOT = Path(__file__).parent.parent.parent

# Config file paths
CONFIG_DIR = PROJECT_ROOT / "config"
CONFIG_FILE = CONFIG_DIR / "bridge.ini"
CONFIG_EXAMPLE = CONFIG_DIR / "bridge.example.ini"

# Prefix for per-device player mapping environment variables
PLAYER_ENV_PREFIX = "PLAYER_"


# =============================================================================
# CONFIGURATION DATACLASSES
# =============================================================================


@dataclass
class ServerSettings:
    """HTTP server configuration."""

    host: str = "0.0.0.0"  # nosec B104 - intentional for server binding
    port: int = 3000


@dataclass
class RconSettings:
    """Remote console connection configuration."""

    host: str = "localhost"
    port: int = 25575
    password: str = ""
    timeout_seconds: float = 5.0


@dataclass
class CatalogSettings:
    """Item catalog configuration."""

    path: str = "config/items.csv"

    @property
    def absolute_path(self) -> Path:
        """Get absolute path to the catalog file."""
        p = Path(self.path)
        if p.is_absolute():
            return p
        return PROJECT_ROOT / p


@dataclass
class PlayerSettings:
    """Caller identity to in-game username mapping."""

    default_player: str = ""
    device_users: dict[str, str] = field(default_factory=dict)


@dataclass
class NlpSettings:
    """Command generator (Ollama) configuration."""

    ollama_base_url: str = "http://localhost:11434"
    model: str = "llama3.1:8b"
    temperature: float = 0.1
    timeout_seconds: float = 30.0

    @property
    def api_endpoint(self) -> str:
        """Full Ollama ``/api/chat`` URL constructed from ``ollama_base_url``."""
        return f"{self.ollama_base_url.rstrip('/')}/api/chat"


@dataclass
class PipelineSettings:
    """Command pipeline behaviour."""

    dry_run: bool = False


@dataclass
class LoggingSettings:
    """Logging configuration."""

    level: str = "INFO"
    format: Literal["simple", "detailed", "json"] = "detailed"


@dataclass
class BridgeConfig:
    """
    Complete bridge configuration.

    This is the main configuration object that aggregates all settings sections.
    Access via the module-level `config` singleton.
    """

    server: ServerSettings = field(default_factory=ServerSettings)
    rcon: RconSettings = field(default_factory=RconSettings)
    catalog: CatalogSettings = field(default_factory=CatalogSettings)
    players: PlayerSettings = field(default_factory=PlayerSettings)
    nlp: NlpSettings = field(default_factory=NlpSettings)
    pipeline: PipelineSettings = field(default_factory=PipelineSettings)
    logging: LoggingSettings = field(default_factory=LoggingSettings)


# =============================================================================
# CONFIGURATION LOADING
# =============================================================================


def _parse_bool(value: str) -> bool:
    """Parse a string value to boolean."""
    return value.lower() in ("true", "yes", "1", "on", "enabled")


def _load_from_ini(parser: configparser.ConfigParser, cfg: BridgeConfig) -> None:
    """Load configuration from parsed INI file into BridgeConfig."""
    # Server section
    if parser.has_section("server"):
        if parser.has_option("server", "host"):
            cfg.server.host = parser.get("server", "host")
        if parser.has_option("server", "port"):
            cfg.server.port = parser.getint("server", "port")

    # RCON section
    if parser.has_section("rcon"):
        if parser.has_option("rcon", "host"):
            cfg.rcon.host = parser.get("rcon", "host")
        if parser.has_option("rcon", "port"):
            cfg.rcon.port = parser.getint("rcon", "port")
        if parser.has_option("rcon", "password"):
            cfg.rcon.password = parser.get("rcon", "password")
        if parser.has_option("rcon", "timeout_seconds"):
            cfg.rcon.timeout_seconds = parser.getfloat("rcon", "timeout_seconds")

    # Catalog section
    if parser.has_section("catalog"):
        if parser.has_option("catalog", "path"):
            cfg.catalog.path = parser.get("catalog", "path")

    # Players section: default_player plus one key per device user
    if parser.has_section("players"):
        for key, value in parser.items("players"):
            if key == "default_player":
                cfg.players.default_player = value
            elif value:
                cfg.players.device_users[key.lower()] = value

    # NLP section
    if parser.has_section("nlp"):
        if parser.has_option("nlp", "ollama_base_url"):
            cfg.nlp.ollama_base_url = parser.get("nlp", "ollama_base_url")
        if parser.has_option("nlp", "model"):
            cfg.nlp.model = parser.get("nlp", "model")
        if parser.has_option("nlp", "temperature"):
            cfg.nlp.temperature = parser.getfloat("nlp", "temperature")
        if parser.has_option("nlp", "timeout_seconds"):
            cfg.nlp.timeout_seconds = parser.getfloat("nlp", "timeout_seconds")

    # Pipeline section
    if parser.has_section("pipeline"):
        if parser.has_option("pipeline", "dry_run"):
            cfg.pipeline.dry_run = _parse_bool(parser.get("pipeline", "dry_run"))

    # Logging section
    if parser.has_section("logging"):
        if parser.has_option("logging", "level"):
            cfg.logging.level = parser.get("logging", "level").upper()
        if parser.has_option("logging", "format"):
            val = parser.get("logging", "format").lower()
            if val in ("simple", "detailed", "json"):
                cfg.logging.format = val  # type: ignore[assignment]


def _apply_env_overrides(cfg: BridgeConfig, environ: Mapping[str, str] | None = None) -> None:
    """Apply environment variable overrides to configuration."""
    env = os.environ if environ is None else environ

    # Server settings
    if env_host := env.get("BRIDGE_HOST"):
        cfg.server.host = env_host
    if env_port := env.get("BRIDGE_PORT"):
        cfg.server.port = int(env_port)

    # RCON settings
    if env_rcon_host := env.get("RCON_HOST"):
        cfg.rcon.host = env_rcon_host
    if env_rcon_port := env.get("RCON_PORT"):
        cfg.rcon.port = int(env_rcon_port)
    if env_rcon_password := env.get("RCON_PASSWORD"):
        cfg.rcon.password = env_rcon_password
    if env_rcon_timeout := env.get("RCON_TIMEOUT"):
        cfg.rcon.timeout_seconds = float(env_rcon_timeout)

    # Catalog settings
    if env_catalog := env.get("BRIDGE_CATALOG_PATH"):
        cfg.catalog.path = env_catalog

    # Player settings (PLAYER_EISLEY=Eisley42 maps device user "eisley")
    if env_default_player := env.get("DEFAULT_PLAYER"):
        cfg.players.default_player = env_default_player
    for key, value in env.items():
        if key.startswith(PLAYER_ENV_PREFIX) and value:
            device_user = key[len(PLAYER_ENV_PREFIX) :].lower()
            if device_user:
                cfg.players.device_users[device_user] = value

    # NLP settings
    if env_ollama := env.get("BRIDGE_OLLAMA_URL"):
        cfg.nlp.ollama_base_url = env_ollama
    if env_model := env.get("BRIDGE_OLLAMA_MODEL"):
        cfg.nlp.model = env_model

    # Pipeline settings
    if env_dry_run := env.get("BRIDGE_DRY_RUN"):
        cfg.pipeline.dry_run = _parse_bool(env_dry_run)

    # Logging settings
    if env_log := env.get("BRIDGE_LOG_LEVEL"):
        cfg.logging.level = env_log.upper()


def load_config() -> BridgeConfig:
    """
    Load configuration from all sources with proper priority.

    Priority (highest wins):
        1. Environment variables
        2. config/bridge.ini
        3. config/bridge.example.ini (fallback for development)
        4. Built-in defaults

    Returns:
        BridgeConfig: Fully populated configuration object.
    """
    cfg = BridgeConfig()

    # Determine which config file to use
    config_file = None
    if CONFIG_FILE.exists():
        config_file = CONFIG_FILE
    elif CONFIG_EXAMPLE.exists():
        # Use example as fallback for development
        config_file = CONFIG_EXAMPLE

    # Load from INI file if available
    if config_file:
        parser = configparser.ConfigParser()
        parser.read(config_file)
        _load_from_ini(parser, cfg)

    # Apply environment variable overrides (highest priority)
    _apply_env_overrides(cfg)

    return cfg


def reload_config() -> "BridgeConfig":
    """
    Reload configuration from disk and environment.

    This updates the module-level `config` singleton. Components that were
    already built from the previous configuration keep their settings.

    Returns:
        BridgeConfig: The newly loaded configuration.
    """
    global config
    config = load_config()
    return config


# =============================================================================
# MODULE-LEVEL SINGLETON
# =============================================================================

# Load configuration once at module import time
config = load_config()


# =============================================================================
# UTILITY FUNCTIONS
# =============================================================================


def get_config_status() -> dict:
    """
    Get configuration status for diagnostics.

    Returns a dictionary with configuration source information. The RCON
    password is reported only as set/unset.
    """
    return {
        "config_file_exists": CONFIG_FILE.exists(),
        "config_file_path": str(CONFIG_FILE),
        "using_example": not CONFIG_FILE.exists() and CONFIG_EXAMPLE.exists(),
        "rcon_endpoint": f"{config.rcon.host}:{config.rcon.port}",
        "rcon_password_set": bool(config.rcon.password),
        "catalog_path": str(config.catalog.absolute_path),
        "default_player": config.players.default_player,
        "device_users_count": len(config.players.device_users),
        "dry_run": config.pipeline.dry_run,
    }


def print_config_summary() -> None:
    """Print a summary of current configuration to stdout."""
    status = get_config_status()
    print("\n" + "=" * 60)
    print("BRIDGE CONFIGURATION")
    print("=" * 60)
    print(f"Config file: {status['config_file_path']}")
    print(f"File exists: {status['config_file_exists']}")
    if status["using_example"]:
        print("WARNING: Using example config (copy to bridge.ini for production)")
    print("-" * 60)
    print(f"Server:      {config.server.host}:{config.server.port}")
    print(f"RCON:        {status['rcon_endpoint']}")
    print(f"RCON secret: {'set' if status['rcon_password_set'] else 'NOT SET'}")
    print(f"Catalog:     {status['catalog_path']}")
    print(f"Default player: {status['default_player'] or 'NOT SET'}")
    print(f"Device users:   {status['device_users_count']}")
    print(f"Ollama:      {config.nlp.ollama_base_url} ({config.nlp.model})")
    print(f"Dry run:     {status['dry_run']}")
    print(f"Log level:   {config.logging.level}")
    print("=" * 60 + "\n")
