"""
Configuration management for the NHL MCP Server.

Settings are layered, later sources winning:

1. Section defaults (the dataclasses below)
2. A YAML or JSON configuration file
3. ``NHL_MCP_*`` environment variables

The merged result is validated with pydantic. When a file is in use it can be
watched with watchdog and re-read on change.
"""

import os
import json
import logging
import threading
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Tuple, Union

import httpx
import yaml
from pydantic import BaseModel, Field, ValidationError
from watchdog.events import FileSystemEventHandler
from watchdog.observers import Observer


logger = logging.getLogger(__name__)


@dataclass
class TimeoutConfig:
    """Upstream HTTP timeouts, in seconds."""
    total: float = 30.0
    connect: float = 10.0


@dataclass
class ServerConfig:
    version: str = "0.1.0"
    base_user_agent: str = field(init=False)

    def __post_init__(self):
        self.base_user_agent = f"NHL-MCP-Server/{self.version}"


@dataclass
class UpstreamConfig:
    """Statistics API endpoint and the public site used for player and game links."""
    api_base_url: str = "https://api-web.nhle.com"
    site_base_url: str = "https://www.nhl.com"


@dataclass
class ValidationLimits:
    """Bounds for the stat leaders ``limit`` argument."""
    leaders_limit_min: int = 1
    leaders_limit_max: int = 100
    leaders_limit_default: int = 10


@dataclass
class DisplayConfig:
    """IANA zone used when rendering game times in summary lines."""
    timezone: str = "UTC"


@dataclass
class SecurityConfig:
    max_string_length: int = 1000


class ConfigurationModel(BaseModel):
    """Validated view over every configuration section."""
    timeout: TimeoutConfig = Field(default_factory=TimeoutConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)
    upstream: UpstreamConfig = Field(default_factory=UpstreamConfig)
    limits: ValidationLimits = Field(default_factory=ValidationLimits)
    display: DisplayConfig = Field(default_factory=DisplayConfig)
    security: SecurityConfig = Field(default_factory=SecurityConfig)

    model_config = {"arbitrary_types_allowed": True}


# Environment variable -> (section, key, converter)
ENV_MAPPINGS: Dict[str, Tuple[str, str, Callable[[str], Any]]] = {
    'NHL_MCP_TIMEOUT_TOTAL': ('timeout', 'total', float),
    'NHL_MCP_TIMEOUT_CONNECT': ('timeout', 'connect', float),
    'NHL_MCP_SERVER_VERSION': ('server', 'version', str),
    'NHL_MCP_API_BASE_URL': ('upstream', 'api_base_url', str),
    'NHL_MCP_SITE_BASE_URL': ('upstream', 'site_base_url', str),
    'NHL_MCP_LEADERS_LIMIT_MIN': ('limits', 'leaders_limit_min', int),
    'NHL_MCP_LEADERS_LIMIT_MAX': ('limits', 'leaders_limit_max', int),
    'NHL_MCP_LEADERS_LIMIT_DEFAULT': ('limits', 'leaders_limit_default', int),
    'NHL_MCP_DISPLAY_TIMEZONE': ('display', 'timezone', str),
    'NHL_MCP_MAX_STRING_LENGTH': ('security', 'max_string_length', int),
}

# Upstream fetchers, keyed by the service name passed to fetch_json
SERVICE_DESCRIPTIONS = {
    "nhl_roster": "NHL Roster Fetcher",
    "nhl_scoreboard": "NHL Scoreboard Fetcher",
    "nhl_leaders": "NHL Stat Leaders Fetcher",
    "nhl_player": "NHL Player Landing Fetcher",
}

CONFIG_FILE_ENV = "NHL_MCP_CONFIG_FILE"
CONFIG_SEARCH_PATHS = [
    Path(directory) / name
    for directory in (".", "/etc/nhl-mcp")
    for name in ("config.yml", "config.yaml", "config.json")
]


def read_config_file(path: Path) -> Dict[str, Any]:
    """Parse a YAML or JSON configuration file into a plain dict."""
    suffix = path.suffix.lower()
    if suffix not in ('.yml', '.yaml', '.json'):
        raise ValueError(f"Unsupported configuration file format: {path.suffix}")
    try:
        with open(path, 'r') as f:
            data = json.load(f) if suffix == '.json' else yaml.safe_load(f)
    except (OSError, yaml.YAMLError, json.JSONDecodeError) as e:
        raise ValueError(f"Failed to load configuration file {path}: {e}")
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"Failed to load configuration file {path}: top level must be a mapping")
    return data


def environment_overrides(environ: Optional[Dict[str, str]] = None) -> Dict[str, Dict[str, Any]]:
    """Collect ``NHL_MCP_*`` overrides as a section -> {key: value} mapping."""
    environ = os.environ if environ is None else environ
    overrides: Dict[str, Dict[str, Any]] = {}
    for env_var, (section, key, convert) in ENV_MAPPINGS.items():
        raw = environ.get(env_var)
        if raw is None:
            continue
        try:
            overrides.setdefault(section, {})[key] = convert(raw)
        except (ValueError, TypeError) as e:
            raise ValueError(f"Invalid value for environment variable {env_var}: {raw} ({e})")
    return overrides


class ConfigFileHandler(FileSystemEventHandler):
    """Reloads the manager when its configuration file is written or replaced."""

    def __init__(self, config_manager: 'ConfigManager'):
        super().__init__()
        self.config_manager = config_manager

    def _maybe_reload(self, event):
        if event.is_directory:
            return
        if Path(event.src_path).resolve() == self.config_manager.config_file_path.resolve():
            logger.info(f"Configuration file {event.src_path} changed, reloading")
            self.config_manager.reload_configuration()

    on_modified = _maybe_reload
    on_created = _maybe_reload


class ConfigManager:
    """
    Holds the active configuration and knows how to rebuild it.

    Args:
        config_file: Optional YAML or JSON file layered between defaults and environment
        enable_hot_reload: Watch ``config_file`` and reload when it changes
    """

    def __init__(self, config_file: Optional[Union[str, Path]] = None, enable_hot_reload: bool = True):
        self.config_file_path = Path(config_file) if config_file else None
        self._lock = threading.RLock()
        self._observer: Optional[Observer] = None
        self._config: Optional[ConfigurationModel] = None

        self.load_configuration()

        if enable_hot_reload and self.config_file_path and self.config_file_path.exists():
            self._start_watching()

    def _start_watching(self):
        self.stop()
        self._observer = Observer()
        self._observer.schedule(ConfigFileHandler(self), str(self.config_file_path.parent), recursive=False)
        self._observer.start()
        logger.debug(f"Watching {self.config_file_path} for changes")

    def load_configuration(self):
        """Rebuild the configuration from file and environment; raises ValueError when invalid."""
        merged: Dict[str, Any] = {}
        if self.config_file_path and self.config_file_path.exists():
            merged = read_config_file(self.config_file_path)

        for section, values in environment_overrides().items():
            existing = merged.get(section)
            merged[section] = {**existing, **values} if isinstance(existing, dict) else values

        try:
            config = ConfigurationModel(**merged)
        except ValidationError as e:
            raise ValueError(f"Configuration validation failed: {e}")

        with self._lock:
            self._config = config

    def reload_configuration(self):
        """Reload, keeping the previous configuration if the new one is invalid."""
        try:
            self.load_configuration()
        except ValueError as e:
            logger.error(f"Failed to reload configuration: {e}")
            return
        logger.info("Configuration reloaded")

    @property
    def config(self) -> ConfigurationModel:
        with self._lock:
            if self._config is None:
                raise RuntimeError("Configuration not loaded")
            return self._config

    def get_http_timeout(self) -> httpx.Timeout:
        timeout = self.config.timeout
        return httpx.Timeout(timeout.total, connect=timeout.connect)

    def get_user_agent(self, service_name: Optional[str] = None) -> str:
        """User-Agent for upstream requests, tagged with the fetching service when given."""
        base_agent = self.config.server.base_user_agent
        if not service_name:
            return base_agent
        return f"{base_agent} ({SERVICE_DESCRIPTIONS.get(service_name, 'Generic Service')})"

    def get_limits_dict(self) -> Dict[str, int]:
        return asdict(self.config.limits)

    def stop(self):
        """Stop watching the configuration file, if watching."""
        if self._observer:
            self._observer.stop()
            self._observer.join()
            self._observer = None


_config_manager: Optional[ConfigManager] = None


def find_config_file() -> Optional[Path]:
    """``NHL_MCP_CONFIG_FILE`` if set, else the first existing CONFIG_SEARCH_PATHS entry."""
    explicit = os.getenv(CONFIG_FILE_ENV)
    if explicit:
        return Path(explicit)
    return next((path for path in CONFIG_SEARCH_PATHS if path.exists()), None)


def get_config_manager() -> ConfigManager:
    """Return the process-wide manager, creating it on first use."""
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigManager(find_config_file())
    return _config_manager


def set_config_manager(config_manager: ConfigManager):
    """Replace the process-wide manager, stopping the previous one."""
    global _config_manager
    if _config_manager and _config_manager is not config_manager:
        _config_manager.stop()
    _config_manager = config_manager
