"""
Configuration constants and shared utilities for NHL MCP Server.

Settings that a config reload may change (upstream URLs, timeouts, limits,
display zone, user agents) are read from the ConfigManager on every call
through the ``get_*`` accessors below. The module-level constants are the
values seen at import time and serve as the fallback when the manager cannot
be built (for example a broken config file); a warning is logged then.

This module also holds the shared HTTP client factory and the input
validators used by the tool layer.
"""

import logging
import re
from typing import Any, Callable, Dict, List, Optional, TypeVar

import httpx

from .config_manager import ConfigManager, SERVICE_DESCRIPTIONS, get_config_manager


logger = logging.getLogger(__name__)

T = TypeVar("T")


def _from_config(read: Callable[[ConfigManager], T], fallback: T) -> T:
    try:
        return read(get_config_manager())
    except Exception as e:
        logger.warning(f"Using built-in default configuration value: {e}")
        return fallback


DEFAULT_TIMEOUT = _from_config(lambda cm: cm.get_http_timeout(), httpx.Timeout(30.0, connect=10.0))
SERVER_VERSION = _from_config(lambda cm: cm.config.server.version, "0.1.0")
BASE_USER_AGENT = _from_config(lambda cm: cm.get_user_agent(), f"NHL-MCP-Server/{SERVER_VERSION}")
USER_AGENTS = _from_config(
    lambda cm: {name: cm.get_user_agent(name) for name in SERVICE_DESCRIPTIONS},
    {name: BASE_USER_AGENT for name in SERVICE_DESCRIPTIONS},
)

API_BASE_URL = _from_config(lambda cm: cm.config.upstream.api_base_url, "https://api-web.nhle.com").rstrip("/")
SITE_BASE_URL = _from_config(lambda cm: cm.config.upstream.site_base_url, "https://www.nhl.com").rstrip("/")

DISPLAY_TIMEZONE = _from_config(lambda cm: cm.config.display.timezone, "UTC")

LIMITS = _from_config(
    lambda cm: cm.get_limits_dict(),
    {"leaders_limit_min": 1, "leaders_limit_max": 100, "leaders_limit_default": 10},
)
MAX_STRING_LENGTH = _from_config(lambda cm: cm.config.security.max_string_length, 1000)

DEFAULT_LEADER_CATEGORIES = ["points", "goals", "assists"]


def get_api_base_url() -> str:
    return _from_config(lambda cm: cm.config.upstream.api_base_url, API_BASE_URL).rstrip("/")


def get_site_base_url() -> str:
    return _from_config(lambda cm: cm.config.upstream.site_base_url, SITE_BASE_URL).rstrip("/")


def get_display_timezone() -> str:
    return _from_config(lambda cm: cm.config.display.timezone, DISPLAY_TIMEZONE)


def get_limits() -> Dict[str, int]:
    """Current leaders limit bounds (min, max, default)."""
    return _from_config(lambda cm: cm.get_limits_dict(), LIMITS)


def get_max_string_length() -> int:
    return _from_config(lambda cm: cm.config.security.max_string_length, MAX_STRING_LENGTH)


def get_http_headers(service_name: str) -> Dict[str, str]:
    """
    Get standard request headers for an upstream fetcher.

    Args:
        service_name: Key into SERVICE_DESCRIPTIONS, e.g. "nhl_roster"

    Returns:
        Headers with User-Agent and a JSON Accept
    """
    user_agent = _from_config(
        lambda cm: cm.get_user_agent(service_name if service_name in SERVICE_DESCRIPTIONS else None),
        USER_AGENTS.get(service_name, BASE_USER_AGENT),
    )
    return {
        "User-Agent": user_agent,
        "Accept": "application/json",
    }


def create_http_client(timeout: Optional[httpx.Timeout] = None) -> httpx.AsyncClient:
    """Create the AsyncClient used for upstream fetches (configured timeout unless given)."""
    if timeout is None:
        timeout = _from_config(lambda cm: cm.get_http_timeout(), DEFAULT_TIMEOUT)
    return httpx.AsyncClient(timeout=timeout, follow_redirects=True)


# Input Validation Patterns
SAFE_PATTERNS = {
    'team_code': re.compile(r'^[A-Z]{2,4}$'),
    'category': re.compile(r'^[A-Za-z][A-Za-z0-9]*$'),
}


def validate_team_code(value: Any) -> str:
    """
    Validate a team code and canonicalize it to upper case.

    Raises:
        ValueError: If the value is not a 2-4 letter code
    """
    if not isinstance(value, str):
        raise ValueError("team code must be a string")
    max_length = get_max_string_length()
    if len(value) > max_length:
        raise ValueError(f"Input length ({len(value)}) exceeds maximum ({max_length})")
    code = value.strip().upper()
    if not SAFE_PATTERNS['team_code'].match(code):
        raise ValueError(f"'{value}' is not a valid team code (expected 2-4 letters, e.g. 'TBL')")
    return code


def validate_player_id(value: Any) -> int:
    """Validate a player identifier (positive integer, numeric strings accepted)."""
    if isinstance(value, bool):
        raise ValueError("player_id must be an integer")
    try:
        player_id = int(value)
    except (TypeError, ValueError):
        raise ValueError(f"Cannot convert '{value}' to integer")
    if isinstance(value, float) and value != player_id:
        raise ValueError("player_id must be an integer")
    if player_id <= 0:
        raise ValueError(f"player_id must be positive, got {player_id}")
    return player_id


def validate_categories(categories: Optional[List[str]]) -> List[str]:
    """
    Validate requested leader categories.

    None or an empty list selects DEFAULT_LEADER_CATEGORIES. Names are
    otherwise passed through in the given order.
    """
    if not categories:
        return list(DEFAULT_LEADER_CATEGORIES)
    if isinstance(categories, str):
        raise ValueError("categories must be a list of strings")
    for category in categories:
        if not isinstance(category, str) or not SAFE_PATTERNS['category'].match(category):
            raise ValueError(f"Invalid category: {category!r}")
    return list(categories)


def validate_limit_strict(value: Any, min_val: int, max_val: int, default: int) -> int:
    """Validate a limit; values outside [min_val, max_val] are rejected, not clamped."""
    if value is None:
        return default
    if isinstance(value, bool):
        raise ValueError("limit must be an integer")
    try:
        int_value = int(value)
    except (TypeError, ValueError):
        raise ValueError(f"Cannot convert '{value}' to integer")
    if int_value < min_val:
        raise ValueError(f"Value {int_value} is below minimum {min_val}")
    if int_value > max_val:
        raise ValueError(f"Value {int_value} exceeds maximum {max_val}")
    return int_value
