"""
Skater statistical leaders for the NHL MCP Server.
"""

from typing import Any, Dict, List, Optional

from .config import DEFAULT_LEADER_CATEGORIES
from .errors import handle_http_errors
from .logging_config import get_logger
from .models import LeaderItem
from .normalization import (
    as_list, as_mapping, int_or_none, localized, localized_or_none,
    number_or_none, string_or_none,
)
from .upstream import fetch_json

logger = get_logger(__name__)


def normalize_leader(raw: Any) -> LeaderItem:
    """Map one raw leader entry to a LeaderItem."""
    raw = as_mapping(raw)
    value = number_or_none(raw.get("value"))
    return LeaderItem(
        id=int_or_none(raw.get("id")),
        first_name=localized(raw.get("firstName")),
        last_name=localized(raw.get("lastName")),
        team_abbrev=string_or_none(raw.get("teamAbbrev")) or "",
        team_name=localized_or_none(raw.get("teamName")),
        sweater_number=int_or_none(raw.get("sweaterNumber")),
        position=string_or_none(raw.get("position")),
        headshot=string_or_none(raw.get("headshot")),
        team_logo=string_or_none(raw.get("teamLogo")),
        value=value if value is not None else 0,
    )


def normalize_leaders(categories: List[str], data: Any) -> Dict[str, List[Dict[str, Any]]]:
    """
    Normalize a raw leaders document.

    The result has exactly the requested categories, in request order. A
    category missing upstream yields an empty list. Entries keep upstream
    rank order.
    """
    data = as_mapping(data)
    leaders = {}
    for category in categories:
        entries = as_list(data.get(category))
        if category not in data:
            logger.debug(f"Leaders: category {category!r} absent upstream")
        leaders[category] = [normalize_leader(entry).to_dict() for entry in entries]
    return leaders


def summarize_leaders(leaders: Dict[str, List[Dict[str, Any]]]) -> str:
    if not leaders:
        return "Leaders: none"
    return "Leaders: " + ", ".join(f"{category} ({len(items)})" for category, items in leaders.items())


@handle_http_errors(operation_name="fetching stat leaders", summarize=summarize_leaders)
async def get_stat_leaders(categories: Optional[List[str]] = None, limit: int = 10) -> dict:
    """
    Get current skater statistical leaders.

    Args:
        categories: Category names (default: points, goals, assists)
        limit: Entries per category (default: 10)

    Returns:
        Envelope whose structuredContent maps category -> [leader dicts]
    """
    # Repeats collapse to their first occurrence, in the query and in the result.
    categories = list(dict.fromkeys(categories)) if categories else list(DEFAULT_LEADER_CATEGORIES)
    data = await fetch_json(
        "/v1/skater-stats-leaders/current",
        params={"categories": ",".join(categories), "limit": limit},
        service="nhl_leaders",
        what="stat leaders",
    )
    return normalize_leaders(categories, data)
