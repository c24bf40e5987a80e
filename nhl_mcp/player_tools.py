"""
Player stat line tools for the NHL MCP Server.
"""

from typing import Any, Dict

from .errors import handle_http_errors
from .logging_config import get_logger
from .models import PlayerSeasonStats
from .normalization import as_mapping, int_or_none
from .upstream import fetch_json

logger = get_logger(__name__)


def extract_player_stats(player_id: int, data: Any) -> Dict[str, Any]:
    """
    Extract the current-season line from a player landing document.

    Reads featuredStats -> regularSeason -> subSeason. Without that block the
    result carries only the id; that is a normal outcome for inactive players.
    """
    featured = as_mapping(as_mapping(data).get("featuredStats"))
    regular_season = as_mapping(featured.get("regularSeason"))
    sub_season = regular_season.get("subSeason")
    if not isinstance(sub_season, dict):
        logger.debug(f"Player {player_id}: no current sub-season block")
        return PlayerSeasonStats(id=player_id).to_dict()

    season = int_or_none(sub_season.get("season"))
    for parent in (regular_season, featured):
        if season is None:
            season = int_or_none(parent.get("season"))
    return PlayerSeasonStats(
        id=player_id,
        season=season,
        games_played=int_or_none(sub_season.get("gamesPlayed")),
        goals=int_or_none(sub_season.get("goals")),
        assists=int_or_none(sub_season.get("assists")),
        points=int_or_none(sub_season.get("points")),
    ).to_dict()


def format_season(season: int) -> str:
    """20242025 -> '2024-25'; other shapes are returned as-is."""
    text = str(season)
    if len(text) == 8:
        return f"{text[:4]}-{text[6:]}"
    return text


def summarize_player_stats(stats: Dict[str, Any]) -> str:
    stat_keys = ("gamesPlayed", "goals", "assists", "points")
    if not any(key in stats for key in stat_keys):
        return f"Player {stats['id']}: no current-season stats"
    label = f"Player {stats['id']}"
    if "season" in stats:
        label += f" {format_season(stats['season'])}"
    parts = [
        f"{stats[key]} {abbr}"
        for key, abbr in zip(stat_keys, ("GP", "G", "A", "P"))
        if key in stats
    ]
    return f"{label}: {', '.join(parts)}"


@handle_http_errors(
    operation_name="fetching player stats",
    summarize=summarize_player_stats,
    meta=lambda stats: {"playerId": stats["id"]},
)
async def get_player_stats(player_id: int) -> dict:
    """
    Get a player's current-season stat line.

    Args:
        player_id: Upstream player identifier (e.g. 8476453)

    Returns:
        Envelope whose structuredContent is {id, season?, gamesPlayed?, goals?, assists?, points?}
    """
    data = await fetch_json(
        f"/v1/player/{player_id}/landing",
        service="nhl_player",
        what=f"player {player_id}",
    )
    return extract_player_stats(player_id, data)
