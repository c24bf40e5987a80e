"""
Team roster tools for the NHL MCP Server.

Fetches a team's current roster and returns one merged, deterministically
ordered player list.
"""

from typing import Any, Dict, List

from .config import get_site_base_url
from .errors import handle_http_errors
from .logging_config import get_logger
from .models import Player
from .normalization import as_list, as_mapping, int_or_none, localized, string_or_none
from .upstream import fetch_json

logger = get_logger(__name__)

POSITION_GROUPS = ("forwards", "defensemen", "goalies")
GROUP_RANK = {group: rank for rank, group in enumerate(POSITION_GROUPS)}
UNSET_NUMBER_RANK = 999


def player_profile_link(player_id: Any) -> str | None:
    """Public profile URL for a player id, or None without an id."""
    if player_id is None:
        return None
    return f"{get_site_base_url()}/player/{player_id}"


def normalize_player(raw: Any, group: str) -> Player:
    """Map one raw roster entry to a Player."""
    raw = as_mapping(raw)
    player_id = int_or_none(raw.get("id"))
    return Player(
        id=player_id,
        first_name=localized(raw.get("firstName")),
        last_name=localized(raw.get("lastName")),
        number=int_or_none(raw.get("sweaterNumber")),
        position_code=string_or_none(raw.get("positionCode")) or "",
        position_group=group,
        shoots_catches=string_or_none(raw.get("shootsCatches")),
        headshot=string_or_none(raw.get("headshot")),
        profile_link=player_profile_link(player_id),
    )


def roster_sort_key(player: Player):
    """Group rank, then jersey number (unset last), then last name."""
    number = player.number if player.number is not None else UNSET_NUMBER_RANK
    return (GROUP_RANK[player.position_group], number, player.last_name)


def normalize_roster(team_code: str, data: Any) -> Dict[str, Any]:
    """
    Normalize a raw roster document.

    Args:
        team_code: Canonical (upper-case) team code
        data: Parsed roster JSON with forwards/defensemen/goalies arrays

    Returns:
        {"team": team_code, "players": [player dicts in roster order]}
    """
    data = as_mapping(data)
    players: List[Player] = []
    for group in POSITION_GROUPS:
        entries = as_list(data.get(group))
        players.extend(normalize_player(entry, group) for entry in entries)
        logger.debug(f"Roster {team_code}: {len(entries)} {group}")

    players.sort(key=roster_sort_key)
    return {"team": team_code, "players": [p.to_dict() for p in players]}


def summarize_roster(roster: Dict[str, Any]) -> str:
    return f"{roster['team']} roster: {len(roster['players'])} players"


@handle_http_errors(operation_name="fetching team roster", summarize=summarize_roster)
async def get_team_roster(team: str) -> dict:
    """
    Get a team's current roster.

    Args:
        team: Team code, case-insensitive (e.g. "tbl" or "TBL")

    Returns:
        Envelope whose structuredContent is {team, players}
    """
    code = team.upper()
    data = await fetch_json(
        f"/v1/roster/{code}/current",
        service="nhl_roster",
        what=f"roster for {code}",
    )
    return normalize_roster(code, data)
