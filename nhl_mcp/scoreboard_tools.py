"""
Scoreboard tools for the NHL MCP Server.

This module contains the team scoreboard normalizer, which keeps only games
worth watching (live, about to start, or scheduled) in start-time order, and
the next-game selector built on top of it.
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .config import get_display_timezone, get_site_base_url
from .errors import handle_http_errors
from .logging_config import get_logger
from .models import Game, GameLinks, TeamInfo
from .normalization import (
    as_list, as_mapping, instant_sort_key, localized, number_or_none,
    parse_instant, string_or_none,
)
from .upstream import fetch_json

logger = get_logger(__name__)

# Upstream gameState codes
STATE_LIVE = "LIVE"
STATE_CRITICAL = "CRIT"
STATE_PREGAME = "PRE"
STATE_FUTURE = "FUT"

RELEVANT_STATES = frozenset({STATE_LIVE, STATE_CRITICAL, STATE_PREGAME, STATE_FUTURE})

# Lower rank wins. Codes missing from the table share the fallback bucket.
STATE_PRIORITY = {
    STATE_LIVE: 0,
    STATE_CRITICAL: 1,
    STATE_PREGAME: 2,
    STATE_FUTURE: 3,
}
UNKNOWN_STATE_PRIORITY = 99


def state_priority(state: Any) -> int:
    """Rank a game state for next-game selection."""
    if not isinstance(state, str):
        return UNKNOWN_STATE_PRIORITY
    return STATE_PRIORITY.get(state, UNKNOWN_STATE_PRIORITY)


def absolute_site_link(link: Any) -> Optional[str]:
    """Resolve a site-relative link such as '/gamecenter/...' against the public site."""
    link = string_or_none(link)
    if link is None:
        return None
    if link.startswith(("http://", "https://")):
        return link
    return f"{get_site_base_url()}{link if link.startswith('/') else '/' + link}"


def normalize_team_info(raw: Any) -> TeamInfo:
    raw = as_mapping(raw)
    return TeamInfo(
        abbrev=string_or_none(raw.get("abbrev")) or "",
        name=localized(raw.get("name")),
        record=string_or_none(raw.get("record")),
        score=number_or_none(raw.get("score")),
        logo=string_or_none(raw.get("logo")) or "",
    )


def normalize_game(raw: Any, group_date: str = "") -> Game:
    """Map one raw scoreboard game, tagged with its date group, to a Game."""
    raw = as_mapping(raw)
    networks = [
        as_mapping(broadcast).get("network")
        for broadcast in as_list(raw.get("tvBroadcasts"))
    ]
    return Game(
        state=string_or_none(raw.get("gameState")) or "",
        date=string_or_none(raw.get("gameDate")) or group_date,
        start_time_utc=string_or_none(raw.get("startTimeUTC")) or "",
        venue=localized(raw.get("venue")),
        home=normalize_team_info(raw.get("homeTeam")),
        away=normalize_team_info(raw.get("awayTeam")),
        tv=[network for network in networks if isinstance(network, str) and network],
        links=GameLinks(
            game_center=absolute_site_link(raw.get("gameCenterLink")),
            tickets=string_or_none(raw.get("ticketsLink")),
        ),
    )


def flatten_games_by_date(data: Any) -> List[tuple]:
    """Flatten ``gamesByDate`` into (date, raw_game) pairs, in document order."""
    pairs = []
    for day in as_list(as_mapping(data).get("gamesByDate")):
        day = as_mapping(day)
        group_date = string_or_none(day.get("date")) or ""
        for raw_game in as_list(day.get("games")):
            pairs.append((group_date, raw_game))
    return pairs


def normalize_scoreboard(team_code: str, data: Any) -> Dict[str, Any]:
    """
    Normalize a raw team scoreboard document.

    Only games in RELEVANT_STATES survive; finals, postponements and other
    states are dropped. Survivors are ordered by start time, ascending.

    Args:
        team_code: Canonical (upper-case) team code
        data: Parsed scoreboard JSON

    Returns:
        {"team": team_code, "games": [game dicts]}
    """
    pairs = flatten_games_by_date(data)
    selected = [
        (group_date, raw) for group_date, raw in pairs
        if (string_or_none(as_mapping(raw).get("gameState")) or "") in RELEVANT_STATES
    ]
    selected.sort(key=lambda pair: instant_sort_key(as_mapping(pair[1]).get("startTimeUTC")))
    logger.debug(f"Scoreboard {team_code}: kept {len(selected)} of {len(pairs)} games")

    games = [normalize_game(raw, group_date).to_dict() for group_date, raw in selected]
    return {"team": team_code, "games": games}


def summarize_scoreboard(scoreboard: Dict[str, Any]) -> str:
    return f"{scoreboard['team']} games: {len(scoreboard['games'])}"


def select_next_game(games: List[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    """
    Pick the most relevant game: lowest state priority, then earliest start.

    Ties on both keys go to the earliest element in ``games``. Pure and
    independent of wall-clock time.
    """
    if not games:
        return None
    return min(
        games,
        key=lambda game: (state_priority(game.get("state")), instant_sort_key(game.get("startTimeUTC"))),
    )


def _display_zone():
    zone_name = get_display_timezone()
    if zone_name.upper() == "UTC":
        return timezone.utc
    try:
        return ZoneInfo(zone_name)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning(f"Unknown display timezone {zone_name!r}, using UTC")
        return timezone.utc


def format_game_time(start_time_utc: Any) -> str:
    """Render a start instant in the display zone, e.g. 'Wed Oct 21, 2026 7:00 PM UTC'."""
    instant = parse_instant(start_time_utc)
    if instant is None:
        return "time TBD"
    local: datetime = instant.astimezone(_display_zone())
    hour = local.strftime("%I").lstrip("0")
    return f"{local.strftime('%a %b %d, %Y')} {hour}:{local.strftime('%M %p')} {local.tzname()}"


def format_next_game(team_code: str, game: Dict[str, Any]) -> str:
    """Build the one-line next-game summary for ``team_code``."""
    home = game.get("home", {})
    away = game.get("away", {})
    if home.get("abbrev") == team_code:
        matchup = f"{team_code} vs {away.get('abbrev', '')}"
    else:
        matchup = f"{team_code} @ {home.get('abbrev', '')}"

    line = f"Next game: {matchup} on {format_game_time(game.get('startTimeUTC'))} at {game.get('venue', '')} ({game.get('state', '')})."
    if game.get("tv"):
        line += f" TV: {', '.join(game['tv'])}."
    links = game.get("links", {})
    if links.get("gameCenter"):
        line += f" Game Center: {links['gameCenter']}"
    if links.get("tickets"):
        line += f" Tickets: {links['tickets']}"
    return line


def no_game_message(team_code: str) -> str:
    return f"No live or upcoming games found for {team_code}."


async def _fetch_scoreboard(code: str) -> Dict[str, Any]:
    data = await fetch_json(
        f"/v1/scoreboard/{code}/now",
        service="nhl_scoreboard",
        what=f"scoreboard for {code}",
    )
    return normalize_scoreboard(code, data)


@handle_http_errors(operation_name="fetching team scoreboard", summarize=summarize_scoreboard)
async def get_team_scoreboard(team: str) -> dict:
    """
    Get a team's live and upcoming games.

    Args:
        team: Team code, case-insensitive

    Returns:
        Envelope whose structuredContent is {team, games}
    """
    return await _fetch_scoreboard(team.upper())


@handle_http_errors(operation_name="fetching next game")
async def get_next_game(team: str) -> str:
    """
    Describe a team's most relevant game in one line.

    Returns a summary-only envelope; finding no game is not an error.
    """
    code = team.upper()
    scoreboard = await _fetch_scoreboard(code)
    game = select_next_game(scoreboard["games"])
    if game is None:
        return no_game_message(code)
    return format_next_game(code, game)
