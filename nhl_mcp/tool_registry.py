"""Tool registry for NHL MCP Server.

Tools are plain async functions: validate input, run the operation, adapt the
envelope to the FastMCP result. ``get_all_tools`` returns the list that
``server.create_app`` registers; nothing here holds state between calls.
"""
from __future__ import annotations
from typing import Optional, List, Callable

from fastmcp.tools.tool import ToolResult

from .metrics import timing_decorator
from . import roster_tools, scoreboard_tools, leaders_tools, player_tools
from .config import (
    get_limits, validate_team_code, validate_player_id, validate_categories, validate_limit_strict,
)
from .errors import handle_validation_error, to_tool_result


def get_all_tools() -> List[Callable]:
    """Get list of all tool functions to register with FastMCP server."""
    return [
        get_team_roster,
        get_team_scoreboard,
        get_next_game,
        get_stat_leaders,
        get_player_stats,
    ]


# =============================================================================
# TEAM TOOLS
# =============================================================================

@timing_decorator("get_team_roster", tool_type="team")
async def get_team_roster(team: str) -> ToolResult:
    """Get an NHL team's current roster, ordered forwards, defensemen, goalies.

    Parameters:
        team (str, required): Team code, case-insensitive (e.g. 'TBL', 'bos').
    Returns: {team, players:[{id, firstName, lastName, number?, positionCode,
             positionGroup, shootsCatches?, headshot?, profileLink?}]}
    Example: get_team_roster(team="TBL")
    """
    try:
        code = validate_team_code(team)
    except ValueError as e:
        return to_tool_result(handle_validation_error(f"Invalid team: {e}"))
    return to_tool_result(await roster_tools.get_team_roster(code))


@timing_decorator("get_team_scoreboard", tool_type="team")
async def get_team_scoreboard(team: str) -> ToolResult:
    """Get a team's live and upcoming games (LIVE, CRIT, PRE, FUT), earliest first.

    Parameters:
        team (str, required): Team code, case-insensitive.
    Returns: {team, games:[{state, date, startTimeUTC, venue, home, away, tv[], links}]}
    Example: get_team_scoreboard(team="EDM")
    """
    try:
        code = validate_team_code(team)
    except ValueError as e:
        return to_tool_result(handle_validation_error(f"Invalid team: {e}"))
    return to_tool_result(await scoreboard_tools.get_team_scoreboard(code))


@timing_decorator("get_next_game", tool_type="team")
async def get_next_game(team: str) -> ToolResult:
    """Describe a team's most relevant game (live first, then soonest) in one line.

    Parameters:
        team (str, required): Team code, case-insensitive.
    Returns: text only, e.g. "Next game: TBL vs BOS on ... at Amalie Arena (FUT)."
    Example: get_next_game(team="TBL")
    """
    try:
        code = validate_team_code(team)
    except ValueError as e:
        return to_tool_result(handle_validation_error(f"Invalid team: {e}"))
    return to_tool_result(await scoreboard_tools.get_next_game(code))


# =============================================================================
# LEAGUE AND PLAYER TOOLS
# =============================================================================

@timing_decorator("get_stat_leaders", tool_type="league")
async def get_stat_leaders(categories: Optional[List[str]] = None, limit: Optional[int] = 10) -> ToolResult:
    """Get current NHL skater stat leaders per category, in upstream rank order.

    Parameters:
        categories (list[str], default ["points","goals","assists"]): Categories in display order.
        limit (int, default 10, range 1-100): Entries per category.
    Returns: {<category>: [{id, firstName, lastName, teamAbbrev, teamName?, sweaterNumber?,
             position?, headshot?, teamLogo?, value}]}
    Example: get_stat_leaders(categories=["goals"], limit=5)
    """
    try:
        categories = validate_categories(categories)
        limits = get_limits()
        limit = validate_limit_strict(
            limit,
            limits["leaders_limit_min"],
            limits["leaders_limit_max"],
            limits["leaders_limit_default"],
        )
    except ValueError as e:
        return to_tool_result(handle_validation_error(f"Invalid input: {e}"))
    return to_tool_result(await leaders_tools.get_stat_leaders(categories, limit))


@timing_decorator("get_player_stats", tool_type="player")
async def get_player_stats(player_id: int) -> ToolResult:
    """Get a player's current regular-season line (games, goals, assists, points).

    Parameters:
        player_id (int, required): NHL player id (e.g. 8478010).
    Returns: {id, season?, gamesPlayed?, goals?, assists?, points?}; only {id} when the
             player has no current-season record.
    Example: get_player_stats(player_id=8478010)
    """
    try:
        player_id = validate_player_id(player_id)
    except ValueError as e:
        return to_tool_result(handle_validation_error(f"Invalid player_id: {e}"))
    return to_tool_result(await player_tools.get_player_stats(player_id))
