"""
Tests for the player stat line extractor and tool.
"""

import pytest

from nhl_mcp import player_tools
from nhl_mcp.player_tools import extract_player_stats, format_season, summarize_player_stats


def _landing(sub_season=None, regular_season_extra=None, featured_extra=None):
    regular_season = {}
    if sub_season is not None:
        regular_season["subSeason"] = sub_season
    regular_season.update(regular_season_extra or {})
    featured = {"regularSeason": regular_season}
    featured.update(featured_extra or {})
    return {"playerId": 8476453, "featuredStats": featured}


FULL_LINE = {"season": 20242025, "gamesPlayed": 82, "goals": 30, "assists": 50, "points": 80}


class TestExtractPlayerStats:

    def test_full_line(self):
        assert extract_player_stats(8476453, _landing(FULL_LINE)) == {
            "id": 8476453,
            "season": 20242025,
            "gamesPlayed": 82,
            "goals": 30,
            "assists": 50,
            "points": 80,
        }

    def test_season_falls_back_to_regular_season(self):
        line = {k: v for k, v in FULL_LINE.items() if k != "season"}
        stats = extract_player_stats(1, _landing(line, regular_season_extra={"season": 20232024}))
        assert stats["season"] == 20232024

    def test_season_falls_back_to_featured_stats(self):
        line = {k: v for k, v in FULL_LINE.items() if k != "season"}
        stats = extract_player_stats(1, _landing(line, featured_extra={"season": 20222023}))
        assert stats["season"] == 20222023

    def test_missing_sub_season_yields_only_id(self):
        assert extract_player_stats(42, _landing()) == {"id": 42}
        assert extract_player_stats(42, {}) == {"id": 42}

    def test_partial_line_omits_missing_counts(self):
        stats = extract_player_stats(7, _landing({"gamesPlayed": 3}))
        assert stats == {"id": 7, "gamesPlayed": 3}


class TestSummaries:

    def test_format_season(self):
        assert format_season(20242025) == "2024-25"
        assert format_season(2024) == "2024"

    def test_full_summary(self):
        stats = dict(FULL_LINE, id=8476453)
        assert summarize_player_stats(stats) == "Player 8476453 2024-25: 82 GP, 30 G, 50 A, 80 P"

    def test_no_stats_summary(self):
        assert summarize_player_stats({"id": 42}) == "Player 42: no current-season stats"


class TestGetPlayerStats:

    @pytest.mark.asyncio
    async def test_success_envelope_with_meta(self, fake_upstream):
        client = fake_upstream(_landing(FULL_LINE))
        result = await player_tools.get_player_stats(8476453)

        assert client.requests[0]["url"] == "https://api-web.nhle.com/v1/player/8476453/landing"
        assert result["isError"] is False
        assert result["structuredContent"]["points"] == 80
        assert result["meta"] == {"playerId": 8476453}

    @pytest.mark.asyncio
    async def test_inactive_player_is_not_an_error(self, fake_upstream):
        fake_upstream(_landing())
        result = await player_tools.get_player_stats(42)

        assert result["isError"] is False
        assert result["structuredContent"] == {"id": 42}

    @pytest.mark.asyncio
    async def test_unknown_player_is_error_envelope(self, fake_upstream):
        fake_upstream(None, status_code=404, reason_phrase="Not Found")
        result = await player_tools.get_player_stats(1)

        assert result["isError"] is True
        assert result["summaryText"] == "Error: Failed to fetch player 1: HTTP 404 Not Found"
