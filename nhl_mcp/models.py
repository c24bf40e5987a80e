"""
Domain records produced by the normalizers.

Each model's field defaults are the default table for that record: names
default to "", optional upstream values default to None ("unset") and are
dropped from the serialized output, collections default to empty lists.
Records are frozen; they are built once from one upstream fetch and only
read afterwards.
"""

from typing import List, Literal, Optional, Union, Dict, Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


PositionGroup = Literal["forwards", "defensemen", "goalies"]
Number = Union[int, float]


class Record(BaseModel):
    """Base for all records: camelCase on the wire, immutable after construction."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize with wire names, omitting unset optional fields."""
        return self.model_dump(by_alias=True, exclude_none=True)


class Player(Record):
    """A roster member."""
    id: Optional[int] = None
    first_name: str = ""
    last_name: str = ""
    number: Optional[int] = None
    position_code: str = ""
    position_group: PositionGroup
    shoots_catches: Optional[str] = None
    headshot: Optional[str] = None
    profile_link: Optional[str] = None


class TeamInfo(Record):
    """One side of a game. ``score`` is set only once a game has a numeric score."""
    abbrev: str = ""
    name: str = ""
    record: Optional[str] = None
    score: Optional[Number] = None
    logo: str = ""


class GameLinks(Record):
    game_center: Optional[str] = None
    tickets: Optional[str] = None


class Game(Record):
    """One scheduled, live or finished matchup."""
    state: str = ""
    date: str = ""
    start_time_utc: str = Field(default="", alias="startTimeUTC")
    venue: str = ""
    home: TeamInfo = Field(default_factory=TeamInfo)
    away: TeamInfo = Field(default_factory=TeamInfo)
    tv: List[str] = Field(default_factory=list)
    links: GameLinks = Field(default_factory=GameLinks)


class LeaderItem(Record):
    """A statistical-leader entry in one category.

    ``value`` falls back to 0 when upstream omits it, which cannot be told
    apart from a real zero.
    """
    id: Optional[int] = None
    first_name: str = ""
    last_name: str = ""
    team_abbrev: str = ""
    team_name: Optional[str] = None
    sweater_number: Optional[int] = None
    position: Optional[str] = None
    headshot: Optional[str] = None
    team_logo: Optional[str] = None
    value: Number = 0


class PlayerSeasonStats(Record):
    """Current-season line for one player; stat fields are all unset when no
    current sub-season block exists."""
    id: int
    season: Optional[int] = None
    games_played: Optional[int] = None
    goals: Optional[int] = None
    assists: Optional[int] = None
    points: Optional[int] = None
