from datetime import datetime, timezone
from enum import auto

from heliclockter import datetime_utc
from pydantic import field_validator

from leaguify.models.db.shared import BaseModelORM
from leaguify.utils.id_types import GameId, LeagueId, OutcomeId, PlayerId
from leaguify.utils.types import EnumAutoStr


def assume_utc(value: object) -> object:
    # SQLite hands timestamps back without a timezone.
    if isinstance(value, datetime) and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class GameStatus(EnumAutoStr):
    PENDING = auto()
    COMPLETED = auto()


class GameResult(EnumAutoStr):
    WIN = auto()
    LOSS = auto()


class LeagueInsertable(BaseModelORM):
    name: str
    num_players: int
    num_games: int
    created: datetime_utc

    @field_validator("created", mode="before")
    @classmethod
    def created_in_utc(cls, value: object) -> object:
        return assume_utc(value)


class League(LeagueInsertable):
    id: LeagueId


class PlayerInsertable(BaseModelORM):
    league_id: LeagueId
    name: str
    avatar_url: str | None = None
    created: datetime_utc

    @field_validator("created", mode="before")
    @classmethod
    def created_in_utc(cls, value: object) -> object:
        return assume_utc(value)


class Player(PlayerInsertable):
    id: PlayerId


class GameInsertable(BaseModelORM):
    league_id: LeagueId
    cycle_number: int
    game_number: int
    status: GameStatus = GameStatus.PENDING
    date_played: datetime_utc | None = None

    @field_validator("date_played", mode="before")
    @classmethod
    def date_played_in_utc(cls, value: object) -> object:
        return assume_utc(value)


class Game(GameInsertable):
    id: GameId


class OutcomeInsertable(BaseModelORM):
    game_id: GameId
    player_id: PlayerId
    score: int
    result: GameResult


class Outcome(OutcomeInsertable):
    id: OutcomeId
