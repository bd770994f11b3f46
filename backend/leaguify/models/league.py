from pydantic import BaseModel, Field, field_validator, model_validator

from leaguify.models.db.league import GameResult
from leaguify.utils.id_types import GameId, LeagueId, PlayerId


class LeagueCreateBody(BaseModel):
    name: str
    num_players: int = Field(ge=2)
    num_games: int = Field(ge=1)
    player_names: list[str]

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, value: str) -> str:
        if value.strip() == "":
            raise ValueError("League name must be a non-empty string")
        return value.strip()

    @model_validator(mode="after")
    def player_names_match_roster(self) -> "LeagueCreateBody":
        if len(self.player_names) != self.num_players:
            raise ValueError(
                f"player_names length ({len(self.player_names)}) "
                f"must match num_players ({self.num_players})"
            )
        for index, player_name in enumerate(self.player_names):
            if player_name.strip() == "":
                raise ValueError(f"Player name at index {index} must be a non-empty string")
        return self


class LeagueCreatedView(BaseModel):
    id: LeagueId
    name: str
    num_players: int
    num_games: int
    player_ids: list[PlayerId]
    game_ids: list[GameId]


class PlayerUpdateBody(BaseModel):
    id: PlayerId
    name: str
    avatar_url: str | None = None

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, value: str) -> str:
        if value.strip() == "":
            raise ValueError("Player name must be a non-empty string")
        return value.strip()


class PlayersUpdateBody(BaseModel):
    players: list[PlayerUpdateBody] = Field(min_length=1)


class PlayerScore(BaseModel):
    player_id: PlayerId
    score: int


class ResolvedOutcome(BaseModel):
    player_id: PlayerId
    score: int
    result: GameResult


class GameOutcomesBody(BaseModel):
    outcomes: list[PlayerScore]


class OutcomesRecordedView(BaseModel):
    game_id: GameId
    cycle_started: bool = False
    new_cycle_number: int | None = None


class CycleStartedView(BaseModel):
    cycle_number: int
    game_ids: list[GameId]


class ManualCycleStartView(BaseModel):
    cycle_started: bool
    cycle_number: int
    game_ids: list[GameId] = Field(default_factory=list)


class GameAddedView(BaseModel):
    game_id: GameId
    game_number: int
    cycle_number: int


class PlayerVictoriesView(BaseModel):
    player_id: PlayerId
    victories: int


class PlayerStanding(BaseModel):
    player_id: PlayerId
    name: str
    avatar_url: str | None = None
    cycle_wins: int = 0
    game_wins: int = 0
    current_cycle_points: int = 0
