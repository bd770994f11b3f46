from typing import Generic, TypeVar

from pydantic import BaseModel

from leaguify.models.db.league import Game, League, Outcome, Player
from leaguify.models.league import (
    GameAddedView,
    LeagueCreatedView,
    ManualCycleStartView,
    OutcomesRecordedView,
    PlayerStanding,
    PlayerVictoriesView,
)


class SuccessResponse(BaseModel):
    success: bool = True


DataT = TypeVar("DataT")


class DataResponse(BaseModel, Generic[DataT]):
    data: DataT


class LeagueResponse(DataResponse[League]):
    pass


class LeaguesResponse(DataResponse[list[League]]):
    pass


class LeagueCreatedResponse(DataResponse[LeagueCreatedView]):
    pass


class PlayersResponse(DataResponse[list[Player]]):
    pass


class PlayerVictoriesResponse(DataResponse[PlayerVictoriesView]):
    pass


class GamesResponse(DataResponse[list[Game]]):
    pass


class GameAddedResponse(DataResponse[GameAddedView]):
    pass


class ManualCycleStartResponse(DataResponse[ManualCycleStartView]):
    pass


class OutcomesResponse(DataResponse[list[Outcome]]):
    pass


class OutcomesRecordedResponse(DataResponse[OutcomesRecordedView]):
    pass


class StandingsResponse(DataResponse[list[PlayerStanding]]):
    pass
