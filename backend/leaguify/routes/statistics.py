from databases import Database
from fastapi import APIRouter, Depends

from leaguify.config import config
from leaguify.logic.ranking.standings import get_league_standings
from leaguify.routes.models import StandingsResponse
from leaguify.routes.util import get_database
from leaguify.utils.id_types import LeagueId

router = APIRouter(prefix=config.api_prefix)


@router.get("/statistics/leagues/{league_id}", response_model=StandingsResponse)
async def get_statistics(
    league_id: LeagueId, database: Database = Depends(get_database)
) -> StandingsResponse:
    return StandingsResponse(data=await get_league_standings(database, league_id))
