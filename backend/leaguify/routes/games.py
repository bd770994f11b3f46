from databases import Database
from fastapi import APIRouter, Depends

from leaguify.config import config
from leaguify.logic.scheduling.cycles import submit_game_outcomes
from leaguify.models.league import GameOutcomesBody
from leaguify.routes.models import OutcomesRecordedResponse, OutcomesResponse
from leaguify.routes.util import get_database
from leaguify.sql.games import sql_get_game
from leaguify.sql.outcomes import sql_get_outcomes_for_game
from leaguify.utils.errors import NotFoundError
from leaguify.utils.id_types import GameId

router = APIRouter(prefix=config.api_prefix)


@router.post("/games/{game_id}/outcomes", response_model=OutcomesRecordedResponse)
async def post_game_outcomes(
    game_id: GameId, body: GameOutcomesBody, database: Database = Depends(get_database)
) -> OutcomesRecordedResponse:
    return OutcomesRecordedResponse(
        data=await submit_game_outcomes(database, game_id, body.outcomes)
    )


@router.get("/games/{game_id}/outcomes", response_model=OutcomesResponse)
async def get_game_outcomes(
    game_id: GameId, database: Database = Depends(get_database)
) -> OutcomesResponse:
    if await sql_get_game(database, game_id) is None:
        raise NotFoundError(f"Game {game_id} not found")
    return OutcomesResponse(data=await sql_get_outcomes_for_game(database, game_id))
