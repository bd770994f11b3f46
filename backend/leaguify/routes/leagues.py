from databases import Database
from fastapi import APIRouter, Depends
from starlette import status

from leaguify.config import config
from leaguify.logic.scheduling.cycles import (
    add_game_to_current_cycle,
    get_current_cycle,
    start_new_cycle,
)
from leaguify.models.league import (
    LeagueCreateBody,
    LeagueCreatedView,
    PlayersUpdateBody,
    PlayerVictoriesView,
)
from leaguify.routes.models import (
    GameAddedResponse,
    GamesResponse,
    LeagueCreatedResponse,
    LeagueResponse,
    LeaguesResponse,
    ManualCycleStartResponse,
    PlayersResponse,
    PlayerVictoriesResponse,
    SuccessResponse,
)
from leaguify.routes.util import get_database, league_or_not_found
from leaguify.sql.games import (
    sql_delete_league_history,
    sql_get_games_by_cycle,
    sql_get_games_for_league,
)
from leaguify.sql.leagues import sql_create_league, sql_get_leagues
from leaguify.sql.players import (
    sql_get_player,
    sql_get_player_victories,
    sql_get_players,
    sql_update_players,
)
from leaguify.utils.errors import NotFoundError
from leaguify.utils.id_types import LeagueId, PlayerId
from leaguify.utils.logging import logger

router = APIRouter(prefix=config.api_prefix)


@router.post(
    "/leagues", response_model=LeagueCreatedResponse, status_code=status.HTTP_201_CREATED
)
async def create_league(
    body: LeagueCreateBody, database: Database = Depends(get_database)
) -> LeagueCreatedResponse:
    league_id, player_ids, game_ids = await sql_create_league(
        database, body, config.default_avatar_url
    )
    logger.info(
        "Created league: league_id=%s players=%s games_per_cycle=%s",
        league_id,
        body.num_players,
        body.num_games,
    )
    return LeagueCreatedResponse(
        data=LeagueCreatedView(
            id=league_id,
            name=body.name,
            num_players=body.num_players,
            num_games=body.num_games,
            player_ids=player_ids,
            game_ids=game_ids,
        )
    )


@router.get("/leagues", response_model=LeaguesResponse)
async def get_leagues(database: Database = Depends(get_database)) -> LeaguesResponse:
    return LeaguesResponse(data=await sql_get_leagues(database))


@router.get("/leagues/{league_id}", response_model=LeagueResponse)
async def get_league(
    league_id: LeagueId, database: Database = Depends(get_database)
) -> LeagueResponse:
    return LeagueResponse(data=await league_or_not_found(database, league_id))


@router.get("/leagues/{league_id}/players", response_model=PlayersResponse)
async def get_players(
    league_id: LeagueId, database: Database = Depends(get_database)
) -> PlayersResponse:
    await league_or_not_found(database, league_id)
    return PlayersResponse(data=await sql_get_players(database, league_id))


@router.put("/leagues/{league_id}/players", response_model=PlayersResponse)
async def update_players(
    league_id: LeagueId,
    body: PlayersUpdateBody,
    database: Database = Depends(get_database),
) -> PlayersResponse:
    await league_or_not_found(database, league_id)
    return PlayersResponse(data=await sql_update_players(database, league_id, body.players))


@router.get(
    "/leagues/{league_id}/players/{player_id}/victories", response_model=PlayerVictoriesResponse
)
async def get_player_victories(
    league_id: LeagueId, player_id: PlayerId, database: Database = Depends(get_database)
) -> PlayerVictoriesResponse:
    if await sql_get_player(database, league_id, player_id) is None:
        raise NotFoundError(f"Player {player_id} not found in league {league_id}")

    victories = await sql_get_player_victories(database, league_id, player_id)
    return PlayerVictoriesResponse(
        data=PlayerVictoriesView(player_id=player_id, victories=victories)
    )


@router.get("/leagues/{league_id}/games", response_model=GamesResponse)
async def get_games(
    league_id: LeagueId, database: Database = Depends(get_database)
) -> GamesResponse:
    await league_or_not_found(database, league_id)
    return GamesResponse(data=await sql_get_games_for_league(database, league_id))


@router.get("/leagues/{league_id}/games/current", response_model=GamesResponse)
async def get_current_cycle_games(
    league_id: LeagueId, database: Database = Depends(get_database)
) -> GamesResponse:
    await league_or_not_found(database, league_id)
    current_cycle = await get_current_cycle(database, league_id)
    return GamesResponse(data=await sql_get_games_by_cycle(database, league_id, current_cycle))


@router.post(
    "/leagues/{league_id}/games",
    response_model=GameAddedResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_game(
    league_id: LeagueId, database: Database = Depends(get_database)
) -> GameAddedResponse:
    return GameAddedResponse(data=await add_game_to_current_cycle(database, league_id))


@router.delete("/leagues/{league_id}/games", response_model=SuccessResponse)
async def delete_league_history(
    league_id: LeagueId, database: Database = Depends(get_database)
) -> SuccessResponse:
    await league_or_not_found(database, league_id)
    await sql_delete_league_history(database, league_id)
    logger.info("Cleared game history: league_id=%s", league_id)
    return SuccessResponse()


@router.post("/leagues/{league_id}/cycles", response_model=ManualCycleStartResponse)
async def post_start_new_cycle(
    league_id: LeagueId, database: Database = Depends(get_database)
) -> ManualCycleStartResponse:
    return ManualCycleStartResponse(data=await start_new_cycle(database, league_id))
