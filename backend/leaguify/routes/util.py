from databases import Database
from starlette.requests import Request

from leaguify.models.db.league import League
from leaguify.sql.leagues import sql_get_league
from leaguify.utils.errors import NotFoundError
from leaguify.utils.id_types import LeagueId


async def get_database(request: Request) -> Database:
    return request.app.state.database


async def league_or_not_found(database: Database, league_id: LeagueId) -> League:
    league = await sql_get_league(database, league_id)
    if league is None:
        raise NotFoundError(f"League {league_id} not found")
    return league
