from databases import Database
from sqlalchemy import func, select

from leaguify.models.db.league import GameResult, Player
from leaguify.models.league import PlayerUpdateBody
from leaguify.schema import game_outcomes, games, players
from leaguify.utils.errors import NotFoundError
from leaguify.utils.id_types import LeagueId, PlayerId


async def sql_get_players(database: Database, league_id: LeagueId) -> list[Player]:
    query = players.select().where(players.c.league_id == league_id).order_by(players.c.name)
    result = await database.fetch_all(query=query)
    return [Player.model_validate(x) for x in result]


async def sql_get_player(
    database: Database, league_id: LeagueId, player_id: PlayerId
) -> Player | None:
    query = players.select().where(
        players.c.id == player_id,
        players.c.league_id == league_id,
    )
    result = await database.fetch_one(query=query)
    return Player.model_validate(result) if result is not None else None


async def sql_update_players(
    database: Database, league_id: LeagueId, updates: list[PlayerUpdateBody]
) -> list[Player]:
    """Rename players (and optionally change their avatar), all or none."""
    async with database.transaction():
        for update in updates:
            player = await sql_get_player(database, league_id, update.id)
            if player is None:
                raise NotFoundError(f"Player {update.id} does not belong to league {league_id}")

            await database.execute(
                query=players.update()
                .where(players.c.id == update.id, players.c.league_id == league_id)
                .values(
                    name=update.name.strip(),
                    avatar_url=update.avatar_url
                    if update.avatar_url is not None
                    else player.avatar_url,
                )
            )

    updated_ids = {update.id for update in updates}
    return [
        player for player in await sql_get_players(database, league_id) if player.id in updated_ids
    ]


async def sql_get_player_victories(
    database: Database, league_id: LeagueId, player_id: PlayerId
) -> int:
    query = (
        select(func.count())
        .select_from(game_outcomes.join(games, games.c.id == game_outcomes.c.game_id))
        .where(
            game_outcomes.c.player_id == player_id,
            games.c.league_id == league_id,
            game_outcomes.c.result == GameResult.WIN.value,
        )
    )
    return int(await database.fetch_val(query=query) or 0)
