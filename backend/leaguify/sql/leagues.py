from uuid import uuid4

from databases import Database
from heliclockter import datetime_utc

from leaguify.models.db.league import (
    GameInsertable,
    League,
    LeagueInsertable,
    PlayerInsertable,
)
from leaguify.models.league import LeagueCreateBody
from leaguify.schema import games, leagues, players
from leaguify.utils.id_types import GameId, LeagueId, PlayerId


async def sql_get_league(database: Database, league_id: LeagueId) -> League | None:
    query = leagues.select().where(leagues.c.id == league_id)
    result = await database.fetch_one(query=query)
    return League.model_validate(result) if result is not None else None


async def sql_get_leagues(database: Database) -> list[League]:
    query = leagues.select().order_by(leagues.c.created.desc())
    result = await database.fetch_all(query=query)
    return [League.model_validate(x) for x in result]


async def sql_create_league(
    database: Database, body: LeagueCreateBody, default_avatar_url: str | None
) -> tuple[LeagueId, list[PlayerId], list[GameId]]:
    """
    Create a league together with its roster and the games of its first cycle.

    Everything is inserted in one transaction, a league never exists without players or
    without cycle 1.
    """
    league_id = LeagueId(str(uuid4()))
    created = datetime_utc.now()
    player_ids = [PlayerId(str(uuid4())) for _ in body.player_names]
    game_ids = [GameId(str(uuid4())) for _ in range(body.num_games)]

    async with database.transaction():
        await database.execute(
            query=leagues.insert(),
            values={
                "id": league_id,
                **LeagueInsertable(
                    name=body.name,
                    num_players=body.num_players,
                    num_games=body.num_games,
                    created=created,
                ).model_dump(),
            },
        )
        await database.execute_many(
            query=players.insert(),
            values=[
                {
                    "id": player_id,
                    **PlayerInsertable(
                        league_id=league_id,
                        name=player_name.strip(),
                        avatar_url=default_avatar_url,
                        created=created,
                    ).model_dump(),
                }
                for player_id, player_name in zip(player_ids, body.player_names)
            ],
        )
        await database.execute_many(
            query=games.insert(),
            values=[
                {
                    "id": game_id,
                    **GameInsertable(
                        league_id=league_id, cycle_number=1, game_number=game_number
                    ).model_dump(),
                }
                for game_number, game_id in enumerate(game_ids, start=1)
            ],
        )

    return league_id, player_ids, game_ids


async def sql_lock_league(database: Database, league_id: LeagueId) -> None:
    """
    Take a row lock on the league until the surrounding transaction ends.

    Serializes writers that complete games or open cycles of the same league. SQLite has no row
    locks; its single-writer transactions already serialize these writers.
    """
    query = leagues.select().where(leagues.c.id == league_id).with_for_update()
    await database.fetch_one(query=query)
