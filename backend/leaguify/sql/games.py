import sqlite3
from uuid import uuid4

from asyncpg.exceptions import UniqueViolationError
from databases import Database
from heliclockter import datetime_utc
from sqlalchemy import func, select

from leaguify.models.db.league import Game, GameInsertable, GameStatus
from leaguify.schema import game_outcomes, games
from leaguify.utils.errors import ConflictError
from leaguify.utils.id_types import GameId, LeagueId

UNIQUE_VIOLATION_ERRORS: tuple[type[Exception], ...] = (UniqueViolationError, sqlite3.IntegrityError)


async def sql_get_game(database: Database, game_id: GameId) -> Game | None:
    query = games.select().where(games.c.id == game_id)
    result = await database.fetch_one(query=query)
    return Game.model_validate(result) if result is not None else None


async def sql_get_games_for_league(database: Database, league_id: LeagueId) -> list[Game]:
    query = (
        games.select()
        .where(games.c.league_id == league_id)
        .order_by(games.c.cycle_number.desc(), games.c.game_number)
    )
    result = await database.fetch_all(query=query)
    return [Game.model_validate(x) for x in result]


async def sql_get_games_by_cycle(
    database: Database, league_id: LeagueId, cycle_number: int
) -> list[Game]:
    query = (
        games.select()
        .where(games.c.league_id == league_id, games.c.cycle_number == cycle_number)
        .order_by(games.c.game_number)
    )
    result = await database.fetch_all(query=query)
    return [Game.model_validate(x) for x in result]


async def sql_get_max_cycle_number(database: Database, league_id: LeagueId) -> int:
    """Highest cycle number of the league's games, 0 if it has no games."""
    query = select(func.coalesce(func.max(games.c.cycle_number), 0)).where(
        games.c.league_id == league_id
    )
    return int(await database.fetch_val(query=query) or 0)


async def sql_get_max_game_number(
    database: Database, league_id: LeagueId, cycle_number: int
) -> int:
    query = select(func.coalesce(func.max(games.c.game_number), 0)).where(
        games.c.league_id == league_id,
        games.c.cycle_number == cycle_number,
    )
    return int(await database.fetch_val(query=query) or 0)


async def sql_count_completed_games(
    database: Database, league_id: LeagueId, cycle_number: int
) -> int:
    query = select(func.count()).select_from(games).where(
        games.c.league_id == league_id,
        games.c.cycle_number == cycle_number,
        games.c.status == GameStatus.COMPLETED.value,
    )
    return int(await database.fetch_val(query=query) or 0)


async def sql_get_completed_game_counts_per_cycle(
    database: Database, league_id: LeagueId
) -> dict[int, int]:
    query = (
        select(games.c.cycle_number, func.count().label("completed_count"))
        .where(
            games.c.league_id == league_id,
            games.c.status == GameStatus.COMPLETED.value,
        )
        .group_by(games.c.cycle_number)
    )
    result = await database.fetch_all(query=query)
    return {int(row["cycle_number"]): int(row["completed_count"]) for row in result}


async def _insert_games(
    database: Database, league_id: LeagueId, cycle_number: int, game_numbers: list[int]
) -> list[GameId]:
    game_ids = [GameId(str(uuid4())) for _ in game_numbers]
    try:
        async with database.transaction():
            await database.execute_many(
                query=games.insert(),
                values=[
                    {
                        "id": game_id,
                        **GameInsertable(
                            league_id=league_id,
                            cycle_number=cycle_number,
                            game_number=game_number,
                        ).model_dump(),
                    }
                    for game_id, game_number in zip(game_ids, game_numbers)
                ],
            )
    except UNIQUE_VIOLATION_ERRORS as exc:
        raise ConflictError(
            f"Games {game_numbers} of cycle {cycle_number} already exist in league {league_id}"
        ) from exc

    return game_ids


async def sql_create_games(
    database: Database, league_id: LeagueId, cycle_number: int, count: int
) -> list[GameId]:
    """
    Insert games 1..count of a cycle, all pending, all-or-nothing.

    Runs in its own (possibly nested) transaction so a lost race on the
    (league_id, cycle_number, game_number) constraint only rolls back these inserts and
    surfaces as ``ConflictError``.
    """
    return await _insert_games(database, league_id, cycle_number, list(range(1, count + 1)))


async def sql_create_game(
    database: Database, league_id: LeagueId, cycle_number: int, game_number: int
) -> GameId:
    game_ids = await _insert_games(database, league_id, cycle_number, [game_number])
    return game_ids[0]


async def sql_mark_game_completed(
    database: Database, game_id: GameId, date_played: datetime_utc
) -> None:
    await database.execute(
        query=games.update()
        .where(games.c.id == game_id)
        .values(status=GameStatus.COMPLETED.value, date_played=date_played)
    )


async def sql_delete_league_history(database: Database, league_id: LeagueId) -> None:
    """Remove every game of the league together with its outcomes."""
    league_game_ids = select(games.c.id).where(games.c.league_id == league_id)
    async with database.transaction():
        await database.execute(
            query=game_outcomes.delete().where(game_outcomes.c.game_id.in_(league_game_ids))
        )
        await database.execute(query=games.delete().where(games.c.league_id == league_id))
