"""
Cycle lifecycle of a league.

A league always has exactly one open cycle: the highest cycle number among its games. Closing a
cycle and opening the next one happen together, either implicitly when the outcome of the
cycle's last game is recorded or through an explicit manual start.
"""

from databases import Database
from heliclockter import datetime_utc

from leaguify.logic.ranking.outcomes import resolve_outcomes
from leaguify.models.db.league import Game, GameStatus, League
from leaguify.models.league import (
    CycleStartedView,
    GameAddedView,
    ManualCycleStartView,
    OutcomesRecordedView,
    PlayerScore,
)
from leaguify.sql.games import (
    sql_count_completed_games,
    sql_create_game,
    sql_create_games,
    sql_get_game,
    sql_get_games_by_cycle,
    sql_get_max_cycle_number,
    sql_get_max_game_number,
    sql_mark_game_completed,
)
from leaguify.sql.leagues import sql_get_league, sql_lock_league
from leaguify.sql.outcomes import sql_replace_outcomes
from leaguify.sql.players import sql_get_players
from leaguify.utils.errors import ConflictError, NotFoundError, PreconditionError, ValidationError
from leaguify.utils.id_types import GameId, LeagueId
from leaguify.utils.logging import logger


async def get_league_or_raise(database: Database, league_id: LeagueId) -> League:
    league = await sql_get_league(database, league_id)
    if league is None:
        raise NotFoundError(f"League {league_id} not found")
    return league


async def get_current_cycle(database: Database, league_id: LeagueId) -> int:
    max_cycle_number = await sql_get_max_cycle_number(database, league_id)
    return max_cycle_number if max_cycle_number > 0 else 1


async def is_cycle_complete(database: Database, league: League, cycle_number: int) -> bool:
    # Greater-or-equal, so games added beyond num_games never block detection.
    completed_count = await sql_count_completed_games(database, league.id, cycle_number)
    return completed_count >= league.num_games


async def _open_next_cycle(database: Database, league: League) -> CycleStartedView:
    async with database.transaction():
        next_cycle_number = await sql_get_max_cycle_number(database, league.id) + 1
        game_ids = await sql_create_games(
            database, league.id, next_cycle_number, league.num_games
        )

    logger.info(
        "Opened cycle: league_id=%s cycle_number=%s games=%s",
        league.id,
        next_cycle_number,
        len(game_ids),
    )
    return CycleStartedView(cycle_number=next_cycle_number, game_ids=game_ids)


async def open_next_cycle(database: Database, league_id: LeagueId) -> CycleStartedView | None:
    """
    Create the next cycle's games, numbered 1..num_games and pending.

    Returns ``None`` when another writer created that cycle first, its cycle stands.
    """
    league = await get_league_or_raise(database, league_id)

    async with database.transaction():
        await sql_lock_league(database, league.id)
        try:
            return await _open_next_cycle(database, league)
        except ConflictError:
            logger.info("Next cycle was already opened concurrently: league_id=%s", league.id)
            return None


async def on_outcomes_recorded(
    database: Database, league: League, game: Game, scores: list[PlayerScore]
) -> OutcomesRecordedView:
    """
    Record the outcomes of a game and advance the league to its next cycle when this completes
    the current one.

    Replacing the outcomes, completing the game and the cycle check all run in one transaction
    holding the league row lock.
    Losing the race to open the next cycle is not an error: the other writer's cycle stands.
    """
    if game.league_id != league.id:
        raise ValidationError(f"Game {game.id} does not belong to league {league.id}")

    async with database.transaction():
        await sql_lock_league(database, league.id)
        players = await sql_get_players(database, league.id)
        outcomes = resolve_outcomes(scores, [player.id for player in players])

        await sql_replace_outcomes(database, game.id, outcomes)
        await sql_mark_game_completed(database, game.id, datetime_utc.now())
        logger.info("Recorded outcomes: league_id=%s game_id=%s", league.id, game.id)

        current_cycle = await get_current_cycle(database, league.id)
        if not await is_cycle_complete(database, league, current_cycle):
            return OutcomesRecordedView(game_id=game.id)

        try:
            started = await _open_next_cycle(database, league)
        except ConflictError:
            logger.info(
                "Next cycle was already opened concurrently: league_id=%s cycle_number=%s",
                league.id,
                current_cycle + 1,
            )
            return OutcomesRecordedView(game_id=game.id)

    return OutcomesRecordedView(
        game_id=game.id, cycle_started=True, new_cycle_number=started.cycle_number
    )


async def submit_game_outcomes(
    database: Database, game_id: GameId, scores: list[PlayerScore]
) -> OutcomesRecordedView:
    game = await sql_get_game(database, game_id)
    if game is None:
        raise NotFoundError(f"Game {game_id} not found")

    league = await get_league_or_raise(database, game.league_id)
    return await on_outcomes_recorded(database, league, game, scores)


async def start_new_cycle(database: Database, league_id: LeagueId) -> ManualCycleStartView:
    """Manually open the next cycle, only allowed once every game of the current one is completed."""
    league = await get_league_or_raise(database, league_id)

    async with database.transaction():
        await sql_lock_league(database, league.id)
        current_cycle = await get_current_cycle(database, league.id)
        current_games = await sql_get_games_by_cycle(database, league.id, current_cycle)
        if any(game.status != GameStatus.COMPLETED for game in current_games):
            raise PreconditionError(
                "All games in the current cycle must be completed before starting a new cycle"
            )

        try:
            started = await _open_next_cycle(database, league)
        except ConflictError:
            logger.info(
                "Manual cycle start lost to a concurrent one: league_id=%s", league.id
            )
            return ManualCycleStartView(cycle_started=False, cycle_number=current_cycle)

    return ManualCycleStartView(
        cycle_started=True, cycle_number=started.cycle_number, game_ids=started.game_ids
    )


async def add_game_to_current_cycle(database: Database, league_id: LeagueId) -> GameAddedView:
    league = await get_league_or_raise(database, league_id)

    async with database.transaction():
        await sql_lock_league(database, league.id)
        cycle_number = await get_current_cycle(database, league.id)
        game_number = await sql_get_max_game_number(database, league.id, cycle_number) + 1
        game_id = await sql_create_game(database, league.id, cycle_number, game_number)

    logger.info(
        "Added game: league_id=%s cycle_number=%s game_number=%s",
        league.id,
        cycle_number,
        game_number,
    )
    return GameAddedView(game_id=game_id, game_number=game_number, cycle_number=cycle_number)
