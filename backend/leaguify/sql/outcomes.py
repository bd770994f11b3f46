from uuid import uuid4

from databases import Database
from sqlalchemy import select

from leaguify.models.db.league import GameResult, Outcome, OutcomeInsertable
from leaguify.models.league import ResolvedOutcome
from leaguify.schema import game_outcomes, games
from leaguify.utils.id_types import GameId, LeagueId, PlayerId


async def sql_get_outcomes_for_game(database: Database, game_id: GameId) -> list[Outcome]:
    query = game_outcomes.select().where(game_outcomes.c.game_id == game_id)
    result = await database.fetch_all(query=query)
    return [Outcome.model_validate(x) for x in result]


async def sql_replace_outcomes(
    database: Database, game_id: GameId, outcomes: list[ResolvedOutcome]
) -> None:
    """Supersede every stored outcome of the game with the given ones, atomically."""
    async with database.transaction():
        await database.execute(
            query=game_outcomes.delete().where(game_outcomes.c.game_id == game_id)
        )
        if len(outcomes) < 1:
            return

        await database.execute_many(
            query=game_outcomes.insert(),
            values=[
                {
                    "id": str(uuid4()),
                    **OutcomeInsertable(
                        game_id=game_id,
                        player_id=outcome.player_id,
                        score=outcome.score,
                        result=outcome.result,
                    ).model_dump(),
                }
                for outcome in outcomes
            ],
        )


async def sql_get_outcome_rows_for_league(
    database: Database, league_id: LeagueId
) -> list[tuple[PlayerId, int, int, GameResult]]:
    """All outcomes of the league as (player_id, cycle_number, score, result) tuples."""
    query = (
        select(
            game_outcomes.c.player_id,
            games.c.cycle_number,
            game_outcomes.c.score,
            game_outcomes.c.result,
        )
        .select_from(game_outcomes.join(games, games.c.id == game_outcomes.c.game_id))
        .where(games.c.league_id == league_id)
    )
    result = await database.fetch_all(query=query)
    return [
        (
            PlayerId(row["player_id"]),
            int(row["cycle_number"]),
            int(row["score"]),
            GameResult(row["result"]),
        )
        for row in result
    ]
