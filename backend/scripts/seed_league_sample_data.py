#!/usr/bin/env python3
import argparse
import asyncio
import random

from databases import Database

from leaguify.config import config
from leaguify.database import create_database
from leaguify.logic.ranking.standings import get_league_standings
from leaguify.logic.scheduling.cycles import get_current_cycle, submit_game_outcomes
from leaguify.models.db.league import GameStatus
from leaguify.models.league import LeagueCreateBody, PlayerScore
from leaguify.sql.games import sql_get_games_by_cycle
from leaguify.sql.leagues import sql_create_league, sql_get_league
from leaguify.sql.players import sql_get_players
from leaguify.utils.id_types import LeagueId, PlayerId
from leaguify.utils.logging import logger

SAMPLE_PLAYER_NAMES = [
    "Steph",
    "Jordan",
    "Riley",
    "Casey",
    "Morgan",
    "Avery",
    "Quinn",
    "Rowan",
]

SCORE_STEPS = [10, 8, 6, 4]


def build_sample_scores(
    rng: random.Random, player_ids: list[PlayerId], tie_chance: float = 0.1
) -> list[PlayerScore]:
    """
    Scores for one game: shuffled players get 10, 8, 6, 4 and then 2 each.

    With ``tie_chance`` every player gets the same score instead, a game nobody wins.
    """
    if rng.random() < tie_chance:
        tied_score = rng.choice(SCORE_STEPS)
        return [PlayerScore(player_id=player_id, score=tied_score) for player_id in player_ids]

    shuffled = list(player_ids)
    rng.shuffle(shuffled)
    return [
        PlayerScore(
            player_id=player_id,
            score=SCORE_STEPS[index] if index < len(SCORE_STEPS) else 2,
        )
        for index, player_id in enumerate(shuffled)
    ]


async def seed_completed_cycles(
    database: Database, league_id: LeagueId, cycles: int, seed: int
) -> list[int]:
    """
    Play ``cycles`` full cycles of the league through the regular outcome submission path.

    Returns the cycle numbers that were opened along the way.
    """
    rng = random.Random(seed)
    player_ids = [player.id for player in await sql_get_players(database, league_id)]
    opened_cycles: list[int] = []

    for _ in range(cycles):
        current_cycle = await get_current_cycle(database, league_id)
        pending_games = [
            game
            for game in await sql_get_games_by_cycle(database, league_id, current_cycle)
            if game.status == GameStatus.PENDING
        ]
        if len(pending_games) < 1:
            logger.warning(
                "No pending games left to play: league_id=%s cycle_number=%s",
                league_id,
                current_cycle,
            )
            break

        for game in pending_games:
            recorded = await submit_game_outcomes(
                database, game.id, build_sample_scores(rng, player_ids)
            )
            if recorded.cycle_started and recorded.new_cycle_number is not None:
                opened_cycles.append(recorded.new_cycle_number)
                break

    return opened_cycles


async def resolve_league_for_seed(
    database: Database, league_id: LeagueId | None, num_players: int, num_games: int
) -> LeagueId:
    if league_id is not None:
        league = await sql_get_league(database, league_id)
        if league is None:
            raise ValueError(f"League {league_id} does not exist")
        return league.id

    created_league_id, _, _ = await sql_create_league(
        database,
        LeagueCreateBody(
            name="Sample League",
            num_players=num_players,
            num_games=num_games,
            player_names=[
                SAMPLE_PLAYER_NAMES[index % len(SAMPLE_PLAYER_NAMES)] + f" {index + 1}"
                for index in range(num_players)
            ],
        ),
        config.default_avatar_url,
    )
    print(f"Created sample league {created_league_id}")
    return created_league_id


async def async_main() -> None:
    parser = argparse.ArgumentParser(
        description="Seed sample data: play full cycles of a league with seeded random scores."
    )
    parser.add_argument(
        "--league-id",
        type=str,
        default=None,
        help="League to seed. If omitted, a sample league is created.",
    )
    parser.add_argument("--cycles", type=int, default=2)
    parser.add_argument("--seed", type=int, default=0)
    parser.add_argument("--players", type=int, default=4)
    parser.add_argument("--games", type=int, default=4)
    args = parser.parse_args()

    if args.cycles < 1:
        raise ValueError("--cycles must be at least 1")

    database = create_database(config.pg_dsn)
    await database.connect()
    try:
        league_id = await resolve_league_for_seed(
            database,
            LeagueId(args.league_id) if args.league_id is not None else None,
            int(args.players),
            int(args.games),
        )
        opened_cycles = await seed_completed_cycles(
            database, league_id, int(args.cycles), int(args.seed)
        )
        print(f"Opened cycles: {opened_cycles}")
        for standing in await get_league_standings(database, league_id):
            print(
                f"{standing.name}: cycle wins={standing.cycle_wins} "
                f"game wins={standing.game_wins} points={standing.current_cycle_points}"
            )
    finally:
        await database.disconnect()


if __name__ == "__main__":
    asyncio.run(async_main())
