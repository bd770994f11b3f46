from collections import defaultdict

from databases import Database

from leaguify.logic.scheduling.cycles import get_current_cycle, get_league_or_raise
from leaguify.models.db.league import GameResult, Player
from leaguify.models.league import PlayerStanding
from leaguify.sql.games import sql_get_completed_game_counts_per_cycle
from leaguify.sql.outcomes import sql_get_outcome_rows_for_league
from leaguify.sql.players import sql_get_players
from leaguify.utils.id_types import LeagueId, PlayerId


def get_scored_cycles(
    completed_counts: dict[int, int], num_games: int, current_cycle: int
) -> list[int]:
    """
    Cycles that count towards cycle wins: strictly before the current cycle and with at least
    ``num_games`` completed games. Cycles played under a larger ``num_games`` setting that was
    lowered afterwards still count, cycles left short of it do not.
    """
    return sorted(
        cycle_number
        for cycle_number, completed_count in completed_counts.items()
        if cycle_number < current_cycle and completed_count >= num_games
    )


def compute_standings(
    players: list[Player],
    outcome_rows: list[tuple[PlayerId, int, int, GameResult]],
    completed_counts: dict[int, int],
    num_games: int,
    current_cycle: int,
) -> list[PlayerStanding]:
    """
    Derive standings from the full outcome history of a league.

    ``outcome_rows`` holds (player_id, cycle_number, score, result) for every outcome. In each
    scored cycle, every player tied at the highest number of game wins gets a full cycle win,
    unless nobody won a game in that cycle.
    """
    roster = {player.id for player in players}
    game_wins: dict[PlayerId, int] = defaultdict(int)
    current_cycle_points: dict[PlayerId, int] = defaultdict(int)
    wins_per_cycle: dict[int, dict[PlayerId, int]] = defaultdict(lambda: defaultdict(int))

    for player_id, cycle_number, score, result in outcome_rows:
        if player_id not in roster:
            continue
        if result == GameResult.WIN:
            game_wins[player_id] += 1
            wins_per_cycle[cycle_number][player_id] += 1
        if cycle_number == current_cycle:
            current_cycle_points[player_id] += score

    cycle_wins: dict[PlayerId, int] = defaultdict(int)
    for cycle_number in get_scored_cycles(completed_counts, num_games, current_cycle):
        wins = wins_per_cycle.get(cycle_number, {})
        max_wins = max(wins.values(), default=0)
        if max_wins <= 0:
            continue

        for player_id, player_wins in wins.items():
            if player_wins == max_wins:
                cycle_wins[player_id] += 1

    return [
        PlayerStanding(
            player_id=player.id,
            name=player.name,
            avatar_url=player.avatar_url,
            cycle_wins=cycle_wins[player.id],
            game_wins=game_wins[player.id],
            current_cycle_points=current_cycle_points[player.id],
        )
        for player in players
    ]


async def get_league_standings(database: Database, league_id: LeagueId) -> list[PlayerStanding]:
    league = await get_league_or_raise(database, league_id)

    async with database.transaction():
        current_cycle = await get_current_cycle(database, league.id)
        players = await sql_get_players(database, league.id)
        outcome_rows = await sql_get_outcome_rows_for_league(database, league.id)
        completed_counts = await sql_get_completed_game_counts_per_cycle(database, league.id)

    return compute_standings(
        players, outcome_rows, completed_counts, league.num_games, current_cycle
    )
