import pytest
from databases import Database

from leaguify.logic.ranking.standings import get_league_standings
from leaguify.logic.scheduling import cycles
from leaguify.logic.scheduling.cycles import (
    add_game_to_current_cycle,
    get_current_cycle,
    open_next_cycle,
    start_new_cycle,
    submit_game_outcomes,
)
from leaguify.models.db.league import GameResult, GameStatus
from leaguify.sql.games import (
    sql_create_games,
    sql_delete_league_history,
    sql_get_game,
    sql_get_games_by_cycle,
    sql_get_games_for_league,
)
from leaguify.sql.outcomes import sql_get_outcomes_for_game
from leaguify.sql.players import sql_get_player_victories
from leaguify.utils.errors import ConflictError, NotFoundError, PreconditionError, ValidationError
from leaguify.utils.id_types import GameId, LeagueId
from leaguify.utils.types import assert_some
from tests.integration_tests.sql import create_test_league, get_current_games, submit_scores


@pytest.mark.asyncio
async def test_league_starts_with_first_cycle(database: Database) -> None:
    league, player_ids = await create_test_league(database, num_players=3, num_games=4)

    games = await sql_get_games_for_league(database, league.id)

    assert len(player_ids) == 3
    assert await get_current_cycle(database, league.id) == 1
    assert [(game.cycle_number, game.game_number) for game in games] == [
        (1, 1),
        (1, 2),
        (1, 3),
        (1, 4),
    ]
    assert all(game.status == GameStatus.PENDING for game in games)


@pytest.mark.asyncio
async def test_full_cycle_opens_next_cycle_and_updates_standings(database: Database) -> None:
    league, player_ids = await create_test_league(database, num_players=2, num_games=2)
    first_game, second_game = await get_current_games(database, league)

    recorded = await submit_scores(database, first_game, player_ids, [10, 5])
    assert recorded.cycle_started is False
    assert await get_current_cycle(database, league.id) == 1

    recorded = await submit_scores(database, second_game, player_ids, [3, 3])
    assert recorded.cycle_started is True
    assert recorded.new_cycle_number == 2

    next_games = await sql_get_games_by_cycle(database, league.id, 2)
    assert [game.game_number for game in next_games] == [1, 2]
    assert all(game.status == GameStatus.PENDING for game in next_games)

    completed = assert_some(await sql_get_game(database, second_game.id))
    assert completed.status == GameStatus.COMPLETED
    assert completed.date_played is not None

    standings = {
        standing.player_id: standing
        for standing in await get_league_standings(database, league.id)
    }
    assert (standings[player_ids[0]].cycle_wins, standings[player_ids[0]].game_wins) == (1, 1)
    assert (standings[player_ids[1]].cycle_wins, standings[player_ids[1]].game_wins) == (0, 0)
    assert standings[player_ids[0]].current_cycle_points == 0
    assert standings[player_ids[1]].current_cycle_points == 0


@pytest.mark.asyncio
async def test_current_cycle_points_are_summed(database: Database) -> None:
    league, player_ids = await create_test_league(database, num_players=2, num_games=3)
    first_game, second_game, _ = await get_current_games(database, league)

    await submit_scores(database, first_game, player_ids, [10, 5])
    await submit_scores(database, second_game, player_ids, [2, 8])

    standings = await get_league_standings(database, league.id)

    assert [standing.current_cycle_points for standing in standings] == [12, 13]
    assert [standing.game_wins for standing in standings] == [1, 1]
    assert [standing.cycle_wins for standing in standings] == [0, 0]


@pytest.mark.asyncio
async def test_resubmitting_outcomes_replaces_previous_ones(database: Database) -> None:
    league, player_ids = await create_test_league(database, num_players=2, num_games=2)
    game = (await get_current_games(database, league))[0]

    await submit_scores(database, game, player_ids, [10, 5])
    await submit_scores(database, game, player_ids, [1, 9])

    outcomes = {
        outcome.player_id: outcome for outcome in await sql_get_outcomes_for_game(database, game.id)
    }
    assert len(outcomes) == 2
    assert (outcomes[player_ids[0]].score, outcomes[player_ids[0]].result) == (1, GameResult.LOSS)
    assert (outcomes[player_ids[1]].score, outcomes[player_ids[1]].result) == (9, GameResult.WIN)
    assert await sql_get_player_victories(database, league.id, player_ids[0]) == 0
    assert await sql_get_player_victories(database, league.id, player_ids[1]) == 1
    assert await get_current_cycle(database, league.id) == 1


@pytest.mark.asyncio
async def test_invalid_outcomes_leave_game_untouched(database: Database) -> None:
    league, player_ids = await create_test_league(database, num_players=2, num_games=1)
    game = (await get_current_games(database, league))[0]

    with pytest.raises(ValidationError):
        await submit_scores(database, game, player_ids[:1], [10])

    stored = assert_some(await sql_get_game(database, game.id))
    assert stored.status == GameStatus.PENDING
    assert await sql_get_outcomes_for_game(database, game.id) == []
    assert await get_current_cycle(database, league.id) == 1


@pytest.mark.asyncio
async def test_submitting_for_unknown_game_raises(database: Database) -> None:
    await create_test_league(database)

    with pytest.raises(NotFoundError):
        await submit_game_outcomes(database, GameId("missing"), [])


@pytest.mark.asyncio
async def test_manual_start_requires_completed_cycle(database: Database) -> None:
    league, player_ids = await create_test_league(database, num_players=2, num_games=2)
    first_game = (await get_current_games(database, league))[0]
    await submit_scores(database, first_game, player_ids, [4, 6])

    with pytest.raises(PreconditionError):
        await start_new_cycle(database, league.id)

    assert await get_current_cycle(database, league.id) == 1
    assert len(await sql_get_games_for_league(database, league.id)) == 2


@pytest.mark.asyncio
async def test_manual_start_after_automatic_open_requires_new_cycle_completed(
    database: Database,
) -> None:
    league, player_ids = await create_test_league(database, num_players=2, num_games=1)
    game = (await get_current_games(database, league))[0]

    recorded = await submit_scores(database, game, player_ids, [4, 6])
    assert recorded.new_cycle_number == 2

    with pytest.raises(PreconditionError):
        await start_new_cycle(database, league.id)


@pytest.mark.asyncio
async def test_manual_start_after_history_reset_opens_first_cycle(database: Database) -> None:
    league, player_ids = await create_test_league(database, num_players=2, num_games=2)
    game = (await get_current_games(database, league))[0]
    await submit_scores(database, game, player_ids, [7, 1])

    await sql_delete_league_history(database, league.id)
    assert await sql_get_games_for_league(database, league.id) == []
    assert await sql_get_outcomes_for_game(database, game.id) == []

    started = await start_new_cycle(database, league.id)

    assert started.cycle_started is True
    assert started.cycle_number == 1
    assert len(started.game_ids) == 2
    assert await get_current_cycle(database, league.id) == 1


@pytest.mark.asyncio
async def test_added_game_extends_current_cycle(database: Database) -> None:
    league, player_ids = await create_test_league(database, num_players=2, num_games=1)

    added = await add_game_to_current_cycle(database, league.id)
    assert (added.cycle_number, added.game_number) == (1, 2)

    first_game, extra_game = await get_current_games(database, league)
    assert extra_game.id == added.game_id

    # One completed game already reaches num_games, the extra game does not block the cycle.
    recorded = await submit_scores(database, first_game, player_ids, [3, 2])
    assert recorded.new_cycle_number == 2


@pytest.mark.asyncio
async def test_creating_existing_cycle_games_conflicts(database: Database) -> None:
    league, _ = await create_test_league(database, num_players=2, num_games=2)

    with pytest.raises(ConflictError):
        await sql_create_games(database, league.id, 1, 2)

    assert len(await sql_get_games_for_league(database, league.id)) == 2


@pytest.mark.asyncio
async def test_open_next_cycle_is_contiguous(database: Database) -> None:
    league, _ = await create_test_league(database, num_players=2, num_games=3)

    started = assert_some(await open_next_cycle(database, league.id))

    assert started.cycle_number == 2
    assert len(started.game_ids) == 3
    assert await get_current_cycle(database, league.id) == 2

    with pytest.raises(NotFoundError):
        await open_next_cycle(database, LeagueId("missing"))


def _reread_stale_max_cycle(monkeypatch: pytest.MonkeyPatch) -> None:
    # Reports no games so the next cycle collides with the existing cycle 1.
    async def stale_max_cycle_number(*_: object) -> int:
        return 0

    monkeypatch.setattr(cycles, "sql_get_max_cycle_number", stale_max_cycle_number)


@pytest.mark.asyncio
async def test_lost_cycle_race_keeps_recorded_outcomes(
    database: Database, monkeypatch: pytest.MonkeyPatch
) -> None:
    league, player_ids = await create_test_league(database, num_players=2, num_games=1)
    game = (await get_current_games(database, league))[0]
    _reread_stale_max_cycle(monkeypatch)

    recorded = await submit_scores(database, game, player_ids, [6, 2])

    assert recorded.cycle_started is False
    assert recorded.new_cycle_number is None
    stored = assert_some(await sql_get_game(database, game.id))
    assert stored.status == GameStatus.COMPLETED
    assert stored.date_played is not None
    outcomes = {
        outcome.player_id: outcome.result
        for outcome in await sql_get_outcomes_for_game(database, game.id)
    }
    assert outcomes == {player_ids[0]: GameResult.WIN, player_ids[1]: GameResult.LOSS}
    assert len(await sql_get_games_for_league(database, league.id)) == 1


@pytest.mark.asyncio
async def test_lost_cycle_race_is_a_no_op_for_explicit_starts(
    database: Database, monkeypatch: pytest.MonkeyPatch
) -> None:
    league, player_ids = await create_test_league(database, num_players=2, num_games=1)
    game = (await get_current_games(database, league))[0]
    _reread_stale_max_cycle(monkeypatch)
    await submit_scores(database, game, player_ids, [6, 2])

    assert await open_next_cycle(database, league.id) is None

    started = await start_new_cycle(database, league.id)
    assert started.cycle_started is False
    assert started.cycle_number == 1
    assert started.game_ids == []
    assert len(await sql_get_games_for_league(database, league.id)) == 1


@pytest.mark.asyncio
async def test_failed_completion_rolls_back_outcomes(
    database: Database, monkeypatch: pytest.MonkeyPatch
) -> None:
    league, player_ids = await create_test_league(database, num_players=2, num_games=2)
    game = (await get_current_games(database, league))[0]

    async def failing_mark_completed(*_: object) -> None:
        raise RuntimeError("connection lost")

    monkeypatch.setattr(cycles, "sql_mark_game_completed", failing_mark_completed)

    with pytest.raises(RuntimeError):
        await submit_scores(database, game, player_ids, [6, 2])

    assert await sql_get_outcomes_for_game(database, game.id) == []
    stored = assert_some(await sql_get_game(database, game.id))
    assert stored.status == GameStatus.PENDING
    assert stored.date_played is None
    assert await sql_get_player_victories(database, league.id, player_ids[0]) == 0
