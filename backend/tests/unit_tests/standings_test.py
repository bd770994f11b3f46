from heliclockter import datetime_utc

from leaguify.logic.ranking.standings import compute_standings, get_scored_cycles
from leaguify.models.db.league import GameResult, Player
from leaguify.utils.id_types import LeagueId, PlayerId

WIN = GameResult.WIN
LOSS = GameResult.LOSS


def _player(player_id: str, name: str) -> Player:
    return Player(
        id=PlayerId(player_id),
        league_id=LeagueId("league"),
        name=name,
        avatar_url="/StephAvatar.png",
        created=datetime_utc.now(),
    )


PLAYERS = [_player("a", "Alice"), _player("b", "Bob")]


def _by_player(standings: list) -> dict[str, tuple[int, int, int]]:
    return {
        standing.player_id: (
            standing.cycle_wins,
            standing.game_wins,
            standing.current_cycle_points,
        )
        for standing in standings
    }


def test_scored_cycles_are_complete_and_before_current() -> None:
    assert get_scored_cycles({1: 4, 2: 3, 3: 4, 4: 1}, 4, 4) == [1, 3]
    assert get_scored_cycles({1: 5}, 4, 2) == [1]
    assert get_scored_cycles({1: 4}, 4, 1) == []


def test_most_game_wins_per_cycle_earns_the_cycle() -> None:
    # Cycle 1: Alice wins 3 of 4 games. Cycle 2: Bob wins all 4. Cycle 3 is open.
    rows = (
        [(PlayerId("a"), 1, 10, WIN), (PlayerId("b"), 1, 5, LOSS)] * 3
        + [(PlayerId("a"), 1, 2, LOSS), (PlayerId("b"), 1, 8, WIN)]
        + [(PlayerId("a"), 2, 1, LOSS), (PlayerId("b"), 2, 9, WIN)] * 4
    )

    standings = compute_standings(PLAYERS, rows, {1: 4, 2: 4, 3: 0}, 4, 3)

    assert _by_player(standings) == {"a": (1, 3, 0), "b": (1, 5, 0)}


def test_tied_cycle_leaders_each_get_a_cycle_win() -> None:
    rows = [
        (PlayerId("a"), 1, 10, WIN),
        (PlayerId("b"), 1, 5, LOSS),
        (PlayerId("a"), 1, 1, LOSS),
        (PlayerId("b"), 1, 6, WIN),
    ]

    standings = compute_standings(PLAYERS, rows, {1: 2}, 2, 2)

    assert _by_player(standings) == {"a": (1, 1, 0), "b": (1, 1, 0)}


def test_cycle_without_game_wins_awards_nothing() -> None:
    rows = [(PlayerId("a"), 1, 3, LOSS), (PlayerId("b"), 1, 3, LOSS)] * 2

    standings = compute_standings(PLAYERS, rows, {1: 2}, 2, 2)

    assert _by_player(standings) == {"a": (0, 0, 0), "b": (0, 0, 0)}


def test_current_cycle_counts_game_wins_and_points_but_no_cycle_win() -> None:
    rows = [
        (PlayerId("a"), 1, 10, WIN),
        (PlayerId("b"), 1, 5, LOSS),
        (PlayerId("a"), 1, 7, WIN),
        (PlayerId("b"), 1, 4, LOSS),
    ]

    standings = compute_standings(PLAYERS, rows, {1: 2}, 2, 1)

    assert _by_player(standings) == {"a": (0, 2, 17), "b": (0, 0, 9)}


def test_incomplete_earlier_cycle_is_not_scored() -> None:
    rows = [
        (PlayerId("a"), 1, 10, WIN),
        (PlayerId("b"), 1, 5, LOSS),
        (PlayerId("a"), 2, 2, LOSS),
        (PlayerId("b"), 2, 6, WIN),
    ]

    standings = compute_standings(PLAYERS, rows, {1: 1, 2: 1}, 2, 2)

    assert _by_player(standings) == {"a": (0, 1, 2), "b": (0, 1, 6)}


def test_outcomes_of_removed_players_are_ignored() -> None:
    rows = [
        (PlayerId("a"), 1, 10, WIN),
        (PlayerId("gone"), 1, 12, WIN),
    ]

    standings = compute_standings(PLAYERS, rows, {1: 1}, 1, 2)

    assert [standing.player_id for standing in standings] == ["a", "b"]
    assert _by_player(standings) == {"a": (1, 1, 0), "b": (0, 0, 0)}


def test_standings_follow_player_order_and_carry_player_details() -> None:
    standings = compute_standings(PLAYERS, [], {}, 2, 1)

    assert [(s.player_id, s.name, s.avatar_url) for s in standings] == [
        ("a", "Alice", "/StephAvatar.png"),
        ("b", "Bob", "/StephAvatar.png"),
    ]
    assert compute_standings([], [], {}, 2, 1) == []
