from collections.abc import Collection

from leaguify.models.db.league import GameResult
from leaguify.models.league import PlayerScore, ResolvedOutcome
from leaguify.utils.errors import ValidationError
from leaguify.utils.id_types import PlayerId


def validate_scores_cover_roster(scores: list[PlayerScore], roster: Collection[PlayerId]) -> None:
    if len(scores) != len(roster):
        raise ValidationError(f"Must provide outcomes for all {len(roster)} players")

    roster_ids = set(roster)
    seen: set[PlayerId] = set()
    for entry in scores:
        if entry.player_id not in roster_ids:
            raise ValidationError(f"Player {entry.player_id} is not in this league")
        if entry.player_id in seen:
            raise ValidationError(f"Duplicate player {entry.player_id} in outcomes")
        if entry.score < 0:
            raise ValidationError(f"Score of player {entry.player_id} must not be negative")
        seen.add(entry.player_id)


def resolve_outcomes(
    scores: list[PlayerScore], roster: Collection[PlayerId]
) -> list[ResolvedOutcome]:
    """
    Derive win/loss results for one game from the raw scores of every league player.

    Every player tied at the highest score wins, unless all scores are equal, in which case
    nobody wins.
    """
    validate_scores_cover_roster(scores, roster)
    if len(scores) < 1:
        return []

    max_score = max(entry.score for entry in scores)
    min_score = min(entry.score for entry in scores)
    return [
        ResolvedOutcome(
            player_id=entry.player_id,
            score=entry.score,
            result=GameResult.WIN
            if entry.score == max_score and max_score != min_score
            else GameResult.LOSS,
        )
        for entry in scores
    ]
