from typing import NewType

LeagueId = NewType("LeagueId", str)
PlayerId = NewType("PlayerId", str)
GameId = NewType("GameId", str)
OutcomeId = NewType("OutcomeId", str)
