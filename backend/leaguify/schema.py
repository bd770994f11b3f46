from sqlalchemy import Column, ForeignKey, Integer, String, Table, UniqueConstraint, func
from sqlalchemy.orm import declarative_base  # type: ignore[attr-defined]
from sqlalchemy.sql.sqltypes import DateTime, Enum

Base = declarative_base()
metadata = Base.metadata
DateTimeTZ = DateTime(timezone=True)

leagues = Table(
    "leagues",
    metadata,
    Column("id", String(36), primary_key=True, index=True),
    Column("name", String, nullable=False),
    Column("num_players", Integer, nullable=False),
    Column("num_games", Integer, nullable=False),
    Column("created", DateTimeTZ, nullable=False, server_default=func.now()),
)

players = Table(
    "players",
    metadata,
    Column("id", String(36), primary_key=True, index=True),
    Column("league_id", String(36), ForeignKey("leagues.id", ondelete="CASCADE"), index=True, nullable=False),
    Column("name", String, nullable=False),
    Column("avatar_url", String, nullable=True),
    Column("created", DateTimeTZ, nullable=False, server_default=func.now()),
)

games = Table(
    "games",
    metadata,
    Column("id", String(36), primary_key=True, index=True),
    Column("league_id", String(36), ForeignKey("leagues.id", ondelete="CASCADE"), index=True, nullable=False),
    Column("cycle_number", Integer, nullable=False, server_default="1"),
    Column("game_number", Integer, nullable=False),
    Column(
        "status",
        Enum(
            "PENDING",
            "COMPLETED",
            name="game_status",
        ),
        nullable=False,
        server_default="PENDING",
    ),
    Column("date_played", DateTimeTZ, nullable=True),
    UniqueConstraint("league_id", "cycle_number", "game_number"),
)

game_outcomes = Table(
    "game_outcomes",
    metadata,
    Column("id", String(36), primary_key=True, index=True),
    Column("game_id", String(36), ForeignKey("games.id", ondelete="CASCADE"), index=True, nullable=False),
    Column("player_id", String(36), ForeignKey("players.id", ondelete="CASCADE"), index=True, nullable=False),
    Column("score", Integer, nullable=False),
    Column(
        "result",
        Enum(
            "WIN",
            "LOSS",
            name="game_result",
        ),
        nullable=False,
    ),
    UniqueConstraint("game_id", "player_id"),
)
