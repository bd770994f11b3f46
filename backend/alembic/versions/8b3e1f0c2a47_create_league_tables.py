"""create league tables

Revision ID: 8b3e1f0c2a47
Revises:
Create Date: 2026-10-17 00:00:00.000000

"""

from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "8b3e1f0c2a47"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

game_status_enum = sa.Enum("PENDING", "COMPLETED", name="game_status")
game_result_enum = sa.Enum("WIN", "LOSS", name="game_result")


def upgrade() -> None:
    op.create_table(
        "leagues",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("num_players", sa.Integer(), nullable=False),
        sa.Column("num_games", sa.Integer(), nullable=False),
        sa.Column("created", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_leagues_id"), "leagues", ["id"], unique=False)

    op.create_table(
        "players",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("league_id", sa.String(length=36), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("avatar_url", sa.String(), nullable=True),
        sa.Column("created", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(["league_id"], ["leagues.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_players_id"), "players", ["id"], unique=False)
    op.create_index(op.f("ix_players_league_id"), "players", ["league_id"], unique=False)

    op.create_table(
        "games",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("league_id", sa.String(length=36), nullable=False),
        sa.Column("cycle_number", sa.Integer(), server_default="1", nullable=False),
        sa.Column("game_number", sa.Integer(), nullable=False),
        sa.Column("status", game_status_enum, server_default="PENDING", nullable=False),
        sa.Column("date_played", sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(["league_id"], ["leagues.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("league_id", "cycle_number", "game_number"),
    )
    op.create_index(op.f("ix_games_id"), "games", ["id"], unique=False)
    op.create_index(op.f("ix_games_league_id"), "games", ["league_id"], unique=False)

    op.create_table(
        "game_outcomes",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("game_id", sa.String(length=36), nullable=False),
        sa.Column("player_id", sa.String(length=36), nullable=False),
        sa.Column("score", sa.Integer(), nullable=False),
        sa.Column("result", game_result_enum, nullable=False),
        sa.ForeignKeyConstraint(["game_id"], ["games.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["player_id"], ["players.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("game_id", "player_id"),
    )
    op.create_index(op.f("ix_game_outcomes_id"), "game_outcomes", ["id"], unique=False)
    op.create_index(op.f("ix_game_outcomes_game_id"), "game_outcomes", ["game_id"], unique=False)
    op.create_index(op.f("ix_game_outcomes_player_id"), "game_outcomes", ["player_id"], unique=False)


def downgrade() -> None:
    op.drop_table("game_outcomes")
    op.drop_table("games")
    op.drop_table("players")
    op.drop_table("leagues")
    game_result_enum.drop(op.get_bind(), checkfirst=True)
    game_status_enum.drop(op.get_bind(), checkfirst=True)
