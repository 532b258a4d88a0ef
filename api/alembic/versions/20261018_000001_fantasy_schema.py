"""Fantasy leagues, teams, matchups and notifications."""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = "20261018_000001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "fantasy_leagues",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("season", sa.Integer(), nullable=False),
        sa.Column("commissioner_id", sa.String(64), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_table(
        "fantasy_teams",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column(
            "league_id",
            sa.String(64),
            sa.ForeignKey("fantasy_leagues.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("owner_id", sa.String(64), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_fantasy_teams_league_id", "fantasy_teams", ["league_id"])
    op.create_index("ix_fantasy_teams_owner_id", "fantasy_teams", ["owner_id"])

    op.create_table(
        "fantasy_matchups",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "league_id",
            sa.String(64),
            sa.ForeignKey("fantasy_leagues.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("season", sa.Integer(), nullable=False),
        sa.Column("week", sa.Integer(), nullable=False),
        sa.Column(
            "home_team_id",
            sa.String(64),
            sa.ForeignKey("fantasy_teams.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "away_team_id",
            sa.String(64),
            sa.ForeignKey("fantasy_teams.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("home_score", sa.Float(), nullable=False, server_default="0"),
        sa.Column("away_score", sa.Float(), nullable=False, server_default="0"),
        sa.Column("is_complete", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index(
        "idx_fantasy_matchups_league_season",
        "fantasy_matchups",
        ["league_id", "season", "is_complete"],
    )

    op.create_table(
        "notifications",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column("user_id", sa.String(64), nullable=False),
        sa.Column("league_id", sa.String(64), nullable=True),
        sa.Column("type", sa.String(50), nullable=False),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("priority", sa.String(10), nullable=False, server_default="normal"),
        sa.Column(
            "data",
            postgresql.JSONB(),
            server_default=sa.text("'{}'::jsonb"),
            nullable=False,
        ),
        sa.Column("read", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("read_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("idx_notifications_user_read", "notifications", ["user_id", "read"])
    op.create_index("idx_notifications_user_created", "notifications", ["user_id", "created_at"])

    op.create_table(
        "notification_preferences",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.String(64), nullable=False),
        sa.Column("category", sa.String(30), nullable=False),
        sa.Column("enabled", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.UniqueConstraint("user_id", "category", name="uq_notification_pref_user_category"),
    )


def downgrade() -> None:
    op.drop_table("notification_preferences")
    op.drop_index("idx_notifications_user_created", table_name="notifications")
    op.drop_index("idx_notifications_user_read", table_name="notifications")
    op.drop_table("notifications")
    op.drop_index("idx_fantasy_matchups_league_season", table_name="fantasy_matchups")
    op.drop_table("fantasy_matchups")
    op.drop_index("ix_fantasy_teams_owner_id", table_name="fantasy_teams")
    op.drop_index("ix_fantasy_teams_league_id", table_name="fantasy_teams")
    op.drop_table("fantasy_teams")
    op.drop_table("fantasy_leagues")
