"""Initial schema: tournaments, registrations, results, blog posts

Revision ID: 5f2a9c1d7e30
Revises:
Create Date: 2026-10-19 12:00:00.000000+00:00
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# Revision identifiers, used by Alembic.
revision: str = "5f2a9c1d7e30"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "tournaments",
        sa.Column("id", sa.String(length=32), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("type", sa.String(length=20), nullable=False),
        sa.Column("location", sa.String(length=100), nullable=False),
        sa.Column("start_date", sa.DateTime(), nullable=False),
        sa.Column("end_date", sa.DateTime(), nullable=False),
        sa.Column("entry_fee", sa.Float(), nullable=False),
        sa.Column("prize_fund", sa.Float(), nullable=False),
        sa.Column("time_control", sa.String(length=50), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("image_url", sa.String(length=500), nullable=True),
        sa.Column("total_rounds", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("status", sa.String(length=15), nullable=False, server_default="Upcoming"),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
        sa.CheckConstraint("total_rounds >= 0", name="ck_tournaments_total_rounds"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_tournaments_status", "tournaments", ["status"], unique=False)
    op.create_index("idx_tournaments_start_date", "tournaments", ["start_date"], unique=False)

    op.create_table(
        "player_registrations",
        sa.Column("id", sa.String(length=32), nullable=False),
        sa.Column("tournament_id", sa.String(length=32), nullable=False),
        sa.Column("tournament_name", sa.String(length=100), nullable=False),
        sa.Column("player_name", sa.String(length=255), nullable=False),
        sa.Column("player_email", sa.String(length=255), nullable=True),
        sa.Column("gender", sa.String(length=20), nullable=True),
        sa.Column("dob", sa.String(length=10), nullable=True),
        sa.Column("organization", sa.String(length=255), nullable=True),
        sa.Column("mobile", sa.String(length=30), nullable=True),
        sa.Column("fide_rating", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("fide_id", sa.String(length=20), nullable=False, server_default="-"),
        sa.Column("fee_paid", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("registration_date", sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(["tournament_id"], ["tournaments.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "idx_registrations_tournament",
        "player_registrations",
        ["tournament_id", "registration_date"],
        unique=False,
    )

    op.create_table(
        "tournament_results",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("tournament_id", sa.String(length=32), nullable=False),
        sa.Column(
            "player_scores",
            postgresql.JSONB(astext_type=sa.Text()),
            nullable=False,
            server_default=sa.text("'[]'::jsonb"),
        ),
        sa.Column("version", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("tournament_id"),
    )

    op.create_table(
        "blog_posts",
        sa.Column("id", sa.String(length=32), nullable=False),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("slug", sa.String(length=255), nullable=False),
        sa.Column("image_url", sa.String(length=500), nullable=True),
        sa.Column("category", sa.String(length=50), nullable=False),
        sa.Column(
            "tags",
            postgresql.JSONB(astext_type=sa.Text()),
            nullable=False,
            server_default=sa.text("'[]'::jsonb"),
        ),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("slug"),
    )
    op.create_index("idx_blog_posts_created_at", "blog_posts", ["created_at"], unique=False)


def downgrade() -> None:
    op.drop_index("idx_blog_posts_created_at", table_name="blog_posts")
    op.drop_table("blog_posts")
    op.drop_table("tournament_results")
    op.drop_index("idx_registrations_tournament", table_name="player_registrations")
    op.drop_table("player_registrations")
    op.drop_index("idx_tournaments_start_date", table_name="tournaments")
    op.drop_index("idx_tournaments_status", table_name="tournaments")
    op.drop_table("tournaments")
