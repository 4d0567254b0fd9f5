"""Create wine catalog tables

Revision ID: 001
Revises: None
Create Date: 2025-03-01 00:00:00.000000+00:00

What:  Initial schema: users, wines, pictures and the six lookup lists.
How:   PostgreSQL UUID primary keys (gen_random_uuid()), JSONB for ratings and
       free-form wine attributes, TIMESTAMP WITH TIME ZONE everywhere.

Rollback: downgrade() drops every table (destructive).
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

# (table, value column) for the dropdown lists
LOOKUP_TABLES = (
    ("varieties", "variety"),
    ("countries", "country"),
    ("appellations", "appellation"),
    ("vintages", "vintage"),
    ("regions", "region"),
    ("producers", "producer"),
)


def _id_column() -> sa.Column:
    return sa.Column(
        "id",
        postgresql.UUID(as_uuid=True),
        server_default=sa.text("gen_random_uuid()"),
        nullable=False,
    )


def _timestamp_column(name: str) -> sa.Column:
    return sa.Column(
        name,
        sa.TIMESTAMP(timezone=True),
        server_default=sa.text("CURRENT_TIMESTAMP"),
        nullable=False,
    )


def upgrade() -> None:
    op.create_table(
        "users",
        _id_column(),
        sa.Column("username", sa.String(64), nullable=False),
        sa.Column(
            "password_hash",
            sa.String(255),
            nullable=False,
            comment="passlib pbkdf2_sha256 hash, never the password itself",
        ),
        _timestamp_column("created_at"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("username"),
    )

    op.create_table(
        "wines",
        _id_column(),
        sa.Column("name", sa.String(255), nullable=True),
        sa.Column("producer", sa.String(255), nullable=True),
        sa.Column("variety", sa.String(255), nullable=True),
        sa.Column("country", sa.String(255), nullable=True),
        sa.Column("region", sa.String(255), nullable=True),
        sa.Column("appellation", sa.String(255), nullable=True),
        sa.Column("vintage", sa.String(32), nullable=True, comment="Text so 'NV' fits"),
        sa.Column("front_label", sa.String(255), nullable=True),
        sa.Column("back_label", sa.String(255), nullable=True),
        sa.Column("front_label_picture_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("back_label_picture_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("color_rating", postgresql.JSONB(), nullable=True),
        sa.Column("nose_rating", postgresql.JSONB(), nullable=True),
        sa.Column("palate_rating", postgresql.JSONB(), nullable=True),
        sa.Column("overall_rating", postgresql.JSONB(), nullable=True),
        sa.Column(
            "attributes",
            postgresql.JSONB(),
            server_default=sa.text("'{}'::jsonb"),
            nullable=False,
            comment="Client fields without a dedicated column",
        ),
        sa.Column("session_id", sa.String(64), nullable=True),
        _timestamp_column("created_at"),
        _timestamp_column("updated_at"),
        sa.PrimaryKeyConstraint("id"),
    )
    # Catalog list is shown newest first
    op.create_index("idx_wines_created_at", "wines", [sa.text("created_at DESC")])

    op.create_table(
        "pictures",
        _id_column(),
        sa.Column("filename", sa.String(255), nullable=False),
        sa.Column("original_filename", sa.String(255), nullable=True),
        sa.Column("content_type", sa.String(100), nullable=False),
        sa.Column("size", sa.Integer(), nullable=False),
        sa.Column("label_side", sa.String(10), nullable=False, comment="front or back"),
        sa.Column("image_url", sa.String(512), nullable=False),
        sa.Column("session_id", sa.String(64), nullable=True),
        sa.Column("wine_id", postgresql.UUID(as_uuid=True), nullable=True),
        _timestamp_column("created_at"),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["wine_id"], ["wines.id"], ondelete="SET NULL"),
    )
    op.create_index("idx_pictures_session_id", "pictures", ["session_id"])
    op.create_index("idx_pictures_wine_id", "pictures", ["wine_id"])

    for table, column in LOOKUP_TABLES:
        op.create_table(
            table,
            _id_column(),
            sa.Column(column, sa.String(255), nullable=False),
            _timestamp_column("created_at"),
            sa.PrimaryKeyConstraint("id"),
            sa.UniqueConstraint(column),
        )


def downgrade() -> None:
    """Drop every table. All catalog data is lost."""
    for table, _ in reversed(LOOKUP_TABLES):
        op.drop_table(table)

    op.drop_index("idx_pictures_wine_id", table_name="pictures")
    op.drop_index("idx_pictures_session_id", table_name="pictures")
    op.drop_table("pictures")

    op.drop_index("idx_wines_created_at", table_name="wines")
    op.drop_table("wines")

    op.drop_table("users")
