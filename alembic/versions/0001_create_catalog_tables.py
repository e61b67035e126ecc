"""create books and ingest_offsets

Revision ID: 0001
Revises:
Create Date: 2026-10-19
"""
from alembic import op
import sqlalchemy as sa


revision = "0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "books",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("isbn", sa.String(100), nullable=False, unique=True),
        sa.Column("external_id", sa.String(100), nullable=False),
        sa.Column("source", sa.String(50), nullable=False),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("subtitle", sa.Text()),
        sa.Column("authors", sa.JSON(), nullable=False),
        sa.Column("publisher", sa.Text()),
        sa.Column("published_date", sa.String(32)),
        sa.Column("description", sa.Text()),
        sa.Column("page_count", sa.Integer()),
        sa.Column("language", sa.String(16), nullable=False),
        sa.Column("cover_url", sa.Text(), nullable=False),
        sa.Column("cover_thumbnail", sa.Text()),
        sa.Column("categories", sa.JSON(), nullable=False),
        sa.Column("avg_rating", sa.Float(), nullable=False),
        sa.Column("ratings_count", sa.BigInteger(), nullable=False),
        sa.Column("is_verified", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("idx_books_title_lower", "books", [sa.text("lower(title)")])
    op.create_index("idx_books_source_external_id", "books", ["source", "external_id"])

    op.create_table(
        "ingest_offsets",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("dataset_variant", sa.String(50), nullable=False, unique=True),
        sa.Column("next_offset", sa.Integer(), nullable=False),
        sa.Column("total", sa.Integer(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
    )


def downgrade() -> None:
    op.drop_table("ingest_offsets")
    op.drop_index("idx_books_source_external_id", table_name="books")
    op.drop_index("idx_books_title_lower", table_name="books")
    op.drop_table("books")
