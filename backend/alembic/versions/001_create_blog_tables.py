"""Create articles, categories and article_categories tables

Revision ID: 001
Revises: None
Create Date: 2024-01-15 00:00:00.000000+00:00

What:  Initial schema for the blog.
How:   Portable column types only, so the revision applies to PostgreSQL,
       MySQL and SQLite alike.

Rollback: downgrade() drops all three tables (destructive).
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "categories",
        sa.Column("category_id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.PrimaryKeyConstraint("category_id"),
        sa.UniqueConstraint("name", name="uq_categories_name"),
    )

    op.create_table(
        "articles",
        sa.Column("article_id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("author", sa.String(100), nullable=True),
        # Wall-clock time in the application's fixed local offset (+08:00)
        sa.Column(
            "publish_date",
            sa.DateTime(timezone=False),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("article_id"),
    )

    # Listing by category sorts on publish_date DESC
    op.create_index(
        "idx_articles_publish_date",
        "articles",
        [sa.text("publish_date DESC")],
    )

    op.create_table(
        "article_categories",
        sa.Column("article_id", sa.Integer(), nullable=False),
        sa.Column("category_id", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(
            ["article_id"], ["articles.article_id"], ondelete="CASCADE"
        ),
        sa.ForeignKeyConstraint(
            ["category_id"], ["categories.category_id"], ondelete="CASCADE"
        ),
        sa.PrimaryKeyConstraint("article_id", "category_id"),
    )


def downgrade() -> None:
    op.drop_table("article_categories")
    op.drop_index("idx_articles_publish_date", table_name="articles")
    op.drop_table("articles")
    op.drop_table("categories")
