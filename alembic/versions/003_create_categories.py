"""003: create categories table

Revision ID: 003
Revises: 002
Create Date: 2026-10-19
"""
from typing import Sequence, Union

from alembic import op

revision: str = "003"
down_revision: Union[str, None] = "002"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE categories (
            id              BIGSERIAL       PRIMARY KEY,
            name            VARCHAR(50)     NOT NULL,
            description     VARCHAR(255),
            color           VARCHAR(16),
            is_active       BOOLEAN         NOT NULL DEFAULT TRUE,
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT uq_categories_name       UNIQUE (name),
            CONSTRAINT ck_categories_name_lower CHECK (name = LOWER(name))
        );
    """)
    op.execute("""
        CREATE TRIGGER trg_categories_updated_at
            BEFORE UPDATE ON categories
            FOR EACH ROW EXECUTE FUNCTION fn_update_timestamp();
    """)
    op.execute(
        "COMMENT ON TABLE categories IS 'Shared categories; is_active = FALSE is a soft delete';"
    )


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS categories CASCADE;")
