"""004: create transactions table

Revision ID: 004
Revises: 003
Create Date: 2026-10-19
"""
from typing import Sequence, Union

from alembic import op

revision: str = "004"
down_revision: Union[str, None] = "003"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE transactions (
            id              BIGSERIAL       PRIMARY KEY,
            user_id         UUID            NOT NULL REFERENCES users (id) ON DELETE CASCADE,
            category_id     BIGINT          NOT NULL REFERENCES categories (id),
            type            VARCHAR(10)     NOT NULL,
            amount          NUMERIC(12, 2)  NOT NULL,
            description     VARCHAR(255)    NOT NULL,
            date            DATE            NOT NULL,
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_transactions_type   CHECK (type IN ('income', 'expense')),
            CONSTRAINT ck_transactions_amount CHECK (amount >= 0)
        );
    """)
    op.execute("CREATE INDEX idx_transactions_user_date ON transactions (user_id, date DESC);")
    op.execute("CREATE INDEX idx_transactions_date ON transactions (date);")
    op.execute("CREATE INDEX idx_transactions_created_at ON transactions (created_at);")
    op.execute("CREATE INDEX idx_transactions_category ON transactions (category_id);")
    op.execute("""
        CREATE TRIGGER trg_transactions_updated_at
            BEFORE UPDATE ON transactions
            FOR EACH ROW EXECUTE FUNCTION fn_update_timestamp();
    """)


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS transactions CASCADE;")
