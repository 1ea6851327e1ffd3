"""002: users with a single role each

Revision ID: 002
Revises: 001
Create Date: 2026-10-19

Emails are stored lowercased (enforced below); registration and the admin
endpoints normalize before insert.
"""
from typing import Sequence, Union

from alembic import op

revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

ROLES = ("admin", "user", "read-only")


def upgrade() -> None:
    roles = ", ".join(f"'{r}'" for r in ROLES)
    op.execute(f"""
        CREATE TABLE users (
            id              UUID            PRIMARY KEY DEFAULT gen_random_uuid(),
            email           VARCHAR(255)    NOT NULL,
            password_hash   VARCHAR(255)    NOT NULL,
            role            VARCHAR(20)     NOT NULL DEFAULT 'user',
            first_name      VARCHAR(100),
            last_name       VARCHAR(100),
            is_active       BOOLEAN         NOT NULL DEFAULT TRUE,
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT uq_users_email       UNIQUE (email),
            CONSTRAINT ck_users_email_lower CHECK (email = LOWER(email)),
            CONSTRAINT ck_users_role        CHECK (role IN ({roles}))
        );
    """)
    # registration trends and "new users in the last 7 days"
    op.execute("CREATE INDEX idx_users_created_at ON users (created_at);")
    op.execute("""
        CREATE TRIGGER trg_users_updated_at
            BEFORE UPDATE ON users
            FOR EACH ROW EXECUTE FUNCTION fn_update_timestamp();
    """)


def downgrade() -> None:
    op.execute("DROP TRIGGER IF EXISTS trg_users_updated_at ON users;")
    op.execute("DROP TABLE IF EXISTS users;")
