"""005: seed default categories

Revision ID: 005
Revises: 004
Create Date: 2026-10-19
"""

from typing import Sequence, Union

from alembic import op

revision: str = "005"
down_revision: Union[str, None] = "004"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

_DEFAULT_NAMES = (
    "salary", "freelance", "investment", "food", "transport",
    "shopping", "bills", "entertainment", "healthcare", "education",
)


def upgrade() -> None:
    op.execute("""
        INSERT INTO categories (name, description, color) VALUES
            ('salary',        'Income from salary',              '#22c55e'),
            ('freelance',     'Freelance income',                '#3b82f6'),
            ('investment',    'Investment returns',              '#8b5cf6'),
            ('food',          'Food and dining expenses',        '#ef4444'),
            ('transport',     'Transportation costs',            '#f97316'),
            ('shopping',      'Shopping expenses',               '#ec4899'),
            ('bills',         'Utility bills and subscriptions', '#6b7280'),
            ('entertainment', 'Entertainment and leisure',       '#06b6d4'),
            ('healthcare',    'Medical and healthcare expenses', '#84cc16'),
            ('education',     'Education and training costs',    '#f59e0b')
        ON CONFLICT (name) DO NOTHING;
    """)


def downgrade() -> None:
    names = ", ".join(f"'{n}'" for n in _DEFAULT_NAMES)
    op.execute(
        f"DELETE FROM categories WHERE name IN ({names}) "
        "AND NOT EXISTS (SELECT 1 FROM transactions t WHERE t.category_id = categories.id);"
    )
