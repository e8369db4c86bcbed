import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision = "0001_test_sessions"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "test_sessions",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("total_marks_awarded", sa.Integer(), nullable=True),
        sa.Column("payload", sa.JSON(), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_test_sessions"),
    )
    op.create_index("ix_test_sessions_created_at", "test_sessions", ["created_at"])


def downgrade() -> None:
    op.drop_index("ix_test_sessions_created_at", table_name="test_sessions")
    op.drop_table("test_sessions")
