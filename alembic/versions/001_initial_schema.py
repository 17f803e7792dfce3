"""Initial database schema.

Revision ID: 001
Revises: 
Create Date: 2026-10-19
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

SESSION_STATUSES = ("ACTIVE", "COMPLETED", "FAILED", "TIMEOUT")
ACTION_STATUSES = ("STARTED", "IN_PROGRESS", "COMPLETED", "FAILED")


def upgrade() -> None:
    # Create enums using raw SQL with IF NOT EXISTS
    op.execute("""
        DO $$
        BEGIN
            IF NOT EXISTS (SELECT 1 FROM pg_type WHERE typname = 'sessionstatus') THEN
                CREATE TYPE sessionstatus AS ENUM ('ACTIVE', 'COMPLETED', 'FAILED', 'TIMEOUT');
            END IF;
            IF NOT EXISTS (SELECT 1 FROM pg_type WHERE typname = 'actionstatus') THEN
                CREATE TYPE actionstatus AS ENUM ('STARTED', 'IN_PROGRESS', 'COMPLETED', 'FAILED');
            END IF;
        END
        $$;
    """)

    # Create agent_sessions table
    op.create_table(
        "agent_sessions",
        sa.Column("id", sa.BigInteger, primary_key=True, autoincrement=True),
        sa.Column("session_id", sa.String(255), nullable=False),
        sa.Column("agent_id", sa.String(255), nullable=True),
        sa.Column("user_query", sa.Text, nullable=True),
        sa.Column(
            "session_status",
            postgresql.ENUM(*SESSION_STATUSES, name="sessionstatus", create_type=False),
            nullable=False,
            server_default="ACTIVE",
        ),
        sa.Column(
            "start_time",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column("end_time", sa.DateTime(timezone=True), nullable=True),
        sa.Column("total_thoughts", sa.Integer, nullable=False, server_default="0"),
        sa.Column("total_actions", sa.Integer, nullable=False, server_default="0"),
        sa.Column("final_response", sa.Text, nullable=True),
    )
    op.create_index("ix_agent_sessions_session_id", "agent_sessions", ["session_id"], unique=True)
    op.create_index("ix_agent_sessions_agent_id", "agent_sessions", ["agent_id"])
    op.create_index("ix_agent_sessions_start_time", "agent_sessions", ["start_time"])

    # Create agent_thoughts table
    op.create_table(
        "agent_thoughts",
        sa.Column("id", sa.BigInteger, primary_key=True, autoincrement=True),
        sa.Column("agent_id", sa.String(255), nullable=True),
        sa.Column("session_id", sa.String(255), nullable=True),
        sa.Column("thought_type", sa.String(100), nullable=True),
        sa.Column("thought_content", sa.Text, nullable=True),
        sa.Column("confidence_score", sa.Float, nullable=True),
        sa.Column(
            "timestamp",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column(
            "parent_thought_id",
            sa.BigInteger,
            sa.ForeignKey("agent_thoughts.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("metadata", sa.Text, nullable=True),
    )
    op.create_index("ix_agent_thoughts_agent_id", "agent_thoughts", ["agent_id"])
    op.create_index("ix_agent_thoughts_session_id", "agent_thoughts", ["session_id"])
    op.create_index("ix_agent_thoughts_timestamp", "agent_thoughts", ["timestamp"])

    # Create agent_actions table
    op.create_table(
        "agent_actions",
        sa.Column("id", sa.BigInteger, primary_key=True, autoincrement=True),
        sa.Column("agent_id", sa.String(255), nullable=True),
        sa.Column("session_id", sa.String(255), nullable=True),
        sa.Column("action_type", sa.String(100), nullable=True),
        sa.Column("action_name", sa.String(255), nullable=True),
        sa.Column("input_data", sa.Text, nullable=True),
        sa.Column("output_data", sa.Text, nullable=True),
        sa.Column(
            "status",
            postgresql.ENUM(*ACTION_STATUSES, name="actionstatus", create_type=False),
            nullable=False,
            server_default="STARTED",
        ),
        sa.Column(
            "start_time",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column("end_time", sa.DateTime(timezone=True), nullable=True),
        sa.Column("duration_ms", sa.BigInteger, nullable=True),
        sa.Column("error_message", sa.Text, nullable=True),
        sa.Column(
            "related_thought_id",
            sa.BigInteger,
            sa.ForeignKey("agent_thoughts.id", ondelete="SET NULL"),
            nullable=True,
        ),
    )
    op.create_index("ix_agent_actions_agent_id", "agent_actions", ["agent_id"])
    op.create_index("ix_agent_actions_session_id", "agent_actions", ["session_id"])
    op.create_index("ix_agent_actions_start_time", "agent_actions", ["start_time"])

    # Create agent_telemetry table
    op.create_table(
        "agent_telemetry",
        sa.Column("id", sa.BigInteger, primary_key=True, autoincrement=True),
        sa.Column("agent_id", sa.String(255), nullable=True),
        sa.Column("session_id", sa.String(255), nullable=True),
        sa.Column("metric_name", sa.String(255), nullable=False),
        sa.Column("metric_value", sa.Float, nullable=False),
        sa.Column("metric_unit", sa.String(50), nullable=False, server_default=""),
        sa.Column("metric_type", sa.String(100), nullable=False, server_default="CUSTOM"),
        sa.Column(
            "timestamp",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column("tags", sa.Text, nullable=True),
    )
    op.create_index("ix_agent_telemetry_agent_id", "agent_telemetry", ["agent_id"])
    op.create_index("ix_agent_telemetry_session_id", "agent_telemetry", ["session_id"])
    op.create_index("ix_agent_telemetry_timestamp", "agent_telemetry", ["timestamp"])


def downgrade() -> None:
    op.drop_table("agent_telemetry")
    op.drop_table("agent_actions")
    op.drop_table("agent_thoughts")
    op.drop_table("agent_sessions")

    # Drop enums
    for name, values in (
        ("actionstatus", ACTION_STATUSES),
        ("sessionstatus", SESSION_STATUSES),
    ):
        postgresql.ENUM(*values, name=name).drop(op.get_bind(), checkfirst=True)
