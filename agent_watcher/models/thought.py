"""AgentThought model for recorded reasoning steps."""

import enum
from datetime import datetime

from sqlalchemy import DateTime, Float, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from agent_watcher.models.base import Base, BigIntPK, utcnow


class ThoughtType(str, enum.Enum):
    """Well-known thought types. Any other string is stored as given."""

    PLANNING = "PLANNING"
    REASONING = "REASONING"
    TOOL_SELECTION = "TOOL_SELECTION"
    EXECUTION = "EXECUTION"
    REFLECTION = "REFLECTION"
    ERROR = "ERROR"
    GENERAL = "GENERAL"


class AgentThought(Base):
    """Model for one reasoning step of an agent.

    ``session_id`` is a soft reference: thoughts may be logged for sessions
    that were never started through this service.
    """

    __tablename__ = "agent_thoughts"

    id: Mapped[int] = mapped_column(
        BigIntPK,
        primary_key=True,
        autoincrement=True,
    )

    agent_id: Mapped[str | None] = mapped_column(String(255), nullable=True, index=True)
    session_id: Mapped[str | None] = mapped_column(String(255), nullable=True, index=True)

    thought_type: Mapped[str | None] = mapped_column(String(100), nullable=True)
    thought_content: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Nominally 0.0-1.0, not enforced
    confidence_score: Mapped[float | None] = mapped_column(Float, nullable=True)

    timestamp: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        nullable=False,
        index=True,
    )

    # Reserved for threaded reasoning chains; nothing writes it yet
    parent_thought_id: Mapped[int | None] = mapped_column(
        BigIntPK,
        ForeignKey("agent_thoughts.id", ondelete="SET NULL"),
        nullable=True,
    )

    # "metadata" is reserved on declarative classes
    thought_metadata: Mapped[str | None] = mapped_column("metadata", Text, nullable=True)
