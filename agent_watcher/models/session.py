"""AgentSession model for tracking a single agent run."""

import enum
from datetime import datetime

from sqlalchemy import DateTime, Enum, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from agent_watcher.models.base import Base, BigIntPK, utcnow


class SessionStatus(str, enum.Enum):
    """Status of an agent session."""

    ACTIVE = "ACTIVE"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"
    TIMEOUT = "TIMEOUT"


class AgentSession(Base):
    """Model for one agent run.

    Thought and action counters are a cached count of child rows; they are
    only ever incremented, never recomputed in place.
    """

    __tablename__ = "agent_sessions"

    id: Mapped[int] = mapped_column(
        BigIntPK,
        primary_key=True,
        autoincrement=True,
    )

    # Externally visible identifier
    session_id: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
        index=True,
    )

    agent_id: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
        index=True,
    )

    user_query: Mapped[str | None] = mapped_column(Text, nullable=True)

    status: Mapped[SessionStatus] = mapped_column(
        "session_status",
        Enum(SessionStatus, name="sessionstatus"),
        default=SessionStatus.ACTIVE,
        nullable=False,
    )

    start_time: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        nullable=False,
        index=True,
    )

    end_time: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    total_thoughts: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    total_actions: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    final_response: Mapped[str | None] = mapped_column(Text, nullable=True)

    @property
    def is_active(self) -> bool:
        return self.status == SessionStatus.ACTIVE

    def complete(self, final_response: str | None) -> None:
        self._finish(SessionStatus.COMPLETED)
        self.final_response = final_response

    def mark_failed(self) -> None:
        self._finish(SessionStatus.FAILED)

    def mark_timed_out(self) -> None:
        self._finish(SessionStatus.TIMEOUT)

    def _finish(self, status: SessionStatus) -> None:
        if not self.is_active:
            raise ValueError(
                f"Session {self.session_id} is already {self.status.value}"
            )
        self.status = status
        self.end_time = utcnow()
