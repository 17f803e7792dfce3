"""AgentAction model for operations an agent performed."""

import enum
from datetime import datetime

from sqlalchemy import BigInteger, DateTime, Enum, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from agent_watcher.models.base import Base, BigIntPK, elapsed_ms, utcnow


class ActionStatus(str, enum.Enum):
    """Lifecycle status of an action."""

    STARTED = "STARTED"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"


class ActionType(str, enum.Enum):
    """Well-known action types. Any other string is stored as given."""

    API_CALL = "API_CALL"
    TOOL_USE = "TOOL_USE"
    COMPUTATION = "COMPUTATION"
    DATA_RETRIEVAL = "DATA_RETRIEVAL"
    GENERAL = "GENERAL"


TERMINAL_ACTION_STATUSES = frozenset({ActionStatus.COMPLETED, ActionStatus.FAILED})


class AgentAction(Base):
    """Model for one tool, API or computation step of an agent."""

    __tablename__ = "agent_actions"

    id: Mapped[int] = mapped_column(
        BigIntPK,
        primary_key=True,
        autoincrement=True,
    )

    agent_id: Mapped[str | None] = mapped_column(String(255), nullable=True, index=True)
    session_id: Mapped[str | None] = mapped_column(String(255), nullable=True, index=True)

    action_type: Mapped[str | None] = mapped_column(String(100), nullable=True)
    action_name: Mapped[str | None] = mapped_column(String(255), nullable=True)

    # Opaque payloads, conventionally JSON text
    input_data: Mapped[str | None] = mapped_column(Text, nullable=True)
    output_data: Mapped[str | None] = mapped_column(Text, nullable=True)

    status: Mapped[ActionStatus] = mapped_column(
        Enum(ActionStatus, name="actionstatus"),
        default=ActionStatus.STARTED,
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
    duration_ms: Mapped[int | None] = mapped_column(BigInteger, nullable=True)

    error_message: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Reserved; nothing writes it yet
    related_thought_id: Mapped[int | None] = mapped_column(
        BigIntPK,
        ForeignKey("agent_thoughts.id", ondelete="SET NULL"),
        nullable=True,
    )

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_ACTION_STATUSES

    def complete(self, output_data: str | None) -> None:
        self.output_data = output_data
        self._finish(ActionStatus.COMPLETED)

    def fail(self, error_message: str | None) -> None:
        self.error_message = error_message
        self._finish(ActionStatus.FAILED)

    def _finish(self, status: ActionStatus) -> None:
        self.end_time = utcnow()
        self.status = status
        self.duration_ms = elapsed_ms(self.start_time, self.end_time)
