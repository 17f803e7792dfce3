"""AgentTelemetry model for numeric observations."""

import enum
from datetime import datetime

from sqlalchemy import DateTime, Float, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from agent_watcher.models.base import Base, BigIntPK, utcnow


class MetricType(str, enum.Enum):
    """Well-known metric types. Any other string is stored as given."""

    LATENCY = "LATENCY"
    TOKENS = "TOKENS"
    COST = "COST"
    ERROR_RATE = "ERROR_RATE"
    CUSTOM = "CUSTOM"


class AgentTelemetry(Base):
    """Model for an append-only metric observation."""

    __tablename__ = "agent_telemetry"

    id: Mapped[int] = mapped_column(
        BigIntPK,
        primary_key=True,
        autoincrement=True,
    )

    agent_id: Mapped[str | None] = mapped_column(String(255), nullable=True, index=True)
    session_id: Mapped[str | None] = mapped_column(String(255), nullable=True, index=True)

    metric_name: Mapped[str] = mapped_column(String(255), nullable=False)
    metric_value: Mapped[float] = mapped_column(Float, nullable=False)
    metric_unit: Mapped[str] = mapped_column(String(50), default="", nullable=False)
    metric_type: Mapped[str] = mapped_column(
        String(100),
        default=MetricType.CUSTOM.value,
        nullable=False,
    )

    timestamp: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        nullable=False,
        index=True,
    )

    # Opaque caller-supplied tags, conventionally JSON text
    tags: Mapped[str | None] = mapped_column(Text, nullable=True)
