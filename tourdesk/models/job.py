from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from sqlalchemy import JSON, DateTime, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from tourdesk.core.database import Base
from tourdesk.models.mixins import BigIntId, utcnow

JOB_PENDING = "pendiente"
JOB_RUNNING = "en_curso"
JOB_DONE = "completado"
JOB_FAILED = "fallido"


class SlotGenerationJob(Base):
    """Tracked background generation of the slots of an activity or schedule."""

    __tablename__ = "trabajos_generacion_turnos"

    id: Mapped[int] = mapped_column(BigIntId, primary_key=True, index=True)
    actividad_id: Mapped[int] = mapped_column(
        BigIntId, ForeignKey("actividades.id"), nullable=False, index=True
    )
    horario_id: Mapped[Optional[int]] = mapped_column(
        BigIntId, ForeignKey("horarios.id"), nullable=True
    )
    estado: Mapped[str] = mapped_column(String(20), default=JOB_PENDING, nullable=False)
    resultado: Mapped[Optional[dict[str, Any]]] = mapped_column(JSON, nullable=True)
    error: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )
    iniciado_en: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    finalizado_en: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
