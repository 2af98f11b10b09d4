from __future__ import annotations

from datetime import date, datetime, time
from typing import Any, Optional

from sqlalchemy import JSON, Boolean, Date, DateTime, ForeignKey, Integer, String, Text, Time
from sqlalchemy.orm import Mapped, mapped_column

from tourdesk.core.database import Base
from tourdesk.models.mixins import BigIntId, TimestampMixin

MODIFICATION_TYPES = (
    "CAMBIAR_HORA_INICIO",
    "CAMBIAR_CUPOS",
    "BLOQUEAR_HORARIO",
    "BLOQUEAR_ACTIVIDAD",
    "BLOQUEAR_TODAS",
)


class TemporaryModification(TimestampMixin, Base):
    """Bulk change applied to the slots of a date range, kept for reverting."""

    __tablename__ = "modificaciones_temporarias"

    id: Mapped[int] = mapped_column(BigIntId, primary_key=True, index=True)
    agencia_id: Mapped[int] = mapped_column(
        BigIntId, ForeignKey("agencias.id"), nullable=False, index=True
    )
    tipo: Mapped[str] = mapped_column(String(30), nullable=False)
    actividad_id: Mapped[Optional[int]] = mapped_column(
        BigIntId, ForeignKey("actividades.id"), nullable=True
    )
    horario_id: Mapped[Optional[int]] = mapped_column(
        BigIntId, ForeignKey("horarios.id"), nullable=True
    )
    fecha_desde: Mapped[date] = mapped_column(Date, nullable=False)
    fecha_hasta: Mapped[date] = mapped_column(Date, nullable=False)
    hora_inicio: Mapped[Optional[time]] = mapped_column(Time, nullable=True)
    hora_fin: Mapped[Optional[time]] = mapped_column(Time, nullable=True)
    cupo: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    motivo: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    activa: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    turnos_afectados: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    turnos_omitidos: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    # [{turno_id, hora_inicio, hora_fin, cupo_total, cupo_disponible, bloquear}]
    valores_previos: Mapped[list[dict[str, Any]]] = mapped_column(
        JSON, default=list, nullable=False
    )
    revertida_en: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
