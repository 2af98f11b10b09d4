from __future__ import annotations

from datetime import date, time
from typing import TYPE_CHECKING, Optional

from sqlalchemy import JSON, Boolean, Date, ForeignKey, Integer, Time
from sqlalchemy.orm import Mapped, mapped_column, relationship

from tourdesk.core.database import Base
from tourdesk.models.mixins import BigIntId, SoftDeleteMixin, TimestampMixin

if TYPE_CHECKING:  # pragma: no cover
    from tourdesk.models.activity import Activity
    from tourdesk.models.slot import Slot

# 0 = domingo ... 6 = sábado
ALL_WEEKDAYS = [0, 1, 2, 3, 4, 5, 6]


class Schedule(TimestampMixin, SoftDeleteMixin, Base):
    """Recurrence rule (horario) from which the bookable slots are generated."""

    __tablename__ = "horarios"

    id: Mapped[int] = mapped_column(BigIntId, primary_key=True, index=True)
    actividad_id: Mapped[int] = mapped_column(
        BigIntId, ForeignKey("actividades.id"), nullable=False, index=True
    )
    agencia_id: Mapped[int] = mapped_column(
        BigIntId, ForeignKey("agencias.id"), nullable=False, index=True
    )
    fecha_inicio: Mapped[date] = mapped_column(Date, nullable=False)
    dias: Mapped[list[int]] = mapped_column(
        JSON, default=lambda: list(ALL_WEEKDAYS), nullable=False
    )
    dia_completo: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    hora_inicio: Mapped[Optional[time]] = mapped_column(Time, nullable=True)
    hora_fin: Mapped[Optional[time]] = mapped_column(Time, nullable=True)
    cupo: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    habilitada: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    activity: Mapped["Activity"] = relationship("Activity", back_populates="schedules")
    slots: Mapped[list["Slot"]] = relationship("Slot", back_populates="schedule")

    def __repr__(self) -> str:  # pragma: no cover - debugging helper
        return (
            "<Schedule(id={id}, actividad_id={activity}, fecha_inicio={start}, dias={days})>"
        ).format(
            id=self.id,
            activity=self.actividad_id,
            start=self.fecha_inicio,
            days=self.dias,
        )
