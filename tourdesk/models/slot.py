from __future__ import annotations

from datetime import date, time
from typing import TYPE_CHECKING, Optional

from sqlalchemy import Boolean, Date, ForeignKey, Integer, Time
from sqlalchemy.orm import Mapped, mapped_column, relationship

from tourdesk.core.database import Base
from tourdesk.models.mixins import BigIntId, SoftDeleteMixin, TimestampMixin

if TYPE_CHECKING:  # pragma: no cover
    from tourdesk.models.reservation import Reservation
    from tourdesk.models.schedule import Schedule


class Slot(TimestampMixin, SoftDeleteMixin, Base):
    """Concrete bookable date (turno) generated from a schedule."""

    __tablename__ = "turnos"

    id: Mapped[int] = mapped_column(BigIntId, primary_key=True, index=True)
    horario_id: Mapped[int] = mapped_column(
        BigIntId, ForeignKey("horarios.id"), nullable=False, index=True
    )
    actividad_id: Mapped[int] = mapped_column(
        BigIntId, ForeignKey("actividades.id"), nullable=False, index=True
    )
    agencia_id: Mapped[int] = mapped_column(
        BigIntId, ForeignKey("agencias.id"), nullable=False, index=True
    )
    fecha: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    hora_inicio: Mapped[Optional[time]] = mapped_column(Time, nullable=True)
    hora_fin: Mapped[Optional[time]] = mapped_column(Time, nullable=True)
    cupo_total: Mapped[int] = mapped_column(Integer, nullable=False)
    cupo_disponible: Mapped[int] = mapped_column(Integer, nullable=False)
    bloquear: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    schedule: Mapped["Schedule"] = relationship("Schedule", back_populates="slots")
    reservations: Mapped[list["Reservation"]] = relationship(
        "Reservation", back_populates="slot"
    )

    @property
    def reserved(self) -> int:
        """Capacity already consumed by reservations."""
        return self.cupo_total - self.cupo_disponible
