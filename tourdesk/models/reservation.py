from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Optional

from sqlalchemy import DateTime, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from tourdesk.core.database import Base
from tourdesk.models.mixins import BigIntId, SoftDeleteMixin, TimestampMixin

if TYPE_CHECKING:  # pragma: no cover
    from tourdesk.models.slot import Slot

RESERVATION_STATES = (
    "pendiente",
    "confirmada",
    "expirada",
    "cancelada",
    "no_show",
    "check_in",
)


class Reservation(TimestampMixin, SoftDeleteMixin, Base):
    """A customer booking (reserva) that holds capacity on a slot."""

    __tablename__ = "reservas"

    id: Mapped[int] = mapped_column(BigIntId, primary_key=True, index=True)
    turno_id: Mapped[int] = mapped_column(
        BigIntId, ForeignKey("turnos.id"), nullable=False, index=True
    )
    actividad_id: Mapped[int] = mapped_column(
        BigIntId, ForeignKey("actividades.id"), nullable=False, index=True
    )
    agencia_id: Mapped[int] = mapped_column(
        BigIntId, ForeignKey("agencias.id"), nullable=False, index=True
    )
    estado: Mapped[str] = mapped_column(String(20), default="pendiente", nullable=False)
    cantidad_personas: Mapped[int] = mapped_column(Integer, nullable=False)
    cliente_nombre: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    cliente_email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    cliente_telefono: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    monto_total: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    moneda: Mapped[str] = mapped_column(String(3), default="USD", nullable=False)
    pago_referencia: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    expira_en: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    slot: Mapped["Slot"] = relationship("Slot", back_populates="reservations")
    items: Mapped[list["ReservationItem"]] = relationship(
        "ReservationItem",
        back_populates="reservation",
        cascade="all, delete-orphan",
        order_by="ReservationItem.id",
    )


class ReservationItem(Base):
    __tablename__ = "reserva_items"

    id: Mapped[int] = mapped_column(BigIntId, primary_key=True, index=True)
    reserva_id: Mapped[int] = mapped_column(
        BigIntId, ForeignKey("reservas.id", ondelete="CASCADE"), nullable=False
    )
    # "tarifa", "adicional" o "transporte"
    item_tipo: Mapped[str] = mapped_column(String(20), nullable=False)
    item_id: Mapped[int] = mapped_column(BigIntId, nullable=False)
    cantidad: Mapped[int] = mapped_column(Integer, nullable=False)
    precio_unitario: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)

    reservation: Mapped["Reservation"] = relationship("Reservation", back_populates="items")
