from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from sqlalchemy import Boolean, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from tourdesk.core.database import Base
from tourdesk.models.mixins import BigIntId, SoftDeleteMixin, TimestampMixin

if TYPE_CHECKING:  # pragma: no cover
    from tourdesk.models.agency import Agency
    from tourdesk.models.catalogue import AddOn, Discount, Transport
    from tourdesk.models.schedule import Schedule
    from tourdesk.models.tariff import Tariff

ACTIVITY_STATES = ("borrador", "publicado")


class Activity(TimestampMixin, SoftDeleteMixin, Base):
    """A bookable tour or experience offered by an agency."""

    __tablename__ = "actividades"

    id: Mapped[int] = mapped_column(BigIntId, primary_key=True, index=True)
    agencia_id: Mapped[int] = mapped_column(
        BigIntId, ForeignKey("agencias.id"), nullable=False, index=True
    )
    titulo: Mapped[str] = mapped_column(String(255), nullable=False)
    titulo_en: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    descripcion: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    descripcion_en: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    es_privada: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    imagen: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    estado: Mapped[str] = mapped_column(String(20), default="borrador", nullable=False)
    iframe_code: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    minimo_personas_reserva: Mapped[int] = mapped_column(Integer, default=1, nullable=False)
    limite_reserva_minutos: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    umbral_limite_personas: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    umbral_limite_minutos: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    umbral_limite_tipo: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)

    ubicacion_lat: Mapped[Optional[float]] = mapped_column(Numeric(9, 6), nullable=True)
    ubicacion_lng: Mapped[Optional[float]] = mapped_column(Numeric(9, 6), nullable=True)
    ubicacion_direccion: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    agency: Mapped["Agency"] = relationship("Agency", back_populates="activities")
    schedules: Mapped[list["Schedule"]] = relationship(
        "Schedule", back_populates="activity", order_by="Schedule.id"
    )
    tariffs: Mapped[list["Tariff"]] = relationship(
        "Tariff", back_populates="activity", order_by="Tariff.id"
    )
    add_ons: Mapped[list["AddOn"]] = relationship(
        "AddOn", secondary="actividad_adicionales", viewonly=True, order_by="AddOn.id"
    )
    transports: Mapped[list["Transport"]] = relationship(
        "Transport", secondary="actividad_transporte", viewonly=True, order_by="Transport.id"
    )
    discounts: Mapped[list["Discount"]] = relationship(
        "Discount", secondary="actividad_descuento", viewonly=True, order_by="Discount.id"
    )

    def __repr__(self) -> str:  # pragma: no cover - debugging helper
        return f"<Activity(id={self.id}, titulo={self.titulo!r}, estado={self.estado})>"
