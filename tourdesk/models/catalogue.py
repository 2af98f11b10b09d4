"""Agency catalogue entries linked to activities through pivot tables."""

from __future__ import annotations

from decimal import Decimal
from typing import Optional

from sqlalchemy import Boolean, Column, ForeignKey, Integer, Numeric, String, Table, Text
from sqlalchemy.orm import Mapped, mapped_column

from tourdesk.core.database import Base
from tourdesk.models.mixins import BigIntId, SoftDeleteMixin, TimestampMixin

activity_add_ons = Table(
    "actividad_adicionales",
    Base.metadata,
    Column("actividad_id", BigIntId, ForeignKey("actividades.id"), primary_key=True),
    Column("adicionales_id", BigIntId, ForeignKey("adicionales.id"), primary_key=True),
)

activity_transports = Table(
    "actividad_transporte",
    Base.metadata,
    Column("actividad_id", BigIntId, ForeignKey("actividades.id"), primary_key=True),
    Column("transporte_id", BigIntId, ForeignKey("transportes.id"), primary_key=True),
)

activity_discounts = Table(
    "actividad_descuento",
    Base.metadata,
    Column("actividad_id", BigIntId, ForeignKey("actividades.id"), primary_key=True),
    Column("descuento_id", BigIntId, ForeignKey("descuentos.id"), primary_key=True),
)


class AddOn(TimestampMixin, SoftDeleteMixin, Base):
    __tablename__ = "adicionales"

    id: Mapped[int] = mapped_column(BigIntId, primary_key=True, index=True)
    agencia_id: Mapped[int] = mapped_column(BigIntId, ForeignKey("agencias.id"), nullable=False)
    nombre: Mapped[str] = mapped_column(String(255), nullable=False)
    descripcion: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    precio: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    moneda: Mapped[str] = mapped_column(String(3), default="USD", nullable=False)
    activo: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)


class Transport(TimestampMixin, SoftDeleteMixin, Base):
    __tablename__ = "transportes"

    id: Mapped[int] = mapped_column(BigIntId, primary_key=True, index=True)
    agencia_id: Mapped[int] = mapped_column(BigIntId, ForeignKey("agencias.id"), nullable=False)
    nombre: Mapped[str] = mapped_column(String(255), nullable=False)
    descripcion: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    precio: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    capacidad: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    activo: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)


class Discount(TimestampMixin, SoftDeleteMixin, Base):
    __tablename__ = "descuentos"

    id: Mapped[int] = mapped_column(BigIntId, primary_key=True, index=True)
    agencia_id: Mapped[int] = mapped_column(BigIntId, ForeignKey("agencias.id"), nullable=False)
    nombre: Mapped[str] = mapped_column(String(255), nullable=False)
    codigo: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    # "porcentaje" o "monto"
    tipo: Mapped[str] = mapped_column(String(20), default="porcentaje", nullable=False)
    valor: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    activo: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)


__all__ = [
    "AddOn",
    "Discount",
    "Transport",
    "activity_add_ons",
    "activity_discounts",
    "activity_transports",
]
