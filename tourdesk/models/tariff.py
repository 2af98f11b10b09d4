from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING, Optional

from sqlalchemy import Boolean, ForeignKey, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from tourdesk.core.database import Base
from tourdesk.models.mixins import BigIntId, SoftDeleteMixin, TimestampMixin

if TYPE_CHECKING:  # pragma: no cover
    from tourdesk.models.activity import Activity


class Tariff(TimestampMixin, SoftDeleteMixin, Base):
    """Priced ticket category of an activity."""

    __tablename__ = "tarifas"

    id: Mapped[int] = mapped_column(BigIntId, primary_key=True, index=True)
    actividad_id: Mapped[int] = mapped_column(
        BigIntId, ForeignKey("actividades.id"), nullable=False, index=True
    )
    nombre: Mapped[str] = mapped_column(String(255), nullable=False)
    nombre_en: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    precio: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    moneda: Mapped[str] = mapped_column(String(3), default="USD", nullable=False)
    es_principal: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    activa: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    activity: Mapped["Activity"] = relationship("Activity", back_populates="tariffs")
