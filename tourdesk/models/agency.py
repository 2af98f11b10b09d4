from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from tourdesk.core.database import Base
from tourdesk.models.mixins import BigIntId, SoftDeleteMixin, TimestampMixin

if TYPE_CHECKING:  # pragma: no cover
    from tourdesk.models.activity import Activity


class Agency(TimestampMixin, SoftDeleteMixin, Base):
    """Tenant organization that owns activities and their catalogue."""

    __tablename__ = "agencias"

    id: Mapped[int] = mapped_column(BigIntId, primary_key=True, index=True)
    nombre: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    activities: Mapped[list["Activity"]] = relationship("Activity", back_populates="agency")
