from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict


class SlotGenerationJobResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    actividad_id: int
    horario_id: Optional[int] = None
    estado: str
    resultado: Optional[dict[str, Any]] = None
    error: Optional[str] = None
    created_at: Optional[datetime] = None
    iniciado_en: Optional[datetime] = None
    finalizado_en: Optional[datetime] = None
