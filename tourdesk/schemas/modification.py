from __future__ import annotations

from datetime import date, datetime, time
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

ModificationType = Literal[
    "CAMBIAR_HORA_INICIO",
    "CAMBIAR_CUPOS",
    "BLOQUEAR_HORARIO",
    "BLOQUEAR_ACTIVIDAD",
    "BLOQUEAR_TODAS",
]

_NEEDS_SCHEDULE = {"CAMBIAR_HORA_INICIO", "CAMBIAR_CUPOS", "BLOQUEAR_HORARIO"}


class ModificationCreate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    tipo: ModificationType
    fecha_desde: date
    fecha_hasta: date
    actividad_id: Optional[int] = Field(None, gt=0)
    horario_id: Optional[int] = Field(None, gt=0)
    hora_inicio: Optional[time] = None
    hora_fin: Optional[time] = None
    cupo: Optional[int] = Field(None, ge=0)
    motivo: Optional[str] = None

    @model_validator(mode="after")
    def _validate_target(self) -> "ModificationCreate":
        if self.fecha_hasta < self.fecha_desde:
            raise ValueError("fecha_hasta debe ser posterior o igual a fecha_desde")
        if self.tipo in _NEEDS_SCHEDULE and self.horario_id is None:
            raise ValueError(f"horario_id es obligatorio para {self.tipo}")
        if self.tipo == "BLOQUEAR_ACTIVIDAD" and self.actividad_id is None:
            raise ValueError("actividad_id es obligatorio para BLOQUEAR_ACTIVIDAD")
        if self.tipo == "CAMBIAR_HORA_INICIO" and self.hora_inicio is None:
            raise ValueError("hora_inicio es obligatoria para CAMBIAR_HORA_INICIO")
        if self.tipo == "CAMBIAR_CUPOS" and self.cupo is None:
            raise ValueError("cupo es obligatorio para CAMBIAR_CUPOS")
        return self


class UnblockRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    fecha_desde: date
    fecha_hasta: date
    actividad_id: Optional[int] = Field(None, gt=0)
    horario_id: Optional[int] = Field(None, gt=0)


class ModificationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    agencia_id: int
    tipo: str
    actividad_id: Optional[int] = None
    horario_id: Optional[int] = None
    fecha_desde: date
    fecha_hasta: date
    hora_inicio: Optional[time] = None
    hora_fin: Optional[time] = None
    cupo: Optional[int] = None
    motivo: Optional[str] = None
    activa: bool
    turnos_afectados: int
    turnos_omitidos: int
    created_at: Optional[datetime] = None
    revertida_en: Optional[datetime] = None


class UnblockResponse(BaseModel):
    turnos_desbloqueados: int
