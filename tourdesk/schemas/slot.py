from __future__ import annotations

from datetime import date, datetime, time
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class SlotResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    horario_id: int
    actividad_id: int
    agencia_id: int
    fecha: date
    hora_inicio: Optional[time] = None
    hora_fin: Optional[time] = None
    cupo_total: int
    cupo_disponible: int
    bloquear: bool
    deleted_at: Optional[datetime] = None


class SlotUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    hora_inicio: Optional[time] = None
    hora_fin: Optional[time] = None
    cupo_total: Optional[int] = Field(None, ge=0)
    cupo_disponible: Optional[int] = Field(None, ge=0)
    bloquear: Optional[bool] = None

    @model_validator(mode="after")
    def _validate_capacity(self) -> "SlotUpdate":
        if self.cupo_total is not None and self.cupo_disponible is not None:
            if self.cupo_disponible > self.cupo_total:
                raise ValueError("cupo_disponible no puede superar cupo_total")
        return self


class GenerateSlotsRequest(BaseModel):
    actividad_id: Optional[int] = Field(None, gt=0)
    horario_id: Optional[int] = Field(None, gt=0)


class SkippedSlotResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    fecha: date
    horario_id: int
    motivo: str


class GenerationResultResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    total_fechas: int
    turnos_creados: int
    omitidos: int
    turnos_omitidos: list[SkippedSlotResponse] = Field(default_factory=list)


class CheckReservationsRequest(BaseModel):
    horario_ids: list[int] = Field(..., min_length=1)


class CheckReservationsResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    affected_reservations: int
    total_turnos: int
    turnos_con_reservas: int
