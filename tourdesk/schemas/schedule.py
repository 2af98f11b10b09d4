from __future__ import annotations

from datetime import date, datetime, time
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _normalize_days(value: Optional[list[int]]) -> Optional[list[int]]:
    if value is None:
        return value
    if not value:
        raise ValueError("dias no puede estar vacío")
    invalid = [day for day in value if day < 0 or day > 6]
    if invalid:
        raise ValueError("dias solo admite valores entre 0 (domingo) y 6 (sábado)")
    return sorted(set(value))


class ScheduleEntry(BaseModel):
    """One entry of an activity's cronograma. Entries with ``id`` edit a stored schedule."""

    model_config = ConfigDict(extra="forbid")

    id: Optional[int] = Field(None, gt=0)
    fecha_inicio: date
    dias: Optional[list[int]] = None
    dia_completo: bool = False
    hora_inicio: Optional[time] = None
    hora_fin: Optional[time] = None
    cupo: int = Field(0, ge=0)
    habilitada: bool = True

    @field_validator("dias")
    @classmethod
    def _validate_days(cls, value: Optional[list[int]]) -> Optional[list[int]]:
        return _normalize_days(value)


class ScheduleCreate(ScheduleEntry):
    actividad_id: int = Field(..., gt=0)


class ScheduleUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    fecha_inicio: Optional[date] = None
    dias: Optional[list[int]] = None
    dia_completo: Optional[bool] = None
    hora_inicio: Optional[time] = None
    hora_fin: Optional[time] = None
    cupo: Optional[int] = Field(None, ge=0)
    habilitada: Optional[bool] = None

    @field_validator("dias")
    @classmethod
    def _validate_days(cls, value: Optional[list[int]]) -> Optional[list[int]]:
        return _normalize_days(value)


class ScheduleResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    actividad_id: int
    agencia_id: int
    fecha_inicio: date
    dias: list[int]
    dia_completo: bool
    hora_inicio: Optional[time] = None
    hora_fin: Optional[time] = None
    cupo: int
    habilitada: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    deleted_at: Optional[datetime] = None
