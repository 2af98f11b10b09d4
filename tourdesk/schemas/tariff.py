from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class TariffInput(BaseModel):
    """Tariff entry as submitted inside an activity payload."""

    model_config = ConfigDict(extra="forbid")

    id: Optional[int] = Field(None, gt=0)
    nombre: str = Field(..., min_length=1, max_length=255)
    nombre_en: Optional[str] = Field(None, max_length=255)
    precio: Decimal = Field(..., ge=0)
    moneda: str = Field("USD", min_length=3, max_length=3)
    es_principal: bool = False
    activa: bool = True


class TariffCreate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    actividad_id: int = Field(..., gt=0)
    nombre: str = Field(..., min_length=1, max_length=255)
    nombre_en: Optional[str] = Field(None, max_length=255)
    precio: Decimal = Field(..., ge=0)
    moneda: str = Field("USD", min_length=3, max_length=3)
    es_principal: bool = False
    activa: bool = True


class TariffUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    nombre: Optional[str] = Field(None, min_length=1, max_length=255)
    nombre_en: Optional[str] = Field(None, max_length=255)
    precio: Optional[Decimal] = Field(None, ge=0)
    moneda: Optional[str] = Field(None, min_length=3, max_length=3)
    es_principal: Optional[bool] = None
    activa: Optional[bool] = None


class TariffResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    actividad_id: int
    nombre: str
    nombre_en: Optional[str] = None
    precio: Decimal
    moneda: str
    es_principal: bool
    activa: bool
    created_at: Optional[datetime] = None
    deleted_at: Optional[datetime] = None
