from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field

ReservationState = Literal[
    "pendiente", "confirmada", "expirada", "cancelada", "no_show", "check_in"
]


class ReservationItemInput(BaseModel):
    item_tipo: Literal["tarifa", "adicional", "transporte"]
    item_id: int = Field(..., gt=0)
    cantidad: int = Field(..., gt=0)


class ReservationClient(BaseModel):
    nombre: Optional[str] = Field(None, max_length=255)
    apellido: Optional[str] = Field(None, max_length=255)
    email: EmailStr
    telefono: Optional[str] = Field(None, max_length=50)


class ReservationCreate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    turno_id: int = Field(..., gt=0)
    items: list[ReservationItemInput] = Field(..., min_length=1)
    cliente: Optional[ReservationClient] = None
    pago_referencia: Optional[str] = Field(None, max_length=255)


class ReservationStateUpdate(BaseModel):
    estado: ReservationState


class ReservationItemResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    item_tipo: str
    item_id: int
    cantidad: int
    precio_unitario: Decimal


class ReservationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    turno_id: int
    actividad_id: int
    agencia_id: int
    estado: str
    cantidad_personas: int
    cliente_nombre: Optional[str] = None
    cliente_email: Optional[str] = None
    cliente_telefono: Optional[str] = None
    monto_total: Decimal
    moneda: str
    pago_referencia: Optional[str] = None
    expira_en: Optional[datetime] = None
    created_at: Optional[datetime] = None
    items: list[ReservationItemResponse] = Field(default_factory=list)


class ExpiredHoldsResponse(BaseModel):
    expiradas: int
