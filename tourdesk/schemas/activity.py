from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, PositiveInt

from tourdesk.schemas.schedule import ScheduleEntry, ScheduleResponse
from tourdesk.schemas.tariff import TariffInput, TariffResponse

if TYPE_CHECKING:  # pragma: no cover
    from tourdesk.services.activity_service import ActivityBundle

ActivityState = Literal["borrador", "publicado"]


class ActivityDetails(BaseModel):
    model_config = ConfigDict(extra="forbid")

    minimo_personas_reserva: Optional[int] = Field(None, ge=1)
    limite_reserva_minutos: Optional[int] = Field(None, ge=0)
    umbral_limite_personas: Optional[int] = Field(None, ge=0)
    umbral_limite_minutos: Optional[int] = Field(None, ge=0)
    umbral_limite_tipo: Optional[str] = Field(None, max_length=20)


class ActivityLocation(BaseModel):
    model_config = ConfigDict(extra="forbid")

    lat: Optional[float] = Field(None, ge=-90, le=90)
    lng: Optional[float] = Field(None, ge=-180, le=180)
    direccion: Optional[str] = None


class ActivityData(BaseModel):
    model_config = ConfigDict(extra="forbid")

    agencia_id: int = Field(..., gt=0)
    titulo: str = Field(..., min_length=1, max_length=255)
    titulo_en: Optional[str] = Field(None, max_length=255)
    descripcion: Optional[str] = None
    descripcion_en: Optional[str] = None
    es_privada: bool = False
    imagen: Optional[str] = None
    estado: ActivityState = "borrador"
    iframe_code: Optional[str] = None
    detalles: Optional[ActivityDetails] = None
    ubicacion: Optional[ActivityLocation] = None


class ActivityRelations(BaseModel):
    model_config = ConfigDict(extra="forbid")

    adicionales: list[PositiveInt] = Field(default_factory=list)
    transportes: list[PositiveInt] = Field(default_factory=list)
    descuentos: list[PositiveInt] = Field(default_factory=list)


class ActivityCreate(BaseModel):
    """Complete activity payload: the activity, its cronograma, tariffs and relations."""

    model_config = ConfigDict(extra="forbid")

    actividad: ActivityData
    cronograma: list[ScheduleEntry] = Field(default_factory=list)
    tarifas: list[TariffInput] = Field(default_factory=list)
    relaciones: ActivityRelations = Field(default_factory=ActivityRelations)


class ActivityUpdate(BaseModel):
    """Partial update. Collections are only synchronized when their key is present."""

    model_config = ConfigDict(extra="forbid")

    titulo: Optional[str] = Field(None, min_length=1, max_length=255)
    titulo_en: Optional[str] = Field(None, max_length=255)
    descripcion: Optional[str] = None
    descripcion_en: Optional[str] = None
    es_privada: Optional[bool] = None
    imagen: Optional[str] = None
    estado: Optional[ActivityState] = None
    iframe_code: Optional[str] = None
    detalles: Optional[ActivityDetails] = None
    ubicacion: Optional[ActivityLocation] = None
    tarifas: Optional[list[TariffInput]] = None
    adicionales: Optional[list[PositiveInt]] = None
    transportes: Optional[list[PositiveInt]] = None
    descuentos: Optional[list[PositiveInt]] = None
    cronograma: Optional[list[ScheduleEntry]] = None


class ActivityStateUpdate(BaseModel):
    estado: ActivityState


class ActivityResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    agencia_id: int
    titulo: str
    titulo_en: Optional[str] = None
    descripcion: Optional[str] = None
    descripcion_en: Optional[str] = None
    es_privada: bool
    imagen: Optional[str] = None
    estado: str
    iframe_code: Optional[str] = None
    minimo_personas_reserva: int
    limite_reserva_minutos: Optional[int] = None
    umbral_limite_personas: Optional[int] = None
    umbral_limite_minutos: Optional[int] = None
    umbral_limite_tipo: Optional[str] = None
    ubicacion_lat: Optional[float] = None
    ubicacion_lng: Optional[float] = None
    ubicacion_direccion: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    deleted_at: Optional[datetime] = None


class CatalogueItemResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    nombre: str
    precio: Optional[Decimal] = None


class DiscountResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    nombre: str
    codigo: Optional[str] = None
    tipo: str
    valor: Decimal


class JobSummary(BaseModel):
    id: int
    estado: str


class ActivityDetailResponse(ActivityResponse):
    cronograma: list[ScheduleResponse] = Field(default_factory=list)
    tarifas: list[TariffResponse] = Field(default_factory=list)
    adicionales: list[CatalogueItemResponse] = Field(default_factory=list)
    transportes: list[CatalogueItemResponse] = Field(default_factory=list)
    descuentos: list[DiscountResponse] = Field(default_factory=list)
    trabajo_turnos: Optional[JobSummary] = None

    @classmethod
    def from_bundle(cls, bundle: "ActivityBundle") -> "ActivityDetailResponse":
        base = ActivityResponse.model_validate(bundle.activity).model_dump()
        job = bundle.job
        return cls(
            **base,
            cronograma=[ScheduleResponse.model_validate(item) for item in bundle.schedules],
            tarifas=[TariffResponse.model_validate(item) for item in bundle.tariffs],
            adicionales=[CatalogueItemResponse.model_validate(item) for item in bundle.add_ons],
            transportes=[
                CatalogueItemResponse.model_validate(item) for item in bundle.transports
            ],
            descuentos=[DiscountResponse.model_validate(item) for item in bundle.discounts],
            trabajo_turnos=JobSummary(id=job.id, estado=job.estado) if job is not None else None,
        )
