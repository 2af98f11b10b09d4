from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from tourdesk.api.responses import envelope
from tourdesk.core.result import unwrap
from tourdesk.dependencies import get_agency_id, get_db
from tourdesk.schemas import (
    ApiResponse,
    CheckReservationsRequest,
    CheckReservationsResponse,
    GenerateSlotsRequest,
    GenerationResultResponse,
    SlotGenerationJobResponse,
    SlotResponse,
    SlotUpdate,
)
from tourdesk.services import SlotGenerationJobService, SlotService

router = APIRouter(prefix="/turnos", tags=["turnos"])


@router.get("", response_model=ApiResponse[list[SlotResponse]])
def list_slots(
    actividad_id: Optional[int] = Query(None),
    horario_id: Optional[int] = Query(None),
    fecha_desde: Optional[date] = Query(None),
    fecha_hasta: Optional[date] = Query(None),
    solo_disponibles: bool = Query(False),
    incluir_borrados: bool = Query(False),
    agencia_id: Optional[int] = Depends(get_agency_id),
    db: Session = Depends(get_db),
):
    service = SlotService(db)
    slots = unwrap(
        service.list_slots(
            actividad_id=actividad_id,
            horario_id=horario_id,
            agencia_id=agencia_id,
            fecha_desde=fecha_desde,
            fecha_hasta=fecha_hasta,
            only_available=solo_disponibles,
            include_deleted=incluir_borrados,
        )
    )
    return envelope([SlotResponse.model_validate(item) for item in slots])


@router.post("/generar", response_model=ApiResponse[GenerationResultResponse])
def generate_slots(
    payload: GenerateSlotsRequest,
    agencia_id: Optional[int] = Depends(get_agency_id),
    db: Session = Depends(get_db),
):
    """Generate the missing slots of a schedule or of every schedule of an activity."""
    service = SlotService(db)
    result = unwrap(service.generate(payload, agencia_id=agencia_id))
    return envelope(
        GenerationResultResponse.model_validate(result),
        message=f"{result.turnos_creados} turnos generados",
    )


@router.post("/verificar-reservas", response_model=ApiResponse[CheckReservationsResponse])
def check_reservations(
    payload: CheckReservationsRequest,
    agencia_id: Optional[int] = Depends(get_agency_id),
    db: Session = Depends(get_db),
):
    """Count the slots of the given schedules that already hold reservations."""
    service = SlotService(db)
    usage = unwrap(service.check_reservations(payload.horario_ids, agencia_id=agencia_id))
    return envelope(CheckReservationsResponse.model_validate(usage))


@router.get("/trabajos/{job_id}", response_model=ApiResponse[SlotGenerationJobResponse])
def get_generation_job(job_id: int, db: Session = Depends(get_db)):
    service = SlotGenerationJobService(db)
    job = unwrap(service.get_job(job_id))
    return envelope(SlotGenerationJobResponse.model_validate(job))


@router.get("/{slot_id}", response_model=ApiResponse[SlotResponse])
def get_slot(
    slot_id: int,
    agencia_id: Optional[int] = Depends(get_agency_id),
    db: Session = Depends(get_db),
):
    service = SlotService(db)
    slot = unwrap(service.get_slot(slot_id, agencia_id=agencia_id))
    return envelope(SlotResponse.model_validate(slot))


@router.put("/{slot_id}", response_model=ApiResponse[SlotResponse])
def update_slot(
    slot_id: int,
    payload: SlotUpdate,
    agencia_id: Optional[int] = Depends(get_agency_id),
    db: Session = Depends(get_db),
):
    service = SlotService(db)
    slot = unwrap(service.update_slot(slot_id, payload, agencia_id=agencia_id))
    return envelope(SlotResponse.model_validate(slot), message="Turno actualizado exitosamente")


@router.delete("/{slot_id}", response_model=ApiResponse[dict])
def delete_slot(
    slot_id: int,
    agencia_id: Optional[int] = Depends(get_agency_id),
    db: Session = Depends(get_db),
):
    service = SlotService(db)
    deleted = unwrap(service.delete_slot(slot_id, agencia_id=agencia_id))
    return envelope({"id": deleted}, message="Turno eliminado exitosamente")
