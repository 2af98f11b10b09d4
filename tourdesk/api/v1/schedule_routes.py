from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from tourdesk.api.responses import envelope
from tourdesk.core.result import unwrap
from tourdesk.dependencies import get_agency_id, get_db
from tourdesk.schemas import ApiResponse, ScheduleCreate, ScheduleResponse, ScheduleUpdate
from tourdesk.services import ScheduleService

router = APIRouter(prefix="/horarios", tags=["horarios"])


@router.get("", response_model=ApiResponse[list[ScheduleResponse]])
def list_schedules(
    actividad_id: Optional[int] = Query(None),
    habilitada: Optional[bool] = Query(None),
    fecha_desde: Optional[date] = Query(None),
    fecha_hasta: Optional[date] = Query(None),
    agencia_id: Optional[int] = Depends(get_agency_id),
    db: Session = Depends(get_db),
):
    service = ScheduleService(db)
    schedules = unwrap(
        service.list_schedules(
            actividad_id=actividad_id,
            agencia_id=agencia_id,
            habilitada=habilitada,
            fecha_desde=fecha_desde,
            fecha_hasta=fecha_hasta,
        )
    )
    return envelope([ScheduleResponse.model_validate(item) for item in schedules])


@router.get("/{schedule_id}", response_model=ApiResponse[ScheduleResponse])
def get_schedule(
    schedule_id: int,
    agencia_id: Optional[int] = Depends(get_agency_id),
    db: Session = Depends(get_db),
):
    service = ScheduleService(db)
    schedule = unwrap(service.get_schedule(schedule_id, agencia_id=agencia_id))
    return envelope(ScheduleResponse.model_validate(schedule))


@router.post(
    "",
    response_model=ApiResponse[ScheduleResponse],
    status_code=status.HTTP_201_CREATED,
)
def create_schedule(
    payload: ScheduleCreate,
    agencia_id: Optional[int] = Depends(get_agency_id),
    db: Session = Depends(get_db),
):
    """Create a schedule and generate its slots."""
    service = ScheduleService(db)
    schedule = unwrap(service.create_schedule(payload, agencia_id=agencia_id))
    return envelope(
        ScheduleResponse.model_validate(schedule),
        message="Horario creado exitosamente",
        code=status.HTTP_201_CREATED,
    )


@router.put("/{schedule_id}", response_model=ApiResponse[ScheduleResponse])
def update_schedule(
    schedule_id: int,
    payload: ScheduleUpdate,
    agencia_id: Optional[int] = Depends(get_agency_id),
    db: Session = Depends(get_db),
):
    """Update a schedule and regenerate its slots."""
    service = ScheduleService(db)
    schedule = unwrap(service.update_schedule(schedule_id, payload, agencia_id=agencia_id))
    return envelope(
        ScheduleResponse.model_validate(schedule),
        message="Horario actualizado exitosamente",
    )


@router.delete("/{schedule_id}", response_model=ApiResponse[dict])
def delete_schedule(
    schedule_id: int,
    agencia_id: Optional[int] = Depends(get_agency_id),
    db: Session = Depends(get_db),
):
    service = ScheduleService(db)
    removed = unwrap(service.delete_schedule(schedule_id, agencia_id=agencia_id))
    return envelope(
        {"id": schedule_id, "turnos_eliminados": removed},
        message="Horario eliminado exitosamente",
    )
