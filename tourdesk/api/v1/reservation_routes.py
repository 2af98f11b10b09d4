from typing import Optional

from fastapi import APIRouter, BackgroundTasks, Depends, Query, status
from sqlalchemy.orm import Session

from tourdesk.api.responses import envelope
from tourdesk.core.result import unwrap
from tourdesk.dependencies import get_agency_id, get_db
from tourdesk.schemas import (
    ApiResponse,
    ExpiredHoldsResponse,
    ReservationCreate,
    ReservationResponse,
    ReservationStateUpdate,
)
from tourdesk.services import ReservationService

router = APIRouter(prefix="/reservas", tags=["reservas"])


@router.get("", response_model=ApiResponse[list[ReservationResponse]])
def list_reservations(
    estado: Optional[str] = Query(None),
    actividad_id: Optional[int] = Query(None),
    turno_id: Optional[int] = Query(None),
    agencia_id: Optional[int] = Depends(get_agency_id),
    db: Session = Depends(get_db),
):
    service = ReservationService(db)
    reservations = unwrap(
        service.list_reservations(
            agencia_id=agencia_id,
            estado=estado,
            actividad_id=actividad_id,
            turno_id=turno_id,
        )
    )
    return envelope([ReservationResponse.model_validate(item) for item in reservations])


@router.post("/expirar-pendientes", response_model=ApiResponse[ExpiredHoldsResponse])
def expire_pending_holds(db: Session = Depends(get_db)):
    """Expire every pending hold past its deadline and give the capacity back."""
    service = ReservationService(db)
    expired = unwrap(service.expire_pending_holds())
    return envelope(ExpiredHoldsResponse(expiradas=expired))


@router.get("/{reservation_id}", response_model=ApiResponse[ReservationResponse])
def get_reservation(
    reservation_id: int,
    agencia_id: Optional[int] = Depends(get_agency_id),
    db: Session = Depends(get_db),
):
    service = ReservationService(db)
    reservation = unwrap(service.get_reservation(reservation_id, agencia_id=agencia_id))
    return envelope(ReservationResponse.model_validate(reservation))


@router.post(
    "",
    response_model=ApiResponse[ReservationResponse],
    status_code=status.HTTP_201_CREATED,
)
def create_reservation(
    payload: ReservationCreate,
    agencia_id: Optional[int] = Depends(get_agency_id),
    db: Session = Depends(get_db),
):
    """Hold capacity on a slot as a ``pendiente`` reservation."""
    service = ReservationService(db)
    reservation = unwrap(service.create_hold(payload, agencia_id=agencia_id))
    return envelope(
        ReservationResponse.model_validate(reservation),
        message="Reserva creada exitosamente",
        code=status.HTTP_201_CREATED,
    )


@router.patch("/{reservation_id}/estado", response_model=ApiResponse[ReservationResponse])
def change_reservation_state(
    reservation_id: int,
    payload: ReservationStateUpdate,
    background_tasks: BackgroundTasks,
    agencia_id: Optional[int] = Depends(get_agency_id),
    db: Session = Depends(get_db),
):
    service = ReservationService(db)
    reservation = unwrap(
        service.change_state(
            reservation_id,
            payload.estado,
            agencia_id=agencia_id,
            background_tasks=background_tasks,
        )
    )
    return envelope(
        ReservationResponse.model_validate(reservation),
        message=f"Reserva {reservation.estado}",
    )
