from typing import Optional

from fastapi import APIRouter, BackgroundTasks, Depends, Query, status
from sqlalchemy.orm import Session

from tourdesk.api.responses import envelope
from tourdesk.core.result import unwrap
from tourdesk.dependencies import get_agency_id, get_db
from tourdesk.schemas import (
    ActivityCreate,
    ActivityDetailResponse,
    ActivityResponse,
    ActivityStateUpdate,
    ActivityUpdate,
    ApiResponse,
)
from tourdesk.services import ActivityService

router = APIRouter(prefix="/actividades", tags=["actividades"])


@router.get("", response_model=ApiResponse[list[ActivityResponse]])
def list_activities(
    include_deleted: bool = Query(False),
    agencia_id: Optional[int] = Depends(get_agency_id),
    db: Session = Depends(get_db),
):
    """List the activities visible to the requesting agency."""
    service = ActivityService(db)
    activities = unwrap(
        service.list_activities(agencia_id=agencia_id, include_deleted=include_deleted)
    )
    return envelope([ActivityResponse.model_validate(item) for item in activities])


@router.get("/{activity_id}", response_model=ApiResponse[ActivityDetailResponse])
def get_activity(
    activity_id: int,
    include_deleted: bool = Query(False),
    agencia_id: Optional[int] = Depends(get_agency_id),
    db: Session = Depends(get_db),
):
    """Return an activity with its cronograma, tariffs and related catalogue items."""
    service = ActivityService(db)
    bundle = unwrap(
        service.get_activity(
            activity_id, agencia_id=agencia_id, include_deleted=include_deleted
        )
    )
    return envelope(ActivityDetailResponse.from_bundle(bundle))


@router.post(
    "",
    response_model=ApiResponse[ActivityDetailResponse],
    status_code=status.HTTP_201_CREATED,
)
def create_activity(
    payload: ActivityCreate,
    background_tasks: BackgroundTasks,
    esperar_turnos: bool = Query(False),
    agencia_id: Optional[int] = Depends(get_agency_id),
    db: Session = Depends(get_db),
):
    """Create an activity; its slots are generated by a tracked job."""
    service = ActivityService(db)
    bundle = unwrap(
        service.create_activity(
            payload,
            agencia_id=agencia_id,
            background_tasks=background_tasks,
            wait_for_slots=esperar_turnos,
        )
    )
    return envelope(
        ActivityDetailResponse.from_bundle(bundle),
        message="Actividad creada exitosamente",
        code=status.HTTP_201_CREATED,
    )


@router.put("/{activity_id}", response_model=ApiResponse[ActivityDetailResponse])
def update_activity(
    activity_id: int,
    payload: ActivityUpdate,
    agencia_id: Optional[int] = Depends(get_agency_id),
    db: Session = Depends(get_db),
):
    """Update an activity and synchronize the collections present in the payload."""
    service = ActivityService(db)
    bundle = unwrap(service.update_activity(activity_id, payload, agencia_id=agencia_id))
    return envelope(
        ActivityDetailResponse.from_bundle(bundle),
        message="Actividad actualizada exitosamente",
    )


@router.patch("/{activity_id}/estado", response_model=ApiResponse[ActivityResponse])
def change_activity_state(
    activity_id: int,
    payload: ActivityStateUpdate,
    agencia_id: Optional[int] = Depends(get_agency_id),
    db: Session = Depends(get_db),
):
    service = ActivityService(db)
    activity = unwrap(
        service.change_state(activity_id, payload.estado, agencia_id=agencia_id)
    )
    return envelope(
        ActivityResponse.model_validate(activity),
        message=f"Actividad {payload.estado}",
    )


@router.delete("/{activity_id}", response_model=ApiResponse[dict])
def delete_activity(
    activity_id: int,
    agencia_id: Optional[int] = Depends(get_agency_id),
    db: Session = Depends(get_db),
):
    service = ActivityService(db)
    removed = unwrap(service.delete_activity(activity_id, agencia_id=agencia_id))
    return envelope(
        {"id": activity_id, "turnos_eliminados": removed},
        message="Actividad eliminada exitosamente",
    )
