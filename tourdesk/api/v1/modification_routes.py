from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from tourdesk.api.responses import envelope
from tourdesk.core.result import unwrap
from tourdesk.dependencies import get_agency_id, get_db, require_agency_id
from tourdesk.schemas import (
    ApiResponse,
    ModificationCreate,
    ModificationResponse,
    UnblockRequest,
    UnblockResponse,
)
from tourdesk.services import ModificationService

router = APIRouter(prefix="/modificaciones-temporarias", tags=["modificaciones-temporarias"])


@router.get("", response_model=ApiResponse[list[ModificationResponse]])
def list_modifications(
    activa: Optional[bool] = Query(None),
    agencia_id: Optional[int] = Depends(get_agency_id),
    db: Session = Depends(get_db),
):
    service = ModificationService(db)
    modifications = unwrap(service.list_modifications(agencia_id=agencia_id, activa=activa))
    return envelope([ModificationResponse.model_validate(item) for item in modifications])


@router.post(
    "",
    response_model=ApiResponse[ModificationResponse],
    status_code=status.HTTP_201_CREATED,
)
def apply_modification(
    payload: ModificationCreate,
    agencia_id: Optional[int] = Depends(get_agency_id),
    db: Session = Depends(get_db),
):
    """Apply a dated change to the matching slots and keep it for reverting."""
    service = ModificationService(db)
    modification = unwrap(service.apply(payload, agencia_id=agencia_id))
    return envelope(
        ModificationResponse.model_validate(modification),
        message=f"Modificación aplicada a {modification.turnos_afectados} turnos",
        code=status.HTTP_201_CREATED,
    )


@router.post("/desbloquear", response_model=ApiResponse[UnblockResponse])
def unblock_slots(
    payload: UnblockRequest,
    agencia_id: int = Depends(require_agency_id),
    db: Session = Depends(get_db),
):
    service = ModificationService(db)
    unblocked = unwrap(service.unblock(payload, agencia_id=agencia_id))
    return envelope(
        UnblockResponse(turnos_desbloqueados=unblocked),
        message=f"{unblocked} turnos desbloqueados",
    )


@router.post("/{modification_id}/revertir", response_model=ApiResponse[ModificationResponse])
def revert_modification(
    modification_id: int,
    agencia_id: Optional[int] = Depends(get_agency_id),
    db: Session = Depends(get_db),
):
    """Restore the slot values stored when the modification was applied."""
    service = ModificationService(db)
    modification = unwrap(service.revert(modification_id, agencia_id=agencia_id))
    return envelope(
        ModificationResponse.model_validate(modification),
        message="Modificación revertida exitosamente",
    )
