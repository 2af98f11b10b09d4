from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from tourdesk.api.responses import envelope
from tourdesk.core.result import unwrap
from tourdesk.dependencies import get_agency_id, get_db
from tourdesk.schemas import ApiResponse, TariffCreate, TariffResponse, TariffUpdate
from tourdesk.services import TariffService

router = APIRouter(prefix="/tarifas", tags=["tarifas"])


@router.get("", response_model=ApiResponse[list[TariffResponse]])
def list_tariffs(
    actividad_id: Optional[int] = Query(None),
    es_principal: Optional[bool] = Query(None),
    activa: Optional[bool] = Query(None),
    agencia_id: Optional[int] = Depends(get_agency_id),
    db: Session = Depends(get_db),
):
    service = TariffService(db)
    tariffs = unwrap(
        service.list_tariffs(
            actividad_id=actividad_id,
            agencia_id=agencia_id,
            es_principal=es_principal,
            activa=activa,
        )
    )
    return envelope([TariffResponse.model_validate(item) for item in tariffs])


@router.get("/{tariff_id}", response_model=ApiResponse[TariffResponse])
def get_tariff(
    tariff_id: int,
    agencia_id: Optional[int] = Depends(get_agency_id),
    db: Session = Depends(get_db),
):
    service = TariffService(db)
    tariff = unwrap(service.get_tariff(tariff_id, agencia_id=agencia_id))
    return envelope(TariffResponse.model_validate(tariff))


@router.post(
    "",
    response_model=ApiResponse[TariffResponse],
    status_code=status.HTTP_201_CREATED,
)
def create_tariff(
    payload: TariffCreate,
    agencia_id: Optional[int] = Depends(get_agency_id),
    db: Session = Depends(get_db),
):
    service = TariffService(db)
    tariff = unwrap(service.create_tariff(payload, agencia_id=agencia_id))
    return envelope(
        TariffResponse.model_validate(tariff),
        message="Tarifa creada exitosamente",
        code=status.HTTP_201_CREATED,
    )


@router.put("/{tariff_id}", response_model=ApiResponse[TariffResponse])
def update_tariff(
    tariff_id: int,
    payload: TariffUpdate,
    agencia_id: Optional[int] = Depends(get_agency_id),
    db: Session = Depends(get_db),
):
    """Update a tariff; marking it principal demotes the others of its activity."""
    service = TariffService(db)
    tariff = unwrap(service.update_tariff(tariff_id, payload, agencia_id=agencia_id))
    return envelope(TariffResponse.model_validate(tariff), message="Tarifa actualizada")


@router.delete("/{tariff_id}", response_model=ApiResponse[dict])
def delete_tariff(
    tariff_id: int,
    agencia_id: Optional[int] = Depends(get_agency_id),
    db: Session = Depends(get_db),
):
    service = TariffService(db)
    deleted = unwrap(service.delete_tariff(tariff_id, agencia_id=agencia_id))
    return envelope({"id": deleted}, message="Tarifa eliminada exitosamente")
