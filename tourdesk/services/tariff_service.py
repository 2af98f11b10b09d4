from __future__ import annotations

from typing import Optional

from sqlalchemy.orm import Session

from tourdesk.core.result import (
    Err,
    Ok,
    Result,
    activity_not_found,
    not_found,
    validation_error,
)
from tourdesk.core.unit_of_work import UnitOfWork
from tourdesk.models import Tariff
from tourdesk.models.mixins import utcnow
from tourdesk.repository import activity_repository, tariff_repository
from tourdesk.schemas.tariff import TariffCreate, TariffUpdate
from tourdesk.services.tariff_sync import TariffSynchronizer, tariff_name_key


class TariffService:
    def __init__(self, db: Session):
        self.db = db
        self.synchronizer = TariffSynchronizer(db)

    def _ensure_unique_name(
        self, actividad_id: int, name: str, *, exclude_id: Optional[int] = None
    ) -> Optional[Err]:
        key = tariff_name_key(name)
        for tariff in tariff_repository.list_live_tariffs(self.db, actividad_id):
            if tariff.id != exclude_id and tariff_name_key(tariff.nombre) == key:
                return validation_error(f"Ya existe una tarifa «{name.strip()}» en la actividad")
        return None

    def list_tariffs(
        self,
        *,
        tariff_id: Optional[int] = None,
        actividad_id: Optional[int] = None,
        agencia_id: Optional[int] = None,
        es_principal: Optional[bool] = None,
        activa: Optional[bool] = None,
    ) -> Result[list[Tariff]]:
        return Ok(
            tariff_repository.list_tariffs(
                self.db,
                tariff_id=tariff_id,
                actividad_id=actividad_id,
                agencia_id=agencia_id,
                es_principal=es_principal,
                activa=activa,
            )
        )

    def get_tariff(self, tariff_id: int, *, agencia_id: Optional[int] = None) -> Result[Tariff]:
        tariff = tariff_repository.get_tariff(self.db, tariff_id)
        if tariff is None or (
            agencia_id is not None and tariff.activity.agencia_id != agencia_id
        ):
            return not_found(f"Tarifa {tariff_id} no encontrada")
        return Ok(tariff)

    def create_tariff(
        self, payload: TariffCreate, *, agencia_id: Optional[int] = None
    ) -> Result[Tariff]:
        def work() -> Result[Tariff]:
            activity = activity_repository.get_activity(
                self.db, payload.actividad_id, agencia_id=agencia_id
            )
            if activity is None:
                return activity_not_found(payload.actividad_id)
            duplicate = self._ensure_unique_name(activity.id, payload.nombre)
            if duplicate is not None:
                return duplicate

            values = payload.model_dump()
            values["nombre"] = payload.nombre.strip()
            values["moneda"] = payload.moneda.upper()
            if payload.es_principal:
                tariff_repository.demote_principals(self.db, activity.id)
            tariff = tariff_repository.create_tariff(self.db, values)
            self.synchronizer.ensure_principal(activity.id)
            return Ok(tariff)

        result = UnitOfWork(self.db, resource="La tarifa").run(work)
        if isinstance(result, Ok):
            self.db.refresh(result.value)
        return result

    def update_tariff(
        self, tariff_id: int, payload: TariffUpdate, *, agencia_id: Optional[int] = None
    ) -> Result[Tariff]:
        def work() -> Result[Tariff]:
            found = self.get_tariff(tariff_id, agencia_id=agencia_id)
            if isinstance(found, Err):
                return found
            tariff = found.value
            changes = payload.model_dump(exclude_unset=True, exclude_none=True)

            if "nombre" in changes:
                duplicate = self._ensure_unique_name(
                    tariff.actividad_id, changes["nombre"], exclude_id=tariff.id
                )
                if duplicate is not None:
                    return duplicate
                changes["nombre"] = changes["nombre"].strip()
            if "moneda" in changes:
                changes["moneda"] = changes["moneda"].upper()
            if changes.get("es_principal"):
                tariff_repository.demote_principals(
                    self.db, tariff.actividad_id, except_id=tariff.id
                )

            for attribute, value in changes.items():
                setattr(tariff, attribute, value)
            self.db.flush()
            self.synchronizer.ensure_principal(tariff.actividad_id)
            return Ok(tariff)

        result = UnitOfWork(self.db, resource="La tarifa").run(work)
        if isinstance(result, Ok):
            self.db.refresh(result.value)
        return result

    def delete_tariff(self, tariff_id: int, *, agencia_id: Optional[int] = None) -> Result[int]:
        def work() -> Result[int]:
            found = self.get_tariff(tariff_id, agencia_id=agencia_id)
            if isinstance(found, Err):
                return found
            tariff = found.value
            tariff.activa = False
            tariff.es_principal = False
            tariff.deleted_at = utcnow()
            self.db.flush()
            self.synchronizer.ensure_principal(tariff.actividad_id)
            return Ok(tariff.id)

        return UnitOfWork(self.db, resource="La tarifa").run(work)


__all__ = ["TariffService"]
