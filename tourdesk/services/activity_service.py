from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Optional

from fastapi import BackgroundTasks
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
from tourdesk.models import Activity, SlotGenerationJob
from tourdesk.models.mixins import utcnow
from tourdesk.repository import (
    activity_repository,
    pivot_repository,
    schedule_repository,
    slot_repository,
    tariff_repository,
)
from tourdesk.schemas.activity import (
    ActivityCreate,
    ActivityDetails,
    ActivityLocation,
    ActivityUpdate,
)
from tourdesk.services.job_service import SlotGenerationJobService
from tourdesk.services.pivot_sync import PivotSynchronizer
from tourdesk.services.schedule_sync import ScheduleSynchronizer
from tourdesk.services.tariff_sync import TariffSynchronizer

logger = logging.getLogger(__name__)

_BASIC_FIELDS = (
    "titulo",
    "titulo_en",
    "descripcion",
    "descripcion_en",
    "es_privada",
    "imagen",
    "estado",
    "iframe_code",
)
_NOT_NULL_FIELDS = ("titulo", "es_privada", "estado")
_RELATIONS = ("adicionales", "transportes", "descuentos")


@dataclass
class ActivityBundle:
    """An activity together with everything its detail view shows."""

    activity: Activity
    schedules: list = field(default_factory=list)
    tariffs: list = field(default_factory=list)
    add_ons: list = field(default_factory=list)
    transports: list = field(default_factory=list)
    discounts: list = field(default_factory=list)
    job: Optional[SlotGenerationJob] = None


def _detail_values(details: Optional[ActivityDetails]) -> dict[str, Any]:
    if details is None:
        return {}
    values = details.model_dump(exclude_unset=True)
    if values.get("minimo_personas_reserva") is None:
        values.pop("minimo_personas_reserva", None)
    return values


def _location_values(location: Optional[ActivityLocation]) -> dict[str, Any]:
    if location is None:
        return {}
    return {
        f"ubicacion_{key}": value
        for key, value in location.model_dump(exclude_unset=True).items()
    }


class ActivityService:
    def __init__(self, db: Session, *, today: Optional[date] = None):
        self.db = db
        self.today = today
        self.jobs = SlotGenerationJobService(db)

    def list_activities(
        self, *, agencia_id: Optional[int] = None, include_deleted: bool = False
    ) -> Result[list[Activity]]:
        return Ok(
            activity_repository.list_activities(
                self.db, agencia_id=agencia_id, include_deleted=include_deleted
            )
        )

    def get_activity(
        self,
        activity_id: int,
        *,
        agencia_id: Optional[int] = None,
        include_deleted: bool = False,
    ) -> Result[ActivityBundle]:
        activity = activity_repository.get_activity(
            self.db, activity_id, agencia_id=agencia_id, include_deleted=include_deleted
        )
        if activity is None:
            return activity_not_found(activity_id)
        return Ok(self._load_bundle(activity, include_deleted=include_deleted))

    def create_activity(
        self,
        payload: ActivityCreate,
        *,
        agencia_id: Optional[int] = None,
        background_tasks: Optional[BackgroundTasks] = None,
        wait_for_slots: bool = False,
    ) -> Result[ActivityBundle]:
        """Create the activity with its cronograma, tariffs and relations.

        Slots are generated by a tracked job once the activity is committed. The
        job runs in ``background_tasks`` unless ``wait_for_slots`` is set.
        """

        data = payload.actividad
        if agencia_id is not None and data.agencia_id != agencia_id:
            return validation_error(
                "agencia_id no coincide con la agencia del encabezado x-agencia-id"
            )
        if any(entry.id is not None for entry in payload.cronograma):
            return validation_error("Los horarios de una actividad nueva no deben incluir id")
        if any(tariff.id is not None for tariff in payload.tarifas):
            return validation_error("Las tarifas de una actividad nueva no deben incluir id")

        def work() -> Result[SlotGenerationJob]:
            if activity_repository.get_agency(self.db, data.agencia_id) is None:
                return not_found(f"Agencia {data.agencia_id} no encontrada")

            values = data.model_dump(include=set(_BASIC_FIELDS) | {"agencia_id"})
            values.update(_detail_values(data.detalles))
            values.update(_location_values(data.ubicacion))
            activity = activity_repository.create_activity(self.db, values)

            synced = self._sync_collections(
                activity,
                tariffs=payload.tarifas,
                relations=payload.relaciones.model_dump(),
                cronograma=payload.cronograma,
                generate_slots=False,
            )
            if isinstance(synced, Err):
                return synced
            return Ok(self.jobs.enqueue(actividad_id=activity.id))

        created = UnitOfWork(self.db, resource="La actividad").run(work)
        if isinstance(created, Err):
            return created

        job = created.value
        logger.info("Created activity %s; slot generation job %s", job.actividad_id, job.id)
        self.jobs.schedule(job, background_tasks=None if wait_for_slots else background_tasks)

        activity = activity_repository.get_activity(self.db, job.actividad_id)
        bundle = self._load_bundle(activity)
        bundle.job = job
        return Ok(bundle)

    def update_activity(
        self,
        activity_id: int,
        payload: ActivityUpdate,
        *,
        agencia_id: Optional[int] = None,
    ) -> Result[ActivityBundle]:
        """Apply a partial update and synchronize every collection present in the payload."""

        def work() -> Result[Activity]:
            activity = activity_repository.get_activity(
                self.db, activity_id, agencia_id=agencia_id
            )
            if activity is None:
                return activity_not_found(activity_id)

            changes = payload.model_dump(include=set(_BASIC_FIELDS), exclude_unset=True)
            changes = {
                key: value
                for key, value in changes.items()
                if value is not None or key not in _NOT_NULL_FIELDS
            }
            changes.update(_detail_values(payload.detalles))
            changes.update(_location_values(payload.ubicacion))
            for attribute, value in changes.items():
                setattr(activity, attribute, value)
            activity.updated_at = utcnow()
            self.db.flush()

            relations = {
                name: getattr(payload, name)
                for name in _RELATIONS
                if getattr(payload, name) is not None
            }
            synced = self._sync_collections(
                activity,
                tariffs=payload.tarifas,
                relations=relations,
                cronograma=payload.cronograma,
                generate_slots=True,
            )
            if isinstance(synced, Err):
                return synced
            return Ok(activity)

        updated = UnitOfWork(self.db, resource="La actividad").run(work)
        if isinstance(updated, Err):
            return updated
        return self.get_activity(activity_id)

    def change_state(
        self, activity_id: int, estado: str, *, agencia_id: Optional[int] = None
    ) -> Result[Activity]:
        def work() -> Result[Activity]:
            activity = activity_repository.get_activity(
                self.db, activity_id, agencia_id=agencia_id
            )
            if activity is None:
                return activity_not_found(activity_id)
            activity.estado = estado
            activity.updated_at = utcnow()
            self.db.flush()
            return Ok(activity)

        result = UnitOfWork(self.db, resource="La actividad").run(work)
        if isinstance(result, Ok):
            self.db.refresh(result.value)
        return result

    def delete_activity(
        self, activity_id: int, *, agencia_id: Optional[int] = None
    ) -> Result[int]:
        """Soft-delete the activity and its live slots; returns the number of slots removed."""

        def work() -> Result[int]:
            activity = activity_repository.get_activity(
                self.db, activity_id, agencia_id=agencia_id
            )
            if activity is None:
                return activity_not_found(activity_id)
            now = utcnow()
            activity.deleted_at = now
            removed = slot_repository.soft_delete_slots_for_activity(
                self.db, activity_id, deleted_at=now
            )
            self.db.flush()
            return Ok(removed)

        return UnitOfWork(self.db, resource="La actividad").run(work)

    def _sync_collections(
        self,
        activity: Activity,
        *,
        tariffs,
        relations: dict,
        cronograma,
        generate_slots: bool,
    ) -> Result[None]:
        if tariffs is not None:
            synced = TariffSynchronizer(self.db).sync(actividad_id=activity.id, tariffs=tariffs)
            if isinstance(synced, Err):
                return synced

        pivots = PivotSynchronizer(self.db)
        for relation, item_ids in relations.items():
            synced = pivots.sync(
                actividad_id=activity.id,
                relation=relation,
                item_ids=item_ids,
                agencia_id=activity.agencia_id,
            )
            if isinstance(synced, Err):
                return synced

        if cronograma is not None:
            synchronizer = ScheduleSynchronizer(self.db, today=self.today)
            synced = synchronizer.sync(
                actividad_id=activity.id,
                agencia_id=activity.agencia_id,
                entries=cronograma,
                generate_slots=generate_slots,
            )
            if isinstance(synced, Err):
                return synced
        return Ok(None)

    def _load_bundle(self, activity: Activity, *, include_deleted: bool = False) -> ActivityBundle:
        return ActivityBundle(
            activity=activity,
            schedules=schedule_repository.list_schedules(
                self.db, actividad_id=activity.id, include_deleted=include_deleted
            ),
            tariffs=tariff_repository.list_tariffs(
                self.db, actividad_id=activity.id, include_deleted=include_deleted
            ),
            add_ons=pivot_repository.list_linked(self.db, "adicionales", activity.id),
            transports=pivot_repository.list_linked(self.db, "transportes", activity.id),
            discounts=pivot_repository.list_linked(self.db, "descuentos", activity.id),
        )


__all__ = ["ActivityBundle", "ActivityService"]
