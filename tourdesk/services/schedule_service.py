from __future__ import annotations

from datetime import date
from typing import Optional

from pydantic import ValidationError
from sqlalchemy.orm import Session

from tourdesk.core.result import (
    Err,
    Ok,
    Result,
    activity_not_found,
    not_found,
    past_start_date,
    reservations_conflict,
    validation_error,
)
from tourdesk.core.unit_of_work import UnitOfWork
from tourdesk.models import Schedule
from tourdesk.models.mixins import utcnow
from tourdesk.repository import activity_repository, schedule_repository, slot_repository
from tourdesk.schemas.schedule import ScheduleCreate, ScheduleEntry, ScheduleUpdate
from tourdesk.services.schedule_sync import check_time_range, schedule_values
from tourdesk.services.slot_generator import SlotGenerator

_ENTRY_FIELDS = (
    "fecha_inicio",
    "dias",
    "dia_completo",
    "hora_inicio",
    "hora_fin",
    "cupo",
    "habilitada",
)


class ScheduleService:
    def __init__(self, db: Session, *, today: Optional[date] = None):
        self.db = db
        self._today = today
        self.generator = SlotGenerator(db, today=today)

    @property
    def today(self) -> date:
        return self._today or date.today()

    def _validate(self, entry: ScheduleEntry) -> tuple[dict, Optional[Err]]:
        values = schedule_values(entry)
        if values["fecha_inicio"] < self.today:
            return values, past_start_date()
        return values, check_time_range(values)

    def list_schedules(
        self,
        *,
        schedule_id: Optional[int] = None,
        actividad_id: Optional[int] = None,
        agencia_id: Optional[int] = None,
        habilitada: Optional[bool] = None,
        fecha_desde: Optional[date] = None,
        fecha_hasta: Optional[date] = None,
    ) -> Result[list[Schedule]]:
        return Ok(
            schedule_repository.list_schedules(
                self.db,
                schedule_id=schedule_id,
                actividad_id=actividad_id,
                agencia_id=agencia_id,
                habilitada=habilitada,
                fecha_desde=fecha_desde,
                fecha_hasta=fecha_hasta,
            )
        )

    def get_schedule(
        self, schedule_id: int, *, agencia_id: Optional[int] = None
    ) -> Result[Schedule]:
        schedule = schedule_repository.get_schedule(self.db, schedule_id)
        if schedule is None or (agencia_id is not None and schedule.agencia_id != agencia_id):
            return not_found(f"Horario {schedule_id} no encontrado")
        return Ok(schedule)

    def create_schedule(
        self, payload: ScheduleCreate, *, agencia_id: Optional[int] = None
    ) -> Result[Schedule]:
        """Create a schedule for an existing activity and generate its slots."""

        def work() -> Result[Schedule]:
            activity = activity_repository.get_activity(
                self.db, payload.actividad_id, agencia_id=agencia_id
            )
            if activity is None:
                return activity_not_found(payload.actividad_id)

            values, error = self._validate(payload)
            if error is not None:
                return error

            schedule = schedule_repository.create_schedule(
                self.db,
                {
                    **values,
                    "actividad_id": activity.id,
                    "agencia_id": activity.agencia_id,
                },
            )
            self.generator.generate_for_schedule(schedule)
            return Ok(schedule)

        result = UnitOfWork(self.db, resource="El horario").run(work)
        if isinstance(result, Ok):
            self.db.refresh(result.value)
        return result

    def update_schedule(
        self,
        schedule_id: int,
        payload: ScheduleUpdate,
        *,
        agencia_id: Optional[int] = None,
    ) -> Result[Schedule]:
        """Update a schedule and regenerate its slots from the new definition."""

        def work() -> Result[Schedule]:
            found = self.get_schedule(schedule_id, agencia_id=agencia_id)
            if isinstance(found, Err):
                return found
            schedule = found.value

            merged = {name: getattr(schedule, name) for name in _ENTRY_FIELDS}
            merged.update(payload.model_dump(exclude_unset=True, exclude_none=True))
            try:
                entry = ScheduleEntry(**merged)
            except ValidationError as exc:
                return validation_error(
                    errors=exc.errors(include_url=False, include_context=False)
                )
            values, error = self._validate(entry)
            if error is not None:
                return error

            for attribute, value in values.items():
                setattr(schedule, attribute, value)
            self.db.flush()
            self.generator.regenerate_for_schedule(schedule)
            return Ok(schedule)

        result = UnitOfWork(self.db, resource="El horario").run(work)
        if isinstance(result, Ok):
            self.db.refresh(result.value)
        return result

    def delete_schedule(
        self, schedule_id: int, *, agencia_id: Optional[int] = None
    ) -> Result[int]:
        """Soft-delete a schedule and its slots unless any slot holds reservations."""

        def work() -> Result[int]:
            found = self.get_schedule(schedule_id, agencia_id=agencia_id)
            if isinstance(found, Err):
                return found

            if slot_repository.schedules_with_consumed_capacity(self.db, [schedule_id]):
                return reservations_conflict([schedule_id])

            now = utcnow()
            removed = slot_repository.soft_delete_slots_for_schedules(
                self.db, [schedule_id], deleted_at=now
            )
            schedule_repository.soft_delete_schedules(
                self.db, [schedule_id], deleted_at=now, disable=True
            )
            return Ok(removed)

        return UnitOfWork(self.db, resource="El horario").run(work)


__all__ = ["ScheduleService"]
