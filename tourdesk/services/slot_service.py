from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from sqlalchemy.orm import Session

from tourdesk.core.result import (
    Err,
    Ok,
    Result,
    activity_not_found,
    conflict,
    invalid_time_range,
    not_found,
    validation_error,
)
from tourdesk.core.unit_of_work import UnitOfWork
from tourdesk.models import Slot
from tourdesk.models.mixins import utcnow
from tourdesk.repository import activity_repository, schedule_repository, slot_repository
from tourdesk.schemas.slot import GenerateSlotsRequest, SlotUpdate
from tourdesk.services.slot_generator import GenerationResult, SlotGenerator

# Reservas que ya no retienen cupo
RELEASED_RESERVATION_STATES = ("cancelada", "expirada")


@dataclass
class ReservationUsage:
    affected_reservations: int
    total_turnos: int
    turnos_con_reservas: int


class SlotService:
    def __init__(self, db: Session, *, today: Optional[date] = None):
        self.db = db
        self.generator = SlotGenerator(db, today=today)

    def list_slots(
        self,
        *,
        slot_id: Optional[int] = None,
        actividad_id: Optional[int] = None,
        horario_id: Optional[int] = None,
        agencia_id: Optional[int] = None,
        fecha_desde: Optional[date] = None,
        fecha_hasta: Optional[date] = None,
        only_available: bool = False,
        include_deleted: bool = False,
    ) -> Result[list[Slot]]:
        return Ok(
            slot_repository.list_slots(
                self.db,
                slot_id=slot_id,
                actividad_id=actividad_id,
                horario_id=horario_id,
                agencia_id=agencia_id,
                fecha_desde=fecha_desde,
                fecha_hasta=fecha_hasta,
                only_available=only_available,
                include_deleted=include_deleted,
            )
        )

    def get_slot(self, slot_id: int, *, agencia_id: Optional[int] = None) -> Result[Slot]:
        slot = slot_repository.get_slot(self.db, slot_id)
        if slot is None or (agencia_id is not None and slot.agencia_id != agencia_id):
            return not_found(f"Turno {slot_id} no encontrado")
        return Ok(slot)

    def update_slot(
        self, slot_id: int, payload: SlotUpdate, *, agencia_id: Optional[int] = None
    ) -> Result[Slot]:
        """Update a slot.

        Changing ``cupo_total`` alone shifts ``cupo_disponible`` by the same amount,
        clamped to ``[0, cupo_total]``.
        """

        def work() -> Result[Slot]:
            found = self.get_slot(slot_id, agencia_id=agencia_id)
            if isinstance(found, Err):
                return found
            slot = found.value
            changes = payload.model_dump(exclude_unset=True, exclude_none=True)

            new_total = changes.get("cupo_total", slot.cupo_total)
            if "cupo_total" in changes and "cupo_disponible" not in changes:
                shifted = slot.cupo_disponible + (new_total - slot.cupo_total)
                changes["cupo_disponible"] = min(max(shifted, 0), new_total)
            if changes.get("cupo_disponible", slot.cupo_disponible) > new_total:
                return validation_error("cupo_disponible no puede superar cupo_total")

            start = changes.get("hora_inicio", slot.hora_inicio)
            end = changes.get("hora_fin", slot.hora_fin)
            if start is not None and end is not None and start >= end:
                return invalid_time_range()

            for attribute, value in changes.items():
                setattr(slot, attribute, value)
            self.db.flush()
            return Ok(slot)

        result = UnitOfWork(self.db, resource="El turno").run(work)
        if isinstance(result, Ok):
            self.db.refresh(result.value)
        return result

    def delete_slot(self, slot_id: int, *, agencia_id: Optional[int] = None) -> Result[int]:
        def work() -> Result[int]:
            found = self.get_slot(slot_id, agencia_id=agencia_id)
            if isinstance(found, Err):
                return found
            slot = found.value
            if slot.reserved > 0:
                return conflict("Turno con reservas confirmadas")
            slot.deleted_at = utcnow()
            self.db.flush()
            return Ok(slot.id)

        return UnitOfWork(self.db, resource="El turno").run(work)

    def generate(
        self, payload: GenerateSlotsRequest, *, agencia_id: Optional[int] = None
    ) -> Result[GenerationResult]:
        """Generate missing slots for one schedule or every schedule of an activity."""

        if payload.actividad_id is None and payload.horario_id is None:
            return validation_error("Debe indicar actividad_id u horario_id")

        def work() -> Result[GenerationResult]:
            if payload.horario_id is not None:
                schedule = schedule_repository.get_schedule(self.db, payload.horario_id)
                if schedule is None or (
                    agencia_id is not None and schedule.agencia_id != agencia_id
                ):
                    return not_found(f"Horario {payload.horario_id} no encontrado")
                if not schedule.habilitada:
                    return validation_error(f"El horario {schedule.id} está deshabilitado")
                return Ok(self.generator.generate_for_schedule(schedule))

            activity = activity_repository.get_activity(
                self.db, payload.actividad_id, agencia_id=agencia_id
            )
            if activity is None:
                return activity_not_found(payload.actividad_id)
            return Ok(self.generator.generate_for_activity(activity.id))

        return UnitOfWork(self.db, resource="Los turnos").run(work)

    def check_reservations(
        self, schedule_ids: list[int], *, agencia_id: Optional[int] = None
    ) -> Result[ReservationUsage]:
        """Report how many live slots of ``schedule_ids`` already hold reservations."""

        total, with_reservations, reservations = slot_repository.reservation_usage(
            self.db,
            schedule_ids,
            excluded_states=RELEASED_RESERVATION_STATES,
            agencia_id=agencia_id,
        )
        return Ok(
            ReservationUsage(
                affected_reservations=reservations,
                total_turnos=total,
                turnos_con_reservas=with_reservations,
            )
        )


__all__ = ["RELEASED_RESERVATION_STATES", "ReservationUsage", "SlotService"]
