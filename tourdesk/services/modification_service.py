"""Temporary, dated changes applied in bulk to slots (gestión dinámica)."""

from __future__ import annotations

import logging
from datetime import time
from typing import Any, Optional

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
from tourdesk.models import Slot, TemporaryModification
from tourdesk.models.mixins import utcnow
from tourdesk.repository import (
    activity_repository,
    modification_repository,
    schedule_repository,
    slot_repository,
)
from tourdesk.schemas.modification import ModificationCreate, UnblockRequest

logger = logging.getLogger(__name__)

_BLOCKING_TYPES = ("BLOQUEAR_HORARIO", "BLOQUEAR_ACTIVIDAD", "BLOQUEAR_TODAS")


def _time_or_none(value: Optional[str]) -> Optional[time]:
    return time.fromisoformat(value) if value else None


def _snapshot(slot: Slot) -> dict[str, Any]:
    return {
        "turno_id": slot.id,
        "hora_inicio": slot.hora_inicio.isoformat() if slot.hora_inicio else None,
        "hora_fin": slot.hora_fin.isoformat() if slot.hora_fin else None,
        "cupo_total": slot.cupo_total,
        "cupo_disponible": slot.cupo_disponible,
        "bloquear": slot.bloquear,
    }


class ModificationService:
    def __init__(self, db: Session):
        self.db = db

    def list_modifications(
        self, *, agencia_id: Optional[int] = None, activa: Optional[bool] = None
    ) -> Result[list[TemporaryModification]]:
        return Ok(
            modification_repository.list_modifications(
                self.db, agencia_id=agencia_id, activa=activa
            )
        )

    def _resolve_agency(
        self, payload: ModificationCreate, agencia_id: Optional[int]
    ) -> Result[int]:
        if payload.horario_id is not None:
            schedule = schedule_repository.get_schedule(self.db, payload.horario_id)
            if schedule is None or (agencia_id is not None and schedule.agencia_id != agencia_id):
                return not_found(f"Horario {payload.horario_id} no encontrado")
            return Ok(schedule.agencia_id)
        if payload.actividad_id is not None:
            activity = activity_repository.get_activity(
                self.db, payload.actividad_id, agencia_id=agencia_id
            )
            if activity is None:
                return activity_not_found(payload.actividad_id)
            return Ok(activity.agencia_id)
        if agencia_id is None:
            return validation_error(f"x-agencia-id es obligatorio para {payload.tipo}")
        return Ok(agencia_id)

    def apply(
        self, payload: ModificationCreate, *, agencia_id: Optional[int] = None
    ) -> Result[TemporaryModification]:
        """Apply the change to every live slot in the date range and record it."""

        if (
            payload.tipo == "CAMBIAR_HORA_INICIO"
            and payload.hora_fin is not None
            and payload.hora_inicio >= payload.hora_fin
        ):
            return invalid_time_range()

        def work() -> Result[TemporaryModification]:
            resolved = self._resolve_agency(payload, agencia_id)
            if isinstance(resolved, Err):
                return resolved

            slots = slot_repository.list_slots_in_range(
                self.db,
                agencia_id=resolved.value,
                fecha_desde=payload.fecha_desde,
                fecha_hasta=payload.fecha_hasta,
                actividad_id=payload.actividad_id,
                horario_id=payload.horario_id,
            )

            previous: list[dict[str, Any]] = []
            skipped = 0
            for slot in slots:
                snapshot = _snapshot(slot)
                if not self._apply_to_slot(payload, slot):
                    skipped += 1
                    continue
                previous.append(snapshot)
            self.db.flush()

            modification = modification_repository.create_modification(
                self.db,
                {
                    **payload.model_dump(),
                    "agencia_id": resolved.value,
                    "turnos_afectados": len(previous),
                    "turnos_omitidos": skipped,
                    "valores_previos": previous,
                },
            )
            logger.info(
                "Applied %s to %s slots (%s skipped)", payload.tipo, len(previous), skipped
            )
            return Ok(modification)

        result = UnitOfWork(self.db, resource="La modificación").run(work)
        if isinstance(result, Ok):
            self.db.refresh(result.value)
        return result

    @staticmethod
    def _apply_to_slot(payload: ModificationCreate, slot: Slot) -> bool:
        if payload.tipo in _BLOCKING_TYPES:
            slot.bloquear = True
            return True

        if payload.tipo == "CAMBIAR_HORA_INICIO":
            end = payload.hora_fin or slot.hora_fin
            if end is not None and payload.hora_inicio >= end:
                return False
            slot.hora_inicio = payload.hora_inicio
            if payload.hora_fin is not None:
                slot.hora_fin = payload.hora_fin
            return True

        # CAMBIAR_CUPOS: nunca por debajo de lo ya reservado
        reserved = slot.reserved
        if payload.cupo < reserved:
            return False
        slot.cupo_total = payload.cupo
        slot.cupo_disponible = payload.cupo - reserved
        return True

    def revert(
        self, modification_id: int, *, agencia_id: Optional[int] = None
    ) -> Result[TemporaryModification]:
        """Restore the values the slots had before the modification was applied."""

        def work() -> Result[TemporaryModification]:
            modification = modification_repository.get_modification(self.db, modification_id)
            if modification is None or (
                agencia_id is not None and modification.agencia_id != agencia_id
            ):
                return not_found(f"Modificación {modification_id} no encontrada")
            if not modification.activa:
                return conflict(f"La modificación {modification_id} ya fue revertida")

            for snapshot in modification.valores_previos or []:
                slot = slot_repository.get_slot(self.db, snapshot["turno_id"])
                if slot is None:
                    continue
                if modification.tipo in _BLOCKING_TYPES:
                    slot.bloquear = snapshot["bloquear"]
                elif modification.tipo == "CAMBIAR_HORA_INICIO":
                    slot.hora_inicio = _time_or_none(snapshot["hora_inicio"])
                    slot.hora_fin = _time_or_none(snapshot["hora_fin"])
                else:
                    reserved = slot.reserved
                    slot.cupo_total = snapshot["cupo_total"]
                    slot.cupo_disponible = max(0, snapshot["cupo_total"] - reserved)

            modification.activa = False
            modification.revertida_en = utcnow()
            self.db.flush()
            return Ok(modification)

        result = UnitOfWork(self.db, resource="La modificación").run(work)
        if isinstance(result, Ok):
            self.db.refresh(result.value)
        return result

    def unblock(self, payload: UnblockRequest, *, agencia_id: int) -> Result[int]:
        """Clear the ``bloquear`` flag on every matching slot of the range."""

        def work() -> Result[int]:
            slots = slot_repository.list_slots_in_range(
                self.db,
                agencia_id=agencia_id,
                fecha_desde=payload.fecha_desde,
                fecha_hasta=payload.fecha_hasta,
                actividad_id=payload.actividad_id,
                horario_id=payload.horario_id,
            )
            unblocked = 0
            for slot in slots:
                if slot.bloquear:
                    slot.bloquear = False
                    unblocked += 1
            self.db.flush()
            return Ok(unblocked)

        return UnitOfWork(self.db, resource="Los turnos").run(work)


__all__ = ["ModificationService"]
