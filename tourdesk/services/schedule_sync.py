"""Reconcile an activity's cronograma against its stored schedules."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Optional, Sequence

from sqlalchemy.orm import Session

from tourdesk.core.result import (
    Err,
    Ok,
    Result,
    duplicate_schedule_ids,
    invalid_time_range,
    not_found,
    past_start_date,
    reservations_conflict,
)
from tourdesk.models import ALL_WEEKDAYS, Schedule
from tourdesk.models.mixins import utcnow
from tourdesk.repository import schedule_repository, slot_repository
from tourdesk.schemas.schedule import ScheduleEntry
from tourdesk.services.slot_generator import GenerationResult, SlotGenerator

logger = logging.getLogger(__name__)

_COMPARED_FIELDS = (
    "fecha_inicio",
    "dias",
    "dia_completo",
    "hora_inicio",
    "hora_fin",
    "cupo",
    "habilitada",
)


def schedule_values(entry: ScheduleEntry) -> dict:
    """Column values for ``entry``; whole-day schedules carry no times."""

    whole_day = entry.dia_completo
    return {
        "fecha_inicio": entry.fecha_inicio,
        "dias": list(entry.dias) if entry.dias else list(ALL_WEEKDAYS),
        "dia_completo": whole_day,
        "hora_inicio": None if whole_day else entry.hora_inicio,
        "hora_fin": None if whole_day else entry.hora_fin,
        "cupo": entry.cupo,
        "habilitada": entry.habilitada,
    }


def check_time_range(values: dict, index: Optional[int] = None) -> Optional[Err]:
    if values["dia_completo"]:
        return None
    start, end = values["hora_inicio"], values["hora_fin"]
    if start is None or end is None or start >= end:
        return invalid_time_range(index)
    return None


def _differs(schedule: Schedule, values: dict) -> bool:
    for name in _COMPARED_FIELDS:
        current = getattr(schedule, name)
        if name == "dias":
            current = sorted(current or ALL_WEEKDAYS)
        if current != values[name]:
            return True
    return False


@dataclass
class ScheduleSyncSummary:
    insertados: list[int] = field(default_factory=list)
    actualizados: list[int] = field(default_factory=list)
    eliminados: list[int] = field(default_factory=list)
    sin_cambios: list[int] = field(default_factory=list)
    turnos: GenerationResult = field(default_factory=GenerationResult)


@dataclass
class _SyncPlan:
    inserts: list[dict] = field(default_factory=list)
    updates: list[tuple[Schedule, dict]] = field(default_factory=list)
    unchanged: list[int] = field(default_factory=list)
    deletes: list[int] = field(default_factory=list)


class ScheduleSynchronizer:
    """Apply a full replacement cronograma to an activity.

    Validation and the deletion guard run before any write. The caller owns the
    transaction; see :class:`tourdesk.core.unit_of_work.UnitOfWork`.
    """

    def __init__(
        self,
        db: Session,
        *,
        generator: Optional[SlotGenerator] = None,
        today: Optional[date] = None,
    ) -> None:
        self.db = db
        self.generator = generator or SlotGenerator(db, today=today)
        self._today = today

    @property
    def today(self) -> date:
        return self._today or date.today()

    def sync(
        self,
        *,
        actividad_id: int,
        agencia_id: int,
        entries: Sequence[ScheduleEntry],
        generate_slots: bool = True,
    ) -> Result[ScheduleSyncSummary]:
        planned = self._plan(actividad_id, entries)
        if isinstance(planned, Err):
            return planned
        plan = planned.value

        blocked = slot_repository.schedules_with_consumed_capacity(self.db, plan.deletes)
        if blocked:
            logger.info(
                "Refusing to delete schedules %s of activity %s: slots have reservations",
                blocked,
                actividad_id,
            )
            return reservations_conflict(blocked)

        return Ok(
            self._apply(
                plan,
                actividad_id=actividad_id,
                agencia_id=agencia_id,
                generate_slots=generate_slots,
            )
        )

    def _plan(self, actividad_id: int, entries: Sequence[ScheduleEntry]) -> Result[_SyncPlan]:
        explicit_ids = [entry.id for entry in entries if entry.id is not None]
        duplicated = sorted({item for item in explicit_ids if explicit_ids.count(item) > 1})
        if duplicated:
            return duplicate_schedule_ids(duplicated)

        existing = {
            schedule.id: schedule
            for schedule in schedule_repository.list_live_schedules(self.db, actividad_id)
        }
        for schedule_id in explicit_ids:
            if schedule_id not in existing:
                return not_found(
                    f"Horario {schedule_id} no encontrado en la actividad {actividad_id}"
                )

        plan = _SyncPlan()
        for index, entry in enumerate(entries):
            values = schedule_values(entry)
            stored = existing.get(entry.id) if entry.id is not None else None
            changed = stored is None or _differs(stored, values)

            if changed and values["fecha_inicio"] < self.today:
                return past_start_date(index)
            time_error = check_time_range(values, index)
            if time_error is not None:
                return time_error

            if stored is None:
                plan.inserts.append(values)
            elif changed:
                plan.updates.append((stored, values))
            else:
                plan.unchanged.append(stored.id)

        incoming = set(explicit_ids)
        plan.deletes = [schedule_id for schedule_id in existing if schedule_id not in incoming]
        return Ok(plan)

    def _apply(
        self,
        plan: _SyncPlan,
        *,
        actividad_id: int,
        agencia_id: int,
        generate_slots: bool,
    ) -> ScheduleSyncSummary:
        now = utcnow()
        summary = ScheduleSyncSummary(sin_cambios=list(plan.unchanged))

        slot_repository.soft_delete_slots_for_schedules(self.db, plan.deletes, deleted_at=now)
        schedule_repository.soft_delete_schedules(self.db, plan.deletes, deleted_at=now)
        summary.eliminados = list(plan.deletes)

        for schedule, values in plan.updates:
            for attribute, value in values.items():
                setattr(schedule, attribute, value)
            self.db.flush()
            slot_repository.soft_delete_slots_for_schedules(
                self.db, [schedule.id], deleted_at=now
            )
            if generate_slots:
                summary.turnos.merge(self.generator.generate_for_schedule(schedule))
            summary.actualizados.append(schedule.id)

        for values in plan.inserts:
            schedule = schedule_repository.create_schedule(
                self.db,
                {**values, "actividad_id": actividad_id, "agencia_id": agencia_id},
            )
            if generate_slots:
                summary.turnos.merge(self.generator.generate_for_schedule(schedule))
            summary.insertados.append(schedule.id)

        logger.info(
            "Synchronized cronograma of activity %s: %s new, %s updated, %s deleted",
            actividad_id,
            len(summary.insertados),
            len(summary.actualizados),
            len(summary.eliminados),
        )
        return summary


__all__ = [
    "ScheduleSyncSummary",
    "ScheduleSynchronizer",
    "check_time_range",
    "schedule_values",
]
