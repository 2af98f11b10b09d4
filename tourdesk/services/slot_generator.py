"""Expansion of schedules (horarios) into bookable slots (turnos)."""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field
from datetime import date, datetime
from typing import Optional

from sqlalchemy.orm import Session

from tourdesk.core.config import settings
from tourdesk.models import ALL_WEEKDAYS, Schedule
from tourdesk.models.mixins import utcnow
from tourdesk.repository import schedule_repository, slot_repository
from tourdesk.services.recurrence import expand_dates

logger = logging.getLogger(__name__)

SKIP_REASON_EXISTING = "Ya existe un turno para esta fecha y horario"


@dataclass
class SkippedSlot:
    fecha: date
    horario_id: int
    motivo: str


@dataclass
class GenerationResult:
    total_fechas: int = 0
    turnos_creados: int = 0
    omitidos: int = 0
    turnos_omitidos: list[SkippedSlot] = field(default_factory=list)

    def merge(self, other: "GenerationResult") -> "GenerationResult":
        self.total_fechas += other.total_fechas
        self.turnos_creados += other.turnos_creados
        self.omitidos += other.omitidos
        self.turnos_omitidos.extend(other.turnos_omitidos)
        return self

    def as_dict(self) -> dict:
        data = asdict(self)
        data["turnos_omitidos"] = [
            {**item, "fecha": item["fecha"].isoformat()} for item in data["turnos_omitidos"]
        ]
        return data


class SlotGenerator:
    """Create the slots of a schedule for every qualifying date of the horizon."""

    def __init__(
        self,
        db: Session,
        *,
        horizon_days: Optional[int] = None,
        today: Optional[date] = None,
    ) -> None:
        self.db = db
        self.horizon_days = horizon_days or settings.DIAS_VENTANA_EXPANSION
        self._today = today

    @property
    def today(self) -> date:
        return self._today or date.today()

    def generate_for_schedule(self, schedule: Schedule) -> GenerationResult:
        if not schedule.habilitada or schedule.deleted_at is not None:
            return GenerationResult()

        weekdays = schedule.dias or ALL_WEEKDAYS
        dates = expand_dates(
            schedule.fecha_inicio,
            weekdays,
            horizon_days=self.horizon_days,
            not_before=self.today,
        )
        existing = slot_repository.live_slot_dates(self.db, schedule.id)

        result = GenerationResult(total_fechas=len(dates))
        hora_inicio = None if schedule.dia_completo else schedule.hora_inicio
        hora_fin = None if schedule.dia_completo else schedule.hora_fin
        rows = []
        for slot_date in dates:
            if slot_date in existing:
                result.turnos_omitidos.append(
                    SkippedSlot(
                        fecha=slot_date, horario_id=schedule.id, motivo=SKIP_REASON_EXISTING
                    )
                )
                continue
            rows.append(
                {
                    "horario_id": schedule.id,
                    "actividad_id": schedule.actividad_id,
                    "agencia_id": schedule.agencia_id,
                    "fecha": slot_date,
                    "hora_inicio": hora_inicio,
                    "hora_fin": hora_fin,
                    "cupo_total": schedule.cupo,
                    "cupo_disponible": schedule.cupo,
                    "bloquear": False,
                }
            )

        slot_repository.bulk_create_slots(self.db, rows)
        result.turnos_creados = len(rows)
        result.omitidos = len(result.turnos_omitidos)

        logger.info(
            "Generated %s slots for schedule %s (%s skipped)",
            result.turnos_creados,
            schedule.id,
            result.omitidos,
        )
        return result

    def regenerate_for_schedule(
        self, schedule: Schedule, *, deleted_at: Optional[datetime] = None
    ) -> GenerationResult:
        slot_repository.soft_delete_slots_for_schedules(
            self.db, [schedule.id], deleted_at=deleted_at or utcnow()
        )
        return self.generate_for_schedule(schedule)

    def generate_for_activity(self, actividad_id: int) -> GenerationResult:
        result = GenerationResult()
        for schedule in schedule_repository.list_live_schedules(self.db, actividad_id):
            result.merge(self.generate_for_schedule(schedule))
        return result


__all__ = ["GenerationResult", "SkippedSlot", "SlotGenerator", "SKIP_REASON_EXISTING"]
