from __future__ import annotations

from datetime import date, datetime
from typing import Iterable, Optional

from sqlalchemy import update
from sqlalchemy.orm import Session

from tourdesk.models import Schedule


def get_schedule(
    db: Session, schedule_id: int, *, include_deleted: bool = False
) -> Optional[Schedule]:
    query = db.query(Schedule).filter(Schedule.id == schedule_id)
    if not include_deleted:
        query = query.filter(Schedule.deleted_at.is_(None))
    return query.first()


def list_schedules(
    db: Session,
    *,
    schedule_id: Optional[int] = None,
    actividad_id: Optional[int] = None,
    agencia_id: Optional[int] = None,
    habilitada: Optional[bool] = None,
    fecha_desde: Optional[date] = None,
    fecha_hasta: Optional[date] = None,
    include_deleted: bool = False,
) -> list[Schedule]:
    query = db.query(Schedule)

    if schedule_id is not None:
        query = query.filter(Schedule.id == schedule_id)
    if actividad_id is not None:
        query = query.filter(Schedule.actividad_id == actividad_id)
    if agencia_id is not None:
        query = query.filter(Schedule.agencia_id == agencia_id)
    if habilitada is not None:
        query = query.filter(Schedule.habilitada.is_(habilitada))
    if fecha_desde is not None:
        query = query.filter(Schedule.fecha_inicio >= fecha_desde)
    if fecha_hasta is not None:
        query = query.filter(Schedule.fecha_inicio <= fecha_hasta)
    if not include_deleted:
        query = query.filter(Schedule.deleted_at.is_(None))

    return query.order_by(Schedule.fecha_inicio, Schedule.id).all()


def list_live_schedules(db: Session, actividad_id: int) -> list[Schedule]:
    return (
        db.query(Schedule)
        .filter(Schedule.actividad_id == actividad_id, Schedule.deleted_at.is_(None))
        .order_by(Schedule.id)
        .all()
    )


def create_schedule(db: Session, schedule_data: dict) -> Schedule:
    schedule = Schedule(**schedule_data)
    db.add(schedule)
    db.flush()
    return schedule


def soft_delete_schedules(
    db: Session,
    schedule_ids: Iterable[int],
    *,
    deleted_at: datetime,
    disable: bool = False,
) -> int:
    ids = list(schedule_ids)
    if not ids:
        return 0
    values: dict = {"deleted_at": deleted_at}
    if disable:
        values["habilitada"] = False
    result = db.execute(
        update(Schedule)
        .where(Schedule.id.in_(ids), Schedule.deleted_at.is_(None))
        .values(**values)
    )
    return result.rowcount or 0


__all__ = [
    "create_schedule",
    "get_schedule",
    "list_live_schedules",
    "list_schedules",
    "soft_delete_schedules",
]
