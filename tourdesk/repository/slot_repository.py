from __future__ import annotations

from datetime import date, datetime
from typing import Iterable, Optional, Sequence

from sqlalchemy import case, func, insert, update
from sqlalchemy.orm import Session

from tourdesk.models import Reservation, Slot


def get_slot(db: Session, slot_id: int, *, include_deleted: bool = False) -> Optional[Slot]:
    query = db.query(Slot).filter(Slot.id == slot_id)
    if not include_deleted:
        query = query.filter(Slot.deleted_at.is_(None))
    return query.first()


def list_slots(
    db: Session,
    *,
    slot_id: Optional[int] = None,
    actividad_id: Optional[int] = None,
    horario_id: Optional[int] = None,
    agencia_id: Optional[int] = None,
    fecha_desde: Optional[date] = None,
    fecha_hasta: Optional[date] = None,
    only_available: bool = False,
    include_deleted: bool = False,
) -> list[Slot]:
    query = db.query(Slot)

    if slot_id is not None:
        query = query.filter(Slot.id == slot_id)
    if actividad_id is not None:
        query = query.filter(Slot.actividad_id == actividad_id)
    if horario_id is not None:
        query = query.filter(Slot.horario_id == horario_id)
    if agencia_id is not None:
        query = query.filter(Slot.agencia_id == agencia_id)
    if fecha_desde is not None:
        query = query.filter(Slot.fecha >= fecha_desde)
    if fecha_hasta is not None:
        query = query.filter(Slot.fecha <= fecha_hasta)
    if only_available:
        query = query.filter(Slot.cupo_disponible > 0, Slot.bloquear.is_(False))
    if not include_deleted:
        query = query.filter(Slot.deleted_at.is_(None))

    return query.order_by(Slot.fecha, Slot.hora_inicio, Slot.id).all()


def live_slot_dates(db: Session, schedule_id: int) -> set[date]:
    rows = (
        db.query(Slot.fecha)
        .filter(Slot.horario_id == schedule_id, Slot.deleted_at.is_(None))
        .all()
    )
    return {row.fecha for row in rows}


def bulk_create_slots(db: Session, rows: Sequence[dict]) -> None:
    if rows:
        db.execute(insert(Slot), list(rows))


def soft_delete_slots_for_schedules(
    db: Session, schedule_ids: Iterable[int], *, deleted_at: datetime
) -> int:
    ids = list(schedule_ids)
    if not ids:
        return 0
    result = db.execute(
        update(Slot)
        .where(Slot.horario_id.in_(ids), Slot.deleted_at.is_(None))
        .values(deleted_at=deleted_at)
    )
    return result.rowcount or 0


def soft_delete_slots_for_activity(
    db: Session, actividad_id: int, *, deleted_at: datetime
) -> int:
    result = db.execute(
        update(Slot)
        .where(Slot.actividad_id == actividad_id, Slot.deleted_at.is_(None))
        .values(deleted_at=deleted_at)
    )
    return result.rowcount or 0


def schedules_with_consumed_capacity(
    db: Session, schedule_ids: Iterable[int]
) -> list[int]:
    """Return the schedules that own at least one live slot with reserved capacity."""

    ids = list(schedule_ids)
    if not ids:
        return []
    rows = (
        db.query(Slot.horario_id)
        .filter(
            Slot.horario_id.in_(ids),
            Slot.deleted_at.is_(None),
            Slot.cupo_disponible < Slot.cupo_total,
        )
        .distinct()
        .order_by(Slot.horario_id)
        .all()
    )
    return [row.horario_id for row in rows]


def reservation_usage(
    db: Session,
    schedule_ids: Iterable[int],
    *,
    excluded_states: Sequence[str],
    agencia_id: Optional[int] = None,
) -> tuple[int, int, int]:
    """Return ``(total_slots, slots_with_reservations, reservations)`` for the schedules."""

    ids = list(schedule_ids)
    if not ids:
        return 0, 0, 0

    live_slots = db.query(Slot).filter(Slot.horario_id.in_(ids), Slot.deleted_at.is_(None))
    if agencia_id is not None:
        live_slots = live_slots.filter(Slot.agencia_id == agencia_id)
    total_slots = live_slots.count()
    slots_with_reservations = live_slots.filter(Slot.cupo_disponible < Slot.cupo_total).count()
    reservation_query = (
        db.query(func.count(Reservation.id))
        .join(Slot, Slot.id == Reservation.turno_id)
        .filter(
            Slot.horario_id.in_(ids),
            Slot.deleted_at.is_(None),
            Reservation.deleted_at.is_(None),
            Reservation.estado.notin_(excluded_states),
        )
    )
    if agencia_id is not None:
        reservation_query = reservation_query.filter(Slot.agencia_id == agencia_id)
    reservations = reservation_query.scalar()
    return total_slots, slots_with_reservations, int(reservations or 0)


def list_slots_in_range(
    db: Session,
    *,
    agencia_id: int,
    fecha_desde: date,
    fecha_hasta: date,
    actividad_id: Optional[int] = None,
    horario_id: Optional[int] = None,
) -> list[Slot]:
    query = db.query(Slot).filter(
        Slot.agencia_id == agencia_id,
        Slot.deleted_at.is_(None),
        Slot.fecha >= fecha_desde,
        Slot.fecha <= fecha_hasta,
    )
    if actividad_id is not None:
        query = query.filter(Slot.actividad_id == actividad_id)
    if horario_id is not None:
        query = query.filter(Slot.horario_id == horario_id)
    return query.order_by(Slot.fecha, Slot.id).all()


def consume_capacity(db: Session, slot_id: int, amount: int) -> bool:
    """Take ``amount`` seats from a live, unblocked slot if it still has them."""

    result = db.execute(
        update(Slot)
        .where(
            Slot.id == slot_id,
            Slot.deleted_at.is_(None),
            Slot.bloquear.is_(False),
            Slot.cupo_disponible >= amount,
        )
        .values(cupo_disponible=Slot.cupo_disponible - amount)
        .execution_options(synchronize_session=False)
    )
    return (result.rowcount or 0) == 1


def release_capacity(db: Session, slot_id: int, amount: int) -> None:
    restored = Slot.cupo_disponible + amount
    db.execute(
        update(Slot)
        .where(Slot.id == slot_id)
        .values(
            cupo_disponible=case((restored > Slot.cupo_total, Slot.cupo_total), else_=restored)
        )
        .execution_options(synchronize_session=False)
    )


__all__ = [
    "bulk_create_slots",
    "consume_capacity",
    "get_slot",
    "list_slots",
    "list_slots_in_range",
    "live_slot_dates",
    "release_capacity",
    "reservation_usage",
    "schedules_with_consumed_capacity",
    "soft_delete_slots_for_activity",
    "soft_delete_slots_for_schedules",
]
