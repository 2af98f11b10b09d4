from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session, selectinload

from tourdesk.models import Reservation


def get_reservation(db: Session, reservation_id: int) -> Optional[Reservation]:
    return (
        db.query(Reservation)
        .options(selectinload(Reservation.items))
        .filter(Reservation.id == reservation_id, Reservation.deleted_at.is_(None))
        .first()
    )


def list_reservations(
    db: Session,
    *,
    agencia_id: Optional[int] = None,
    estado: Optional[str] = None,
    actividad_id: Optional[int] = None,
    turno_id: Optional[int] = None,
) -> list[Reservation]:
    query = db.query(Reservation).options(selectinload(Reservation.items))

    if agencia_id is not None:
        query = query.filter(Reservation.agencia_id == agencia_id)
    if estado is not None:
        query = query.filter(Reservation.estado == estado)
    if actividad_id is not None:
        query = query.filter(Reservation.actividad_id == actividad_id)
    if turno_id is not None:
        query = query.filter(Reservation.turno_id == turno_id)

    query = query.filter(Reservation.deleted_at.is_(None))
    return query.order_by(Reservation.created_at.desc(), Reservation.id.desc()).all()


def create_reservation(db: Session, reservation: Reservation) -> Reservation:
    db.add(reservation)
    db.flush()
    return reservation


def list_expired_holds(db: Session, *, now: datetime) -> list[Reservation]:
    return (
        db.query(Reservation)
        .filter(
            Reservation.estado == "pendiente",
            Reservation.deleted_at.is_(None),
            Reservation.expira_en.isnot(None),
            Reservation.expira_en < now,
        )
        .order_by(Reservation.id)
        .all()
    )


__all__ = [
    "create_reservation",
    "get_reservation",
    "list_expired_holds",
    "list_reservations",
]
