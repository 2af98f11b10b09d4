from __future__ import annotations

from typing import Optional

from sqlalchemy import update
from sqlalchemy.orm import Session

from tourdesk.models import Activity, Tariff


def get_tariff(db: Session, tariff_id: int, *, include_deleted: bool = False) -> Optional[Tariff]:
    query = db.query(Tariff).filter(Tariff.id == tariff_id)
    if not include_deleted:
        query = query.filter(Tariff.deleted_at.is_(None))
    return query.first()


def list_tariffs(
    db: Session,
    *,
    tariff_id: Optional[int] = None,
    actividad_id: Optional[int] = None,
    agencia_id: Optional[int] = None,
    es_principal: Optional[bool] = None,
    activa: Optional[bool] = None,
    include_deleted: bool = False,
) -> list[Tariff]:
    query = db.query(Tariff)

    if tariff_id is not None:
        query = query.filter(Tariff.id == tariff_id)
    if actividad_id is not None:
        query = query.filter(Tariff.actividad_id == actividad_id)
    if agencia_id is not None:
        query = query.join(Activity, Activity.id == Tariff.actividad_id).filter(
            Activity.agencia_id == agencia_id
        )
    if es_principal is not None:
        query = query.filter(Tariff.es_principal.is_(es_principal))
    if activa is not None:
        query = query.filter(Tariff.activa.is_(activa))
    if not include_deleted:
        query = query.filter(Tariff.deleted_at.is_(None))

    return query.order_by(Tariff.actividad_id, Tariff.id).all()


def list_live_tariffs(db: Session, actividad_id: int) -> list[Tariff]:
    return (
        db.query(Tariff)
        .filter(Tariff.actividad_id == actividad_id, Tariff.deleted_at.is_(None))
        .order_by(Tariff.id)
        .all()
    )


def create_tariff(db: Session, tariff_data: dict) -> Tariff:
    tariff = Tariff(**tariff_data)
    db.add(tariff)
    db.flush()
    return tariff


def demote_principals(
    db: Session, actividad_id: int, *, except_id: Optional[int] = None
) -> None:
    statement = update(Tariff).where(
        Tariff.actividad_id == actividad_id, Tariff.es_principal.is_(True)
    )
    if except_id is not None:
        statement = statement.where(Tariff.id != except_id)
    db.execute(statement.values(es_principal=False))


def has_principal(db: Session, actividad_id: int) -> bool:
    match = (
        db.query(Tariff.id)
        .filter(
            Tariff.actividad_id == actividad_id,
            Tariff.deleted_at.is_(None),
            Tariff.es_principal.is_(True),
        )
        .first()
    )
    return match is not None


def earliest_active_tariff(db: Session, actividad_id: int) -> Optional[Tariff]:
    return (
        db.query(Tariff)
        .filter(
            Tariff.actividad_id == actividad_id,
            Tariff.deleted_at.is_(None),
            Tariff.activa.is_(True),
        )
        .order_by(Tariff.created_at, Tariff.id)
        .first()
    )


__all__ = [
    "create_tariff",
    "demote_principals",
    "earliest_active_tariff",
    "get_tariff",
    "has_principal",
    "list_live_tariffs",
    "list_tariffs",
]
