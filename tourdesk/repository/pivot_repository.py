"""Association rows between activities and the agency catalogue."""

from __future__ import annotations

from typing import Iterable

from sqlalchemy import Table, delete, insert, select
from sqlalchemy.orm import Session

from tourdesk.models import (
    AddOn,
    Discount,
    Transport,
    activity_add_ons,
    activity_discounts,
    activity_transports,
)

# relación -> (tabla pivote, columna del ítem, modelo)
PIVOTS = {
    "adicionales": (activity_add_ons, "adicionales_id", AddOn),
    "transportes": (activity_transports, "transporte_id", Transport),
    "descuentos": (activity_discounts, "descuento_id", Discount),
}


def delete_links(db: Session, table: Table, actividad_id: int) -> int:
    result = db.execute(delete(table).where(table.c.actividad_id == actividad_id))
    return result.rowcount or 0


def insert_links(
    db: Session, table: Table, column: str, actividad_id: int, item_ids: Iterable[int]
) -> int:
    rows = [{"actividad_id": actividad_id, column: item_id} for item_id in item_ids]
    if rows:
        db.execute(insert(table), rows)
    return len(rows)


def linked_ids(db: Session, table: Table, column: str, actividad_id: int) -> list[int]:
    item_column = table.c[column]
    rows = db.execute(
        select(item_column)
        .where(table.c.actividad_id == actividad_id)
        .order_by(item_column)
    ).all()
    return [row[0] for row in rows]


def list_linked(db: Session, relation: str, actividad_id: int) -> list:
    table, column, model = PIVOTS[relation]
    return (
        db.query(model)
        .join(table, table.c[column] == model.id)
        .filter(table.c.actividad_id == actividad_id, model.deleted_at.is_(None))
        .order_by(model.id)
        .all()
    )


__all__ = ["PIVOTS", "delete_links", "insert_links", "linked_ids", "list_linked"]
