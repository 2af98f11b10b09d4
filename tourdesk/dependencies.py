from collections.abc import Iterator
from typing import Optional

from fastapi import Header
from sqlalchemy.orm import Session

from tourdesk.core.database import SessionLocal
from tourdesk.core.result import unwrap, validation_error


def get_db() -> Iterator[Session]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_agency_id(
    x_agencia_id: Optional[str] = Header(None, alias="x-agencia-id"),
) -> Optional[int]:
    """Agency scope taken from the ``x-agencia-id`` header, when sent."""

    if x_agencia_id is None or not x_agencia_id.strip():
        return None
    value = x_agencia_id.strip()
    if not value.isdigit() or int(value) <= 0:
        unwrap(validation_error("El encabezado x-agencia-id debe ser un entero positivo"))
    return int(value)


def require_agency_id(
    x_agencia_id: Optional[str] = Header(None, alias="x-agencia-id"),
) -> int:
    agency_id = get_agency_id(x_agencia_id)
    if agency_id is None:
        unwrap(validation_error("El encabezado x-agencia-id es obligatorio"))
    return agency_id
