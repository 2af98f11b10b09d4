from __future__ import annotations

from typing import Optional

from sqlalchemy.orm import Session

from tourdesk.models import TemporaryModification


def get_modification(db: Session, modification_id: int) -> Optional[TemporaryModification]:
    return (
        db.query(TemporaryModification)
        .filter(TemporaryModification.id == modification_id)
        .first()
    )


def list_modifications(
    db: Session,
    *,
    agencia_id: Optional[int] = None,
    activa: Optional[bool] = None,
) -> list[TemporaryModification]:
    query = db.query(TemporaryModification)
    if agencia_id is not None:
        query = query.filter(TemporaryModification.agencia_id == agencia_id)
    if activa is not None:
        query = query.filter(TemporaryModification.activa.is_(activa))
    return query.order_by(TemporaryModification.id.desc()).all()


def create_modification(db: Session, modification_data: dict) -> TemporaryModification:
    modification = TemporaryModification(**modification_data)
    db.add(modification)
    db.flush()
    return modification


__all__ = ["create_modification", "get_modification", "list_modifications"]
