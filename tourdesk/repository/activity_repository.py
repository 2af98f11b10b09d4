from __future__ import annotations

from typing import Optional

from sqlalchemy.orm import Session

from tourdesk.models import Activity, Agency


def get_activity(
    db: Session,
    activity_id: int,
    *,
    agencia_id: Optional[int] = None,
    include_deleted: bool = False,
) -> Optional[Activity]:
    query = db.query(Activity).filter(Activity.id == activity_id)
    if agencia_id is not None:
        query = query.filter(Activity.agencia_id == agencia_id)
    if not include_deleted:
        query = query.filter(Activity.deleted_at.is_(None))
    return query.first()


def list_activities(
    db: Session,
    *,
    agencia_id: Optional[int] = None,
    include_deleted: bool = False,
) -> list[Activity]:
    query = db.query(Activity)
    if agencia_id is not None:
        query = query.filter(Activity.agencia_id == agencia_id)
    if not include_deleted:
        query = query.filter(Activity.deleted_at.is_(None))
    # publicado antes que borrador, luego lo más reciente
    return query.order_by(
        Activity.estado.desc(), Activity.updated_at.desc(), Activity.id.desc()
    ).all()


def create_activity(db: Session, activity_data: dict) -> Activity:
    activity = Activity(**activity_data)
    db.add(activity)
    db.flush()
    return activity


def get_agency(db: Session, agency_id: int) -> Optional[Agency]:
    return (
        db.query(Agency)
        .filter(Agency.id == agency_id, Agency.deleted_at.is_(None))
        .first()
    )


__all__ = ["create_activity", "get_activity", "get_agency", "list_activities"]
