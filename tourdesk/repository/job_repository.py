from __future__ import annotations

from typing import Optional

from sqlalchemy.orm import Session

from tourdesk.models import SlotGenerationJob


def get_job(db: Session, job_id: int) -> Optional[SlotGenerationJob]:
    return db.query(SlotGenerationJob).filter(SlotGenerationJob.id == job_id).first()


def create_job(db: Session, job_data: dict) -> SlotGenerationJob:
    job = SlotGenerationJob(**job_data)
    db.add(job)
    db.flush()
    return job


__all__ = ["create_job", "get_job"]
