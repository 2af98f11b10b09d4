"""Tracked slot-generation jobs run after the HTTP response is sent."""

from __future__ import annotations

import logging
from typing import Callable, Optional

from fastapi import BackgroundTasks
from sqlalchemy.orm import Session

from tourdesk.core.database import SessionLocal
from tourdesk.core.result import Ok, Result, not_found
from tourdesk.models import SlotGenerationJob
from tourdesk.models.job import JOB_DONE, JOB_FAILED, JOB_RUNNING
from tourdesk.models.mixins import utcnow
from tourdesk.repository import job_repository, schedule_repository
from tourdesk.services.slot_generator import GenerationResult, SlotGenerator

logger = logging.getLogger(__name__)


class SlotGenerationJobService:
    def __init__(self, db: Session):
        self.db = db

    def enqueue(
        self, *, actividad_id: int, horario_id: Optional[int] = None
    ) -> SlotGenerationJob:
        """Register a pending job. The caller commits it with its own unit of work."""

        return job_repository.create_job(
            self.db, {"actividad_id": actividad_id, "horario_id": horario_id}
        )

    def get_job(self, job_id: int) -> Result[SlotGenerationJob]:
        job = job_repository.get_job(self.db, job_id)
        if job is None:
            return not_found(f"Trabajo {job_id} no encontrado")
        return Ok(job)

    def schedule(
        self,
        job: SlotGenerationJob,
        *,
        background_tasks: Optional[BackgroundTasks] = None,
    ) -> SlotGenerationJob:
        """Run ``job`` in the background when possible, otherwise right away."""

        if background_tasks is not None:
            background_tasks.add_task(SlotGenerationJobService.run_job, job.id)
            return job
        self.execute(job.id)
        return job

    def execute(self, job_id: int) -> Result[SlotGenerationJob]:
        found = self.get_job(job_id)
        if not isinstance(found, Ok):
            return found
        job = found.value

        job.estado = JOB_RUNNING
        job.iniciado_en = utcnow()
        self.db.commit()

        try:
            result = self._generate(job)
            job.estado = JOB_DONE
            job.resultado = result.as_dict()
            job.finalizado_en = utcnow()
            self.db.commit()
        except Exception as exc:
            self.db.rollback()
            logger.exception(
                "Slot generation job %s for activity %s failed", job_id, job.actividad_id
            )
            job.estado = JOB_FAILED
            job.error = str(exc) or exc.__class__.__name__
            job.finalizado_en = utcnow()
            self.db.commit()

        self.db.refresh(job)
        return Ok(job)

    def _generate(self, job: SlotGenerationJob) -> GenerationResult:
        generator = SlotGenerator(self.db)
        if job.horario_id is None:
            return generator.generate_for_activity(job.actividad_id)
        schedule = schedule_repository.get_schedule(self.db, job.horario_id)
        if schedule is None:
            return GenerationResult()
        return generator.generate_for_schedule(schedule)

    @staticmethod
    def run_job(
        job_id: int, session_factory: Callable[[], Session] = SessionLocal
    ) -> None:
        db = session_factory()
        try:
            SlotGenerationJobService(db).execute(job_id)
        finally:
            db.close()


__all__ = ["SlotGenerationJobService"]
