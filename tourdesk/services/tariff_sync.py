"""Reconcile the tariffs (tarifas) submitted for an activity."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional, Sequence

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from tourdesk.core.result import Err, Ok, Result, not_found, validation_error
from tourdesk.core.unit_of_work import is_foreign_key_violation
from tourdesk.models import Tariff
from tourdesk.models.mixins import utcnow
from tourdesk.repository import tariff_repository
from tourdesk.schemas.tariff import TariffInput

logger = logging.getLogger(__name__)


def tariff_name_key(name: str) -> str:
    return name.strip().casefold()


def find_duplicate_name(tariffs: Sequence[TariffInput]) -> Optional[Err]:
    seen: set[str] = set()
    for index, tariff in enumerate(tariffs):
        key = tariff_name_key(tariff.nombre)
        if key in seen:
            name = tariff.nombre.strip()
            return validation_error(
                f"Tarifa duplicada en índice {index}: «{name}»",
                {"indice": index, "nombre": name},
            )
        seen.add(key)
    return None


@dataclass
class TariffSyncSummary:
    insertadas: list[int] = field(default_factory=list)
    actualizadas: list[int] = field(default_factory=list)
    eliminadas: list[int] = field(default_factory=list)
    principal_id: Optional[int] = None


class TariffSynchronizer:
    def __init__(self, db: Session) -> None:
        self.db = db

    def sync(
        self, *, actividad_id: int, tariffs: Sequence[TariffInput]
    ) -> Result[TariffSyncSummary]:
        duplicate = find_duplicate_name(tariffs)
        if duplicate is not None:
            return duplicate

        existing = {
            tariff.id: tariff
            for tariff in tariff_repository.list_live_tariffs(self.db, actividad_id)
        }
        for tariff in tariffs:
            if tariff.id is not None and tariff.id not in existing:
                return not_found(
                    f"Tarifa {tariff.id} no encontrada en la actividad {actividad_id}"
                )

        summary = TariffSyncSummary()
        incoming_ids = {tariff.id for tariff in tariffs if tariff.id is not None}
        for tariff_id, tariff in existing.items():
            if tariff_id not in incoming_ids and self._soft_delete(tariff):
                summary.eliminadas.append(tariff_id)

        principal_assigned = False
        for item in tariffs:
            # Solo la primera tarifa activa marcada queda como principal
            is_principal = item.es_principal and item.activa and not principal_assigned
            principal_assigned = principal_assigned or is_principal
            values = {
                "nombre": item.nombre.strip(),
                "nombre_en": item.nombre_en,
                "precio": item.precio,
                "moneda": item.moneda.upper(),
                "es_principal": is_principal,
                "activa": item.activa,
            }
            if item.id is not None:
                stored = existing[item.id]
                for attribute, value in values.items():
                    setattr(stored, attribute, value)
                summary.actualizadas.append(stored.id)
                target = stored
            else:
                target = tariff_repository.create_tariff(
                    self.db, {**values, "actividad_id": actividad_id}
                )
                summary.insertadas.append(target.id)
            if is_principal:
                summary.principal_id = target.id

        self.db.flush()

        if not principal_assigned:
            promoted = self.ensure_principal(actividad_id)
            summary.principal_id = promoted.id if promoted is not None else None

        return Ok(summary)

    def _soft_delete(self, tariff: Tariff) -> bool:
        try:
            with self.db.begin_nested():
                tariff.activa = False
                tariff.es_principal = False
                tariff.deleted_at = utcnow()
                self.db.flush()
        except IntegrityError as exc:
            if not is_foreign_key_violation(exc):
                raise
            logger.warning(
                "Tariff %s is still referenced; keeping it: %s", tariff.id, exc.orig
            )
            return False
        return True

    def ensure_principal(self, actividad_id: int) -> Optional[Tariff]:
        if tariff_repository.has_principal(self.db, actividad_id):
            return None
        candidate = tariff_repository.earliest_active_tariff(self.db, actividad_id)
        if candidate is not None:
            candidate.es_principal = True
            self.db.flush()
            logger.info(
                "Promoted tariff %s to principal for activity %s", candidate.id, actividad_id
            )
        return candidate


__all__ = [
    "TariffSyncSummary",
    "TariffSynchronizer",
    "find_duplicate_name",
    "tariff_name_key",
]
