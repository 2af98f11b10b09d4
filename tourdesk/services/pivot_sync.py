"""Replace-all synchronization of the activity pivot tables."""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from sqlalchemy.orm import Session

from tourdesk.core.result import Ok, Result, not_found, validation_error
from tourdesk.repository import pivot_repository
from tourdesk.repository.pivot_repository import PIVOTS

logger = logging.getLogger(__name__)


class PivotSynchronizer:
    """Delete every association of an activity for a relation and insert the new list."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def sync(
        self,
        *,
        actividad_id: int,
        relation: str,
        item_ids: Iterable[int],
        agencia_id: Optional[int] = None,
    ) -> Result[list[int]]:
        if relation not in PIVOTS:
            return validation_error(f"Relación desconocida: {relation}")
        table, column, model = PIVOTS[relation]
        ids = list(dict.fromkeys(item_ids))

        if ids:
            query = self.db.query(model.id).filter(
                model.id.in_(ids), model.deleted_at.is_(None)
            )
            if agencia_id is not None:
                query = query.filter(model.agencia_id == agencia_id)
            found = {row.id for row in query.all()}
            missing = [item_id for item_id in ids if item_id not in found]
            if missing:
                return not_found(f"{relation.capitalize()} no encontrados: {missing}")

        removed = pivot_repository.delete_links(self.db, table, actividad_id)
        pivot_repository.insert_links(self.db, table, column, actividad_id, ids)
        logger.debug(
            "Replaced %s %s links of activity %s with %s",
            removed,
            relation,
            actividad_id,
            len(ids),
        )
        return Ok(ids)


__all__ = ["PivotSynchronizer"]
