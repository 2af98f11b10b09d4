"""Reservation holds and their state machine."""

from __future__ import annotations

import logging
from datetime import timedelta
from decimal import Decimal
from typing import Optional

from fastapi import BackgroundTasks
from sqlalchemy.orm import Session

from tourdesk.core.config import settings
from tourdesk.core.result import Err, Ok, Result, conflict, not_found, validation_error
from tourdesk.core.unit_of_work import UnitOfWork
from tourdesk.models import (
    AddOn,
    Reservation,
    ReservationItem,
    Slot,
    Transport,
    activity_add_ons,
    activity_transports,
)
from tourdesk.models.mixins import utcnow
from tourdesk.repository import (
    activity_repository,
    pivot_repository,
    reservation_repository,
    slot_repository,
    tariff_repository,
)
from tourdesk.schemas.reservation import ReservationCreate, ReservationItemInput
from tourdesk.services.notification_client import NotificationClient, build_confirmation_payload
from tourdesk.services.slot_service import RELEASED_RESERVATION_STATES

logger = logging.getLogger(__name__)

HOLD_REJECTED_MESSAGE = "Sin cupo o ítem inválido"

ALLOWED_TRANSITIONS = {
    "pendiente": {"confirmada", "cancelada", "expirada"},
    "confirmada": {"cancelada", "check_in", "no_show"},
}


def _send_confirmation(payload: dict) -> None:
    NotificationClient().send_reservation_email(payload)


class ReservationService:
    def __init__(self, db: Session):
        self.db = db

    def list_reservations(
        self,
        *,
        agencia_id: Optional[int] = None,
        estado: Optional[str] = None,
        actividad_id: Optional[int] = None,
        turno_id: Optional[int] = None,
    ) -> Result[list[Reservation]]:
        return Ok(
            reservation_repository.list_reservations(
                self.db,
                agencia_id=agencia_id,
                estado=estado,
                actividad_id=actividad_id,
                turno_id=turno_id,
            )
        )

    def get_reservation(
        self, reservation_id: int, *, agencia_id: Optional[int] = None
    ) -> Result[Reservation]:
        reservation = reservation_repository.get_reservation(self.db, reservation_id)
        if reservation is None or (
            agencia_id is not None and reservation.agencia_id != agencia_id
        ):
            return not_found(f"Reserva {reservation_id} no encontrada")
        return Ok(reservation)

    def _price_items(
        self, slot: Slot, items: list[ReservationItemInput]
    ) -> Optional[tuple[list[ReservationItem], int, Decimal, str]]:
        """Price every item against the slot's activity; ``None`` if any is foreign."""

        linked_add_ons = set(
            pivot_repository.linked_ids(
                self.db, activity_add_ons, "adicionales_id", slot.actividad_id
            )
        )
        linked_transports = set(
            pivot_repository.linked_ids(
                self.db, activity_transports, "transporte_id", slot.actividad_id
            )
        )

        rows: list[ReservationItem] = []
        party_size = 0
        total = Decimal("0")
        currency: Optional[str] = None

        for item in items:
            if item.item_tipo == "tarifa":
                tariff = tariff_repository.get_tariff(self.db, item.item_id)
                if tariff is None or tariff.actividad_id != slot.actividad_id or not tariff.activa:
                    return None
                price = tariff.precio
                party_size += item.cantidad
                currency = currency or tariff.moneda
            elif item.item_tipo == "adicional":
                add_on = self.db.get(AddOn, item.item_id)
                if add_on is None or add_on.is_deleted or add_on.id not in linked_add_ons:
                    return None
                price = add_on.precio
            else:
                transport = self.db.get(Transport, item.item_id)
                if (
                    transport is None
                    or transport.is_deleted
                    or transport.id not in linked_transports
                ):
                    return None
                price = transport.precio

            total += Decimal(price) * item.cantidad
            rows.append(
                ReservationItem(
                    item_tipo=item.item_tipo,
                    item_id=item.item_id,
                    cantidad=item.cantidad,
                    precio_unitario=price,
                )
            )

        return rows, party_size, total, currency or "USD"

    def create_hold(
        self, payload: ReservationCreate, *, agencia_id: Optional[int] = None
    ) -> Result[Reservation]:
        """Create a ``pendiente`` reservation holding capacity for a short time."""

        def work() -> Result[Reservation]:
            slot = slot_repository.get_slot(self.db, payload.turno_id)
            if slot is None or (agencia_id is not None and slot.agencia_id != agencia_id):
                return not_found(f"Turno {payload.turno_id} no encontrado")

            priced = self._price_items(slot, payload.items)
            if priced is None:
                return conflict(HOLD_REJECTED_MESSAGE)
            items, party_size, total, currency = priced

            activity = activity_repository.get_activity(self.db, slot.actividad_id)
            if activity is None:
                return conflict(HOLD_REJECTED_MESSAGE)
            if party_size < max(activity.minimo_personas_reserva or 1, 1):
                return validation_error(
                    f"La reserva requiere al menos {activity.minimo_personas_reserva} personas"
                )

            if not slot_repository.consume_capacity(self.db, slot.id, party_size):
                logger.info("Hold rejected on slot %s for %s people", slot.id, party_size)
                return conflict(HOLD_REJECTED_MESSAGE)

            client = payload.cliente
            full_name = None
            if client is not None:
                parts = [part for part in (client.nombre, client.apellido) if part]
                full_name = " ".join(parts) or None

            reservation = Reservation(
                turno_id=slot.id,
                actividad_id=slot.actividad_id,
                agencia_id=slot.agencia_id,
                estado="pendiente",
                cantidad_personas=party_size,
                cliente_nombre=full_name,
                cliente_email=client.email if client is not None else None,
                cliente_telefono=client.telefono if client is not None else None,
                monto_total=total,
                moneda=currency,
                pago_referencia=payload.pago_referencia,
                expira_en=utcnow() + timedelta(minutes=settings.RESERVA_HOLD_MINUTOS),
                items=items,
            )
            reservation_repository.create_reservation(self.db, reservation)
            return Ok(reservation)

        result = UnitOfWork(self.db, resource="La reserva").run(work)
        if isinstance(result, Ok):
            self.db.refresh(result.value)
        return result

    def change_state(
        self,
        reservation_id: int,
        new_state: str,
        *,
        agencia_id: Optional[int] = None,
        background_tasks: Optional[BackgroundTasks] = None,
    ) -> Result[Reservation]:
        def work() -> Result[Reservation]:
            found = self.get_reservation(reservation_id, agencia_id=agencia_id)
            if isinstance(found, Err):
                return found
            reservation = found.value

            if new_state not in ALLOWED_TRANSITIONS.get(reservation.estado, set()):
                return conflict(
                    f"No se puede pasar de '{reservation.estado}' a '{new_state}'"
                )
            if new_state in RELEASED_RESERVATION_STATES:
                slot_repository.release_capacity(
                    self.db, reservation.turno_id, reservation.cantidad_personas
                )
            reservation.estado = new_state
            self.db.flush()
            return Ok(reservation)

        result = UnitOfWork(self.db, resource="La reserva").run(work)
        if not isinstance(result, Ok):
            return result

        reservation = result.value
        self.db.refresh(reservation)
        if reservation.estado == "confirmada":
            self._notify_confirmation(reservation, background_tasks)
        return result

    def _notify_confirmation(
        self, reservation: Reservation, background_tasks: Optional[BackgroundTasks]
    ) -> None:
        if not reservation.cliente_email:
            logger.info("Reservation %s has no email; skipping confirmation", reservation.id)
            return

        slot = slot_repository.get_slot(self.db, reservation.turno_id, include_deleted=True)
        activity = activity_repository.get_activity(
            self.db, reservation.actividad_id, include_deleted=True
        )
        payload = build_confirmation_payload(reservation, slot, activity)
        if background_tasks is not None:
            background_tasks.add_task(_send_confirmation, payload)
        else:
            _send_confirmation(payload)

    def expire_pending_holds(self) -> Result[int]:
        """Expire every ``pendiente`` hold whose ``expira_en`` has passed."""

        def work() -> Result[int]:
            expired = reservation_repository.list_expired_holds(self.db, now=utcnow())
            for reservation in expired:
                slot_repository.release_capacity(
                    self.db, reservation.turno_id, reservation.cantidad_personas
                )
                reservation.estado = "expirada"
            self.db.flush()
            if expired:
                logger.info("Expired %s pending reservation holds", len(expired))
            return Ok(len(expired))

        return UnitOfWork(self.db, resource="La reserva").run(work)


__all__ = ["ALLOWED_TRANSITIONS", "HOLD_REJECTED_MESSAGE", "ReservationService"]
