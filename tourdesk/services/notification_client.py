"""HTTP client for interacting with the notification service."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx

from tourdesk.core.config import settings

logger = logging.getLogger(__name__)


class NotificationClient:
    """Small wrapper around the notification API endpoints."""

    def __init__(
        self,
        *,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        enabled: Optional[bool] = None,
    ) -> None:
        configured_base = base_url if base_url is not None else settings.NOTIFICATION_SERVICE_URL
        self._base_url = configured_base.rstrip("/") if configured_base else ""
        self._timeout = timeout or settings.NOTIFICATION_SERVICE_TIMEOUT
        self._enabled = settings.NOTIFICATION_ENABLED if enabled is None else enabled

    @property
    def is_configured(self) -> bool:
        return self._enabled and bool(self._base_url)

    def send_reservation_email(self, payload: Dict[str, Any]) -> bool:
        """Post a reservation email; returns ``True`` when the service accepted it."""

        if not self.is_configured:
            logger.info("Notification service URL not configured; skipping email dispatch")
            return False

        url = f"{self._base_url}/notifications/send-email"

        try:
            response = httpx.post(url, json=payload, timeout=self._timeout)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            logger.warning(
                "Notification service returned HTTP %s while sending reservation email: %s",
                exc.response.status_code,
                exc.response.text,
            )
            return False
        except httpx.RequestError as exc:
            logger.warning("Failed to reach notification service: %s", exc)
            return False
        return True


def build_confirmation_payload(reservation: Any, slot: Any, activity: Any) -> Dict[str, Any]:
    return {
        "template": "reserva_confirmada",
        "to": reservation.cliente_email,
        "context": {
            "reserva_id": reservation.id,
            "cliente": reservation.cliente_nombre,
            "actividad": activity.titulo if activity is not None else None,
            "fecha": slot.fecha.isoformat() if slot is not None else None,
            "hora_inicio": (
                slot.hora_inicio.strftime("%H:%M")
                if slot is not None and slot.hora_inicio is not None
                else None
            ),
            "personas": reservation.cantidad_personas,
            "monto_total": str(reservation.monto_total),
            "moneda": reservation.moneda,
        },
    }


__all__ = ["NotificationClient", "build_confirmation_payload"]
