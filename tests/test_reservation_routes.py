from datetime import timedelta
from decimal import Decimal
from unittest import mock

import pytest

from tourdesk.models import Reservation, Slot
from tourdesk.models.mixins import utcnow
from tourdesk.services.pivot_sync import PivotSynchronizer
from tourdesk.services.slot_generator import SlotGenerator
from tests.helpers import tomorrow


@pytest.fixture
def slot(db, make_schedule):
    """A live slot of 10 seats for the shared activity."""
    schedule = make_schedule(fecha_inicio=tomorrow(), dias=[0, 1, 2, 3, 4, 5, 6])
    SlotGenerator(db).generate_for_schedule(schedule)
    db.commit()
    return (
        db.query(Slot).filter(Slot.horario_id == schedule.id).order_by(Slot.fecha).first()
    )


@pytest.fixture
def linked_add_on(db, activity, catalogue):
    PivotSynchronizer(db).sync(
        actividad_id=activity.id, relation="adicionales", item_ids=[catalogue["adicional"].id]
    )
    db.commit()
    return catalogue["adicional"]


def hold(client, slot_id, items, **extra):
    body = {"turno_id": slot_id, "items": items, **extra}
    return client.post("/api/reservas", json=body)


def seats(tariff, cantidad):
    return {"item_tipo": "tarifa", "item_id": tariff.id, "cantidad": cantidad}


def available(db, slot_id):
    db.expire_all()
    return db.get(Slot, slot_id).cupo_disponible


class TestHolds:
    def test_hold_consumes_capacity_and_prices_items(
        self, client, db, slot, make_tariff, linked_add_on
    ):
        adult = make_tariff(nombre="Adulto", precio=Decimal("100.00"))
        child = make_tariff(nombre="Niño", precio=Decimal("60.00"))

        response = hold(
            client,
            slot.id,
            [
                seats(adult, 2),
                seats(child, 1),
                {"item_tipo": "adicional", "item_id": linked_add_on.id, "cantidad": 3},
            ],
            cliente={"nombre": "Ana", "apellido": "Quispe", "email": "ana@example.com"},
        )

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["estado"] == "pendiente"
        assert data["cantidad_personas"] == 3
        assert Decimal(data["monto_total"]) == Decimal("305.00")
        assert data["moneda"] == "PEN"
        assert data["cliente_nombre"] == "Ana Quispe"
        assert data["expira_en"] is not None
        assert len(data["items"]) == 3
        assert available(db, slot.id) == 7

    def test_not_enough_capacity(self, client, db, slot, make_tariff):
        adult = make_tariff()

        response = hold(client, slot.id, [seats(adult, 11)])

        assert response.status_code == 409
        assert response.json()["message"] == "Sin cupo o ítem inválido"
        assert available(db, slot.id) == 10

    def test_blocked_slot(self, client, db, slot, make_tariff):
        adult = make_tariff()
        slot.bloquear = True
        db.commit()

        response = hold(client, slot.id, [seats(adult, 1)])

        assert response.status_code == 409

    def test_add_on_not_linked_to_the_activity(self, client, slot, make_tariff, catalogue):
        adult = make_tariff()

        response = hold(
            client,
            slot.id,
            [
                seats(adult, 1),
                {"item_tipo": "adicional", "item_id": catalogue["adicional_2"].id, "cantidad": 1},
            ],
        )

        assert response.status_code == 409

    def test_inactive_tariff(self, client, slot, make_tariff):
        tariff = make_tariff(activa=False)

        response = hold(client, slot.id, [seats(tariff, 1)])

        assert response.status_code == 409

    def test_party_below_minimum(self, client, db, slot, activity, make_tariff):
        activity.minimo_personas_reserva = 4
        db.commit()
        adult = make_tariff()

        response = hold(client, slot.id, [seats(adult, 2)])

        assert response.status_code == 400
        assert available(db, slot.id) == 10

    def test_unknown_slot(self, client, make_tariff):
        adult = make_tariff()

        response = hold(client, 999, [seats(adult, 1)])

        assert response.status_code == 404


class TestTransitions:
    @pytest.fixture
    def reservation_id(self, client, slot, make_tariff):
        adult = make_tariff()
        response = hold(
            client,
            slot.id,
            [seats(adult, 4)],
            cliente={"nombre": "Luis", "email": "luis@example.com"},
        )
        return response.json()["data"]["id"]

    def change(self, client, reservation_id, estado):
        return client.patch(f"/api/reservas/{reservation_id}/estado", json={"estado": estado})

    def test_confirm_sends_notification(self, client, reservation_id):
        with mock.patch(
            "tourdesk.services.reservation_service.NotificationClient.send_reservation_email",
            return_value=True,
        ) as send:
            response = self.change(client, reservation_id, "confirmada")

        assert response.status_code == 200
        assert response.json()["data"]["estado"] == "confirmada"
        send.assert_called_once()
        payload = send.call_args.args[0]
        assert payload["to"] == "luis@example.com"
        assert payload["context"]["reserva_id"] == reservation_id
        assert payload["context"]["personas"] == 4

    def test_cancel_gives_capacity_back(self, client, db, slot, reservation_id):
        assert available(db, slot.id) == 6

        response = self.change(client, reservation_id, "cancelada")

        assert response.status_code == 200
        assert available(db, slot.id) == 10

    def test_check_in_keeps_capacity(self, client, db, slot, reservation_id):
        self.change(client, reservation_id, "confirmada")

        response = self.change(client, reservation_id, "check_in")

        assert response.status_code == 200
        assert available(db, slot.id) == 6

    def test_invalid_transition(self, client, reservation_id):
        response = self.change(client, reservation_id, "no_show")

        assert response.status_code == 409
        assert response.json()["message"] == "No se puede pasar de 'pendiente' a 'no_show'"

    def test_cancelled_is_final(self, client, reservation_id):
        self.change(client, reservation_id, "cancelada")

        assert self.change(client, reservation_id, "confirmada").status_code == 409


def test_expire_pending_holds(client, db, slot, make_tariff):
    adult = make_tariff()
    hold_id = hold(client, slot.id, [seats(adult, 3)]).json()["data"]["id"]
    db.get(Reservation, hold_id).expira_en = utcnow() - timedelta(minutes=1)
    db.commit()

    response = client.post("/api/reservas/expirar-pendientes")

    assert response.json()["data"] == {"expiradas": 1}
    assert available(db, slot.id) == 10
    assert client.get(f"/api/reservas/{hold_id}").json()["data"]["estado"] == "expirada"


def test_list_filters_by_state(client, slot, make_tariff):
    adult = make_tariff()
    for _ in range(2):
        hold(client, slot.id, [seats(adult, 1)])

    response = client.get("/api/reservas", params={"estado": "pendiente", "turno_id": slot.id})

    assert len(response.json()["data"]) == 2
