from datetime import time, timedelta

import pytest

from tourdesk.models import Slot
from tourdesk.services.slot_generator import SlotGenerator
from tests.helpers import tomorrow


@pytest.fixture
def schedule(db, make_schedule):
    """Daily schedule with its 28 slots of 10 seats, 08:00 to 12:00."""
    schedule = make_schedule(fecha_inicio=tomorrow(), dias=[0, 1, 2, 3, 4, 5, 6])
    SlotGenerator(db).generate_for_schedule(schedule)
    db.commit()
    return schedule


def first_week():
    start = tomorrow()
    end = start + timedelta(days=6)
    return {"fecha_desde": start.isoformat(), "fecha_hasta": end.isoformat()}


def week_slots(db, schedule_id):
    db.expire_all()
    start = tomorrow()
    return (
        db.query(Slot)
        .filter(
            Slot.horario_id == schedule_id,
            Slot.fecha >= start,
            Slot.fecha <= start + timedelta(days=6),
        )
        .order_by(Slot.fecha)
        .all()
    )


def apply(client, headers=None, **body):
    return client.post("/api/modificaciones-temporarias", json=body, headers=headers or {})


class TestBlocking:
    def test_block_schedule_and_revert(self, client, db, schedule):
        response = apply(client, tipo="BLOQUEAR_HORARIO", horario_id=schedule.id, **first_week())

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["turnos_afectados"] == 7
        assert data["activa"] is True
        assert all(slot.bloquear for slot in week_slots(db, schedule.id))

        reverted = client.post(f"/api/modificaciones-temporarias/{data['id']}/revertir")

        assert reverted.status_code == 200
        assert reverted.json()["data"]["activa"] is False
        assert reverted.json()["data"]["revertida_en"] is not None
        assert not any(slot.bloquear for slot in week_slots(db, schedule.id))

    def test_revert_twice_conflicts(self, client, schedule):
        created = apply(client, tipo="BLOQUEAR_HORARIO", horario_id=schedule.id, **first_week())
        modification_id = created.json()["data"]["id"]
        client.post(f"/api/modificaciones-temporarias/{modification_id}/revertir")

        response = client.post(f"/api/modificaciones-temporarias/{modification_id}/revertir")

        assert response.status_code == 409

    def test_block_all_needs_the_agency_header(self, client, schedule):
        response = apply(client, tipo="BLOQUEAR_TODAS", **first_week())

        assert response.status_code == 400

    def test_block_all_with_header(self, client, schedule):
        headers = {"x-agencia-id": str(schedule.agencia_id)}

        response = apply(client, headers=headers, tipo="BLOQUEAR_TODAS", **first_week())

        assert response.json()["data"]["turnos_afectados"] == 7

    def test_unblock_requires_header(self, client, schedule):
        response = client.post("/api/modificaciones-temporarias/desbloquear", json=first_week())

        assert response.status_code == 400
        assert response.json()["message"] == "El encabezado x-agencia-id es obligatorio"

    def test_unblock_clears_the_flag(self, client, db, schedule):
        apply(client, tipo="BLOQUEAR_HORARIO", horario_id=schedule.id, **first_week())

        response = client.post(
            "/api/modificaciones-temporarias/desbloquear",
            json=first_week(),
            headers={"x-agencia-id": str(schedule.agencia_id)},
        )

        assert response.json()["data"] == {"turnos_desbloqueados": 7}
        assert not any(slot.bloquear for slot in week_slots(db, schedule.id))


class TestCapacityChanges:
    def test_slots_with_more_reservations_than_the_new_cupo_are_skipped(
        self, client, db, schedule
    ):
        booked = week_slots(db, schedule.id)[0]
        booked.cupo_disponible = 4
        db.commit()

        response = apply(
            client, tipo="CAMBIAR_CUPOS", horario_id=schedule.id, cupo=5, **first_week()
        )

        data = response.json()["data"]
        assert (data["turnos_afectados"], data["turnos_omitidos"]) == (6, 1)
        slots = week_slots(db, schedule.id)
        assert (slots[0].cupo_total, slots[0].cupo_disponible) == (10, 4)
        assert {(slot.cupo_total, slot.cupo_disponible) for slot in slots[1:]} == {(5, 5)}

    def test_revert_restores_total_and_keeps_new_reservations(self, client, db, schedule):
        created = apply(
            client, tipo="CAMBIAR_CUPOS", horario_id=schedule.id, cupo=6, **first_week()
        )
        slot = week_slots(db, schedule.id)[0]
        slot.cupo_disponible = 4
        db.commit()

        client.post(
            f"/api/modificaciones-temporarias/{created.json()['data']['id']}/revertir"
        )

        slot = week_slots(db, schedule.id)[0]
        assert (slot.cupo_total, slot.cupo_disponible) == (10, 8)


class TestStartTimeChanges:
    def test_moves_start_time_and_reverts(self, client, db, schedule):
        created = apply(
            client,
            tipo="CAMBIAR_HORA_INICIO",
            horario_id=schedule.id,
            hora_inicio="10:30:00",
            **first_week(),
        )

        assert created.status_code == 201
        assert {slot.hora_inicio for slot in week_slots(db, schedule.id)} == {time(10, 30)}

        client.post(
            f"/api/modificaciones-temporarias/{created.json()['data']['id']}/revertir"
        )

        assert {slot.hora_inicio for slot in week_slots(db, schedule.id)} == {time(8, 0)}

    def test_start_after_end_is_skipped(self, client, schedule):
        response = apply(
            client,
            tipo="CAMBIAR_HORA_INICIO",
            horario_id=schedule.id,
            hora_inicio="13:00:00",
            **first_week(),
        )

        data = response.json()["data"]
        assert (data["turnos_afectados"], data["turnos_omitidos"]) == (0, 7)

    def test_explicit_range_must_be_ordered(self, client, schedule):
        response = apply(
            client,
            tipo="CAMBIAR_HORA_INICIO",
            horario_id=schedule.id,
            hora_inicio="11:00:00",
            hora_fin="09:00:00",
            **first_week(),
        )

        assert response.status_code == 400
        assert response.json()["message"] == "hora_inicio debe ser < hora_fin"


def test_missing_schedule_id_is_a_validation_error(client):
    response = apply(client, tipo="BLOQUEAR_HORARIO", **first_week())

    assert response.status_code == 400


def test_list_only_active(client, schedule):
    first = apply(client, tipo="BLOQUEAR_HORARIO", horario_id=schedule.id, **first_week())
    apply(client, tipo="BLOQUEAR_HORARIO", horario_id=schedule.id, **first_week())
    client.post(f"/api/modificaciones-temporarias/{first.json()['data']['id']}/revertir")

    response = client.get("/api/modificaciones-temporarias", params={"activa": "true"})

    assert len(response.json()["data"]) == 1
