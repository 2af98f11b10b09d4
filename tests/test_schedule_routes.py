from datetime import timedelta

from tourdesk.models import Schedule, Slot
from tests.helpers import tomorrow


def schedule_body(activity_id, **overrides):
    body = {
        "actividad_id": activity_id,
        "fecha_inicio": tomorrow().isoformat(),
        "dias": [0, 1, 2, 3, 4, 5, 6],
        "hora_inicio": "09:00:00",
        "hora_fin": "13:00:00",
        "cupo": 8,
    }
    body.update(overrides)
    return body


def create_schedule(client, activity_id, **overrides):
    response = client.post("/api/horarios", json=schedule_body(activity_id, **overrides))
    return response.json()["data"]["id"]


def live_slot_count(db, schedule_id):
    db.expire_all()
    return (
        db.query(Slot)
        .filter(Slot.horario_id == schedule_id, Slot.deleted_at.is_(None))
        .count()
    )


def test_create_generates_slots(client, db, activity):
    response = client.post("/api/horarios", json=schedule_body(activity.id))

    assert response.status_code == 201
    body = response.json()
    assert body["message"] == "Horario creado exitosamente"
    assert body["data"]["agencia_id"] == activity.agencia_id
    assert live_slot_count(db, body["data"]["id"]) == 28


def test_create_for_unknown_activity(client):
    response = client.post("/api/horarios", json=schedule_body(999))

    assert response.status_code == 404
    assert response.json()["message"] == "Actividad 999 no encontrada o sin permiso"


def test_create_rejects_past_start(client, activity):
    past = (tomorrow() - timedelta(days=5)).isoformat()

    response = client.post("/api/horarios", json=schedule_body(activity.id, fecha_inicio=past))

    assert response.status_code == 400
    assert response.json()["message"] == "fecha_inicio no puede ser anterior a hoy"


def test_create_rejects_invalid_days(client, activity):
    response = client.post("/api/horarios", json=schedule_body(activity.id, dias=[7]))

    assert response.status_code == 400


def test_list_filters_by_activity_and_enabled(client, activity):
    client.post("/api/horarios", json=schedule_body(activity.id))
    client.post("/api/horarios", json=schedule_body(activity.id, habilitada=False))

    response = client.get(
        "/api/horarios", params={"actividad_id": activity.id, "habilitada": "true"}
    )

    schedules = response.json()["data"]
    assert len(schedules) == 1
    assert schedules[0]["habilitada"] is True


def test_update_regenerates_slots(client, db, activity):
    schedule_id = create_schedule(client, activity.id)

    response = client.put(f"/api/horarios/{schedule_id}", json={"dias": [6], "cupo": 3})

    assert response.status_code == 200
    assert response.json()["data"]["dias"] == [6]
    assert live_slot_count(db, schedule_id) == 4
    db.expire_all()
    capacities = {
        slot.cupo_total
        for slot in db.query(Slot).filter(
            Slot.horario_id == schedule_id, Slot.deleted_at.is_(None)
        )
    }
    assert capacities == {3}


def test_update_validates_time_range(client, activity):
    schedule_id = create_schedule(client, activity.id)

    response = client.put(f"/api/horarios/{schedule_id}", json={"hora_fin": "08:00:00"})

    assert response.status_code == 400


def test_delete_disables_and_cascades(client, db, activity):
    schedule_id = create_schedule(client, activity.id)

    response = client.delete(f"/api/horarios/{schedule_id}")

    assert response.status_code == 200
    assert response.json()["data"]["turnos_eliminados"] == 28
    db.expire_all()
    schedule = db.get(Schedule, schedule_id)
    assert schedule.deleted_at is not None
    assert schedule.habilitada is False
    assert client.get(f"/api/horarios/{schedule_id}").status_code == 404


def test_delete_with_reservations_conflicts(client, db, activity):
    schedule_id = create_schedule(client, activity.id)
    slot = db.query(Slot).filter(Slot.horario_id == schedule_id).first()
    slot.cupo_disponible -= 1
    db.commit()

    response = client.delete(f"/api/horarios/{schedule_id}")

    assert response.status_code == 409
    assert response.json()["errors"] == {"horarios": [schedule_id]}
    assert live_slot_count(db, schedule_id) == 28
