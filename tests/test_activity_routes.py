from datetime import timedelta

from tourdesk.models import Activity, Schedule, Slot, Tariff
from tests.helpers import activity_payload, tomorrow


def create_activity(client, agency_id, **overrides):
    return client.post(
        "/api/actividades",
        params={"esperar_turnos": "true"},
        json=activity_payload(agency_id, **overrides),
    )


class TestCreateActivity:
    def test_creates_everything_and_generates_slots_inline(self, client, db, agency):
        response = create_activity(client, agency.id)

        assert response.status_code == 201
        body = response.json()
        assert body["code"] == 201
        assert body["message"] == "Actividad creada exitosamente"
        data = body["data"]
        assert data["titulo"] == "Valle Sagrado Full Day"
        assert data["minimo_personas_reserva"] == 2
        assert data["ubicacion_direccion"] == "Urubamba"
        assert len(data["cronograma"]) == 1
        assert [tariff["nombre"] for tariff in data["tarifas"]] == ["Adulto", "Niño"]
        assert data["tarifas"][0]["es_principal"] is True
        assert data["trabajo_turnos"]["estado"] == "completado"

        slots = db.query(Slot).filter(Slot.actividad_id == data["id"]).all()
        # todos los días durante la ventana de 28 días
        assert len(slots) == 28
        assert min(slot.fecha for slot in slots) == tomorrow()

    def test_background_job_can_be_polled(self, client, agency):
        response = client.post("/api/actividades", json=activity_payload(agency.id))

        assert response.status_code == 201
        job = response.json()["data"]["trabajo_turnos"]
        assert job["estado"] == "pendiente"

        polled = client.get(f"/api/turnos/trabajos/{job['id']}")

        assert polled.status_code == 200
        result = polled.json()["data"]
        assert result["estado"] == "completado"
        assert result["resultado"]["turnos_creados"] == 28
        assert result["finalizado_en"] is not None

    def test_links_catalogue_items(self, client, agency, catalogue):
        relations = {
            "adicionales": [catalogue["adicional"].id, catalogue["adicional"].id],
            "transportes": [catalogue["transporte"].id],
            "descuentos": [catalogue["descuento"].id],
        }

        response = create_activity(client, agency.id, relaciones=relations)

        data = response.json()["data"]
        assert [item["nombre"] for item in data["adicionales"]] == ["Almuerzo"]
        assert [item["nombre"] for item in data["transportes"]] == ["Bus desde Cusco"]
        assert [item["tipo"] for item in data["descuentos"]] == ["porcentaje"]

    def test_duplicate_tariff_names_roll_back_the_whole_creation(self, client, db, agency):
        tariffs = [
            {"nombre": "Adulto", "precio": "100"},
            {"nombre": " ADULTO ", "precio": "90"},
        ]

        response = create_activity(client, agency.id, tarifas=tariffs)

        assert response.status_code == 400
        assert response.json()["message"] == "Tarifa duplicada en índice 1: «ADULTO»"
        assert db.query(Activity).count() == 0
        assert db.query(Schedule).count() == 0
        assert db.query(Tariff).count() == 0

    def test_foreign_catalogue_item_rolls_back(self, client, db, agency, catalogue):
        relations = {"adicionales": [catalogue["adicional_ajeno"].id]}

        response = create_activity(client, agency.id, relaciones=relations)

        assert response.status_code == 404
        assert db.query(Activity).count() == 0

    def test_past_start_date_is_rejected(self, client, db, agency):
        payload = activity_payload(agency.id)
        payload["cronograma"][0]["fecha_inicio"] = (tomorrow() - timedelta(days=3)).isoformat()

        response = client.post("/api/actividades", json=payload)

        assert response.status_code == 400
        assert response.json()["errors"] == {"indice": 0}
        assert db.query(Activity).count() == 0

    def test_unknown_agency_is_not_found(self, client):
        response = create_activity(client, 999)

        assert response.status_code == 404
        assert response.json()["message"] == "Agencia 999 no encontrada"

    def test_header_agency_must_match_payload(self, client, agency, other_agency):
        response = client.post(
            "/api/actividades",
            json=activity_payload(agency.id),
            headers={"x-agencia-id": str(other_agency.id)},
        )

        assert response.status_code == 400

    def test_missing_title_returns_field_errors(self, client, agency):
        payload = activity_payload(agency.id)
        del payload["actividad"]["titulo"]

        response = client.post("/api/actividades", json=payload)

        assert response.status_code == 400
        body = response.json()
        assert body["message"] == "Datos de entrada inválidos"
        assert any(error["campo"] == "actividad.titulo" for error in body["errors"])


class TestReadActivities:
    def test_unknown_activity_returns_envelope_404(self, client):
        response = client.get("/api/actividades/999")

        assert response.status_code == 404
        assert response.json() == {
            "code": 404,
            "message": "Actividad 999 no encontrada o sin permiso",
        }

    def test_other_agency_cannot_see_the_activity(self, client, agency, other_agency):
        activity_id = create_activity(client, agency.id).json()["data"]["id"]

        response = client.get(
            f"/api/actividades/{activity_id}", headers={"x-agencia-id": str(other_agency.id)}
        )

        assert response.status_code == 404

    def test_list_puts_published_first(self, client, agency):
        draft = create_activity(client, agency.id).json()["data"]["id"]
        payload = activity_payload(agency.id)
        payload["actividad"]["estado"] = "publicado"
        published = client.post("/api/actividades", json=payload).json()["data"]["id"]

        response = client.get("/api/actividades", headers={"x-agencia-id": str(agency.id)})

        assert [item["id"] for item in response.json()["data"]] == [published, draft]

    def test_invalid_agency_header_is_rejected(self, client):
        response = client.get("/api/actividades", headers={"x-agencia-id": "abc"})

        assert response.status_code == 400


class TestUpdateActivity:
    def test_basic_fields_change_and_absent_collections_stay(self, client, agency):
        created = create_activity(client, agency.id).json()["data"]

        response = client.put(
            f"/api/actividades/{created['id']}",
            json={"titulo": "Valle Sagrado VIP", "detalles": {"minimo_personas_reserva": 4}},
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["titulo"] == "Valle Sagrado VIP"
        assert data["minimo_personas_reserva"] == 4
        assert [item["id"] for item in data["tarifas"]] == [
            item["id"] for item in created["tarifas"]
        ]
        assert [item["id"] for item in data["cronograma"]] == [
            item["id"] for item in created["cronograma"]
        ]

    def test_edited_schedule_regenerates_slots(self, client, db, agency):
        created = create_activity(client, agency.id).json()["data"]
        schedule = created["cronograma"][0]
        edited = {
            "id": schedule["id"],
            "fecha_inicio": schedule["fecha_inicio"],
            "dias": schedule["dias"],
            "hora_inicio": schedule["hora_inicio"],
            "hora_fin": schedule["hora_fin"],
            "cupo": 30,
        }

        response = client.put(f"/api/actividades/{created['id']}", json={"cronograma": [edited]})

        assert response.status_code == 200
        db.expire_all()
        live = (
            db.query(Slot)
            .filter(Slot.horario_id == schedule["id"], Slot.deleted_at.is_(None))
            .all()
        )
        assert len(live) == 28
        assert {slot.cupo_total for slot in live} == {30}

    def test_failed_sync_leaves_the_activity_untouched(self, client, db, agency):
        created = create_activity(client, agency.id).json()["data"]
        schedule_id = created["cronograma"][0]["id"]
        entry = {
            "fecha_inicio": tomorrow().isoformat(),
            "hora_inicio": "09:00:00",
            "hora_fin": "10:00:00",
            "cupo": 5,
        }

        cronograma = [entry, {**entry, "id": schedule_id}, {**entry, "id": schedule_id}]

        response = client.put(
            f"/api/actividades/{created['id']}",
            json={"titulo": "No debería guardarse", "cronograma": cronograma},
        )

        assert response.status_code == 400
        assert response.json()["message"] == "IDs duplicados en cronograma"
        db.expire_all()
        assert db.get(Activity, created["id"]).titulo == "Valle Sagrado Full Day"
        assert db.query(Schedule).count() == 1

    def test_removing_a_booked_schedule_conflicts(self, client, db, agency):
        created = create_activity(client, agency.id).json()["data"]
        slot = db.query(Slot).filter(Slot.actividad_id == created["id"]).first()
        slot.cupo_disponible -= 1
        db.commit()

        response = client.put(f"/api/actividades/{created['id']}", json={"cronograma": []})

        assert response.status_code == 409
        body = response.json()
        assert body["message"] == "Horario con reservas confirmadas"
        assert body["errors"] == {"horarios": [created["cronograma"][0]["id"]]}

    def test_replaces_tariffs(self, client, agency):
        created = create_activity(client, agency.id).json()["data"]

        response = client.put(
            f"/api/actividades/{created['id']}",
            json={"tarifas": [{"nombre": "Tarifa única", "precio": "99.90", "moneda": "pen"}]},
        )

        tariffs = response.json()["data"]["tarifas"]
        assert [(item["nombre"], item["moneda"], item["es_principal"]) for item in tariffs] == [
            ("Tarifa única", "PEN", True)
        ]


class TestStateAndDeletion:
    def test_change_state(self, client, agency):
        activity_id = create_activity(client, agency.id).json()["data"]["id"]

        response = client.patch(
            f"/api/actividades/{activity_id}/estado", json={"estado": "publicado"}
        )

        assert response.status_code == 200
        assert response.json()["data"]["estado"] == "publicado"

    def test_unknown_state_is_rejected(self, client, agency):
        activity_id = create_activity(client, agency.id).json()["data"]["id"]

        response = client.patch(f"/api/actividades/{activity_id}/estado", json={"estado": "x"})

        assert response.status_code == 400

    def test_delete_soft_deletes_activity_and_slots(self, client, db, agency):
        activity_id = create_activity(client, agency.id).json()["data"]["id"]

        response = client.delete(f"/api/actividades/{activity_id}")

        assert response.status_code == 200
        assert response.json()["data"] == {"id": activity_id, "turnos_eliminados": 28}
        assert client.get(f"/api/actividades/{activity_id}").status_code == 404
        deleted = client.get(
            f"/api/actividades/{activity_id}", params={"include_deleted": "true"}
        )
        assert deleted.json()["data"]["deleted_at"] is not None
        db.expire_all()
        assert (
            db.query(Slot)
            .filter(Slot.actividad_id == activity_id, Slot.deleted_at.is_(None))
            .count()
            == 0
        )
