from decimal import Decimal

from tourdesk.models import Tariff


def tariff_body(activity_id, **overrides):
    body = {"actividad_id": activity_id, "nombre": "Adulto", "precio": "120.00", "moneda": "pen"}
    body.update(overrides)
    return body


def test_first_tariff_becomes_principal(client, activity):
    response = client.post("/api/tarifas", json=tariff_body(activity.id))

    assert response.status_code == 201
    data = response.json()["data"]
    assert data["es_principal"] is True
    assert data["moneda"] == "PEN"


def test_new_principal_demotes_the_previous_one(client, db, activity, make_tariff):
    previous = make_tariff(nombre="Adulto", es_principal=True)

    response = client.post(
        "/api/tarifas", json=tariff_body(activity.id, nombre="Promo", es_principal=True)
    )

    assert response.status_code == 201
    db.expire_all()
    assert db.get(Tariff, previous.id).es_principal is False
    principals = client.get(
        "/api/tarifas", params={"actividad_id": activity.id, "es_principal": "true"}
    ).json()["data"]
    assert [item["nombre"] for item in principals] == ["Promo"]


def test_duplicate_name_within_activity_is_rejected(client, activity, make_tariff):
    make_tariff(nombre="Adulto")

    response = client.post("/api/tarifas", json=tariff_body(activity.id, nombre=" adulto "))

    assert response.status_code == 400


def test_update_to_principal(client, db, activity, make_tariff):
    adult = make_tariff(nombre="Adulto", es_principal=True)
    child = make_tariff(nombre="Niño")

    response = client.put(f"/api/tarifas/{child.id}", json={"es_principal": True})

    assert response.status_code == 200
    db.expire_all()
    assert db.get(Tariff, adult.id).es_principal is False
    assert db.get(Tariff, child.id).es_principal is True


def test_deleting_the_principal_promotes_the_earliest_remaining(
    client, db, activity, make_tariff
):
    adult = make_tariff(nombre="Adulto", es_principal=True)
    child = make_tariff(nombre="Niño")

    response = client.delete(f"/api/tarifas/{adult.id}")

    assert response.status_code == 200
    db.expire_all()
    removed = db.get(Tariff, adult.id)
    assert removed.activa is False
    assert removed.deleted_at is not None
    assert db.get(Tariff, child.id).es_principal is True
    assert client.get(f"/api/tarifas/{adult.id}").status_code == 404


def test_create_for_unknown_activity(client):
    response = client.post("/api/tarifas", json=tariff_body(999))

    assert response.status_code == 404


class TestAgencyScope:
    def headers(self, agency):
        return {"x-agencia-id": str(agency.id)}

    def test_update_from_another_agency_is_not_found(
        self, client, db, other_agency, make_tariff
    ):
        tariff = make_tariff(nombre="Adulto")

        response = client.put(
            f"/api/tarifas/{tariff.id}",
            json={"precio": "1.00"},
            headers=self.headers(other_agency),
        )

        assert response.status_code == 404
        db.expire_all()
        assert db.get(Tariff, tariff.id).precio == Decimal("120.00")

    def test_delete_from_another_agency_is_not_found(
        self, client, db, other_agency, make_tariff
    ):
        tariff = make_tariff(nombre="Adulto")

        response = client.delete(f"/api/tarifas/{tariff.id}", headers=self.headers(other_agency))

        assert response.status_code == 404
        db.expire_all()
        assert db.get(Tariff, tariff.id).deleted_at is None

    def test_get_is_scoped_to_the_owner(self, client, agency, other_agency, make_tariff):
        tariff = make_tariff(nombre="Adulto")
        url = f"/api/tarifas/{tariff.id}"

        assert client.get(url, headers=self.headers(other_agency)).status_code == 404
        assert client.get(url, headers=self.headers(agency)).status_code == 200

    def test_list_only_returns_tariffs_of_the_agency(
        self, client, agency, other_agency, make_tariff
    ):
        make_tariff(nombre="Adulto")

        foreign = client.get("/api/tarifas", headers=self.headers(other_agency))
        own = client.get("/api/tarifas", headers=self.headers(agency))

        assert foreign.json()["data"] == []
        assert [item["nombre"] for item in own.json()["data"]] == ["Adulto"]
