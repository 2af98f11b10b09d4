import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["DIAS_VENTANA_EXPANSION"] = "28"
os.environ["NOTIFICATION_ENABLED"] = "false"

from datetime import time  # noqa: E402
from decimal import Decimal  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from tourdesk.core.database import Base, SessionLocal, engine  # noqa: E402
from tourdesk.main import app  # noqa: E402
from tourdesk.models import (  # noqa: E402
    Activity,
    AddOn,
    Agency,
    Discount,
    Schedule,
    Tariff,
    Transport,
)
from tests.helpers import FIXED_TODAY  # noqa: E402


@pytest.fixture(autouse=True)
def _reset_database():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def agency(db):
    """Agency that owns the activities under test."""
    agency = Agency(nombre="Andes Trekking", email="reservas@andes.example")
    db.add(agency)
    db.commit()
    return agency


@pytest.fixture
def other_agency(db):
    agency = Agency(nombre="Costa Verde Tours")
    db.add(agency)
    db.commit()
    return agency


@pytest.fixture
def activity(db, agency):
    activity = Activity(
        agencia_id=agency.id,
        titulo="Trekking Salkantay",
        estado="publicado",
        minimo_personas_reserva=1,
    )
    db.add(activity)
    db.commit()
    return activity


@pytest.fixture
def catalogue(db, agency, other_agency):
    """Add-ons, transports and discounts of both agencies."""
    items = {
        "adicional": AddOn(agencia_id=agency.id, nombre="Almuerzo", precio=Decimal("15.00")),
        "adicional_2": AddOn(agencia_id=agency.id, nombre="Bastones", precio=Decimal("5.00")),
        "transporte": Transport(
            agencia_id=agency.id, nombre="Bus desde Cusco", precio=Decimal("20.00"), capacidad=30
        ),
        "descuento": Discount(
            agencia_id=agency.id, nombre="Estudiante", tipo="porcentaje", valor=Decimal("10")
        ),
        "adicional_ajeno": AddOn(
            agencia_id=other_agency.id, nombre="Kayak", precio=Decimal("40.00")
        ),
    }
    db.add_all(items.values())
    db.commit()
    return items


@pytest.fixture
def make_schedule(db, activity):
    """Insert a stored schedule for ``activity`` without generating slots."""

    def _make(**overrides) -> Schedule:
        values = {
            "actividad_id": activity.id,
            "agencia_id": activity.agencia_id,
            "fecha_inicio": FIXED_TODAY,
            "dias": [1, 3],
            "dia_completo": False,
            "hora_inicio": time(8, 0),
            "hora_fin": time(12, 0),
            "cupo": 10,
            "habilitada": True,
        }
        values.update(overrides)
        schedule = Schedule(**values)
        db.add(schedule)
        db.commit()
        return schedule

    return _make


@pytest.fixture
def make_tariff(db, activity):
    def _make(**overrides) -> Tariff:
        values = {
            "actividad_id": activity.id,
            "nombre": "Adulto",
            "precio": Decimal("120.00"),
            "moneda": "PEN",
            "es_principal": False,
            "activa": True,
        }
        values.update(overrides)
        tariff = Tariff(**values)
        db.add(tariff)
        db.commit()
        return tariff

    return _make

