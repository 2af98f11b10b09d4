from datetime import date, timedelta

# Monday; service-level tests pin "today" to it
FIXED_TODAY = date(2031, 3, 3)


def tomorrow() -> date:
    return date.today() + timedelta(days=1)


def activity_payload(agencia_id: int, **overrides) -> dict:
    """Complete activity body as sent by the admin panel."""
    payload = {
        "actividad": {
            "agencia_id": agencia_id,
            "titulo": "Valle Sagrado Full Day",
            "estado": "borrador",
            "detalles": {"minimo_personas_reserva": 2},
            "ubicacion": {"lat": -13.33, "lng": -72.08, "direccion": "Urubamba"},
        },
        "cronograma": [
            {
                "fecha_inicio": tomorrow().isoformat(),
                "dias": [0, 1, 2, 3, 4, 5, 6],
                "hora_inicio": "07:00:00",
                "hora_fin": "18:00:00",
                "cupo": 12,
            }
        ],
        "tarifas": [
            {"nombre": "Adulto", "precio": "150.00", "moneda": "PEN", "es_principal": True},
            {"nombre": "Niño", "precio": "90.00", "moneda": "PEN"},
        ],
        "relaciones": {"adicionales": [], "transportes": [], "descuentos": []},
    }
    payload.update(overrides)
    return payload
