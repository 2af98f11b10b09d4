from unittest import mock

import httpx

from tourdesk.services.notification_client import NotificationClient

PAYLOAD = {"template": "reserva_confirmada", "to": "ana@example.com", "context": {}}


def test_disabled_client_does_not_call_the_service():
    client = NotificationClient(base_url="http://notificaciones", enabled=False)

    with mock.patch("httpx.post") as post:
        assert client.send_reservation_email(PAYLOAD) is False

    post.assert_not_called()


def test_missing_url_counts_as_not_configured():
    assert NotificationClient(base_url="", enabled=True).is_configured is False


def test_posts_the_payload():
    client = NotificationClient(base_url="http://notificaciones/", enabled=True, timeout=2)
    request = httpx.Request("POST", "http://notificaciones/notifications/send-email")

    with mock.patch("httpx.post", return_value=httpx.Response(202, request=request)) as post:
        assert client.send_reservation_email(PAYLOAD) is True

    post.assert_called_once_with(
        "http://notificaciones/notifications/send-email", json=PAYLOAD, timeout=2
    )


def test_http_errors_are_reported_as_false():
    client = NotificationClient(base_url="http://notificaciones", enabled=True)
    request = httpx.Request("POST", "http://notificaciones/notifications/send-email")

    with mock.patch("httpx.post", return_value=httpx.Response(503, request=request)):
        assert client.send_reservation_email(PAYLOAD) is False


def test_unreachable_service_is_reported_as_false():
    client = NotificationClient(base_url="http://notificaciones", enabled=True)

    with mock.patch("httpx.post", side_effect=httpx.ConnectError("refused")):
        assert client.send_reservation_email(PAYLOAD) is False
