"""Tests for order notifications."""

from app.services.notification_service import NotificationService, notify_safely


def test_console_mode_sends(caplog):
    service = NotificationService(email_service="console")

    with caplog.at_level("INFO"):
        sent = service.send_order_confirmed({
            "order_id": 7,
            "quantity": 5,
            "amount_paid": "357.50",
            "customer_email": "buyer@example.com",
        })

    assert sent is True
    assert "Order #7 confirmed" in caplog.text


def test_no_recipient_is_skipped():
    service = NotificationService(email_service="console")

    assert service.send_order_status_changed({"order_id": 7, "new_status": "Shipped"}) is False


def test_disabled_mode():
    service = NotificationService(email_service="disabled")

    assert service.send_order_confirmed({"order_id": 1, "customer_email": "a@example.com"}) is False


def test_smtp_errors_are_swallowed(monkeypatch, caplog):
    import smtplib

    def refuse(*args, **kwargs):
        raise ConnectionRefusedError("no smtp server")

    monkeypatch.setattr(smtplib, "SMTP", refuse)
    service = NotificationService(email_service="smtp")

    notify_safely(service.send_order_confirmed, {"order_id": 3, "customer_email": "a@example.com"})

    assert "Failed to send notification for order 3" in caplog.text
