# tests/test_contact.py

import smtplib
from unittest.mock import MagicMock, patch

from sqlmodel import Session, select

from natheme.db import engine
from natheme.models import ContactMessage
from natheme.notifications import format_contact_email, send_email


MESSAGE = {"name": "Ann", "email": "ann@x.com", "message": "I would like a quote for a green wall."}


def stored_messages():
    with Session(engine) as session:
        return session.exec(select(ContactMessage)).all()


# Test sending a message when the mail relay is configured
def test_contact_message_sent(create_test_database, client):
    with patch("natheme.routers.contact.is_email_configured", return_value=True), \
            patch("natheme.routers.contact.send_email", return_value=True) as mock_send:
        response = client.post("/api/contact", json=MESSAGE)

    assert response.status_code == 201
    assert response.json() == {"success": True, "message": "Message received and email sent."}
    mock_send.assert_called_once()
    to_email, subject, body = mock_send.call_args.args
    assert to_email == "yourcompany@example.com"
    assert subject == "New Contact Message from Ann"
    assert "I would like a quote" in body
    assert len(stored_messages()) == 1

# Without SMTP credentials the message is still stored
def test_contact_message_without_mail_relay(create_test_database, client):
    with patch("natheme.routers.contact.send_email") as mock_send:
        response = client.post("/api/contact", json=MESSAGE)

    assert response.status_code == 201
    assert response.json()["message"] == "Message received."
    mock_send.assert_not_called()
    assert stored_messages()[0].email == "ann@x.com"

def test_contact_message_delivery_failure(create_test_database, client):
    with patch("natheme.routers.contact.is_email_configured", return_value=True), \
            patch("natheme.routers.contact.send_email", return_value=False):
        response = client.post("/api/contact", json=MESSAGE)

    assert response.status_code == 500
    assert response.json()["message"] == "Server error while sending message."
    assert len(stored_messages()) == 1

def test_contact_message_blank_field(create_test_database, client):
    response = client.post("/api/contact", json={**MESSAGE, "message": "   "})
    assert response.status_code == 400
    assert response.json()["message"] == "All fields (name, email, message) are required."
    assert stored_messages() == []

def test_contact_message_missing_field(create_test_database, client):
    response = client.post("/api/contact", json={"name": "Ann", "email": "ann@x.com"})
    assert response.status_code == 400


# send_email talks SMTP and retries with backoff
def test_send_email_success():
    with patch("natheme.notifications.smtplib.SMTP") as mock_smtp:
        server = mock_smtp.return_value.__enter__.return_value
        assert send_email("to@x.com", "Subject", "Body", retries=1) is True

    server.starttls.assert_called_once()
    server.send_message.assert_called_once()
    sent = server.send_message.call_args.args[0]
    assert sent["To"] == "to@x.com"
    assert sent["Subject"] == "Subject"

def test_send_email_retries_then_gives_up():
    with patch("natheme.notifications.smtplib.SMTP") as mock_smtp, \
            patch("natheme.notifications.time.sleep") as mock_sleep:
        server = MagicMock()
        server.send_message.side_effect = smtplib.SMTPException("relay down")
        mock_smtp.return_value.__enter__.return_value = server
        assert send_email("to@x.com", "Subject", "Body", retries=3) is False

    assert server.send_message.call_count == 3
    assert [c.args[0] for c in mock_sleep.call_args_list] == [2, 4]

def test_format_contact_email():
    subject, body = format_contact_email("Ann", "ann@x.com", "Hello")
    assert subject == "New Contact Message from Ann"
    assert "Name: Ann" in body
    assert "Email: ann@x.com" in body
    assert body.rstrip().endswith("Hello")
