"""
SMTP Sender Tests

smtplib is patched; no network.
  - send() runs the blocking client off the event loop and returns the Message-ID
  - SMTP failures surface as EmailSendError without the message body
"""

import smtplib
from unittest.mock import MagicMock, patch

import pytest

from services.mail import EmailMessage, EmailSendError, SMTPEmailSender

MESSAGE = EmailMessage(to="user@example.com", subject="Code", text="Your OTP is 123456")


@pytest.mark.asyncio
async def test_send_delivers_and_returns_message_id():
    sender = SMTPEmailSender("smtp.example.com", username="u", password="p", from_email="noreply@example.com")

    with patch("services.mail.smtp.smtplib.SMTP") as smtp_cls:
        message_id = await sender.send(MESSAGE)

    smtp = smtp_cls.return_value.__enter__.return_value
    smtp.starttls.assert_called_once()
    smtp.login.assert_called_once_with("u", "p")
    sent = smtp.send_message.call_args[0][0]
    assert sent["To"] == "user@example.com"
    assert sent["Message-ID"] == message_id


@pytest.mark.asyncio
async def test_smtp_failure_raises_send_error():
    sender = SMTPEmailSender("smtp.example.com")
    smtp = MagicMock()
    smtp.send_message.side_effect = smtplib.SMTPServerDisconnected("gone")

    with patch("services.mail.smtp.smtplib.SMTP") as smtp_cls:
        smtp_cls.return_value.__enter__.return_value = smtp
        with pytest.raises(EmailSendError) as exc_info:
            await sender.send(MESSAGE)

    assert "123456" not in str(exc_info.value)


@pytest.mark.asyncio
async def test_missing_host():
    with pytest.raises(EmailSendError):
        await SMTPEmailSender("").send(MESSAGE)
