"""
Email service exports.
"""

from .base import EmailMessage, EmailSendError, EmailSender
from .logging_sender import LoggingEmailSender
from .smtp import SMTPEmailSender

__all__ = [
    "EmailMessage",
    "EmailSendError",
    "EmailSender",
    "LoggingEmailSender",
    "SMTPEmailSender",
]
