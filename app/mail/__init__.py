from app.mail.client import LoggingMailClient, MailClient, MailDeliveryError, SMTPMailClient

__all__ = ["LoggingMailClient", "MailClient", "MailDeliveryError", "SMTPMailClient"]
