# raiz/services/mail_service.py
from __future__ import annotations

from flask import current_app
from flask_mail import Message
from flask_security import MailUtil

from raiz import mail


class FlaskMailUtil(MailUtil):
    """Deliver Flask-Security e-mails (password reset etc.) through Flask-Mail."""

    def send_mail(self, template, subject, recipient, sender, body, html, **kwargs):
        if isinstance(sender, tuple) and len(sender) == 2:
            sender = (str(sender[0]), str(sender[1]))
        msg = Message(subject=subject, sender=sender, recipients=[recipient])
        msg.body = body
        msg.html = html
        try:
            mail.send(msg)
            current_app.logger.info(f"Sent '{template}' e-mail to {recipient}")
        except Exception as e:
            # A failed reset e-mail must not turn into a 500 for the visitor
            current_app.logger.error(f"Failed to send email '{subject}' to {recipient}: {e}")
