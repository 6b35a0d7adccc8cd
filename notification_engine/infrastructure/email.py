"""Utility helpers for sending notification emails via SendGrid."""

from __future__ import annotations

import html
import json
import logging
from dataclasses import dataclass
from typing import Any

from sendgrid import SendGridAPIClient
from sendgrid.helpers.mail import Mail

from notification_engine.config import get_settings
from notification_engine.domain.entities import Notification

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EmailSendResult:
    """Outcome of a single email delivery attempt."""

    success: bool
    error: str | None = None


def _extract_sendgrid_error_details(body: Any) -> str | None:
    """Return a human readable description for a SendGrid error payload."""

    if body in (None, ""):
        return None

    if isinstance(body, bytes):
        try:
            body = body.decode("utf-8")
        except UnicodeDecodeError:
            return None

    if isinstance(body, str):
        body = body.strip()
        if not body:
            return None
        try:
            parsed = json.loads(body)
        except json.JSONDecodeError:
            return body
    else:
        parsed = body

    if isinstance(parsed, dict):
        errors = parsed.get("errors")
        if isinstance(errors, list):
            messages: list[str] = []
            for item in errors:
                if not isinstance(item, dict):
                    continue
                message = item.get("message")
                help_link = item.get("help")
                if message and help_link:
                    messages.append(f"{message} (help: {help_link})")
                elif message:
                    messages.append(str(message))
            if messages:
                return "; ".join(messages)
        # Fall back to a JSON string for unrecognised payloads
        try:
            return json.dumps(parsed)
        except (TypeError, ValueError):
            return None

    if isinstance(parsed, list):
        try:
            return "; ".join(str(item) for item in parsed)
        except TypeError:
            return None

    return None


def _describe_sendgrid_exception(exc: Exception) -> str:
    """Log a SendGrid API error and return a short description of it."""

    status_code = getattr(exc, "status_code", None)
    body = getattr(exc, "body", None)
    details = _extract_sendgrid_error_details(body)

    if status_code and details:
        logger.error(
            "SendGrid API request failed with status %s: %s", status_code, details
        )
        return f"status {status_code}: {details}"
    if status_code:
        logger.error("SendGrid API request failed with status %s", status_code)
        return f"status {status_code}"
    if details:
        logger.error("SendGrid API request failed: %s", details)
        return details
    logger.exception("Error sending email via SendGrid: %s", exc)
    return str(exc) or exc.__class__.__name__


def _describe_unsuccessful_response(response: Any) -> str:
    """Log details from an unsuccessful SendGrid response object."""

    status_code = getattr(response, "status_code", None)
    body = getattr(response, "body", None)
    details = _extract_sendgrid_error_details(body)

    if details:
        logger.error(
            "SendGrid API responded with status %s: %s", status_code, details
        )
        return f"status {status_code}: {details}"
    logger.error("SendGrid API responded with status %s", status_code)
    return f"status {status_code}"


def send_email(subject: str, html_content: str, recipient: str) -> EmailSendResult:
    """Send an email using the configured SendGrid credentials."""

    settings = get_settings()
    if not (settings.sendgrid_api_key and settings.sendgrid_sender):
        logger.info("SendGrid configuration incomplete; skipping email delivery")
        return EmailSendResult(success=False, error="Email delivery is not configured")

    message = Mail(
        from_email=settings.sendgrid_sender,
        to_emails=recipient,
        subject=subject,
        html_content=html_content,
    )

    try:
        client = SendGridAPIClient(settings.sendgrid_api_key)
        response = client.send(message)
    except Exception as exc:  # pragma: no cover - network failures depend on environment
        return EmailSendResult(success=False, error=_describe_sendgrid_exception(exc))

    status_code = getattr(response, "status_code", None)
    if not isinstance(status_code, int) or not 200 <= status_code < 300:
        return EmailSendResult(success=False, error=_describe_unsuccessful_response(response))

    return EmailSendResult(success=True)


class SendGridEmailTransport:
    """Email transport used by the channel dispatcher."""

    def send(self, to: str, subject: str, html_content: str) -> EmailSendResult:
        return send_email(subject, html_content, to)


def render_notification_email(notification: Notification, *, brand: str) -> str:
    """Return the HTML body used to deliver ``notification`` by email."""

    title = html.escape(notification.title)
    message = html.escape(notification.message)
    brand_label = html.escape(brand)

    action_html = ""
    if notification.action_url:
        action_html = (
            '<div style="text-align: center; margin: 30px 0;">'
            f'<a href="{html.escape(notification.action_url, quote=True)}" '
            'style="display: inline-block; background-color: #4f46e5; color: #ffffff; '
            'text-decoration: none; padding: 12px 24px; border-radius: 6px; font-weight: 600;">'
            f"{html.escape(notification.action_label or 'View Details')}</a>"
            "</div>"
        )

    return "".join(
        (
            "<!DOCTYPE html>",
            '<html><head><meta charset="utf-8">',
            '<meta name="viewport" content="width=device-width, initial-scale=1.0"></head>',
            '<body style="font-family: -apple-system, BlinkMacSystemFont, \'Segoe UI\', Roboto, sans-serif; '
            'background-color: #f9fafb; padding: 40px 20px;">',
            '<table width="100%" cellpadding="0" cellspacing="0" style="max-width: 600px; margin: 0 auto; '
            'background-color: #ffffff; border-radius: 8px; overflow: hidden;">',
            '<tr><td style="background-color: #4f46e5; padding: 32px 30px; text-align: center;">',
            f'<h1 style="margin: 0; color: #ffffff; font-size: 22px;">{brand_label}</h1>',
            "</td></tr>",
            '<tr><td style="padding: 40px 30px;">',
            f'<h2 style="margin: 0 0 20px; color: #111827; font-size: 20px;">{title}</h2>',
            f'<p style="margin: 0 0 20px; color: #4b5563; font-size: 16px; line-height: 1.6;">{message}</p>',
            action_html,
            "</td></tr>",
            '<tr><td style="padding: 20px 30px; background-color: #f9fafb; text-align: center; '
            'border-top: 1px solid #e5e7eb;">',
            f'<p style="margin: 0; color: #6b7280; font-size: 12px;">This is an automated notification from {brand_label}</p>',
            "</td></tr>",
            "</table></body></html>",
        )
    )


__all__ = [
    "EmailSendResult",
    "SendGridEmailTransport",
    "render_notification_email",
    "send_email",
]
