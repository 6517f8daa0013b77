"""Contact form and scope wizard submissions, turned into an e-mail to the team."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, fields
from typing import Any

from gethacked.errors import BadRequestError

logger = logging.getLogger(__name__)

DEFAULT_RECIPIENT = "[email]"
SCOPE_WIZARD_SUBJECT = "scope-wizard"
SUCCESS_TEMPLATE = "contact/success.html"


@dataclass(frozen=True)
class ContactForm:
    """Fields posted by the contact page or the scope wizard."""

    name: str
    email: str
    company: str = ""
    subject: str = ""
    message: str = ""
    phone: str = ""
    details: str = ""
    wizard_approach: str = ""
    wizard_scope: str = ""
    wizard_duration: str = ""
    wizard_estimate: str = ""

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> ContactForm:
        """Build a form from posted fields; ``name`` and ``email`` are required."""
        missing = [key for key in ("name", "email") if key not in data]
        if missing:
            raise BadRequestError(f"missing field `{missing[0]}`")
        known = {f.name for f in fields(cls)}
        return cls(**{key: str(value) for key, value in data.items() if key in known})

    @property
    def is_scope(self) -> bool:
        """True when the submission came from the scope wizard."""
        return self.subject == SCOPE_WIZARD_SUBJECT


@dataclass(frozen=True)
class ContactMessage:
    """The e-mail sent to the team for one submission."""

    to: str
    subject: str
    text: str
    html: str
    reply_to: str | None = None


def contact_recipient(settings: Mapping[str, Any] | None) -> str:
    """The configured ``contact_email`` setting, or the placeholder address."""
    if settings is None:
        return DEFAULT_RECIPIENT
    value = settings.get("contact_email")
    return value if isinstance(value, str) else DEFAULT_RECIPIENT


def compose_message(form: ContactForm, recipient: str) -> ContactMessage:
    """Render the subject and plain-text and HTML bodies for a submission."""
    if form.is_scope:
        subject = f"[GetHacked] Scope request from {form.name} ({form.email})"
        text = (
            f"Name: {form.name}\nEmail: {form.email}\n"
            f"Company: {form.company}\nPhone: {form.phone}\n\n"
            "--- Scope Wizard ---\n"
            f"Approach: {form.wizard_approach}\nTargets: {form.wizard_scope}\n"
            f"Duration: {form.wizard_duration} man-days\n"
            f"Estimate: EUR {form.wizard_estimate}\n\n"
            f"--- Details ---\n{form.details}"
        )
    else:
        subject = f"[GetHacked] Contact: {form.subject} \u2014 {form.name}"
        text = (
            f"Name: {form.name}\nEmail: {form.email}\n"
            f"Company: {form.company}\nSubject: {form.subject}\n\n"
            f"--- Message ---\n{form.message}"
        )
    return ContactMessage(
        to=recipient,
        subject=subject,
        text=text,
        html=text.replace("\n", "<br>"),
        reply_to=form.email,
    )


def submit(
    form: ContactForm,
    settings: Mapping[str, Any] | None = None,
    mailer: Callable[[ContactMessage], Any] | None = None,
) -> dict[str, Any]:
    """Send the submission by ``mailer`` if one is given, else only log it.

    A failing mailer is logged and does not stop the success page. Returns the
    template name and data for that page.
    """
    message = compose_message(form, contact_recipient(settings))
    if mailer is not None:
        try:
            mailer(message)
        except Exception as exc:  # the visitor still sees the success page
            logger.error("failed to send contact email: %s", exc)
    else:
        logger.warning("mailer not configured — contact form submission logged only")
        logger.info(
            "contact form submission from=%s subject=%s", form.email, message.subject
        )
    return {
        "template": SUCCESS_TEMPLATE,
        "name": form.name,
        "is_scope": form.is_scope,
    }