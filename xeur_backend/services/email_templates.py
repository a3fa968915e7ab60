"""
HTML email templates.

Each builder receives structured data and returns an EmailTemplate
(subject + html). Every user supplied value is HTML-escaped before it is
interpolated.
"""
from html import escape
from typing import Iterable, NamedTuple, Optional


class EmailTemplate(NamedTuple):
    subject: str
    html: str


CONTACT_TYPE_LABELS = {
    "GENERAL": "General Inquiry",
    "TECHNICAL": "Technical Question",
    "PARTNERSHIP": "Partnership Opportunity",
    "INVESTMENT": "Investment Inquiry",
    "PRESS": "Press & Media",
    "SUPPORT": "Support Request",
}

# Expected reply time shown in the contact confirmation
CONTACT_RESPONSE_TIMES = {
    "GENERAL": "2-3 business days",
    "TECHNICAL": "1-2 business days",
    "PARTNERSHIP": "3-5 business days",
    "INVESTMENT": "1-2 business days",
    "PRESS": "24 hours",
    "SUPPORT": "24 hours",
}


def _e(value: Optional[str], fallback: str = "") -> str:
    return escape(str(value)) if value not in (None, "") else fallback


def _layout(brand: str, title: str, body: str, accent: str = "#6366f1") -> str:
    return f"""
    <!DOCTYPE html>
    <html>
    <head>
        <meta charset="UTF-8">
        <meta name="viewport" content="width=device-width, initial-scale=1.0">
    </head>
    <body style="font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif; line-height: 1.6; color: #333; max-width: 600px; margin: 0 auto; padding: 20px;">
        <div style="background: {accent}; padding: 30px; border-radius: 12px 12px 0 0; text-align: center;">
            <h1 style="color: white; margin: 0; font-size: 24px;">{title}</h1>
        </div>
        <div style="background: #ffffff; padding: 30px; border: 1px solid #e5e7eb; border-top: none; border-radius: 0 0 12px 12px;">
            {body}
            <hr style="border: none; border-top: 1px solid #e5e7eb; margin: 20px 0;">
            <p style="font-size: 12px; color: #9ca3af; text-align: center; margin: 0;">
                {escape(brand)}
            </p>
        </div>
    </body>
    </html>
    """


def _rows(pairs: Iterable[tuple]) -> str:
    rows = ""
    for label, value in pairs:
        rows += f"""
                <tr>
                    <td style="padding: 6px 0; color: #6b7280; width: 40%;">{escape(label)}</td>
                    <td style="padding: 6px 0; font-weight: 600;">{value}</td>
                </tr>"""
    return f'<table style="width: 100%; border-collapse: collapse;">{rows}\n            </table>'


def _quote(text: str) -> str:
    # Preserve line breaks of free text after escaping
    return (
        '<div style="background: #f9fafb; border-left: 4px solid #6366f1; padding: 15px; margin: 20px 0; white-space: pre-wrap;">'
        f"{escape(text)}</div>"
    )


# --- Waitlist ----------------------------------------------------------------

def waitlist_confirmation(brand: str, name: Optional[str], position: int, game_types: list) -> EmailTemplate:
    greeting = _e(name, "there")
    tags = ", ".join(escape(tag) for tag in game_types)
    body = f"""
            <p>Hi {greeting},</p>
            <p>Thanks for joining the {escape(brand)} waitlist. We will let you know as soon as early access opens.</p>
            <div style="background: #eef2ff; border-radius: 8px; padding: 20px; margin: 20px 0; text-align: center;">
                <p style="margin: 0; color: #6b7280;">Your position in line</p>
                <p style="margin: 5px 0 0 0; font-size: 32px; font-weight: bold; color: #4f46e5;">#{position}</p>
            </div>
            <p>Game types you are interested in: <strong>{tags}</strong></p>
    """
    return EmailTemplate(
        subject=f"You're on the {brand} waitlist! 🎮",
        html=_layout(brand, "Welcome to the waitlist 🎮", body),
    )


def waitlist_admin_notification(brand: str, entry, position: int) -> EmailTemplate:
    details = _rows([
        ("Email", _e(entry.email)),
        ("Name", _e(entry.name, "Not provided")),
        ("Game types", escape(", ".join(entry.game_types or []))),
        ("Experience", _e(entry.experience)),
        ("Source", _e(entry.source)),
        ("Position", str(position)),
    ])
    body = f"""
            <p>A new user joined the waitlist.</p>
            {details}
    """
    return EmailTemplate(
        subject=f"[{brand}] New waitlist signup: {entry.email}",
        html=_layout(brand, "New waitlist signup", body),
    )


# --- Contact -----------------------------------------------------------------

def contact_confirmation(brand: str, name: str, contact_type: str, subject: str) -> EmailTemplate:
    label = CONTACT_TYPE_LABELS.get(contact_type, CONTACT_TYPE_LABELS["GENERAL"])
    response_time = CONTACT_RESPONSE_TIMES.get(contact_type, CONTACT_RESPONSE_TIMES["GENERAL"])
    body = f"""
            <p>Hi {_e(name)},</p>
            <p>We received your message about <strong>{_e(subject)}</strong>.</p>
            <p>Your request was filed as <strong>{escape(label)}</strong> and our team usually replies within {response_time}.</p>
    """
    return EmailTemplate(
        subject=f"We received your message - {brand}",
        html=_layout(brand, "Thanks for reaching out ✉️", body),
    )


def contact_team_notification(brand: str, contact) -> EmailTemplate:
    label = CONTACT_TYPE_LABELS.get(contact.type, contact.type)
    details = _rows([
        ("Name", _e(contact.name)),
        ("Email", _e(contact.email)),
        ("Type", escape(label)),
        ("Subject", _e(contact.subject)),
    ])
    body = f"""
            {details}
            {_quote(contact.message)}
            <p style="font-size: 12px; color: #9ca3af;">Reference: {escape(contact.id)}</p>
    """
    return EmailTemplate(
        subject=f"[{brand}] {label}: {contact.subject}",
        html=_layout(brand, "New contact form submission", body),
    )


def contact_response(brand: str, name: str, subject: str, response: str) -> EmailTemplate:
    body = f"""
            <p>Hi {_e(name)},</p>
            <p>Thanks for your patience. Here is our reply to <strong>{_e(subject)}</strong>:</p>
            {_quote(response)}
            <p>If you have any further questions just reply to this email.</p>
    """
    return EmailTemplate(
        subject=f"Re: {subject}",
        html=_layout(brand, "We replied to your message", body),
    )


# --- Newsletter --------------------------------------------------------------

def newsletter_welcome(brand: str, name: Optional[str], preferences: dict) -> EmailTemplate:
    preferences = preferences or {}
    greeting = _e(name, "there")
    topics = ", ".join(escape(t) for t in preferences.get("topics") or [])
    details = _rows([
        ("Frequency", _e(preferences.get("frequency"), "monthly")),
        ("Topics", topics or "All"),
    ])
    body = f"""
            <p>Hi {greeting},</p>
            <p>You are now subscribed to the {escape(brand)} newsletter.</p>
            {details}
    """
    return EmailTemplate(
        subject=f"Welcome to the {brand} newsletter",
        html=_layout(brand, "You're subscribed 📬", body),
    )


def newsletter_unsubscribed(brand: str, name: Optional[str]) -> EmailTemplate:
    greeting = _e(name, "there")
    body = f"""
            <p>Hi {greeting},</p>
            <p>You have been unsubscribed and will not receive more newsletters from {escape(brand)}.</p>
            <p>Changed your mind? You can subscribe again at any time from our website.</p>
    """
    return EmailTemplate(
        subject=f"You have been unsubscribed from {brand}",
        html=_layout(brand, "Unsubscribed", body, accent="#6b7280"),
    )


def newsletter_admin_notification(brand: str, subscription) -> EmailTemplate:
    body = _rows([
        ("Email", _e(subscription.email)),
        ("Name", _e(subscription.name, "Not provided")),
        ("Source", _e(subscription.source)),
    ])
    return EmailTemplate(
        subject=f"[{brand}] New newsletter subscriber: {subscription.email}",
        html=_layout(brand, "New newsletter subscriber", body),
    )


# --- Investment --------------------------------------------------------------

def investment_confirmation(brand: str, name: str, company: Optional[str]) -> EmailTemplate:
    on_behalf = f" on behalf of <strong>{_e(company)}</strong>" if company else ""
    body = f"""
            <p>Hi {_e(name)},</p>
            <p>Thank you for your interest in investing in {escape(brand)}{on_behalf}.</p>
            <p>Our founders review every inquiry personally and will get back to you within 1-2 business days.</p>
    """
    return EmailTemplate(
        subject=f"Thank you for your interest in {brand}",
        html=_layout(brand, "Investment inquiry received", body, accent="#059669"),
    )


def investment_team_notification(brand: str, site_url: str, inquiry) -> EmailTemplate:
    not_specified = "Not specified"
    not_provided = "Not provided"
    details = _rows([
        ("Name", _e(inquiry.name)),
        ("Email", _e(inquiry.email)),
        ("Company", _e(inquiry.company, not_provided)),
        ("Position", _e(inquiry.position, not_provided)),
        ("Investment size", _e(inquiry.investment_size, not_specified)),
        ("Fund type", _e(inquiry.fund_type, not_specified)),
        ("Timeline", _e(inquiry.timeline, not_specified)),
    ])
    details_url = escape(f"{site_url}/admin/investments/{inquiry.id}")
    body = f"""
            {details}
            {_quote(inquiry.message)}
            <p style="text-align: center;">
                <a href="{details_url}"
                   style="display: inline-block; background: #059669; color: white; padding: 12px 24px; border-radius: 8px; text-decoration: none;">
                    View Details
                </a>
            </p>
    """
    return EmailTemplate(
        subject=f"🚀 New investment inquiry from {inquiry.name}",
        html=_layout(brand, "New investment inquiry", body, accent="#059669"),
    )


def investment_response(brand: str, name: str, company: Optional[str], response: str) -> EmailTemplate:
    body = f"""
            <p>Hi {_e(name)},</p>
            <p>Thanks again for your interest in {escape(brand)}. Here is our reply to your inquiry:</p>
            {_quote(response)}
            <p>Feel free to reply directly to this email to continue the conversation.</p>
    """
    subject = f"Re: Investment inquiry - {company}" if company else f"Re: Your investment inquiry - {brand}"
    return EmailTemplate(
        subject=subject,
        html=_layout(brand, "A reply from our team", body, accent="#059669"),
    )
