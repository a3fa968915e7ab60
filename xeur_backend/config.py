import os
from typing import Dict, List, Optional

DEFAULT_CONTACT_ROUTING = {
    "GENERAL": "hello@xeur.ai",
    "TECHNICAL": "tech@xeur.ai",
    "PARTNERSHIP": "partnerships@xeur.ai",
    "INVESTMENT": "investors@xeur.ai",
    "PRESS": "press@xeur.ai",
    "SUPPORT": "support@xeur.ai",
}

DEFAULT_INVESTOR_RELATIONS_EMAILS = ["investors@xeur.ai"]


def _env(name: str, default: Optional[str] = None) -> Optional[str]:
    value = os.getenv(name, "").strip()
    return value or default


def _split_csv(raw: Optional[str]) -> List[str]:
    if not raw:
        return []
    return [item.strip() for item in raw.split(",") if item.strip()]


def _parse_routing(raw: Optional[str]) -> Dict[str, str]:
    """Parse CONTACT_ROUTING in the form "GENERAL=hello@x.ai,PRESS=press@x.ai"."""
    routing = dict(DEFAULT_CONTACT_ROUTING)
    for pair in _split_csv(raw):
        if "=" not in pair:
            continue
        contact_type, address = pair.split("=", 1)
        if contact_type.strip() and address.strip():
            routing[contact_type.strip().upper()] = address.strip()
    return routing


def _detect_environment() -> str:
    # Railway sets PORT; ENV=production also forces production
    env = os.getenv("ENV", "").lower()
    railway_env = os.getenv("RAILWAY_ENVIRONMENT", "").lower()
    if env == "production" or railway_env == "production" or os.getenv("PORT"):
        return "production"
    return "development"


class Settings:
    """Application configuration.

    Built once at process start from the environment and handed to routers,
    services and the notifier by reference. Keyword overrides replace the
    environment value for a single field (used by tests).
    """

    def __init__(self, **overrides):
        self.app_name: str = "XEUR.AI Web Backend"
        self.environment: str = _detect_environment()
        self.cors_origin: str = _env("CORS_ORIGIN", "http://localhost:3000")

        self.brand_name: str = _env("BRAND_NAME", "XEUR.AI")
        self.site_url: str = _env("SITE_URL", "https://xeur.ai").rstrip("/")

        self.resend_api_key: Optional[str] = _env("RESEND_API_KEY")
        self.email_from: str = _env("EMAIL_FROM", "XEUR.AI <noreply@xeur.ai>")
        self.email_reply_to: Optional[str] = _env("EMAIL_REPLY_TO")
        self.admin_email: Optional[str] = _env("ADMIN_EMAIL")

        self.slack_webhook_url: Optional[str] = _env("SLACK_WEBHOOK_URL")

        self.contact_routing: Dict[str, str] = _parse_routing(_env("CONTACT_ROUTING"))
        self.investor_relations_emails: List[str] = (
            _split_csv(_env("INVESTOR_RELATIONS_EMAILS")) or list(DEFAULT_INVESTOR_RELATIONS_EMAILS)
        )
        self.investor_notify_delay: float = float(_env("INVESTOR_NOTIFY_DELAY_SECONDS", "0.1"))

        for key, value in overrides.items():
            if not hasattr(self, key):
                raise AttributeError(f"Unknown setting: {key}")
            setattr(self, key, value)

    def team_email_for(self, contact_type: str) -> str:
        """Mailbox that receives contact submissions of the given type."""
        return self.contact_routing.get(contact_type) or self.contact_routing["GENERAL"]

    def investor_team_emails(self) -> List[str]:
        """Investor relations recipients plus the admin address, without duplicates."""
        recipients: List[str] = []
        for address in [*self.investor_relations_emails, self.admin_email]:
            if address and address not in recipients:
                recipients.append(address)
        return recipients


# Singleton Settings instance
_settings_instance = None


def get_settings() -> Settings:
    """Return the Settings instance, creating it on first use."""
    global _settings_instance
    if _settings_instance is None:
        _settings_instance = Settings()
    return _settings_instance


def clear_settings_cache():
    """Drop the instance so the next get_settings() re-reads the environment."""
    global _settings_instance
    _settings_instance = None
