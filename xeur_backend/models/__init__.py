# Import every model so Base.metadata knows all tables before create_all()
from .waitlist_entry import WaitlistEntry
from .contact_form import ContactForm
from .newsletter_subscription import NewsletterSubscription
from .investment_inquiry import InvestmentInquiry
from .analytics_event import AnalyticsEvent

__all__ = [
    "WaitlistEntry",
    "ContactForm",
    "NewsletterSubscription",
    "InvestmentInquiry",
    "AnalyticsEvent",
]
