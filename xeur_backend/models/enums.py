from enum import Enum


class Experience(str, Enum):
    BEGINNER = "BEGINNER"
    INTERMEDIATE = "INTERMEDIATE"
    ADVANCED = "ADVANCED"
    PROFESSIONAL = "PROFESSIONAL"


class Status(str, Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    RESPONDED = "RESPONDED"
    ARCHIVED = "ARCHIVED"


class ContactType(str, Enum):
    GENERAL = "GENERAL"
    TECHNICAL = "TECHNICAL"
    PARTNERSHIP = "PARTNERSHIP"
    INVESTMENT = "INVESTMENT"
    PRESS = "PRESS"
    SUPPORT = "SUPPORT"


class NewsletterFrequency(str, Enum):
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"


class FundType(str, Enum):
    VC = "VC"
    ANGEL = "Angel"
    STRATEGIC = "Strategic"
    FAMILY_OFFICE = "Family Office"
    OTHER = "Other"


class Timeline(str, Enum):
    IMMEDIATE = "Immediate"
    THREE_TO_SIX_MONTHS = "3-6 months"
    SIX_TO_TWELVE_MONTHS = "6-12 months"
    TWELVE_PLUS_MONTHS = "12+ months"


DEFAULT_NEWSLETTER_TOPICS = ["platform-updates", "industry-news"]

# Analytics event names written by the intake endpoints
EVENT_WAITLIST_SIGNUP = "waitlist_signup"
EVENT_CONTACT_SUBMIT = "contact_form_submit"
EVENT_NEWSLETTER_SIGNUP = "newsletter_signup"
EVENT_NEWSLETTER_UNSUBSCRIBE = "newsletter_unsubscribe"
EVENT_INVESTMENT_INQUIRY = "investment_inquiry"
