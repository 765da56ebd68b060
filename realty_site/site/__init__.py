"""Public site content: copy, media and the contact form."""

from .content import AboutContent, SiteContent, SiteMedia, DEFAULT_STORY
from .contact import ContactForm, ContactRequest, AVAILABLE_TIMES

__all__ = [
    'AboutContent',
    'SiteContent',
    'SiteMedia',
    'DEFAULT_STORY',
    'ContactForm',
    'ContactRequest',
    'AVAILABLE_TIMES',
]
